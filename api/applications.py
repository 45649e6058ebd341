# api/applications.py
from .client import decode


def create(client, data):
    return decode(client.post('/applications', json=data))


def get_by_id(client, application_id):
    return decode(client.get(f'/applications/{application_id}'))


def get_mine(client):
    return decode(client.get('/applications/my-applications'))


def get_by_job(client, job_id):
    return decode(client.get(f'/applications/job/{job_id}'))


def update_status(client, application_id, status):
    return decode(client.put(f'/applications/{application_id}/status', json={'status': status}))


def save_note(client, application_id, note):
    return decode(client.put(f'/applications/{application_id}/notes', json={'note': note}))


def delete(client, application_id):
    client.delete(f'/applications/{application_id}')
