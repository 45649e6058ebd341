# api/employers.py
from .client import decode


def get_profile(client):
    return decode(client.get('/employers/profile'))


def update_profile(client, data):
    return decode(client.put('/employers/profile', json=data))


def get_verification_status(client):
    return decode(client.get('/employers/verification'))


def request_verification(client, data):
    return decode(client.post('/employers/verification', json=data))


def get_applications(client):
    return decode(client.get('/employers/applications'))


def get_applications_for_job(client, job_id):
    return decode(client.get(f'/employers/jobs/{job_id}/applications'))


def get_statistics(client):
    return decode(client.get('/employers/statistics'))
