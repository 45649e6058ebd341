# api/profile.py
from .client import decode


def get_profile(client):
    return decode(client.get('/profile'))


def get_job_seeker_profile(client):
    return decode(client.get('/profile/job-seeker'))


def update_job_seeker_profile(client, data):
    return decode(client.put('/profile/job-seeker', json=data))


def get_employer_profile(client):
    return decode(client.get('/profile/employer'))


def update_employer_profile(client, data):
    return decode(client.put('/profile/employer', json=data))


def get_statistics(client):
    return decode(client.get('/job-seekers/statistics'))
