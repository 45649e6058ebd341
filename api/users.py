# api/users.py
from .client import decode


def get_profile(client):
    return decode(client.get('/users/profile'))


def update_profile(client, data):
    return decode(client.put('/users/profile', json=data))


def deactivate_account(client):
    return decode(client.put('/users/deactivate'))
