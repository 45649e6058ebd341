# api/auth.py
from .client import decode


def login(client, email, password):
    return decode(client.post('/auth/login', json={'email': email, 'password': password}))


def register(client, data):
    return decode(client.post('/auth/register', json=data))


def logout(client):
    return decode(client.post('/auth/logout'))


def get_current_user(client):
    return decode(client.get('/auth/me'))


def refresh(client, token):
    return decode(client.post('/auth/refresh', json={'token': token}))


def change_password(client, current_password, new_password):
    payload = {'currentPassword': current_password, 'newPassword': new_password}
    return decode(client.put('/auth/change-password', json=payload))


def check_email(client, email):
    return decode(client.get('/auth/check-email', params={'email': email}))


def forgot_password(client, email):
    return decode(client.post('/auth/forgot-password', json={'email': email}))


def reset_password(client, token, password):
    return decode(client.post('/auth/reset-password', json={'token': token, 'password': password}))


def extract_token(payload):
    """The backend has answered with each of these names at some point."""
    if not isinstance(payload, dict):
        return None
    return payload.get('token') or payload.get('accessToken') or payload.get('access_token')
