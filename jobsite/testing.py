# jobsite/testing.py
"""Helpers shared by the app test suites."""
import json
from unittest import mock

import requests
from django.conf import settings

from api.client import TOKEN_SESSION_KEY
from accounts.session import USER_SESSION_KEY

BACKEND_ROLE_NAMES = {
    'job_seeker': 'JOB_SEEKER',
    'employer': 'EMPLOYER',
    'admin': 'ADMIN',
}


def make_response(status=200, body=None, headers=None, url='http://backend.test/api/x'):
    """A real requests.Response carrying `body` (JSON-encoded unless bytes)."""
    response = requests.Response()
    response.status_code = status
    response.url = url
    if body is None:
        response._content = b''
    elif isinstance(body, bytes):
        response._content = body
    else:
        response._content = json.dumps(body).encode('utf-8')
    response.headers.update(headers or {})
    return response


class SessionMixin:
    """
    Seed the signed-cookie session of `self.client` with a token and user,
    the state AuthSessionMiddleware expects after a login. The per-request
    /auth/me refresh is stubbed to echo the same user back.
    """

    def sign_in(self, role='job_seeker', token='test-token', **user):
        data = {'id': 1, 'email': f'{role}@example.com', 'name': 'Test User', 'role': role}
        data.update(user)
        session = self.client.session
        session[TOKEN_SESSION_KEY] = token
        session[USER_SESSION_KEY] = data
        session.save()
        self.client.cookies[settings.SESSION_COOKIE_NAME] = session.session_key

        backend_user = dict(data, role=BACKEND_ROLE_NAMES.get(role, role))
        self.current_user_mock = self.stub_current_user(return_value=backend_user)
        return data

    def stub_current_user(self, **kwargs):
        patcher = mock.patch('accounts.session.auth_api.get_current_user', **kwargs)
        mocked = patcher.start()
        self.addCleanup(patcher.stop)
        return mocked
