# api/client.py
"""
Shared HTTP client for the backend REST API.

Every outbound request carries the visitor's bearer token (if any) and uses a
fixed timeout. Responses are handed back unchanged; 401/403/5xx are logged and,
like every other status >= 400, raised as ApiError. There is no retry logic.
"""
import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

TOKEN_SESSION_KEY = 'token'
DEFAULT_TIMEOUT = 10  # seconds


class ApiError(Exception):
    """A backend call that did not come back with a 2xx status."""

    def __init__(self, message, status=None, payload=None, method=None, url=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload
        self.method = method
        self.url = url

    @property
    def is_unauthorized(self):
        return self.status == 401

    @property
    def is_forbidden(self):
        return self.status == 403

    @classmethod
    def from_response(cls, response):
        payload = None
        try:
            payload = response.json()
        except ValueError:
            payload = None
        message = None
        if isinstance(payload, dict):
            message = payload.get('message') or payload.get('error')
        if not message:
            message = f"Request failed with status code {response.status_code}"
        return cls(
            message,
            status=response.status_code,
            payload=payload,
            method=response.request.method if response.request is not None else None,
            url=response.url,
        )


class NetworkError(ApiError):
    """No response at all (connection refused, DNS failure, timeout)."""


def error_message(exc, default='An unexpected error occurred'):
    """Turn an API failure into the short text shown next to a form or list."""
    if isinstance(exc, NetworkError):
        return 'Network error. Please check your connection.'
    if isinstance(exc, ApiError):
        payload = exc.payload if isinstance(exc.payload, dict) else {}
        return payload.get('message') or payload.get('error') or default
    return str(exc) or default


class ApiClient:
    """
    Thin wrapper around a requests.Session bound to the backend base URL.

    `token` may be a string or a zero-argument callable; a callable is read on
    every request so a token stored mid-request (login) is picked up by the
    very next call.
    """

    def __init__(self, base_url=None, token=None, timeout=None, session=None):
        self.base_url = (base_url or getattr(settings, 'API_BASE_URL', '')).rstrip('/')
        self.timeout = timeout or getattr(settings, 'API_TIMEOUT', DEFAULT_TIMEOUT)
        self._token = token
        self.session = session or requests.Session()
        self.session.headers.update({'Accept': 'application/json'})

    @property
    def token(self):
        if callable(self._token):
            return self._token()
        return self._token

    def build_url(self, path):
        if path.startswith('http://') or path.startswith('https://'):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def build_headers(self):
        headers = {}
        token = self.token
        if token:
            headers['Authorization'] = f"Bearer {token}"
        return headers

    def request(self, method, path, params=None, json=None, files=None, data=None):
        method = method.upper()
        url = self.build_url(path)
        if params:
            params = {k: v for k, v in params.items() if v not in (None, '')}
        try:
            response = self.session.request(
                method,
                url,
                params=params or None,
                json=json,
                files=files,
                data=data,
                headers=self.build_headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.error("Backend timeout for %s %s", method, url)
            raise NetworkError("Backend request timed out", method=method, url=url) from e
        except requests.exceptions.RequestException as e:
            logger.error("Cannot reach backend for %s %s: %s", method, url, e)
            raise NetworkError("Cannot connect to backend", method=method, url=url) from e

        status = response.status_code
        if status == 401:
            logger.warning("401 Unauthorized received for: %s %s", method, url)
        elif status == 403:
            logger.error("Access denied: %s %s", method, url)
        elif status >= 500:
            logger.error("Server error (%s): %s %s", status, method, url)

        if status >= 400:
            raise ApiError.from_response(response)
        return response

    def get(self, path, params=None):
        return self.request('GET', path, params=params)

    def post(self, path, json=None, files=None, data=None, params=None):
        return self.request('POST', path, params=params, json=json, files=files, data=data)

    def put(self, path, json=None, params=None):
        return self.request('PUT', path, params=params, json=json)

    def delete(self, path):
        return self.request('DELETE', path)


def decode(response):
    """JSON body of a response, or None when the backend sent nothing."""
    if response is None or not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def get_client(request):
    """
    Client for the current visitor. The token is read from the session each
    time a request goes out.
    """
    client = getattr(request, '_api_client', None)
    if client is None:
        client = ApiClient(token=lambda: request.session.get(TOKEN_SESSION_KEY))
        request._api_client = client
    return client


def call_or_default(func, *args, default=None, error_text='Failed to load data', **kwargs):
    """
    Run one independent backend call. Returns (value, error); a failure logs
    and yields the default so sibling fetches on the same page still render.
    """
    try:
        return func(*args, **kwargs), None
    except ApiError as e:
        logger.warning("%s failed: %s", getattr(func, '__name__', func), e)
        return default, error_message(e, error_text)
