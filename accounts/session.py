# accounts/session.py
"""
Per-visitor auth state, kept in the Django session under two fixed keys:
`token` (the backend bearer token) and `user` (the last known user, with
its role already mapped to a client role).
"""
import logging

from api import auth as auth_api
from api.client import ApiError, TOKEN_SESSION_KEY, get_client
from api.dto import User

from .roles import map_backend_role

logger = logging.getLogger(__name__)

USER_SESSION_KEY = 'user'


def normalize_user(data):
    """Backend user payload -> the dict stored in the session."""
    if not isinstance(data, dict):
        return None
    role_source = data.get('role') or data.get('roles') or data.get('authorities')
    user = User.from_json(data)
    # only the fields pages read; the session lives in a size-limited cookie
    return {
        'id': user.id,
        'email': user.email,
        'name': user.name,
        'role': map_backend_role(role_source),
        'is_active': user.is_active,
    }


class AuthSession:

    def __init__(self, request):
        self.request = request
        self.session = request.session
        self.loading = False

    @property
    def token(self):
        return self.session.get(TOKEN_SESSION_KEY)

    @property
    def user(self):
        return self.session.get(USER_SESSION_KEY)

    @property
    def role(self):
        user = self.user
        return user.get('role') if user else None

    @property
    def is_authenticated(self):
        return bool(self.token and self.user)

    def bootstrap(self):
        """
        Runs once per page load. The cached user is trusted until /auth/me
        answers; only a 401 throws the stored credentials away.
        """
        if not self.token:
            return None
        return self.fetch_user()

    def fetch_user(self):
        self.loading = True
        try:
            logger.debug("Fetching current user")
            data = auth_api.get_current_user(get_client(self.request))
        except ApiError as e:
            if e.is_unauthorized:
                logger.warning("Stored token rejected by backend, clearing session credentials")
                self.clear()
                return None
            logger.error("Failed to fetch current user: %s", e)
            return self.user
        finally:
            self.loading = False

        user = normalize_user(data)
        if user is not None:
            self.session[USER_SESSION_KEY] = user
        return self.user

    def login(self, token):
        self.session[TOKEN_SESSION_KEY] = token
        return self.fetch_user()

    def logout(self):
        if self.token:
            try:
                auth_api.logout(get_client(self.request))
            except ApiError as e:
                logger.warning("Backend logout failed: %s", e)
        self.clear()

    def clear(self):
        self.session.pop(TOKEN_SESSION_KEY, None)
        self.session.pop(USER_SESSION_KEY, None)
