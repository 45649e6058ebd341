# accounts/middleware.py
from django.conf import settings

from .session import AuthSession


class AuthSessionMiddleware:
    """
    Attach `request.auth` and refresh the signed-in user once per page load.
    Must sit after SessionMiddleware.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.auth = AuthSession(request)
        static_url = getattr(settings, 'STATIC_URL', None) or '/static/'
        if not request.path.startswith(static_url):
            request.auth.bootstrap()
        return self.get_response(request)
