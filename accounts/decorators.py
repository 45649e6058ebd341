# accounts/decorators.py
from functools import wraps

from django.conf import settings
from django.shortcuts import redirect

from .roles import PUBLIC_PATH, dashboard_route
from .session import AuthSession


def _auth(request):
    auth = getattr(request, 'auth', None)
    if auth is None:
        auth = request.auth = AuthSession(request)
    return auth


def login_required(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not _auth(request).user:
            return redirect(settings.LOGIN_URL)
        return view_func(request, *args, **kwargs)
    return _wrapped


def role_required(*roles):
    """No session -> login page; signed in with another role -> public page."""
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            auth = _auth(request)
            if not auth.user:
                return redirect(settings.LOGIN_URL)
            if auth.role not in roles:
                return redirect(getattr(settings, 'PUBLIC_URL', PUBLIC_PATH))
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


def guest_only(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        auth = _auth(request)
        if auth.user:
            return redirect(dashboard_route(auth.role))
        return view_func(request, *args, **kwargs)
    return _wrapped
