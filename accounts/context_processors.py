# accounts/context_processors.py
from django.conf import settings

from .roles import ROLE_LABELS, role_prefix

THEME_SESSION_KEY = 'theme'
THEMES = ('light', 'dark')


def session_user(request):
    auth = getattr(request, 'auth', None)
    user = auth.user if auth is not None else None
    role = user.get('role') if user else None
    return {
        'current_user': user,
        'current_role': role,
        'current_role_label': ROLE_LABELS.get(role, ''),
        'role_prefix': role_prefix(role) or '',
    }


def current_theme(request):
    theme = request.session.get(THEME_SESSION_KEY) if hasattr(request, 'session') else None
    if theme not in THEMES:
        theme = getattr(settings, 'DEFAULT_THEME', 'light')
    return theme


def theme(request):
    return {'theme': current_theme(request)}


def app_config(request):
    return {
        'APP_NAME': getattr(settings, 'APP_NAME', 'Job Board'),
        'ENVIRONMENT': getattr(settings, 'ENVIRONMENT', 'development'),
    }
