"""
Django settings for the jobsite web client.
"""

from pathlib import Path
import os

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent


# -------------------------
# Basic / environment
# -------------------------
SECRET_KEY = os.environ.get('JOBSITE_SECRET_KEY', 'django-insecure-dev-secret-for-local')

DEBUG = os.environ.get('JOBSITE_DEBUG', 'True').lower() in ('1', 'true', 'yes')

ALLOWED_HOSTS = (
    os.environ.get('JOBSITE_ALLOWED_HOSTS', '')
    .split(',') if os.environ.get('JOBSITE_ALLOWED_HOSTS') else []
)

APP_NAME = os.environ.get('JOBSITE_APP_NAME', 'Job Board')
ENVIRONMENT = os.environ.get('JOBSITE_ENV', 'development')


# -------------------------
# Backend REST API
# -------------------------
API_BASE_URL = os.environ.get('JOBSITE_API_URL', 'http://localhost:8080/api')
API_TIMEOUT = float(os.environ.get('JOBSITE_API_TIMEOUT', 10))


# -------------------------
# Installed apps / middleware
# -------------------------
INSTALLED_APPS = [
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # project apps
    'api',
    'accounts',
    'jobs',
    'employers',
    'adminpanel',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'accounts.middleware.AuthSessionMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'jobsite.urls'


# -------------------------
# Templates
# -------------------------
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [os.path.join(BASE_DIR, 'templates')],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.template.context_processors.static',
                'django.template.context_processors.csrf',
                'django.contrib.messages.context_processors.messages',
                'accounts.context_processors.session_user',
                'accounts.context_processors.theme',
                'accounts.context_processors.app_config',
            ],
        },
    },
]


WSGI_APPLICATION = 'jobsite.wsgi.application'


# -------------------------
# Database
# -------------------------
# The client owns no data; everything is fetched from the backend per view.
DATABASES = {}


# -------------------------
# Sessions (token + last known user)
# -------------------------
SESSION_ENGINE = os.environ.get('JOBSITE_SESSION_ENGINE', 'django.contrib.sessions.backends.signed_cookies')
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_AGE = int(os.environ.get('JOBSITE_SESSION_COOKIE_AGE', 60 * 60 * 24 * 14))

MESSAGE_STORAGE = 'django.contrib.messages.storage.cookie.CookieStorage'

DEFAULT_THEME = os.environ.get('JOBSITE_DEFAULT_THEME', 'light')

LOGIN_URL = '/login/'
PUBLIC_URL = '/'


# -------------------------
# Internationalization
# -------------------------
LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('JOBSITE_TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True


# -------------------------
# Static
# -------------------------
STATIC_URL = '/static/'
STATICFILES_DIRS = [os.path.join(BASE_DIR, 'static')]
STATIC_ROOT = os.environ.get('JOBSITE_STATIC_ROOT', os.path.join(BASE_DIR, 'staticfiles'))


# -------------------------
# Uploads
# -------------------------
CV_MAX_UPLOAD_SIZE = 5 * 1024 * 1024
CV_ALLOWED_EXTENSIONS = ('.pdf', '.doc', '.docx')


# -------------------------
# Logging (basic)
# -------------------------
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S',
        },
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'simple'},
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO' if DEBUG else 'WARNING',
            'propagate': False,
        },
        'api': {
            'handlers': ['console'],
            'level': 'DEBUG' if DEBUG else 'INFO',
            'propagate': False,
        },
    },
}


# -------------------------
# Security (production suggestions)
# -------------------------
# In production, you should set these via environment variables:
# SECURE_HSTS_SECONDS = 31536000
# SECURE_SSL_REDIRECT = True
# SESSION_COOKIE_SECURE = True
# CSRF_COOKIE_SECURE = True
