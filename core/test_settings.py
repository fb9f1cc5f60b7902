"""
Settings used by the pytest suite.

Runs against an in-memory SQLite database with a fast password hasher.
"""

import os

os.environ.setdefault('SECRET_KEY', 'test-secret-key-not-for-production')
os.environ.setdefault('DEBUG', 'False')
os.environ.setdefault('SECURE_SSL_REDIRECT', 'False')

from .settings import *  # noqa: E402,F401,F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'farm-records-tests',
    }
}

SHARED_FORMULATION_RATE_LIMIT = 3
SHARED_FORMULATION_RATE_WINDOW_HOURS = 1

LOGGING['root']['level'] = 'WARNING'  # noqa: F405
