"""Test settings for AutoRent project.

Uses an in-memory SQLite database, a fast password hasher and a
temporary media root so uploads never touch the working tree.
"""

import tempfile

from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

MEDIA_ROOT = Path(tempfile.mkdtemp(prefix='autorent-media-'))

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

LOGGING['root']['level'] = 'CRITICAL'  # noqa: F405
LOGGING['loggers']['apps']['level'] = 'CRITICAL'  # noqa: F405
LOGGING['loggers']['shared']['level'] = 'CRITICAL'  # noqa: F405
LOGGING['loggers']['django']['level'] = 'CRITICAL'  # noqa: F405
