"""
Test settings: in-memory SQLite for both the primary store and the offline queue.
"""
import os

# base.py requires a primary database URL; the value is replaced below.
os.environ.setdefault('DATABASE_URL', 'sqlite://:memory:')

from .base import *

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    },
    'offline': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    },
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

PUSH_ENDPOINT_URL = 'https://push.test/functions/v1/send-notification'
PUSH_API_KEY = 'test-key'

OFFLINE_QUEUE_MAX_ATTEMPTS = 3

LOGGING['root']['level'] = 'CRITICAL'
