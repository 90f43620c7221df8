"""
Development settings
"""
from .base import *

DEBUG = True

# Email backend (console for development)
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

LOGGING['root']['level'] = env('LOG_LEVEL', default='DEBUG').upper()
