from .base import *

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

DEBUG = False
EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARN',
    },
}

GMAIL_USER = 'sender@test.it'
GMAIL_APP_PASSWORD = 'test-app-password'
DEFAULT_SENDER_EMAIL = 'sender@test.it'
ORGANIZERS_EMAIL = 'organizers@test.it'

APP_BASE_URL = 'http://testserver'
TALLY_WEBHOOK_SECRET = ''

ADMINS = [
    ('test', 'test@test.it')
]
