import os

DEBUG = False

SECRET_KEY = os.environ.get('SECRET_KEY')

ALLOWED_HOSTS = os.environ.get('ALLOWED_HOSTS', '').split(',')

ADMINS = [
  (os.environ.get('ADMIN_NAME'), os.environ.get('ADMIN_EMAIL')),
]

CONN_MAX_AGE = 60

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.environ.get('DB_NAME'),
        'USER': os.environ.get('DB_USER'),
        'PASSWORD': os.environ.get('DB_PASS'),
        'HOST': os.environ.get('DB_HOST'),
        'PORT': '5432',
   }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.db.DatabaseCache',
        'LOCATION': 'gfportal_cache',
    }
}

APP_BASE_URL = os.environ.get('APP_BASE_URL', '')

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
