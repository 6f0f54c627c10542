"""
Django settings for main project.
"""

import os
from pathlib import Path

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get('SECRET_KEY', 'changeme')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = True

ALLOWED_HOSTS = ['127.0.0.1', 'localhost', '0.0.0.0']

# Application definition
INSTALLED_APPS = [
    'gfportal.apps.GfPortalConfig',
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'tinymce',
    'safedelete',
    'import_export',
]

MIDDLEWARE = [
    # Security middleware
    'django.middleware.security.SecurityMiddleware',
    # Session middleware needed by auth
    'django.contrib.sessions.middleware.SessionMiddleware',
    # Messages depends on sessions
    'django.contrib.messages.middleware.MessageMiddleware',
    # Authentication (must be before anything that depends on request.user)
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    # Magic link login, needs the session and the user
    'gfportal.middleware.token.TokenAuthMiddleware',
    # Custom middleware for exception handling and locale
    'gfportal.middleware.exception.ExceptionHandlingMiddleware',
    'gfportal.middleware.locale.LocaleAdvMiddleware',
    # Dashboards are restricted by role
    'gfportal.middleware.role.RoleGateMiddleware',
    'django.middleware.common.CommonMiddleware',
    # CSRF protection
    'django.middleware.csrf.CsrfViewMiddleware',
    # Clickjacking protection
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'main.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.template.context_processors.i18n',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

# Database

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'gfportal',
    }
}

# Password validation

AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
    },
]

AUTHENTICATION_BACKENDS = [
    'django.contrib.auth.backends.ModelBackend',
]

# Internationalization

LANGUAGE_CODE = 'en'

LANGUAGES = [
    ('en', 'English'),
    ('it', 'Italiano'),
    ('fr', 'Français'),
    ('de', 'Deutsch'),
    ('es', 'Español'),
    ('nl-be', 'Nederlands (België)'),
    ('uk', 'Українська'),
]

TIME_ZONE = 'Europe/Rome'

USE_I18N = True

USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LOCALE_PATHS = ('gfportal/locale',)

# Static files (CSS, JavaScript, Images)

STATIC_URL = '/static/'

STATIC_ROOT = os.path.join(BASE_DIR, '../static')

# Tinymce
TINYMCE_DEFAULT_CONFIG = {
    'width': '100%',
    'height': '20em',
    'plugins': 'lists advlist autosave table link code autoresize wordcount autolink searchreplace',
    'toolbar': 'undo redo | bold italic forecolor | alignleft aligncenter alignright | numlist bullist | link | code',
    'menubar': False,
    'convert_urls': False,
    'license_key': 'gpl',
    'promotion': False,
}

TINYMCE_COMPRESSOR = False

X_FRAME_OPTIONS = 'SAMEORIGIN'

SECURE_REFERRER_POLICY = 'origin'

# safe delete
SAFE_DELETE_FIELD_NAME = 'deleted'

DATE_INPUT_FORMATS = ['%Y-%m-%d']

LOGIN_URL = '/login'
LOGIN_REDIRECT_URL = '/dashboard'
LOGOUT_REDIRECT_URL = '/login'

# email

EMAIL_BACKEND = 'django.core.mail.backends.smtp.EmailBackend'

EMAIL_SMTP_HOST = 'smtp.gmail.com'
EMAIL_SMTP_PORT = 465

GMAIL_USER = os.environ.get('GMAIL_USER', '')
GMAIL_APP_PASSWORD = os.environ.get('GMAIL_APP_PASSWORD', '')

DEFAULT_SENDER_EMAIL = os.environ.get('DEFAULT_SENDER_EMAIL', 'europeanyouthmeeting@gmail.com')
DEFAULT_FROM_EMAIL = DEFAULT_SENDER_EMAIL
SERVER_EMAIL = DEFAULT_SENDER_EMAIL

ORGANIZERS_EMAIL = os.environ.get('ORGANIZERS_EMAIL', 'info@giovaniperlapace.it')

ADMINS = []

# magic link login
LOGIN_TOKEN_TIMEOUT = 60 * 60

# public url used in the emailed links, request host when empty
APP_BASE_URL = os.environ.get('APP_BASE_URL', '')

# shared secret of the Tally webhook, signature check disabled when empty
TALLY_WEBHOOK_SECRET = os.environ.get('TALLY_WEBHOOK_SECRET', '')

# Logging configuration
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name} {module} {funcName} {lineno} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {name} {funcName}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
    'loggers': {
        'gfportal': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'django.security.DisallowedHost': {
            'handlers': [],
            'propagate': False,
        },
    },
}
