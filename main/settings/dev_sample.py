DEBUG = True

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': 'gfportal',
        'USER': 'gfportal',
        'PASSWORD': 'gfportal',
        'HOST': 'localhost',
        'PORT': '5432',
    }
}

# CREATE DATABASE gfportal;
# CREATE USER gfportal WITH PASSWORD 'gfportal';
# ALTER DATABASE gfportal OWNER TO gfportal;
# GRANT ALL PRIVILEGES ON DATABASE gfportal TO gfportal;

EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

APP_BASE_URL = 'http://127.0.0.1:8000'

ADMINS = [
    ('test', 'test@test.it')
]
