"""
Settings Django usados pelo pytest-django.

Banco SQLite em memória, app do back office instalado e eventos
retidos em memória.
"""

SECRET_KEY = 'test-secret-key'

DEBUG = True

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'src.adapters.django_app.backoffice',
]

MIDDLEWARE = [
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'src.config.urls'

ALLOWED_HOSTS = ['testserver', 'localhost']

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

USE_TZ = True
TIME_ZONE = 'America/Sao_Paulo'

STORE_BACKEND = 'memory'
EVENT_PUBLISHER_MODE = 'memory'

CELERY_TASK_ALWAYS_EAGER = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'
