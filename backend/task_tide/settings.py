"""
Django settings for the task_tide project.

Every deployment-specific value can be overridden through a
``TASK_TIDE_*`` environment variable; the defaults are meant for local
development against the in-memory task repository.
"""

import os
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def env_list(name, default=''):
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(',') if item.strip()]


# ==================== Core ====================

SECRET_KEY = os.environ.get(
    'TASK_TIDE_SECRET_KEY',
    'django-insecure-task-tide-development-key'
)

DEBUG = env_bool('TASK_TIDE_DEBUG', default=True)

ALLOWED_HOSTS = env_list('TASK_TIDE_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver')

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'corsheaders',
    'rest_framework',
    'drf_spectacular',
    'tasks',
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'task_tide.urls'

WSGI_APPLICATION = 'task_tide.wsgi.application'

# The REST contract uses paths without a trailing slash (/api/tasks).
APPEND_SLASH = False

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
            ],
        },
    },
]


# ==================== Database ====================
# Only used when TASK_TIDE['REPOSITORY'] points at the ORM repository.

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('TASK_TIDE_DB_PATH', str(BASE_DIR / 'db.sqlite3')),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# ==================== Internationalization ====================

LANGUAGE_CODE = 'en-us'

# "Today" for the daily suggestions is evaluated in this zone.
TIME_ZONE = os.environ.get('TASK_TIDE_TIME_ZONE', 'UTC')

USE_I18N = False

USE_TZ = True


# ==================== CORS ====================

CORS_ALLOWED_ORIGINS = env_list(
    'TASK_TIDE_CORS_ORIGINS',
    'http://localhost:3000,http://127.0.0.1:5500'
)

CORS_ALLOW_ALL_ORIGINS = DEBUG


# ==================== REST Framework ====================

REST_FRAMEWORK = {
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
    ],
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'UNAUTHENTICATED_USER': None,
    'EXCEPTION_HANDLER': 'tasks.exceptions.api_exception_handler',
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
    'TEST_REQUEST_DEFAULT_FORMAT': 'json',
}

SPECTACULAR_SETTINGS = {
    'TITLE': 'Task Tide API',
    'DESCRIPTION': 'Personal task management with heuristic AI prioritization, '
                   'suggestions and productivity analytics.',
    'VERSION': '1.0.0',
    'SERVE_INCLUDE_SCHEMA': False,
}


# ==================== Task Tide ====================

TASK_TIDE = {
    # Dotted path to the TaskRepository implementation. The in-memory store
    # is empty at process start and discarded at stop.
    'REPOSITORY': os.environ.get(
        'TASK_TIDE_REPOSITORY',
        'tasks.repository.InMemoryTaskRepository'
    ),
}


# ==================== Logging ====================

LOG_LEVEL = os.environ.get('TASK_TIDE_LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
        'tasks': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}
