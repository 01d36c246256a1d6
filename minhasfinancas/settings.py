"""
Django settings do projeto Minhas Finanças.

Os dados ficam no MongoDB (core.database); o Django só atende a API
JSON, então não há DATABASES, sessões nem templates.
Valores vêm de core.config (variáveis de ambiente / .env).
"""
from pathlib import Path

from core.config import settings as app_settings

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = app_settings.django_secret_key

DEBUG = app_settings.debug

ALLOWED_HOSTS = app_settings.allowed_hosts

INSTALLED_APPS = [
    'core',
    'finance',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'core.middleware.ExceptionLoggingMiddleware',
]

ROOT_URLCONF = 'minhasfinancas.urls'

WSGI_APPLICATION = 'minhasfinancas.wsgi.application'

DATABASES = {}

# Rotas da API não usam barra final (/api/usuarios/autenticar)
APPEND_SLASH = False

LANGUAGE_CODE = 'pt-br'

TIME_ZONE = 'America/Sao_Paulo'

USE_I18N = True

USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'default',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': app_settings.log_level.upper(),
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
        'pymongo': {
            'level': 'WARNING',
        },
    },
}
