"""
WSGI do projeto.

Exemplo:
    gunicorn minhasfinancas.wsgi:application
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'minhasfinancas.settings')

application = get_wsgi_application()
