"""
URLs da API.

Localização: api/urls.py

Centraliza todas as rotas da API REST.
"""
from django.urls import path, include

urlpatterns = [
    path('', include('core.urls')),
    path('', include('finance.urls')),
]
