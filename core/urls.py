"""
URLs do app core.

Localização: core/urls.py

Rotas de usuários e autenticação (montadas em /api/ por api/urls.py).
"""
from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    path('usuarios', views.usuarios_view, name='usuarios'),
    path('usuarios/autenticar', views.autenticar_view, name='autenticar'),
    path('usuarios/<str:user_id>/saldo', views.saldo_view, name='saldo'),
]
