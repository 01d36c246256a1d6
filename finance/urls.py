"""
URLs do app finance.

Localização: finance/urls.py

Rotas de lançamentos (montadas em /api/ por api/urls.py).
"""
from django.urls import path
from . import views

app_name = 'finance'

urlpatterns = [
    path('lancamentos', views.lancamentos_view, name='lancamentos'),
    path('lancamentos/<str:lancamento_id>', views.lancamento_detail_view, name='lancamento-detail'),
    path('lancamentos/<str:lancamento_id>/atualiza-status', views.atualizar_status_view, name='atualiza-status'),
]
