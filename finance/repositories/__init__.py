"""
Repositories do app finance.

Localização: finance/repositories/

Repositories específicos para o domínio financeiro.
Cada repository representa uma collection relacionada a finanças.
"""
from .lancamento_repository import LancamentoRepository

__all__ = ['LancamentoRepository']
