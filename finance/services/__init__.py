"""
Services do app finance.

Localização: finance/services/

Services contêm a lógica de negócio da aplicação.
Eles:
- Orquestram chamadas a repositories
- Aplicam regras de negócio
- Validam dados

NÃO devem acessar diretamente o MongoDB, apenas via repositories.
"""
from .lancamento_service import LancamentoService
from .lancamento_validator import validate_lancamento

__all__ = ['LancamentoService', 'validate_lancamento']
