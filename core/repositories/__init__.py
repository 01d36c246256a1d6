"""
Repositories do core.

Localização: core/repositories/

Repositories são a camada de acesso a dados (Data Access Layer).
Eles encapsulam todas as operações com MongoDB, isolando a lógica de acesso
a dados do resto da aplicação.

Estrutura:
- Cada repository representa uma collection do MongoDB
- Recebem e devolvem entidades (Usuario, Lancamento), não documentos
- O database pode ser injetado no construtor (default: core.database)
"""
from .user_repository import UserRepository
from .audit_log_repository import AuditLogRepository

__all__ = ['UserRepository', 'AuditLogRepository']
