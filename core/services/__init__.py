"""
Services do core.

Localização: core/services/

Services contêm a lógica de negócio relacionada a funcionalidades base,
como autenticação, tokens de sessão e auditoria.
"""
from .auth_service import AuthService
from .jwt_service import JwtService
from .audit_log_service import AuditLogService

__all__ = ['AuthService', 'JwtService', 'AuditLogService']
