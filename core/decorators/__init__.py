"""
Decorators do core.

Localização: core/decorators/

Decorators para autenticação e auditoria das views.
"""
from .audit_log import audit_log
from .auth import jwt_required, get_bearer_token

__all__ = ['audit_log', 'jwt_required', 'get_bearer_token']
