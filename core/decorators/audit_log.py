"""
Decorator para auditoria e logging.

Localização: core/decorators/audit_log.py

Decorator para logar ações das views automaticamente.
"""
from functools import wraps
from typing import Callable

from core.services.audit_log_service import AuditLogService


def audit_log(action: str, entity: str, source: str = 'api'):
    """
    Decorator para logar ações automaticamente.

    Deve ficar abaixo do ``jwt_required`` para que request.user_id já
    esteja preenchido. Respostas com status >= 400 são registradas como
    'error'; exceções são registradas e relançadas, e o request fica
    marcado (audit_error_logged) para o ExceptionLoggingMiddleware não
    gravar o mesmo erro de novo.

    Args:
        action: Tipo de ação ('create_lancamento', 'update_status', etc.)
        entity: Entidade relacionada ('lancamento', 'usuario', etc.)
        source: Origem ('api')

    Exemplo de uso:
        @jwt_required
        @audit_log(action='delete_lancamento', entity='lancamento')
        def lancamento_detail_view(request, lancamento_id):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(request, *args, **kwargs):
            audit_service = AuditLogService()
            user_id = getattr(request, 'user_id', None)
            entity_id = kwargs.get('lancamento_id') or kwargs.get('user_id')
            payload = {'method': request.method, 'path': request.path}

            try:
                response = func(request, *args, **kwargs)
            except Exception as e:
                audit_service.log_error(
                    user_id=user_id,
                    action=action,
                    entity=entity,
                    error=e,
                    source=source,
                    entity_id=entity_id,
                    payload=payload
                )
                request.audit_error_logged = True
                raise

            payload['status_code'] = response.status_code
            audit_service.log_action(
                user_id=user_id,
                action=action,
                entity=entity,
                entity_id=entity_id,
                source=source,
                status='success' if response.status_code < 400 else 'error',
                payload=payload
            )
            return response

        return wrapper
    return decorator
