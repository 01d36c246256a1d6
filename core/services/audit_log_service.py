"""
Service para logs de auditoria.

Localização: core/services/audit_log_service.py

Este service gerencia a criação e consulta de logs de auditoria.
Falhas ao gravar o log são registradas no logger e nunca interrompem
a operação auditada.
"""
import logging
import traceback
from typing import Optional, Dict, Any

from pymongo.errors import PyMongoError

from core.repositories.audit_log_repository import AuditLogRepository

logger = logging.getLogger(__name__)


class AuditLogService:
    """
    Service para gerenciar logs de auditoria.

    Exemplo de uso:
        service = AuditLogService()
        service.log_action(
            user_id='...',
            action='login',
            entity='usuario',
            source='api',
            status='success'
        )
    """

    def __init__(self, audit_repo: Optional[AuditLogRepository] = None):
        self._audit_repo = audit_repo

    @property
    def audit_repo(self) -> AuditLogRepository:
        # Criado sob demanda: instanciar o service não abre conexão.
        if self._audit_repo is None:
            self._audit_repo = AuditLogRepository()
        return self._audit_repo

    def log_action(self, user_id: Optional[str], action: str, entity: str,
                   source: str = 'api', status: str = 'success',
                   entity_id: Optional[str] = None, payload: Optional[Dict[str, Any]] = None,
                   error: Optional[Any] = None) -> Optional[Dict[str, Any]]:
        """
        Registra uma ação no log de auditoria.

        Args:
            user_id: ID do usuário (None para ações anônimas)
            action: Tipo de ação ('login', 'create_lancamento', 'error', ...)
            entity: Entidade relacionada ('usuario', 'lancamento', 'system')
            source: Origem da ação ('api')
            status: 'success' ou 'error'
            entity_id: ID da entidade (opcional)
            payload: Dados adicionais (opcional)
            error: Exception, mensagem ou stacktrace (opcional)

        Returns:
            Dict com dados do log criado, ou None se a gravação falhou
        """
        log_data: Dict[str, Any] = {
            'user_id': user_id,
            'action': action,
            'entity': entity,
            'source': source,
            'status': status,
        }

        if entity_id:
            log_data['entity_id'] = entity_id

        if payload:
            log_data['payload'] = payload

        if error:
            log_data['error'] = self._format_error(error)

        try:
            return self.audit_repo.create(log_data)
        except PyMongoError:
            logger.exception("Falha ao gravar audit log (action=%s, entity=%s)", action, entity)
            return None

    def log_login(self, user_id: Optional[str], status: str = 'success',
                  error: Optional[str] = None,
                  payload: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """
        Registra tentativa de login.

        Args:
            user_id: ID do usuário (None quando o email não existe)
            status: 'success' ou 'error'
            error: Tipo da falha (se status = 'error')
            payload: Dados adicionais (ex.: email informado)
        """
        return self.log_action(
            user_id=user_id,
            action='login',
            entity='usuario',
            entity_id=user_id,
            status=status,
            payload=payload,
            error=error
        )

    def log_error(self, user_id: Optional[str], action: str, entity: str,
                  error: Any, source: str = 'api',
                  entity_id: Optional[str] = None,
                  payload: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """Registra um erro ocorrido durante ``action``."""
        return self.log_action(
            user_id=user_id,
            action=action,
            entity=entity,
            entity_id=entity_id,
            source=source,
            status='error',
            payload=payload,
            error=error
        )

    def _format_error(self, error: Any) -> str:
        """
        Formata erro para armazenamento (stacktrace resumido).

        Args:
            error: Exception, string ou qualquer objeto

        Returns:
            String com no máximo 500 caracteres
        """
        if isinstance(error, Exception):
            # Apenas as últimas 3 linhas do stacktrace
            tb_lines = traceback.format_exception(type(error), error, error.__traceback__)
            error_str = ''.join(tb_lines[-3:])
            if len(error_str) > 500:
                error_str = error_str[:497] + '...'
            return error_str
        return str(error)[:500]
