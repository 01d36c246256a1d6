"""
Repository para logs de auditoria no MongoDB.

Localização: core/repositories/audit_log_repository.py

Schema da collection audit_logs:
{
  _id: ObjectId,
  user_id: ObjectId,           // null para ações anônimas (ex.: login falho)
  action: String,              // 'login', 'create_lancamento', 'update_status', 'error'
  entity: String,              // 'usuario', 'lancamento', 'system'
  entity_id: String,           // ID da entidade (opcional)
  payload: Object,             // Dados adicionais
  source: String,              // 'api'
  status: String,              // 'success', 'error'
  error: String,               // Mensagem/stacktrace resumido (se status = 'error')
  created_at: ISODate
}
"""
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from pymongo.database import Database

from core.repositories.base_repository import BaseRepository, to_object_id


class AuditLogRepository(BaseRepository):
    """
    Repository para gerenciar logs de auditoria no MongoDB.

    Exemplo de uso:
        repo = AuditLogRepository()
        log = repo.create({
            'user_id': '...',
            'action': 'login',
            'entity': 'usuario',
            'source': 'api',
            'status': 'success'
        })
    """

    def __init__(self, db: Optional[Database] = None):
        super().__init__('audit_logs', db)

    def _ensure_indexes(self):
        """
        Índices:
        - [user_id, created_at] (desc): histórico por usuário
        - action, status: filtros de análise
        """
        self.collection.create_index([('user_id', 1), ('created_at', -1)])
        self.collection.create_index('action')
        self.collection.create_index('status')

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Cria um novo log de auditoria.

        Args:
            data: Dados do log

        Returns:
            Dict com dados do log criado (incluindo _id)
        """
        data = dict(data)
        data.setdefault('created_at', datetime.now(timezone.utc))

        # user_id vira ObjectId quando for um id válido; senão fica como veio
        if isinstance(data.get('user_id'), str):
            data['user_id'] = to_object_id(data['user_id']) or data['user_id']

        result = self.collection.insert_one(data)
        data['_id'] = result.inserted_id
        return data
