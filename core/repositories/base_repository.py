"""
Repository base para MongoDB.

Localização: core/repositories/base_repository.py

Este é um repository base que pode ser estendido por outros repositories
para compartilhar funcionalidades comuns. Trabalha com documentos (dicts);
a conversão para entidades fica nas classes filhas.
"""
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.database import Database

from core.database import get_database


def to_object_id(document_id: Any) -> Optional[ObjectId]:
    """
    Converte um id (string ou ObjectId) para ObjectId.

    Returns:
        ObjectId ou None se o id for inválido
    """
    if isinstance(document_id, ObjectId):
        return document_id
    try:
        return ObjectId(document_id)
    except (InvalidId, TypeError):
        return None


class BaseRepository:
    """
    Repository base com operações CRUD comuns.

    Exemplo de uso:
        class UserRepository(BaseRepository):
            def __init__(self, db=None):
                super().__init__('usuarios', db)
    """

    def __init__(self, collection_name: str, db: Optional[Database] = None):
        """
        Inicializa o repository.

        Args:
            collection_name: Nome da collection no MongoDB
            db: Database a usar (default: core.database.get_database())
        """
        self.db = db if db is not None else get_database()
        self.collection = self.db[collection_name]
        self._ensure_indexes()

    def _ensure_indexes(self):
        """
        Cria índices necessários.
        Deve ser sobrescrito nas classes filhas.
        """
        pass

    def find_document_by_id(self, document_id: Any) -> Optional[Dict[str, Any]]:
        """
        Busca documento por ID.

        Args:
            document_id: ID do documento (ObjectId ou string)

        Returns:
            Dict com dados do documento ou None (também para id malformado)
        """
        oid = to_object_id(document_id)
        if oid is None:
            return None
        return self.collection.find_one({'_id': oid})

    def find_many(self, query: Optional[Dict[str, Any]] = None,
                  sort: Optional[tuple] = None) -> List[Dict[str, Any]]:
        """
        Busca múltiplos documentos.

        Args:
            query: Query do MongoDB (None para todos)
            sort: Tupla (campo, direção) para ordenação

        Returns:
            Lista de documentos
        """
        cursor = self.collection.find(query or {})

        if sort:
            cursor = cursor.sort(sort[0], sort[1])
        return list(cursor)

    def save_document(self, data: Dict[str, Any],
                      document_id: Optional[Any] = None) -> Dict[str, Any]:
        """
        Insere ou substitui um documento (upsert por id).

        Args:
            data: Dados do documento (sem _id)
            document_id: ID existente; None para inserir

        Returns:
            Dict com dados gravados (incluindo _id)
        """
        data = dict(data)
        if document_id is None:
            data.setdefault('created_at', datetime.now(timezone.utc))
            result = self.collection.insert_one(data)
            data['_id'] = result.inserted_id
            return data

        oid = to_object_id(document_id)
        if oid is None:
            raise ValueError("ID inválido: {!r}".format(document_id))
        self.collection.update_one({'_id': oid}, {'$set': data}, upsert=True)
        data['_id'] = oid
        return data

    def delete_document(self, document_id: Any) -> bool:
        """
        Deleta um documento.

        Returns:
            True se algum documento foi removido
        """
        oid = to_object_id(document_id)
        if oid is None:
            return False
        result = self.collection.delete_one({'_id': oid})
        return result.deleted_count > 0
