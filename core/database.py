"""
Acesso ao MongoDB.

Localização: core/database.py

Um único MongoClient por processo (o pymongo já é thread-safe e mantém
pool de conexões). O client só é criado no primeiro uso, então importar
repositories não abre conexão.
"""
import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database

from core.config import settings

logger = logging.getLogger(__name__)

_client: Optional[MongoClient] = None


def get_client() -> MongoClient:
    """Retorna o MongoClient do processo, criando-o se necessário."""
    global _client
    if _client is None:
        logger.info("Conectando ao MongoDB (db=%s)", settings.mongo_db_name)
        _client = MongoClient(
            settings.mongo_uri,
            serverSelectionTimeoutMS=settings.mongo_timeout_ms,
            tz_aware=True,
        )
    return _client


def get_database(name: Optional[str] = None) -> Database:
    """
    Retorna o database configurado.

    Args:
        name: Nome do database (default: MONGO_DB_NAME)
    """
    return get_client()[name or settings.mongo_db_name]

