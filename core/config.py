"""
Configuração da aplicação.

Localização: core/config.py

Lê variáveis de ambiente (com suporte a arquivo .env via python-dotenv).
Os valores são lidos uma única vez, na importação; defina as variáveis
antes de importar este módulo.
"""
import os
import urllib.parse
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv, find_dotenv

load_dotenv(find_dotenv())


def _env_bool(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).strip().lower() in {'1', 'true', 'yes'}


def _build_mongo_uri() -> str:
    """
    Monta a URI do MongoDB.

    MONGO_URI tem prioridade. Sem ela, usa MONGO_USER/MONGO_PASS/MONGO_HOST
    (usuário e senha escapados com quote_plus). Sem credenciais, cai no
    MongoDB local.
    """
    uri = os.getenv('MONGO_URI')
    if uri:
        return uri

    user = os.getenv('MONGO_USER')
    password = os.getenv('MONGO_PASS')
    host = os.getenv('MONGO_HOST', 'localhost:27017')
    if user and password:
        return 'mongodb://{}:{}@{}/'.format(
            urllib.parse.quote_plus(user),
            urllib.parse.quote_plus(password),
            host,
        )
    return 'mongodb://{}/'.format(host)


@dataclass
class Settings:
    """Configurações carregadas do ambiente."""

    project_name: str = os.getenv('PROJECT_NAME', 'Minhas Finanças')
    debug: bool = _env_bool('DEBUG')
    log_level: str = os.getenv('LOG_LEVEL', 'INFO')
    django_secret_key: str = os.getenv('DJANGO_SECRET_KEY', 'change_me')
    allowed_hosts: List[str] = field(
        default_factory=lambda: [h.strip() for h in os.getenv('ALLOWED_HOSTS', '*').split(',') if h.strip()]
    )

    mongo_uri: str = _build_mongo_uri()
    mongo_db_name: str = os.getenv('MONGO_DB_NAME', 'minhas_financas')
    mongo_timeout_ms: int = int(os.getenv('MONGO_TIMEOUT_MS', '5000'))

    # Obrigatórias apenas para o JwtService; a ausência é verificada lá.
    jwt_expiracao: Optional[str] = os.getenv('JWT_EXPIRACAO')
    jwt_chave_assinatura: Optional[str] = os.getenv('JWT_CHAVE_ASSINATURA')


settings = Settings()
