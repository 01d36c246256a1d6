"""
Repository para operações de usuário no MongoDB.

Localização: core/repositories/user_repository.py

Encapsula todas as operações com a collection 'usuarios' no MongoDB.
Recebe e devolve entidades Usuario; a senha chega aqui já em hash
(quem gera o hash é o AuthService).
"""
import logging
from typing import Optional

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from core.exceptions import BusinessRuleError
from core.models.user_model import Usuario, normalize_email
from core.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)

EMAIL_JA_CADASTRADO = "Já existe um usuário cadastrado com este email."


class UserRepository(BaseRepository):
    """
    Repository para gerenciar usuários no MongoDB.

    Exemplo de uso:
        repo = UserRepository()
        if not repo.exists_by_email('user@email.com'):
            usuario = repo.save(Usuario(nome='Fulano', email='user@email.com', senha=hash))
    """

    def __init__(self, db: Optional[Database] = None):
        super().__init__('usuarios', db)

    def _ensure_indexes(self):
        """Cria índices necessários."""
        self.collection.create_index('email', unique=True)

    def exists_by_email(self, email: str) -> bool:
        """
        Verifica se já existe usuário com o email.

        Args:
            email: Email do usuário

        Returns:
            True se existir
        """
        query = {'email': normalize_email(email)}
        return self.collection.count_documents(query, limit=1) > 0

    def find_by_email(self, email: str) -> Optional[Usuario]:
        """
        Busca usuário por email.

        Returns:
            Usuario (com o hash da senha) ou None
        """
        doc = self.collection.find_one({'email': normalize_email(email)})
        return Usuario.from_document(doc) if doc else None

    def find_by_id(self, user_id: str) -> Optional[Usuario]:
        """
        Busca usuário por ID.

        Returns:
            Usuario ou None (também para id malformado)
        """
        doc = self.find_document_by_id(user_id)
        return Usuario.from_document(doc) if doc else None

    def save(self, usuario: Usuario) -> Usuario:
        """
        Insere (id None) ou atualiza o usuário.

        O índice único de email é a última barreira contra cadastros
        concorrentes: a colisão vira a mesma BusinessRuleError do AuthService.

        Returns:
            Usuario persistido, com id preenchido
        """
        try:
            doc = self.save_document(usuario.to_document(), usuario.id)
        except DuplicateKeyError:
            logger.warning("Colisão no índice único de email ao salvar usuário")
            raise BusinessRuleError(EMAIL_JA_CADASTRADO)
        return Usuario.from_document(doc)

    def delete(self, usuario: Usuario) -> None:
        self.delete_document(usuario.id)
