"""
Service para lógica de autenticação.

Localização: core/services/auth_service.py

Este service contém a lógica de negócio relacionada a autenticação.
Ele usa o UserRepository para acessar dados, mas adiciona
validações e regras de negócio (email único, verificação de senha).
"""
import logging
from typing import Callable, Optional

from core.exceptions import BusinessRuleError, UserNotFoundError, InvalidPasswordError
from core.models.user_model import Usuario
from core.repositories.user_repository import UserRepository, EMAIL_JA_CADASTRADO
from core.security import hash_password, check_password, password_too_long, BCRYPT_MAX_BYTES

logger = logging.getLogger(__name__)

USUARIO_NAO_ENCONTRADO = "Usuário não encontrado para o email informado"
SENHA_INVALIDA = "Senha inválida"
SENHA_MUITO_LONGA = "A senha deve ter no máximo {} bytes.".format(BCRYPT_MAX_BYTES)

PasswordChecker = Callable[[Optional[str], Optional[str]], bool]
PasswordHasher = Callable[[str], str]


class AuthService:
    """
    Service para gerenciar cadastro e autenticação de usuários.

    Exemplo de uso:
        service = AuthService(UserRepository())
        usuario = service.authenticate('user@email.com', 'senha123')
    """

    def __init__(self, user_repo: Optional[UserRepository] = None,
                 password_checker: PasswordChecker = check_password,
                 password_hasher: PasswordHasher = hash_password):
        """
        Args:
            user_repo: Repository de usuários (default: UserRepository())
            password_checker: Compara senha informada com a armazenada
            password_hasher: Gera o valor armazenado a partir da senha
        """
        self.user_repo = user_repo if user_repo is not None else UserRepository()
        self.password_checker = password_checker
        self.password_hasher = password_hasher

    def validate_email_available(self, email: str) -> None:
        """
        Garante que o email ainda não foi cadastrado.

        Raises:
            BusinessRuleError: Se já existe usuário com o email
        """
        if self.user_repo.exists_by_email(email):
            raise BusinessRuleError(EMAIL_JA_CADASTRADO)

    def register_user(self, usuario: Usuario) -> Usuario:
        """
        Cadastra um novo usuário.

        A checagem de email e o save não são atômicos; cadastros
        simultâneos com o mesmo email são barrados pelo índice único
        do repository.

        Args:
            usuario: Usuário com a senha em texto plano

        Returns:
            Usuario persistido (id preenchido, senha em hash)

        Raises:
            BusinessRuleError: Se o email já estiver cadastrado ou a senha
                passar do limite do bcrypt
        """
        if usuario.senha and password_too_long(usuario.senha):
            raise BusinessRuleError(SENHA_MUITO_LONGA)
        self.validate_email_available(usuario.email)

        to_save = Usuario(
            id=usuario.id,
            nome=usuario.nome,
            email=usuario.email,
            senha=self.password_hasher(usuario.senha) if usuario.senha else None,
        )
        saved = self.user_repo.save(to_save)
        logger.info("Usuário cadastrado (id=%s)", saved.id)
        return saved

    def authenticate(self, email: str, senha: str) -> Usuario:
        """
        Autentica um usuário.

        Args:
            email: Email do usuário
            senha: Senha em texto plano

        Returns:
            Usuario autenticado

        Raises:
            UserNotFoundError: Email não cadastrado
            InvalidPasswordError: Senha não confere
        """
        usuario = self.user_repo.find_by_email(email)
        if usuario is None:
            logger.warning("Falha de autenticação: %s", UserNotFoundError.kind)
            raise UserNotFoundError(USUARIO_NAO_ENCONTRADO)

        if not self.password_checker(senha, usuario.senha):
            logger.warning("Falha de autenticação: %s (user_id=%s)", InvalidPasswordError.kind, usuario.id)
            raise InvalidPasswordError(SENHA_INVALIDA)

        return usuario

    def find_by_id(self, user_id: str) -> Optional[Usuario]:
        """
        Busca usuário por ID.

        Returns:
            Usuario ou None
        """
        return self.user_repo.find_by_id(user_id)
