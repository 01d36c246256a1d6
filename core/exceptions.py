"""
Exceções de domínio.

Localização: core/exceptions.py

Toda falha de regra de negócio carrega um ``kind`` (etiqueta estável,
usada em logs e no audit_log) e uma ``message`` legível para o usuário.
As views convertem essas exceções em respostas JSON; o que não for
FinanceError sobe até o ExceptionLoggingMiddleware.
"""


class FinanceError(Exception):
    """Base das falhas recuperáveis pelo chamador."""

    kind = 'error'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message, 'kind': self.kind}


class ValidationError(FinanceError):
    """Lançamento não passou nas regras de validação."""

    kind = 'validation'


class BusinessRuleError(FinanceError):
    """Violação de regra de negócio (ex.: email já cadastrado)."""

    kind = 'business_rule'


class AuthenticationError(FinanceError):
    """Credenciais inválidas."""

    kind = 'authentication'


class UserNotFoundError(AuthenticationError):
    kind = 'user_not_found'


class InvalidPasswordError(AuthenticationError):
    kind = 'invalid_password'


class TokenError(FinanceError):
    """Token de sessão não pôde ser aceito."""

    kind = 'token'


class ExpiredTokenError(TokenError):
    kind = 'token_expired'


class InvalidSignatureError(TokenError):
    kind = 'token_invalid'


class UnsavedEntityError(RuntimeError):
    """
    Operação exige uma entidade já persistida (id preenchido).

    É erro de programação, não de negócio: não herda de FinanceError
    para que nenhum handler de regra de negócio a converta em 400.
    """


class ConfigurationError(RuntimeError):
    """Configuração obrigatória ausente ou inválida."""
