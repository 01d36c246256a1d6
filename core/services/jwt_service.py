"""
Service de tokens de sessão (JWT).

Localização: core/services/jwt_service.py

Tokens no formato compacto ``header.payload.signature`` (base64url sem
padding), assinados com HMAC-SHA512 usando a chave JWT_CHAVE_ASSINATURA.
Nada é guardado no servidor: a validade depende só da assinatura e do
claim ``exp`` (segundos desde epoch).

Claims emitidos:
    sub            email do usuário
    userid         id do usuário
    nome           nome do usuário
    exp            expiração (epoch, inteiro)
    horaExpiracao  hora local da expiração, 'HH:MM'
"""
import base64
import hashlib
import hmac
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from core.config import settings
from core.exceptions import ConfigurationError, ExpiredTokenError, InvalidSignatureError
from core.models.user_model import Usuario

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _b64_url_encode(data: bytes) -> str:
    """Base64-url sem padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decodifica base64-url, recolocando o padding."""
    padding = '=' * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _json_segment(data: Dict[str, Any]) -> str:
    return _b64_url_encode(json.dumps(data, separators=(',', ':')).encode("utf-8"))


class JwtService:
    """
    Emite e valida tokens de sessão.

    Exemplo de uso:
        jwt_service = JwtService()
        token = jwt_service.issue_token(usuario)
        if jwt_service.is_valid(token):
            email = jwt_service.subject_of(token)
    """

    ALGORITHM = 'HS512'

    def __init__(self, secret_key: Optional[str] = None,
                 expiration_minutes: Optional[Any] = None,
                 clock: Optional[Clock] = None):
        """
        Args:
            secret_key: Chave de assinatura (default: JWT_CHAVE_ASSINATURA)
            expiration_minutes: Validade em minutos (default: JWT_EXPIRACAO)
            clock: Função que retorna o instante atual (datetime com tz)

        Raises:
            ConfigurationError: Chave ou validade ausentes/inválidas
        """
        if secret_key is None:
            secret_key = settings.jwt_chave_assinatura
        if expiration_minutes is None:
            expiration_minutes = settings.jwt_expiracao

        if not secret_key:
            raise ConfigurationError("JWT_CHAVE_ASSINATURA não configurada")
        if expiration_minutes is None or str(expiration_minutes).strip() == '':
            raise ConfigurationError("JWT_EXPIRACAO não configurada")
        try:
            minutes = int(str(expiration_minutes).strip())
        except ValueError:
            raise ConfigurationError("JWT_EXPIRACAO inválida: {!r}".format(expiration_minutes))
        if minutes < 0:
            raise ConfigurationError("JWT_EXPIRACAO não pode ser negativa")

        self.secret_key = secret_key
        self.expiration_minutes = minutes
        self.clock = clock or _utcnow

    def _sign(self, message: bytes) -> bytes:
        return hmac.new(self.secret_key.encode("utf-8"), message, hashlib.sha512).digest()

    def _now_seconds(self) -> int:
        return int(self.clock().timestamp())

    def issue_token(self, usuario: Usuario) -> str:
        """
        Gera o token de sessão do usuário.

        Args:
            usuario: Usuário autenticado

        Returns:
            Token assinado
        """
        expires_at = self.clock() + timedelta(minutes=self.expiration_minutes)
        claims = {
            'sub': usuario.email,
            'userid': usuario.id,
            'nome': usuario.nome,
            'exp': int(expires_at.timestamp()),
            'horaExpiracao': expires_at.astimezone().strftime('%H:%M'),
        }
        header = {'alg': self.ALGORITHM, 'typ': 'JWT'}
        signing_input = "{}.{}".format(_json_segment(header), _json_segment(claims))
        signature = _b64_url_encode(self._sign(signing_input.encode("utf-8")))
        return "{}.{}".format(signing_input, signature)

    def parse_claims(self, token: str) -> Dict[str, Any]:
        """
        Verifica a assinatura e decodifica os claims.

        Returns:
            Dict com os claims

        Raises:
            InvalidSignatureError: Token malformado ou assinatura não confere
            ExpiredTokenError: Token íntegro, porém expirado
        """
        if not isinstance(token, str):
            raise InvalidSignatureError("Token malformado")
        parts = token.split('.')
        if len(parts) != 3:
            raise InvalidSignatureError("Token malformado")
        header_b64, payload_b64, signature_b64 = parts

        signing_input = "{}.{}".format(header_b64, payload_b64).encode("utf-8")
        try:
            actual_sig = _b64_url_decode(signature_b64)
        except ValueError:
            raise InvalidSignatureError("Token malformado")
        if not hmac.compare_digest(self._sign(signing_input), actual_sig):
            raise InvalidSignatureError("Assinatura do token inválida")

        try:
            header = json.loads(_b64_url_decode(header_b64).decode("utf-8"))
            claims = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
        except ValueError:
            raise InvalidSignatureError("Token malformado")

        if not isinstance(header, dict) or header.get('alg') != self.ALGORITHM:
            raise InvalidSignatureError("Algoritmo do token não suportado")
        if not isinstance(claims, dict):
            raise InvalidSignatureError("Token malformado")

        exp = claims.get('exp')
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise InvalidSignatureError("Token sem expiração")
        if self._now_seconds() > exp:
            raise ExpiredTokenError("Token expirado")
        return claims

    def is_valid(self, token: str) -> bool:
        """
        Indica se o token ainda está dentro da validade.

        Só a expiração vira False; assinatura inválida propaga
        InvalidSignatureError para o chamador.
        """
        try:
            claims = self.parse_claims(token)
        except ExpiredTokenError:
            logger.debug("Token expirado")
            return False
        return self._now_seconds() <= claims['exp']

    def subject_of(self, token: str) -> str:
        """Retorna o email (claim ``sub``) do token."""
        return self.parse_claims(token).get('sub')
