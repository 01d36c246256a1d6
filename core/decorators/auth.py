"""
Decorator de autenticação por token.

Localização: core/decorators/auth.py
"""
import logging
from functools import wraps

from django.http import JsonResponse

from core.exceptions import ExpiredTokenError, TokenError
from core.services.jwt_service import JwtService

logger = logging.getLogger(__name__)

BEARER_PREFIX = 'Bearer '


def get_bearer_token(request):
    """Extrai o token do header ``Authorization: Bearer <token>``."""
    header = request.META.get('HTTP_AUTHORIZATION', '')
    if not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):].strip()
    return token or None


def jwt_required(view_func):
    """
    Decorator que exige um token de sessão válido.

    Sem token: 401 "Não autenticado". Token expirado ou com assinatura
    inválida: 401 "Token inválido ou expirado" (o motivo vai só para o log).

    Em caso de sucesso injeta no request:
    - request.user_claims: claims do token
    - request.user_id: id do usuário (claim userid)
    - request.user_email: email do usuário (claim sub)
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        token = get_bearer_token(request)
        if not token:
            return JsonResponse({
                'error': 'Não autenticado',
                'message': 'É necessário enviar o token no header Authorization'
            }, status=401)

        jwt_service = JwtService()
        try:
            if not jwt_service.is_valid(token):
                raise ExpiredTokenError("Token expirado")
            claims = jwt_service.parse_claims(token)
        except TokenError as e:
            logger.info("Token recusado (%s) em %s", e.kind, request.path)
            return JsonResponse({'error': 'Token inválido ou expirado'}, status=401)

        request.user_claims = claims
        request.user_id = claims.get('userid')
        request.user_email = claims.get('sub')
        return view_func(request, *args, **kwargs)
    return wrapper
