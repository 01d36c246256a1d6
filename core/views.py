"""
Views do app core (usuários e autenticação).

Localização: core/views.py

Views são os controllers da aplicação. Elas:
- Recebem requisições HTTP
- Chamam services para lógica de negócio
- Retornam respostas JSON

NÃO devem conter lógica de negócio, apenas orquestração.
"""
import logging

from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from core.decorators.audit_log import audit_log
from core.decorators.auth import jwt_required
from core.exceptions import AuthenticationError, BusinessRuleError
from core.http_utils import json_response, error_response, read_json
from core.models.user_model import Usuario
from core.services.audit_log_service import AuditLogService
from core.services.auth_service import AuthService
from core.services.jwt_service import JwtService
from finance.services.lancamento_service import LancamentoService

logger = logging.getLogger(__name__)

CREDENCIAIS_INVALIDAS = "Email ou senha inválidos."
CAMPOS_NAO_TEXTO = "Os campos nome, email e senha devem ser texto."


def _campos_texto(data, *nomes):
    """
    Lê campos que precisam ser string (ausente ou null vira '').

    Returns:
        Lista com os valores, ou None se algum não for texto
    """
    valores = [data.get(nome) or '' for nome in nomes]
    if not all(isinstance(valor, str) for valor in valores):
        return None
    return valores


@csrf_exempt
@require_POST
def usuarios_view(request):
    """
    Cadastro de usuário.

    POST /api/usuarios
    Body: {"nome": "...", "email": "...", "senha": "..."}
    """
    try:
        data = read_json(request)
    except ValueError:
        return json_response({'error': 'JSON inválido'}, status=400)

    campos = _campos_texto(data, 'nome', 'email', 'senha')
    if campos is None:
        return json_response({'error': CAMPOS_NAO_TEXTO}, status=400)
    nome, email, senha = campos[0].strip(), campos[1].strip(), campos[2]
    if not email or not senha:
        return json_response({'error': 'Campos obrigatórios: email, senha'}, status=400)

    auth_service = AuthService()
    try:
        usuario = auth_service.register_user(Usuario(nome=nome, email=email, senha=senha))
    except BusinessRuleError as e:
        return error_response(e, status=400)

    return json_response(usuario.to_dict(), status=201)


@csrf_exempt
@require_POST
def autenticar_view(request):
    """
    Login: troca email/senha por um token de sessão.

    POST /api/usuarios/autenticar
    Body: {"email": "...", "senha": "..."}

    Email inexistente e senha errada têm a mesma resposta (401) para não
    revelar quais emails estão cadastrados; o motivo real fica no log.
    """
    try:
        data = read_json(request)
    except ValueError:
        return json_response({'error': 'JSON inválido'}, status=400)

    campos = _campos_texto(data, 'email', 'senha')
    if campos is None:
        return json_response({'error': CAMPOS_NAO_TEXTO}, status=400)
    email, senha = campos[0].strip(), campos[1]

    audit_service = AuditLogService()
    auth_service = AuthService()
    try:
        usuario = auth_service.authenticate(email, senha)
    except AuthenticationError as e:
        audit_service.log_login(
            user_id=None,
            status='error',
            error=e.kind,
            payload={'email': email}
        )
        return json_response({'error': CREDENCIAIS_INVALIDAS}, status=401)

    token = JwtService().issue_token(usuario)
    audit_service.log_login(user_id=usuario.id)

    return json_response({**usuario.to_dict(), 'token': token})


@require_GET
@jwt_required
@audit_log(action='consultar_saldo', entity='usuario')
def saldo_view(request, user_id):
    """
    Saldo do usuário (receitas - despesas efetivadas).

    GET /api/usuarios/<user_id>/saldo

    SEGURANÇA: só o próprio usuário consulta o seu saldo.
    """
    if user_id != request.user_id:
        return json_response({'error': 'Acesso negado'}, status=403)

    usuario = AuthService().find_by_id(user_id)
    if usuario is None:
        return json_response({'error': 'Usuário não encontrado.'}, status=404)

    saldo = LancamentoService().balance_for_user(usuario.id)
    return json_response({'usuario': usuario.id, 'saldo': str(saldo)})
