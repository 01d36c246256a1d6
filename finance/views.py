"""
Views do app finance (lançamentos).

Localização: finance/views.py

Views do módulo finance. Elas convertem JSON em Lancamento, chamam o
LancamentoService e devolvem JSON.

SEGURANÇA: o usuário vem sempre do token (request.user_id). Lançamentos
de outros usuários respondem 404, sem revelar se existem.
"""
import logging
from typing import Any, Dict, Optional

from django.http import HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from core.decorators.audit_log import audit_log
from core.decorators.auth import jwt_required
from core.exceptions import ValidationError
from core.http_utils import json_response, error_response, read_json
from core.models.user_model import Usuario
from finance.models.lancamento_filter import LancamentoFilter
from finance.models.lancamento_model import (
    Lancamento, TipoLancamento, StatusLancamento, parse_enum, to_decimal,
)
from finance.services.lancamento_service import LancamentoService

logger = logging.getLogger(__name__)

LANCAMENTO_NAO_ENCONTRADO = "Lançamento não encontrado na base de Dados."
STATUS_INVALIDO = "Não foi possível atualizar o status do lançamento, envie um status válido."


def _to_int(value: Any) -> Optional[int]:
    """Inteiro vindo de JSON ou query string; bool e float fracionário viram None."""
    if value is None or value == '' or isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_decimal_or_none(value: Any):
    try:
        return to_decimal(value)
    except ValueError:
        return None


def _enum_or_none(enum_cls, value):
    try:
        return parse_enum(enum_cls, value)
    except ValueError:
        return None


def _usuario_do_request(request) -> Usuario:
    claims = getattr(request, 'user_claims', {}) or {}
    return Usuario(id=request.user_id, email=request.user_email, nome=claims.get('nome'))


def _outro_usuario(request, usuario_id: Any) -> bool:
    return usuario_id not in (None, '') and str(usuario_id) != request.user_id


def _apply_payload(lancamento: Lancamento, data: Dict[str, Any]) -> Lancamento:
    """
    Copia os campos do corpo JSON para o lançamento.

    Valores que não convertem viram None e a validação do service
    devolve a mensagem correspondente.
    """
    lancamento.descricao = data.get('descricao')
    lancamento.mes = _to_int(data.get('mes'))
    lancamento.ano = _to_int(data.get('ano'))
    lancamento.valor = _to_decimal_or_none(data.get('valor'))
    lancamento.tipo = _enum_or_none(TipoLancamento, data.get('tipo'))
    return lancamento


def _find_owned(service: LancamentoService, request, lancamento_id: str) -> Optional[Lancamento]:
    lancamento = service.find_by_id(lancamento_id)
    if lancamento is None or lancamento.usuario_id != request.user_id:
        return None
    return lancamento


def _not_found():
    return json_response({'error': LANCAMENTO_NAO_ENCONTRADO}, status=404)


@csrf_exempt
@require_http_methods(["GET", "POST"])
@jwt_required
@audit_log(action='lancamentos', entity='lancamento')
def lancamentos_view(request):
    """
    GET  /api/lancamentos?descricao=&mes=&ano=&tipo=&status=  busca
    POST /api/lancamentos                                       cria
    """
    if request.method == 'POST':
        return _create(request)
    return _search(request)


def _search(request):
    if _outro_usuario(request, request.GET.get('usuario')):
        return json_response({'error': 'Acesso negado'}, status=403)

    filtro = LancamentoFilter(
        usuario_id=request.user_id,
        descricao=request.GET.get('descricao') or None,
        mes=_to_int(request.GET.get('mes')),
        ano=_to_int(request.GET.get('ano')),
        tipo=_enum_or_none(TipoLancamento, request.GET.get('tipo')),
        status=_enum_or_none(StatusLancamento, request.GET.get('status')),
    )
    lancamentos = LancamentoService().search(filtro)
    return json_response([lancamento.to_dict() for lancamento in lancamentos])


def _create(request):
    try:
        data = read_json(request)
    except ValueError:
        return json_response({'error': 'JSON inválido'}, status=400)

    if _outro_usuario(request, data.get('usuario')):
        return json_response({'error': 'Acesso negado'}, status=403)

    lancamento = _apply_payload(Lancamento(usuario=_usuario_do_request(request)), data)
    try:
        lancamento = LancamentoService().save(lancamento)
    except ValidationError as e:
        return error_response(e, status=400)

    return json_response(lancamento.to_dict(), status=201)


@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
@jwt_required
@audit_log(action='lancamento', entity='lancamento')
def lancamento_detail_view(request, lancamento_id):
    """
    GET    /api/lancamentos/<id>  consulta
    PUT    /api/lancamentos/<id>  atualiza
    DELETE /api/lancamentos/<id>  remove
    """
    service = LancamentoService()
    lancamento = _find_owned(service, request, lancamento_id)
    if lancamento is None:
        return _not_found()

    if request.method == 'GET':
        return json_response(lancamento.to_dict())

    if request.method == 'DELETE':
        service.delete(lancamento)
        return HttpResponse(status=204)

    try:
        data = read_json(request)
    except ValueError:
        return json_response({'error': 'JSON inválido'}, status=400)

    _apply_payload(lancamento, data)
    try:
        lancamento = service.update(lancamento)
    except ValidationError as e:
        return error_response(e, status=400)
    return json_response(lancamento.to_dict())


@csrf_exempt
@require_http_methods(["PUT"])
@jwt_required
@audit_log(action='update_status', entity='lancamento')
def atualizar_status_view(request, lancamento_id):
    """
    PUT /api/lancamentos/<id>/atualiza-status
    Body: {"status": "EFETIVADO"}
    """
    try:
        data = read_json(request)
    except ValueError:
        return json_response({'error': 'JSON inválido'}, status=400)

    status = _enum_or_none(StatusLancamento, data.get('status'))
    if status is None:
        return json_response({'error': STATUS_INVALIDO}, status=400)

    service = LancamentoService()
    lancamento = _find_owned(service, request, lancamento_id)
    if lancamento is None:
        return _not_found()

    try:
        lancamento = service.change_status(lancamento, status)
    except ValidationError as e:
        return error_response(e, status=400)
    return json_response(lancamento.to_dict())
