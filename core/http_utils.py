"""
Helpers de request/response JSON compartilhados pelas views.

Localização: core/http_utils.py
"""
import json
from typing import Any, Dict

from django.http import JsonResponse

from core.exceptions import FinanceError


def json_response(data: Any, status: int = 200) -> JsonResponse:
    """JsonResponse sem escapar acentos; listas também são aceitas."""
    return JsonResponse(
        data,
        status=status,
        safe=isinstance(data, dict),
        json_dumps_params={'ensure_ascii': False},
    )


def error_response(error: FinanceError, status: int = 400) -> JsonResponse:
    return json_response(error.to_dict(), status=status)


def read_json(request) -> Dict[str, Any]:
    """
    Lê o corpo JSON da requisição.

    Returns:
        Dict com o corpo (vazio se não houver corpo)

    Raises:
        ValueError: Corpo não é um objeto JSON válido
    """
    if not request.body:
        return {}
    data = json.loads(request.body.decode('utf-8'))
    if not isinstance(data, dict):
        raise ValueError("O corpo da requisição deve ser um objeto JSON")
    return data
