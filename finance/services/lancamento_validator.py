"""
Validação de lançamentos.

Localização: finance/services/lancamento_validator.py

As regras são verificadas em ordem fixa e a primeira que falhar define
a mensagem. Função pura: não altera o lançamento nem acessa o banco.
"""
from decimal import Decimal, DecimalException

from bson.decimal128 import Decimal128

from core.exceptions import ValidationError
from finance.models.lancamento_model import Lancamento, to_decimal

DESCRICAO_INVALIDA = "Informe uma descrição válida."
MES_INVALIDO = "Informe um mês válido."
ANO_INVALIDO = "Informe um Ano válido."
USUARIO_INVALIDO = "Informe um Usuário."
VALOR_INVALIDO = "Informe um valor válido."
TIPO_INVALIDO = "Informe um tipo de lançamento."


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _valor_positivo(valor) -> bool:
    try:
        decimal_valor = to_decimal(valor)
    except ValueError:
        return False
    if decimal_valor is None or not decimal_valor.is_finite() or decimal_valor <= Decimal('0'):
        return False
    # precisa caber no Decimal128 (34 dígitos significativos) sem arredondar
    try:
        Decimal128(decimal_valor)
    except DecimalException:
        return False
    return True


def validate_lancamento(lancamento: Lancamento) -> None:
    """
    Valida os campos obrigatórios do lançamento.

    Raises:
        ValidationError: Com a mensagem da primeira regra violada
    """
    if not isinstance(lancamento.descricao, str) or not lancamento.descricao.strip():
        raise ValidationError(DESCRICAO_INVALIDA)

    if not _is_int(lancamento.mes) or not 1 <= lancamento.mes <= 12:
        raise ValidationError(MES_INVALIDO)

    if not _is_int(lancamento.ano) or not 1000 <= lancamento.ano <= 9999:
        raise ValidationError(ANO_INVALIDO)

    if lancamento.usuario is None or lancamento.usuario.id is None:
        raise ValidationError(USUARIO_INVALIDO)

    if not _valor_positivo(lancamento.valor):
        raise ValidationError(VALOR_INVALIDO)

    if lancamento.tipo is None:
        raise ValidationError(TIPO_INVALIDO)
