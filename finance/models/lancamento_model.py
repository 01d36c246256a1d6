"""
Modelo de Lançamento (receita ou despesa).

Localização: finance/models/lancamento_model.py

Schema no MongoDB (collection 'lancamentos'):
{
  _id: ObjectId,
  descricao: String,
  mes: Number (1-12),
  ano: Number (4 dígitos),
  valor: Decimal128 (sempre positivo),
  tipo: "RECEITA" | "DESPESA",
  status: "PENDENTE" | "EFETIVADO" | "CANCELADO",
  usuario_id: ObjectId,
  data_cadastro: ISODate,
  updated_at: ISODate
}
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Dict, Any

from bson import ObjectId
from bson.decimal128 import Decimal128

from core.models.user_model import Usuario


class TipoLancamento(str, Enum):
    RECEITA = 'RECEITA'
    DESPESA = 'DESPESA'


class StatusLancamento(str, Enum):
    PENDENTE = 'PENDENTE'
    EFETIVADO = 'EFETIVADO'
    CANCELADO = 'CANCELADO'


def parse_enum(enum_cls, value):
    """
    Converte string (qualquer caixa) para o membro do enum.

    Returns:
        Membro do enum, ou None se value for None/vazio

    Raises:
        ValueError: Se o valor não existir no enum
    """
    if value is None or isinstance(value, enum_cls):
        return value
    text = str(value).strip().upper()
    if not text:
        return None
    return enum_cls(text)


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Converte valores numéricos (int, float, str, Decimal128) para Decimal.

    Floats passam por str() para não carregar o erro binário.
    """
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, Decimal128):
        return value.to_decimal()
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError("Valor numérico inválido: {!r}".format(value))


@dataclass
class Lancamento:
    """
    Lançamento financeiro de um usuário em um mês/ano.

    ``id`` é None até o primeiro save; update, delete e mudança de
    status exigem id preenchido.
    """

    id: Optional[str] = None
    descricao: Optional[str] = None
    mes: Optional[int] = None
    ano: Optional[int] = None
    usuario: Optional[Usuario] = None
    valor: Optional[Decimal] = None
    tipo: Optional[TipoLancamento] = None
    status: Optional[StatusLancamento] = None
    data_cadastro: Optional[date] = field(default=None)

    @property
    def usuario_id(self) -> Optional[str]:
        return self.usuario.id if self.usuario else None

    def to_document(self) -> Dict[str, Any]:
        """
        Converte para documento do MongoDB (sem _id).

        Returns:
            Dict pronto para insert/update
        """
        valor = to_decimal(self.valor)
        return {
            'descricao': self.descricao.strip() if self.descricao else self.descricao,
            'mes': self.mes,
            'ano': self.ano,
            'valor': Decimal128(valor) if valor is not None else None,
            'tipo': self.tipo.value if self.tipo else None,
            'status': self.status.value if self.status else None,
            'usuario_id': ObjectId(self.usuario_id) if self.usuario_id else None,
            'data_cadastro': (
                datetime.combine(self.data_cadastro, time.min, tzinfo=timezone.utc)
                if self.data_cadastro else None
            ),
            'updated_at': datetime.now(timezone.utc),
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any],
                      usuario: Optional[Usuario] = None) -> 'Lancamento':
        """
        Cria a entidade a partir do documento.

        Args:
            doc: Documento da collection 'lancamentos'
            usuario: Usuário já carregado; sem ele só o id é preenchido
        """
        if usuario is None and doc.get('usuario_id') is not None:
            usuario = Usuario(id=str(doc['usuario_id']))

        data_cadastro = doc.get('data_cadastro')
        if isinstance(data_cadastro, datetime):
            data_cadastro = data_cadastro.date()

        return cls(
            id=str(doc['_id']),
            descricao=doc.get('descricao'),
            mes=doc.get('mes'),
            ano=doc.get('ano'),
            usuario=usuario,
            valor=to_decimal(doc.get('valor')),
            tipo=parse_enum(TipoLancamento, doc.get('tipo')),
            status=parse_enum(StatusLancamento, doc.get('status')),
            data_cadastro=data_cadastro,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Representação JSON usada pela API."""
        return {
            'id': self.id,
            'descricao': self.descricao,
            'mes': self.mes,
            'ano': self.ano,
            'valor': str(self.valor) if self.valor is not None else None,
            'tipo': self.tipo.value if self.tipo else None,
            'status': self.status.value if self.status else None,
            'usuario': self.usuario_id,
            'data_cadastro': self.data_cadastro.isoformat() if self.data_cadastro else None,
        }
