"""
Filtro de busca de lançamentos.

Localização: finance/models/lancamento_filter.py

Cada campo é um predicado opcional; campo None é curinga (não filtra).
``descricao`` busca por trecho, sem diferenciar maiúsculas; os demais
campos são igualdade.
"""
import re
from dataclasses import dataclass
from typing import Optional, Dict, Any

from bson import ObjectId

from core.repositories.base_repository import to_object_id
from finance.models.lancamento_model import Lancamento, TipoLancamento, StatusLancamento


@dataclass
class LancamentoFilter:
    id: Optional[str] = None
    usuario_id: Optional[str] = None
    descricao: Optional[str] = None
    mes: Optional[int] = None
    ano: Optional[int] = None
    tipo: Optional[TipoLancamento] = None
    status: Optional[StatusLancamento] = None

    @classmethod
    def from_lancamento(cls, exemplo: Lancamento) -> 'LancamentoFilter':
        """Filtro por exemplo: copia os campos não nulos do lançamento."""
        return cls(
            id=exemplo.id,
            usuario_id=exemplo.usuario_id,
            descricao=exemplo.descricao or None,
            mes=exemplo.mes,
            ano=exemplo.ano,
            tipo=exemplo.tipo,
            status=exemplo.status,
        )

    def to_query(self) -> Dict[str, Any]:
        """
        Monta a query do MongoDB.

        Ids malformados não casam com nenhum documento (em vez de erro),
        o mesmo comportamento de uma busca por id inexistente.
        """
        query: Dict[str, Any] = {}
        if self.id is not None:
            query['_id'] = to_object_id(self.id) or ObjectId(b'\x00' * 12)
        if self.usuario_id is not None:
            query['usuario_id'] = to_object_id(self.usuario_id) or ObjectId(b'\x00' * 12)
        if self.descricao is not None:
            query['descricao'] = {'$regex': re.escape(self.descricao), '$options': 'i'}
        if self.mes is not None:
            query['mes'] = self.mes
        if self.ano is not None:
            query['ano'] = self.ano
        if self.tipo is not None:
            query['tipo'] = self.tipo.value
        if self.status is not None:
            query['status'] = self.status.value
        return query
