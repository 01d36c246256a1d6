"""
Repository para lançamentos financeiros.

Localização: finance/repositories/lancamento_repository.py

Este repository encapsula todas as operações com a collection
'lancamentos' no MongoDB. O schema está em
finance/models/lancamento_model.py.
"""
from decimal import Decimal
from typing import Optional, List

from pymongo.database import Database

from core.repositories.base_repository import BaseRepository, to_object_id
from finance.models.lancamento_filter import LancamentoFilter
from finance.models.lancamento_model import (
    Lancamento, TipoLancamento, StatusLancamento, to_decimal,
)


class LancamentoRepository(BaseRepository):
    """
    Repository para gerenciar lançamentos no MongoDB.

    Exemplo de uso:
        repo = LancamentoRepository()
        pendentes = repo.find_all(LancamentoFilter(
            usuario_id='...',
            status=StatusLancamento.PENDENTE,
        ))
    """

    def __init__(self, db: Optional[Database] = None):
        super().__init__('lancamentos', db)

    def _ensure_indexes(self):
        """
        Índices:
        - [usuario_id, ano, mes]: consulta por período
        - [usuario_id, status]: saldo e filtro por status
        """
        self.collection.create_index([('usuario_id', 1), ('ano', 1), ('mes', 1)])
        self.collection.create_index([('usuario_id', 1), ('status', 1)])

    def find_by_id(self, lancamento_id: str) -> Optional[Lancamento]:
        """
        Busca lançamento por ID.

        Returns:
            Lancamento ou None (também para id malformado)
        """
        doc = self.find_document_by_id(lancamento_id)
        return Lancamento.from_document(doc) if doc else None

    def find_all(self, filtro: Optional[LancamentoFilter] = None) -> List[Lancamento]:
        """
        Busca lançamentos que atendem ao filtro, em ordem de inserção.

        Args:
            filtro: Predicados opcionais (None = todos)
        """
        query = filtro.to_query() if filtro else {}
        docs = self.find_many(query=query, sort=('_id', 1))
        return [Lancamento.from_document(doc) for doc in docs]

    def save(self, lancamento: Lancamento) -> Lancamento:
        """
        Insere (id None) ou atualiza o lançamento.

        Returns:
            Lancamento persistido; o usuário carregado é mantido
        """
        doc = self.save_document(lancamento.to_document(), lancamento.id)
        return Lancamento.from_document(doc, usuario=lancamento.usuario)

    def delete(self, lancamento: Lancamento) -> None:
        self.delete_document(lancamento.id)

    def balance_for_user(self, usuario_id: str) -> Decimal:
        """
        Saldo do usuário: receitas efetivadas menos despesas efetivadas.

        Returns:
            Decimal (0 se não houver lançamentos efetivados)
        """
        oid = to_object_id(usuario_id)
        if oid is None:
            return Decimal('0')

        pipeline = [
            {'$match': {'usuario_id': oid, 'status': StatusLancamento.EFETIVADO.value}},
            {'$group': {'_id': '$tipo', 'total': {'$sum': '$valor'}}},
        ]
        totals = {r['_id']: to_decimal(r['total']) for r in self.collection.aggregate(pipeline)}

        receitas = totals.get(TipoLancamento.RECEITA.value) or Decimal('0')
        despesas = totals.get(TipoLancamento.DESPESA.value) or Decimal('0')
        return receitas - despesas
