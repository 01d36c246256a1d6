"""Fixtures compartilhadas dos testes."""
import os

# core.config lê o ambiente na importação: definir antes de importar o projeto.
os.environ.setdefault('JWT_EXPIRACAO', '30')
os.environ.setdefault('JWT_CHAVE_ASSINATURA', 'chave-de-assinatura-de-teste')
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'minhasfinancas.settings')

import django  # noqa: E402

django.setup()

from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from bson import ObjectId  # noqa: E402

from core.models.user_model import Usuario  # noqa: E402
from finance.models.lancamento_model import (  # noqa: E402
    Lancamento, TipoLancamento, StatusLancamento,
)


USER_ID = str(ObjectId())


def criar_usuario(**overrides):
    data = {'id': USER_ID, 'nome': 'usuario', 'email': 'usuario@email.com', 'senha': 'senha'}
    data.update(overrides)
    return Usuario(**data)


def criar_lancamento(**overrides):
    data = {
        'descricao': 'lancamento qualquer',
        'mes': 1,
        'ano': 2019,
        'valor': Decimal('10'),
        'tipo': TipoLancamento.RECEITA,
        'status': StatusLancamento.PENDENTE,
        'usuario': criar_usuario(),
        'data_cadastro': date(2019, 1, 15),
    }
    data.update(overrides)
    return Lancamento(**data)


def filtro_aceita(filtro, lancamento):
    """Avalia em memória a mesma semântica de ``LancamentoFilter.to_query``."""
    if filtro.id is not None and lancamento.id != filtro.id:
        return False
    if filtro.usuario_id is not None and lancamento.usuario_id != filtro.usuario_id:
        return False
    if filtro.descricao is not None:
        if lancamento.descricao is None or filtro.descricao.lower() not in lancamento.descricao.lower():
            return False
    for campo in ('mes', 'ano', 'tipo', 'status'):
        esperado = getattr(filtro, campo)
        if esperado is not None and getattr(lancamento, campo) != esperado:
            return False
    return True


class InMemoryLancamentoRepository:
    """Repository em memória com a mesma interface do LancamentoRepository."""

    def __init__(self, lancamentos=None):
        self.items = {}
        for lancamento in lancamentos or []:
            self.save(lancamento)

    def save(self, lancamento):
        if lancamento.id is None:
            lancamento.id = str(ObjectId())
        self.items[lancamento.id] = lancamento
        return lancamento

    def find_by_id(self, lancamento_id):
        return self.items.get(lancamento_id)

    def find_all(self, filtro=None):
        return [l for l in self.items.values() if filtro is None or filtro_aceita(filtro, l)]

    def delete(self, lancamento):
        self.items.pop(lancamento.id, None)

    def balance_for_user(self, usuario_id):
        saldo = Decimal('0')
        for l in self.items.values():
            if l.usuario_id != usuario_id or l.status != StatusLancamento.EFETIVADO:
                continue
            saldo += l.valor if l.tipo == TipoLancamento.RECEITA else -l.valor
        return saldo


@pytest.fixture
def usuario():
    return criar_usuario()


@pytest.fixture
def lancamento():
    return criar_lancamento()


@pytest.fixture
def memory_repo():
    return InMemoryLancamentoRepository()
