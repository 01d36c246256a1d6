"""
Service para lógica de lançamentos financeiros.

Localização: finance/services/lancamento_service.py

Este service contém a lógica de negócio relacionada a lançamentos.
Ele usa o LancamentoRepository para acessar dados, mas adiciona
validações e regras de negócio.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Union

from core.exceptions import UnsavedEntityError
from finance.models.lancamento_filter import LancamentoFilter
from finance.models.lancamento_model import Lancamento, StatusLancamento
from finance.repositories.lancamento_repository import LancamentoRepository
from finance.services.lancamento_validator import validate_lancamento

logger = logging.getLogger(__name__)


def _require_id(lancamento: Lancamento, operation: str) -> None:
    if lancamento.id is None:
        raise UnsavedEntityError(
            "{} exige um lançamento já salvo (id preenchido)".format(operation)
        )


class LancamentoService:
    """
    Service para gerenciar lançamentos.

    Exemplo de uso:
        service = LancamentoService(LancamentoRepository())
        lancamento = service.save(Lancamento(
            descricao='Salário', mes=2, ano=2022,
            valor=Decimal('10'), tipo=TipoLancamento.RECEITA,
            usuario=usuario,
        ))
        service.change_status(lancamento, StatusLancamento.EFETIVADO)
    """

    def __init__(self, lancamento_repo: Optional[LancamentoRepository] = None):
        self.lancamento_repo = lancamento_repo if lancamento_repo is not None else LancamentoRepository()

    def validate(self, lancamento: Lancamento) -> None:
        """
        Raises:
            ValidationError: Se algum campo obrigatório estiver inválido
        """
        validate_lancamento(lancamento)

    def save(self, lancamento: Lancamento) -> Lancamento:
        """
        Valida e cria o lançamento. Todo lançamento novo nasce PENDENTE.

        Returns:
            Lancamento persistido (id preenchido)

        Raises:
            ValidationError: Se dados inválidos (nada é gravado)
        """
        self.validate(lancamento)
        lancamento.status = StatusLancamento.PENDENTE
        if lancamento.data_cadastro is None:
            lancamento.data_cadastro = date.today()

        saved = self.lancamento_repo.save(lancamento)
        logger.info("Lançamento criado (id=%s, usuario=%s)", saved.id, saved.usuario_id)
        return saved

    def update(self, lancamento: Lancamento) -> Lancamento:
        """
        Valida e atualiza um lançamento existente.

        Raises:
            UnsavedEntityError: Se o lançamento nunca foi salvo
            ValidationError: Se dados inválidos
        """
        _require_id(lancamento, 'update')
        self.validate(lancamento)

        saved = self.lancamento_repo.save(lancamento)
        logger.info("Lançamento atualizado (id=%s)", saved.id)
        return saved

    def delete(self, lancamento: Lancamento) -> None:
        """
        Remove o lançamento.

        Raises:
            UnsavedEntityError: Se o lançamento nunca foi salvo
        """
        _require_id(lancamento, 'delete')
        self.lancamento_repo.delete(lancamento)
        logger.info("Lançamento removido (id=%s)", lancamento.id)

    def search(self, filtro: Union[LancamentoFilter, Lancamento]) -> List[Lancamento]:
        """
        Busca lançamentos.

        Args:
            filtro: LancamentoFilter, ou um Lancamento usado como exemplo
                (seus campos não nulos viram predicados)

        Returns:
            Lista de lançamentos na ordem do repository
        """
        if isinstance(filtro, Lancamento):
            filtro = LancamentoFilter.from_lancamento(filtro)
        return self.lancamento_repo.find_all(filtro)

    def change_status(self, lancamento: Lancamento, status: StatusLancamento) -> Lancamento:
        """
        Altera o status e persiste via ``update``.

        Passa pela validação completa do update: um lançamento que ficou
        inválido em outro campo não consegue mudar de status.
        """
        lancamento.status = status
        logger.info("Alterando status do lançamento %s para %s", lancamento.id, status.value)
        return self.update(lancamento)

    def find_by_id(self, lancamento_id: str) -> Optional[Lancamento]:
        """
        Returns:
            Lancamento ou None se não existir
        """
        return self.lancamento_repo.find_by_id(lancamento_id)

    def balance_for_user(self, usuario_id: str) -> Decimal:
        """Saldo (receitas - despesas efetivadas) do usuário."""
        return self.lancamento_repo.balance_for_user(usuario_id)
