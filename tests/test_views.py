"""Tests for the HTTP views, with services mocked out."""
import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from bson import ObjectId
from django.test import RequestFactory

from conftest import criar_lancamento, criar_usuario, USER_ID, InMemoryLancamentoRepository
from core import views as core_views
from core.exceptions import (
    BusinessRuleError, InvalidPasswordError, UserNotFoundError, ValidationError,
)
from core.middleware import ExceptionLoggingMiddleware
from core.services.jwt_service import JwtService
from finance import views as finance_views
from finance.models.lancamento_model import StatusLancamento
from finance.services.lancamento_service import LancamentoService


@pytest.fixture
def rf():
    return RequestFactory()


@pytest.fixture(autouse=True)
def audit_service():
    service = MagicMock()
    with patch('core.decorators.audit_log.AuditLogService', return_value=service), \
            patch('core.views.AuditLogService', return_value=service):
        yield service


@pytest.fixture
def auth_header():
    token = JwtService().issue_token(criar_usuario())
    return {'HTTP_AUTHORIZATION': 'Bearer {}'.format(token)}


@pytest.fixture
def lancamento_service():
    service = MagicMock()
    with patch('finance.views.LancamentoService', return_value=service):
        yield service


def _body(response):
    return json.loads(response.content.decode('utf-8'))


def _post(rf, path, data, **extra):
    return rf.post(path, data=json.dumps(data), content_type='application/json', **extra)


def _put(rf, path, data, **extra):
    return rf.put(path, data=json.dumps(data), content_type='application/json', **extra)


class TestUsuarios:

    def test_register_returns_created_user_without_password(self, rf):
        with patch('core.views.AuthService') as auth_cls:
            auth_cls.return_value.register_user.return_value = criar_usuario(senha='hash')
            response = core_views.usuarios_view(_post(rf, '/api/usuarios', {
                'nome': 'usuario', 'email': 'usuario@email.com', 'senha': 'senha',
            }))

        assert response.status_code == 201
        assert _body(response) == {'id': USER_ID, 'nome': 'usuario', 'email': 'usuario@email.com'}

    def test_register_duplicate_email(self, rf):
        with patch('core.views.AuthService') as auth_cls:
            auth_cls.return_value.register_user.side_effect = BusinessRuleError("Já existe")
            response = core_views.usuarios_view(_post(rf, '/api/usuarios', {
                'email': 'usuario@email.com', 'senha': 'senha',
            }))

        assert response.status_code == 400
        assert _body(response) == {'error': 'Já existe', 'kind': 'business_rule'}

    def test_register_requires_email_and_password(self, rf):
        response = core_views.usuarios_view(_post(rf, '/api/usuarios', {'nome': 'x'}))
        assert response.status_code == 400

    def test_register_rejects_invalid_json(self, rf):
        request = rf.post('/api/usuarios', data='{nao json', content_type='application/json')
        assert core_views.usuarios_view(request).status_code == 400


class TestAutenticar:

    def test_success_returns_token(self, rf, audit_service):
        usuario = criar_usuario()
        with patch('core.views.AuthService') as auth_cls:
            auth_cls.return_value.authenticate.return_value = usuario
            response = core_views.autenticar_view(_post(rf, '/api/usuarios/autenticar', {
                'email': 'usuario@email.com', 'senha': 'senha',
            }))

        body = _body(response)
        assert response.status_code == 200
        assert body['id'] == USER_ID
        assert JwtService().subject_of(body['token']) == 'usuario@email.com'
        audit_service.log_login.assert_called_once_with(user_id=USER_ID)

    @pytest.mark.parametrize('error', [
        UserNotFoundError("Usuário não encontrado para o email informado"),
        InvalidPasswordError("Senha inválida"),
    ])
    def test_failures_share_generic_response(self, rf, audit_service, error):
        with patch('core.views.AuthService') as auth_cls:
            auth_cls.return_value.authenticate.side_effect = error
            response = core_views.autenticar_view(_post(rf, '/api/usuarios/autenticar', {
                'email': 'usuario@email.com', 'senha': 'x',
            }))

        assert response.status_code == 401
        assert _body(response) == {'error': core_views.CREDENCIAIS_INVALIDAS}
        assert audit_service.log_login.call_args.kwargs['error'] == error.kind


class TestJwtRequired:

    def test_missing_token(self, rf, lancamento_service):
        response = finance_views.lancamentos_view(rf.get('/api/lancamentos'))
        assert response.status_code == 401
        lancamento_service.search.assert_not_called()

    def test_invalid_token(self, rf, lancamento_service):
        request = rf.get('/api/lancamentos', HTTP_AUTHORIZATION='Bearer a.b.c')
        response = finance_views.lancamentos_view(request)
        assert response.status_code == 401
        assert _body(response) == {'error': 'Token inválido ou expirado'}

    def test_expired_token(self, rf, lancamento_service):
        emitido = JwtService(
            expiration_minutes=0,
            clock=lambda: datetime.now(timezone.utc) - timedelta(minutes=5),
        )
        token = emitido.issue_token(criar_usuario())

        request = rf.get('/api/lancamentos', HTTP_AUTHORIZATION='Bearer {}'.format(token))
        response = finance_views.lancamentos_view(request)

        assert response.status_code == 401
        lancamento_service.search.assert_not_called()


class TestLancamentos:

    def test_search_is_scoped_to_token_user(self, rf, auth_header, lancamento_service):
        lancamento_service.search.return_value = [criar_lancamento(id='1')]

        response = finance_views.lancamentos_view(
            rf.get('/api/lancamentos', {'mes': '1', 'status': 'pendente'}, **auth_header))

        assert response.status_code == 200
        assert [item['id'] for item in _body(response)] == ['1']
        filtro = lancamento_service.search.call_args[0][0]
        assert filtro.usuario_id == USER_ID
        assert filtro.mes == 1
        assert filtro.status == StatusLancamento.PENDENTE

    def test_search_for_other_user_is_forbidden(self, rf, auth_header, lancamento_service):
        response = finance_views.lancamentos_view(
            rf.get('/api/lancamentos', {'usuario': str(ObjectId())}, **auth_header))

        assert response.status_code == 403
        lancamento_service.search.assert_not_called()

    def test_create(self, rf, auth_header, lancamento_service):
        lancamento_service.save.side_effect = lambda l: criar_lancamento(
            id='1', descricao=l.descricao, valor=l.valor, usuario=l.usuario)

        response = finance_views.lancamentos_view(_post(rf, '/api/lancamentos', {
            'descricao': 'Salario', 'mes': 2, 'ano': 2022, 'valor': '10.50', 'tipo': 'RECEITA',
        }, **auth_header))

        assert response.status_code == 201
        body = _body(response)
        assert body['status'] == 'PENDENTE'
        assert body['valor'] == '10.50'
        assert body['usuario'] == USER_ID
        saved = lancamento_service.save.call_args[0][0]
        assert saved.valor == Decimal('10.50')
        assert saved.usuario.id == USER_ID

    def test_create_for_other_user_is_forbidden(self, rf, auth_header, lancamento_service):
        response = finance_views.lancamentos_view(_post(rf, '/api/lancamentos', {
            'descricao': 'x', 'usuario': str(ObjectId()),
        }, **auth_header))

        assert response.status_code == 403
        lancamento_service.save.assert_not_called()

    def test_create_validation_error(self, rf, auth_header, lancamento_service):
        lancamento_service.save.side_effect = ValidationError("Informe um valor válido.")

        response = finance_views.lancamentos_view(_post(rf, '/api/lancamentos', {
            'descricao': 'x', 'valor': 'abc',
        }, **auth_header))

        assert response.status_code == 400
        assert _body(response)['error'] == "Informe um valor válido."


class TestLancamentoDetail:

    def test_get_owned(self, rf, auth_header, lancamento_service):
        lancamento_service.find_by_id.return_value = criar_lancamento(id='1')

        response = finance_views.lancamento_detail_view(
            rf.get('/api/lancamentos/1', **auth_header), lancamento_id='1')

        assert response.status_code == 200
        assert _body(response)['id'] == '1'

    def test_other_users_entry_is_not_found(self, rf, auth_header, lancamento_service):
        lancamento_service.find_by_id.return_value = criar_lancamento(
            id='1', usuario=criar_usuario(id=str(ObjectId())))

        response = finance_views.lancamento_detail_view(
            rf.delete('/api/lancamentos/1', **auth_header), lancamento_id='1')

        assert response.status_code == 404
        lancamento_service.delete.assert_not_called()

    def test_missing_entry(self, rf, auth_header, lancamento_service):
        lancamento_service.find_by_id.return_value = None

        response = finance_views.lancamento_detail_view(
            rf.get('/api/lancamentos/1', **auth_header), lancamento_id='1')

        assert response.status_code == 404
        assert _body(response) == {'error': finance_views.LANCAMENTO_NAO_ENCONTRADO}

    def test_delete(self, rf, auth_header, lancamento_service):
        lancamento = criar_lancamento(id='1')
        lancamento_service.find_by_id.return_value = lancamento

        response = finance_views.lancamento_detail_view(
            rf.delete('/api/lancamentos/1', **auth_header), lancamento_id='1')

        assert response.status_code == 204
        lancamento_service.delete.assert_called_once_with(lancamento)

    def test_update(self, rf, auth_header, lancamento_service):
        lancamento_service.find_by_id.return_value = criar_lancamento(id='1')
        lancamento_service.update.side_effect = lambda l: l

        response = finance_views.lancamento_detail_view(_put(rf, '/api/lancamentos/1', {
            'descricao': 'Aluguel', 'mes': 3, 'ano': 2022, 'valor': '900', 'tipo': 'DESPESA',
        }, **auth_header), lancamento_id='1')

        body = _body(response)
        assert response.status_code == 200
        assert body['descricao'] == 'Aluguel'
        assert body['tipo'] == 'DESPESA'


class TestAtualizarStatus:

    def test_invalid_status(self, rf, auth_header, lancamento_service):
        response = finance_views.atualizar_status_view(_put(
            rf, '/api/lancamentos/1/atualiza-status', {'status': 'QUALQUER'}, **auth_header,
        ), lancamento_id='1')

        assert response.status_code == 400
        assert _body(response) == {'error': finance_views.STATUS_INVALIDO}
        lancamento_service.change_status.assert_not_called()

    def test_changes_status(self, rf, auth_header, lancamento_service):
        lancamento = criar_lancamento(id='1')
        lancamento_service.find_by_id.return_value = lancamento
        lancamento_service.change_status.return_value = criar_lancamento(
            id='1', status=StatusLancamento.EFETIVADO)

        response = finance_views.atualizar_status_view(_put(
            rf, '/api/lancamentos/1/atualiza-status', {'status': 'efetivado'}, **auth_header,
        ), lancamento_id='1')

        assert response.status_code == 200
        assert _body(response)['status'] == 'EFETIVADO'
        lancamento_service.change_status.assert_called_once_with(lancamento, StatusLancamento.EFETIVADO)


class TestSaldo:

    def test_other_user_is_forbidden(self, rf, auth_header):
        response = core_views.saldo_view(
            rf.get('/api/usuarios/x/saldo', **auth_header), user_id=str(ObjectId()))
        assert response.status_code == 403

    def test_unknown_user(self, rf, auth_header):
        with patch('core.views.AuthService') as auth_cls:
            auth_cls.return_value.find_by_id.return_value = None
            response = core_views.saldo_view(
                rf.get('/api/usuarios/x/saldo', **auth_header), user_id=USER_ID)
        assert response.status_code == 404

    def test_balance(self, rf, auth_header, audit_service):
        with patch('core.views.AuthService') as auth_cls, \
                patch('core.views.LancamentoService') as service_cls:
            auth_cls.return_value.find_by_id.return_value = criar_usuario()
            service_cls.return_value.balance_for_user.return_value = Decimal('69.50')
            response = core_views.saldo_view(
                rf.get('/api/usuarios/x/saldo', **auth_header), user_id=USER_ID)

        assert response.status_code == 200
        assert _body(response) == {'usuario': USER_ID, 'saldo': '69.50'}
        assert audit_service.log_action.call_args.kwargs['status'] == 'success'


def test_audit_decorator_records_and_reraises(rf, auth_header, lancamento_service, audit_service):
    lancamento_service.search.side_effect = RuntimeError('banco fora do ar')

    with pytest.raises(RuntimeError):
        finance_views.lancamentos_view(rf.get('/api/lancamentos', **auth_header))

    kwargs = audit_service.log_error.call_args.kwargs
    assert kwargs['user_id'] == USER_ID
    assert kwargs['action'] == 'lancamentos'


def test_middleware_logs_unhandled_exception(rf):
    with patch('core.middleware.exception_logging_middleware.AuditLogService') as audit_cls:
        middleware = ExceptionLoggingMiddleware(lambda request: None)
        result = middleware.process_exception(rf.get('/api/lancamentos'), ValueError('boom'))

    assert result is None
    kwargs = audit_cls.return_value.log_error.call_args.kwargs
    assert kwargs['action'] == 'unhandled_exception'
    assert kwargs['payload']['exception_type'] == 'ValueError'


class TestTiposInvalidos:
    """Wrong-typed JSON fields answer 400, never 500."""

    @pytest.fixture
    def real_service(self):
        service = LancamentoService(InMemoryLancamentoRepository())
        with patch('finance.views.LancamentoService', return_value=service):
            yield service

    @pytest.mark.parametrize('payload', [
        {'nome': 5, 'email': 'usuario@email.com', 'senha': 'senha'},
        {'nome': 'usuario', 'email': ['usuario@email.com'], 'senha': 'senha'},
        {'nome': 'usuario', 'email': 'usuario@email.com', 'senha': 123456},
    ])
    def test_register_non_text_fields(self, rf, payload):
        with patch('core.views.AuthService') as auth_cls:
            response = core_views.usuarios_view(_post(rf, '/api/usuarios', payload))

        assert response.status_code == 400
        assert _body(response) == {'error': core_views.CAMPOS_NAO_TEXTO}
        auth_cls.return_value.register_user.assert_not_called()

    def test_login_with_numeric_password(self, rf):
        with patch('core.views.AuthService') as auth_cls:
            response = core_views.autenticar_view(_post(rf, '/api/usuarios/autenticar', {
                'email': 'usuario@email.com', 'senha': 123456,
            }))

        assert response.status_code == 400
        auth_cls.return_value.authenticate.assert_not_called()

    def test_create_with_numeric_description(self, rf, auth_header, real_service):
        response = finance_views.lancamentos_view(_post(rf, '/api/lancamentos', {
            'descricao': 5, 'mes': 2, 'ano': 2022, 'valor': '10', 'tipo': 'RECEITA',
        }, **auth_header))

        assert response.status_code == 400
        assert _body(response)['error'] == "Informe uma descrição válida."

    @pytest.mark.parametrize('mes', [True, 2.9])
    def test_create_with_non_integer_month(self, rf, auth_header, real_service, mes):
        response = finance_views.lancamentos_view(_post(rf, '/api/lancamentos', {
            'descricao': 'Salario', 'mes': mes, 'ano': 2022, 'valor': '10', 'tipo': 'RECEITA',
        }, **auth_header))

        assert response.status_code == 400
        assert _body(response)['error'] == "Informe um mês válido."

    def test_create_with_integral_float_month(self, rf, auth_header, real_service):
        response = finance_views.lancamentos_view(_post(rf, '/api/lancamentos', {
            'descricao': 'Salario', 'mes': 2.0, 'ano': 2022, 'valor': '10', 'tipo': 'RECEITA',
        }, **auth_header))

        assert response.status_code == 201
        assert _body(response)['mes'] == 2

    def test_create_with_value_beyond_decimal128(self, rf, auth_header, real_service):
        response = finance_views.lancamentos_view(_post(rf, '/api/lancamentos', {
            'descricao': 'Salario', 'mes': 2, 'ano': 2022,
            'valor': '1.0000000000000000000000000000000001', 'tipo': 'RECEITA',
        }, **auth_header))

        assert response.status_code == 400
        assert _body(response)['error'] == "Informe um valor válido."


@pytest.mark.parametrize('value,expected', [
    ('3', 3), (3, 3), (3.0, 3), (True, None), (False, None), (2.9, None),
    ('', None), (None, None), ('abc', None), ([1], None),
])
def test_to_int_conversion(value, expected):
    assert finance_views._to_int(value) == expected


def test_error_in_audited_view_is_recorded_once(rf, auth_header, lancamento_service, audit_service):
    lancamento_service.search.side_effect = RuntimeError('banco fora do ar')
    request = rf.get('/api/lancamentos', **auth_header)

    with patch('core.middleware.exception_logging_middleware.AuditLogService') as middleware_audit_cls:
        middleware = ExceptionLoggingMiddleware(lambda req: None)
        with pytest.raises(RuntimeError) as exc_info:
            finance_views.lancamentos_view(request)
        middleware.process_exception(request, exc_info.value)

    audit_service.log_error.assert_called_once()
    middleware_audit_cls.return_value.log_error.assert_not_called()
