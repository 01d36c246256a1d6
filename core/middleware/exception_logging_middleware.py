"""
Middleware para capturar e logar exceções não tratadas.

Localização: core/middleware/exception_logging_middleware.py

Este middleware registra no logger e no audit_log as exceções que as
views não trataram (erros de programação, banco indisponível, etc.).
FinanceError nunca chega aqui: as views já a convertem em 4xx.
"""
import logging

from core.services.audit_log_service import AuditLogService

logger = logging.getLogger(__name__)


class ExceptionLoggingMiddleware:
    """
    Middleware para capturar exceções não tratadas e logá-las.

    Deve ser adicionado após outros middlewares para capturar exceções.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.audit_service = AuditLogService()

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        """
        Processa exceções não tratadas.

        Returns:
            None (deixa o Django produzir a resposta 500 normalmente)
        """
        logger.exception(
            "Exceção não tratada em %s %s", request.method, request.path,
            exc_info=exception,
        )
        if getattr(request, 'audit_error_logged', False):
            # o @audit_log da view já gravou o erro
            return None
        self.audit_service.log_error(
            user_id=getattr(request, 'user_id', None),
            action='unhandled_exception',
            entity='system',
            error=exception,
            payload={
                'path': request.path,
                'method': request.method,
                'exception_type': type(exception).__name__,
                'exception_message': str(exception)
            }
        )
        return None
