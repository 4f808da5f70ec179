"""
API Views JSON do back office (denúncias e tickets de suporte).

Camada fina sobre os use cases: converte JSON em DTOs, chama o
service do container e devolve {success, data/error, meta}.
Autorização é responsabilidade de quem expõe estas rotas.

Endpoints de denúncias:
- GET  /api/reports/                  - Listar (?status=, ?assignee=)
- POST /api/reports/                  - Registrar denúncia
- GET  /api/reports/stats/            - Estatísticas
- GET  /api/reports/<id>/             - Obter denúncia
- POST /api/reports/<id>/assign/      - Atribuir
- POST /api/reports/<id>/unassign/    - Remover atribuição
- POST /api/reports/<id>/status/      - Alterar status (+ notas)

Endpoints de tickets:
- GET  /api/tickets/                  - Listar (?status=, ?assignee=, ?q=)
- POST /api/tickets/                  - Abrir ticket
- GET  /api/tickets/stats/            - Estatísticas de SLA
- GET  /api/tickets/escalated/        - Escalonados
- POST /api/tickets/bulk-status/      - Status em lote
- GET  /api/tickets/<id>/             - Obter ticket
- PATCH /api/tickets/<id>/            - Alterar prioridade
- POST /api/tickets/<id>/assign/      - Atribuir ao suporte
- POST /api/tickets/<id>/unassign/    - Remover atribuição
- POST /api/tickets/<id>/escalate/    - Escalonar para desenvolvedor
- POST /api/tickets/<id>/status/      - Alterar status
- POST /api/tickets/<id>/notes/       - Nota interna
- POST /api/tickets/<id>/responses/   - Registrar resposta
"""

import json
import logging
from typing import Any, Dict, Optional, Tuple

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from src.config.container import get_container
from src.core.reports.dtos import (
    AssignReportInputDTO,
    SubmitReportInputDTO,
    UpdateReportStatusInputDTO,
)
from src.core.shared.exceptions import (
    DomainException,
    EntityNotFoundError,
    ReportValidationError,
    StoreUnavailableError,
    ValidationError,
)
from src.core.tickets.dtos import (
    AddInternalNoteInputDTO,
    AssignTicketInputDTO,
    EscalateTicketInputDTO,
    SubmitTicketInputDTO,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Raises:
        ValueError: Se JSON inválido ou não for um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON inválido: {e}")

    if not isinstance(data, dict):
        raise ValueError("Corpo da requisição deve ser um objeto JSON")
    return data


def optional_str(data: Dict, key: str) -> Optional[str]:
    value = data.get(key)
    return str(value) if value not in (None, '') else None


def string_list(data: Dict, key: str) -> Tuple[str, ...]:
    """
    Lê uma lista de strings do corpo (URLs, IDs).

    Ausente ou null vira tupla vazia. Qualquer outro formato é
    rejeitado, nunca convertido.

    Raises:
        ValidationError: Se não for lista ou tiver item que não é string
    """
    value = data.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValidationError(f"{key} deve ser uma lista de strings", field=key)
    return tuple(value)


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso ao container DI
    - Tratamento de erros padronizado
    """

    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except Exception as e:
            return self.handle_exception(e)

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Traduz exceções em respostas HTTP.

        - ValidationError / ReportValidationError: 400
        - EntityNotFoundError: 404
        - StoreUnavailableError: 503
        - Demais erros de domínio e ValueError: 400
        - Qualquer outra: 500 (logada com traceback)
        """
        if isinstance(e, ValidationError):
            return json_response(
                success=False,
                error=e.message,
                status=400,
                meta={'field': e.field, 'code': e.code}
            )

        if isinstance(e, ReportValidationError):
            return json_response(
                success=False,
                error=e.message,
                status=400,
                meta={'errors': e.errors, 'code': e.code}
            )

        if isinstance(e, EntityNotFoundError):
            return json_response(
                success=False,
                error=e.message,
                status=404,
                meta={'code': e.code}
            )

        if isinstance(e, StoreUnavailableError):
            logger.error(f"Store indisponível: {e}")
            return json_response(
                success=False,
                error=e.message,
                status=503,
                meta={'code': e.code}
            )

        if isinstance(e, DomainException):
            return json_response(success=False, error=e.message, status=400)

        if isinstance(e, ValueError):
            return json_response(success=False, error=str(e), status=400)

        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor",
            status=500
        )


# =============================================================================
# Report API Views
# =============================================================================

class ReportAPIListView(BaseAPIView):
    """
    GET /api/reports/ - Lista denúncias
    POST /api/reports/ - Registra denúncia
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        reports = self.get_service('list_reports_service').execute(
            status=request.GET.get('status') or None,
            assignee_id=request.GET.get('assignee') or None,
        )
        return json_response(
            success=True,
            data=[r.to_dict() for r in reports],
            meta={'total': len(reports)},
        )

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "user_id": "string",
            "type": "product|seller",
            "reason": "string",
            "description": "string (obrigatório se reason=Other)",
            "documents": ["url"],
            "photos": ["url"]
        }
        """
        data = self.parse_body(request)

        output = self.get_service('submit_report_service').execute(
            SubmitReportInputDTO(
                user_id=data.get('user_id', ''),
                type=optional_str(data, 'type'),
                reason=data.get('reason', ''),
                description=optional_str(data, 'description'),
                issue_report=optional_str(data, 'issue_report'),
                additional_details=optional_str(data, 'additional_details'),
                documents=string_list(data, 'documents'),
                photos=string_list(data, 'photos'),
            )
        )

        logger.info(f"API: Denúncia registrada: {output.id}")
        return json_response(success=True, data=output.to_dict(), status=201)


class ReportAPIStatsView(BaseAPIView):
    """GET /api/reports/stats/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        return json_response(
            success=True,
            data=self.get_service('report_stats_service').execute(),
        )


class ReportAPIDetailView(BaseAPIView):
    """GET /api/reports/<id>/"""

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        report = self.get_service('get_report_service').execute(pk)
        return json_response(success=True, data=report.to_dict())


class ReportAPIAssignView(BaseAPIView):
    """POST /api/reports/<id>/assign/ {"staff_id", "staff_name"}"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        data = self.parse_body(request)
        output = self.get_service('assign_report_service').execute(
            AssignReportInputDTO(
                report_id=pk,
                staff_id=data.get('staff_id', ''),
                staff_name=optional_str(data, 'staff_name'),
            )
        )
        return json_response(success=True, data=output.to_dict())


class ReportAPIUnassignView(BaseAPIView):
    """POST /api/reports/<id>/unassign/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        output = self.get_service('unassign_report_service').execute(pk)
        return json_response(success=True, data=output.to_dict())


class ReportAPIStatusView(BaseAPIView):
    """POST /api/reports/<id>/status/ {"status", "notes"}"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        data = self.parse_body(request)
        output = self.get_service('update_report_status_service').execute(
            UpdateReportStatusInputDTO(
                report_id=pk,
                status=data.get('status', ''),
                notes=optional_str(data, 'notes'),
            )
        )
        return json_response(success=True, data=output.to_dict())


# =============================================================================
# Ticket API Views
# =============================================================================

class TicketAPIListView(BaseAPIView):
    """
    GET /api/tickets/ - Lista tickets (?q= faz busca textual)
    POST /api/tickets/ - Abre ticket
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        term = request.GET.get('q')
        if term:
            tickets = self.get_service('search_tickets_service').execute(term)
        else:
            tickets = self.get_service('list_tickets_service').execute(
                status=request.GET.get('status') or None,
                assignee_id=request.GET.get('assignee') or None,
            )

        return json_response(
            success=True,
            data=[t.to_dict() for t in tickets],
            meta={'total': len(tickets)},
        )

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "full_name": "string (obrigatório)",
            "email": "string (obrigatório)",
            "issue_type": "string (obrigatório)",
            "description": "string (obrigatório)",
            "priority": "low|normal|high|urgent (opcional)",
            "attachments": ["url"]
        }
        """
        data = self.parse_body(request)

        output = self.get_service('submit_ticket_service').execute(
            SubmitTicketInputDTO(
                full_name=data.get('full_name', ''),
                email=data.get('email', ''),
                issue_type=data.get('issue_type', ''),
                description=data.get('description', ''),
                account_type=optional_str(data, 'account_type'),
                device_type=optional_str(data, 'device_type'),
                app_version=optional_str(data, 'app_version'),
                date_time=optional_str(data, 'date_time'),
                priority=optional_str(data, 'priority'),
                attachments=string_list(data, 'attachments'),
            )
        )

        logger.info(f"API: Ticket aberto: {output.id}")
        return json_response(success=True, data=output.to_dict(), status=201)


class TicketAPIStatsView(BaseAPIView):
    """GET /api/tickets/stats/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        return json_response(
            success=True,
            data=self.get_service('ticket_stats_service').execute(),
        )


class TicketAPIEscalatedView(BaseAPIView):
    """GET /api/tickets/escalated/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        tickets = self.get_service('list_escalated_tickets_service').execute()
        return json_response(
            success=True,
            data=[t.to_dict() for t in tickets],
            meta={'total': len(tickets)},
        )


class TicketAPIBulkStatusView(BaseAPIView):
    """POST /api/tickets/bulk-status/ {"ticket_ids": [...], "status"}"""

    def post(self, request: HttpRequest) -> JsonResponse:
        data = self.parse_body(request)
        tickets = self.get_service('bulk_update_ticket_status_service').execute(
            list(string_list(data, 'ticket_ids')),
            data.get('status', ''),
        )
        return json_response(
            success=True,
            data=[t.to_dict() for t in tickets],
            meta={'total': len(tickets)},
        )


class TicketAPIDetailView(BaseAPIView):
    """
    GET /api/tickets/<id>/ - Obter ticket
    PATCH /api/tickets/<id>/ - Alterar prioridade ({"priority": null} recalcula)
    """

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        ticket = self.get_service('get_ticket_service').execute(pk)
        return json_response(success=True, data=ticket.to_dict())

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        data = self.parse_body(request)

        if 'priority' not in data:
            return json_response(
                success=False,
                error="Nenhum campo válido para atualização",
                status=400
            )

        output = self.get_service('update_ticket_priority_service').execute(
            pk, optional_str(data, 'priority')
        )
        return json_response(success=True, data=output.to_dict())


class TicketAPIAssignView(BaseAPIView):
    """POST /api/tickets/<id>/assign/ {"staff_id", "staff_name"}"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        data = self.parse_body(request)
        output = self.get_service('assign_ticket_service').execute(
            AssignTicketInputDTO(
                ticket_id=pk,
                staff_id=data.get('staff_id', ''),
                staff_name=optional_str(data, 'staff_name'),
            )
        )
        logger.info(f"API: Ticket {pk} atribuído a {output.assigned_to}")
        return json_response(success=True, data=output.to_dict())


class TicketAPIUnassignView(BaseAPIView):
    """POST /api/tickets/<id>/unassign/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        output = self.get_service('unassign_ticket_service').execute(pk)
        return json_response(success=True, data=output.to_dict())


class TicketAPIEscalateView(BaseAPIView):
    """POST /api/tickets/<id>/escalate/ {"developer_id", "developer_name", "reason"}"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        data = self.parse_body(request)
        output = self.get_service('escalate_ticket_service').execute(
            EscalateTicketInputDTO(
                ticket_id=pk,
                developer_id=data.get('developer_id', ''),
                developer_name=optional_str(data, 'developer_name'),
                reason=optional_str(data, 'reason'),
            )
        )
        return json_response(success=True, data=output.to_dict())


class TicketAPIStatusView(BaseAPIView):
    """POST /api/tickets/<id>/status/ {"status"}"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        data = self.parse_body(request)
        output = self.get_service('update_ticket_status_service').execute(
            pk, data.get('status', '')
        )
        return json_response(success=True, data=output.to_dict())


class TicketAPINoteView(BaseAPIView):
    """POST /api/tickets/<id>/notes/ {"author_id", "author_name", "note"}"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        data = self.parse_body(request)
        output = self.get_service('add_internal_note_service').execute(
            AddInternalNoteInputDTO(
                ticket_id=pk,
                author_id=data.get('author_id', ''),
                author_name=optional_str(data, 'author_name'),
                note=data.get('note', ''),
            )
        )
        return json_response(success=True, data=output.to_dict(), status=201)


class TicketAPIResponseView(BaseAPIView):
    """POST /api/tickets/<id>/responses/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        output = self.get_service('record_response_service').execute(pk)
        return json_response(success=True, data=output.to_dict())
