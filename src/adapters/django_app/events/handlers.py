"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados de forma assíncrona via Celery quando
o CeleryEventPublisher entrega um evento. Notificação real (push,
email) fica fora do motor; aqui os handlers registram o fato e
alimentam contadores.

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        # Processar evento
"""

import logging
from typing import Any, Dict, Optional

from celery import shared_task

logger = logging.getLogger(__name__)


def _payload(event_data: Dict[str, Any]) -> Dict[str, Any]:
    return event_data.get('data') or {}


# =============================================================================
# Event Handlers - Tickets
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_submitted(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para TicketSubmittedEvent.

    Registra abertura e contabiliza por prioridade.
    """
    ticket_id = event_data.get('aggregate_id')
    data = _payload(event_data)
    priority = data.get('priority', 'normal')

    logger.info(
        f"[HANDLER] TicketSubmitted: {ticket_id} | "
        f"Tipo: {data.get('issue_type')} | Prioridade: {priority}"
    )

    record_metric.delay(
        metric_name='tickets_submitted',
        value=1,
        tags={'priority': priority},
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_escalated(self, event_data: Dict[str, Any]) -> None:
    """Handler para TicketEscalatedEvent."""
    ticket_id = event_data.get('aggregate_id')
    data = _payload(event_data)

    logger.info(
        f"[HANDLER] TicketEscalated: {ticket_id} | "
        f"Desenvolvedor: {data.get('developer_id')} | Motivo: {data.get('reason')}"
    )

    record_metric.delay(metric_name='tickets_escalated', value=1, tags={})


# =============================================================================
# Event Handlers - Status (tickets e denúncias)
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_status_changed(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para TicketStatusChangedEvent e ReportStatusChangedEvent.

    Transições para trás (reabertura, saída de estado final) ficam
    registradas em WARNING para auditoria.
    """
    aggregate_id = event_data.get('aggregate_id')
    aggregate_type = event_data.get('aggregate_type', '')
    data = _payload(event_data)
    previous_status = data.get('previous_status')
    new_status = data.get('new_status')

    if data.get('backward'):
        logger.warning(
            f"[HANDLER] Transição para trás: {aggregate_type} {aggregate_id} | "
            f"{previous_status} -> {new_status}"
        )
        record_metric.delay(
            metric_name='backward_transitions',
            value=1,
            tags={'aggregate_type': aggregate_type},
        )
    else:
        logger.info(
            f"[HANDLER] StatusChanged: {aggregate_type} {aggregate_id} | "
            f"{previous_status} -> {new_status}"
        )


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

EVENT_HANDLERS = {
    'TicketSubmittedEvent': handle_ticket_submitted,
    'TicketEscalatedEvent': handle_ticket_escalated,
    'TicketStatusChangedEvent': handle_status_changed,
    'ReportStatusChangedEvent': handle_status_changed,
}


@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> Optional[str]:
    """
    Dispatcher central para Domain Events.

    Roteia eventos para os handlers apropriados. Eventos sem handler
    são apenas registrados em DEBUG.

    Args:
        event_type: Tipo do evento (ex: 'TicketEscalatedEvent')
        event_data: Evento serializado (DomainEvent.to_dict)

    Returns:
        Nome do handler acionado, se houver
    """
    handler = EVENT_HANDLERS.get(event_type)

    if handler is None:
        logger.debug(f"[DISPATCHER] Nenhum handler para {event_type}")
        return None

    logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
    handler.delay(event_data)
    return handler.name


# =============================================================================
# Metric Tasks
# =============================================================================

@shared_task(bind=True, ignore_result=True)
def record_metric(
    self,
    metric_name: str,
    value: float,
    tags: Optional[Dict[str, str]] = None,
) -> None:
    """
    Registra métrica para monitoramento.

    Args:
        metric_name: Nome da métrica
        value: Valor
        tags: Tags para dimensões
    """
    logger.info(f"[METRIC] {metric_name}={value} | tags={tags or {}}")
