"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados de forma assíncrona via Celery quando
Domain Events são publicados (CeleryEventPublisher).

Tipos de Handlers:
- Notificação: avisar técnico/equipe (por enquanto apenas log)
- Agendados: verificação periódica de tickets fora do prazo

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        # Processar evento
"""

from typing import Any, Dict, List
import logging

from celery import shared_task

from helpdesk.core.tickets.events import TicketOverdueEvent

logger = logging.getLogger(__name__)

HIGH_PRIORITIES = ("critical", "high")


# =============================================================================
# Event Handlers - Tickets
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_created(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para TicketCreatedEvent.

    Tickets critical/high geram aviso para a equipe de suporte.
    """
    data = event_data.get('data', {})
    ticket_id = event_data.get('aggregate_id')
    priority = data.get('priority', 'medium')

    logger.info(
        f"[HANDLER] TicketCreated: {ticket_id} | "
        f"#{data.get('number')} | priority={priority}"
    )

    if priority in HIGH_PRIORITIES:
        notify_support_team.delay(
            ticket_id=ticket_id,
            message=f"New {priority} ticket: {data.get('subject', '')}",
            priority='high' if priority == 'critical' else 'normal',
        )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_updated(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para TicketUpdatedEvent.

    Mudança de atribuição notifica o novo técnico.
    """
    data = event_data.get('data', {})
    ticket_id = event_data.get('aggregate_id')
    changed = data.get('changed_fields', [])

    logger.info(f"[HANDLER] TicketUpdated: {ticket_id} | fields={changed}")

    if 'assigned_to' in changed and data.get('assigned_to'):
        notify_user.delay(
            user_id=data['assigned_to'],
            message=f"You were assigned to ticket {ticket_id[:8]}",
        )


@shared_task(bind=True, max_retries=3, default_retry_delay=60, acks_late=True)
def handle_comment_added(self, event_data: Dict[str, Any]) -> None:
    """Handler para CommentAddedEvent. Notas internas não geram aviso."""
    data = event_data.get('data', {})
    logger.info(
        f"[HANDLER] CommentAdded: {event_data.get('aggregate_id')} | "
        f"internal={data.get('is_internal', False)}"
    )


@shared_task(bind=True, max_retries=3, default_retry_delay=60, acks_late=True)
def handle_ticket_overdue(self, event_data: Dict[str, Any]) -> None:
    data = event_data.get('data', {})
    ticket_id = event_data.get('aggregate_id')

    notify_support_team.delay(
        ticket_id=ticket_id,
        message=f"Ticket overdue by {data.get('hours_overdue', 0):.1f}h",
        priority='high' if data.get('priority') in HIGH_PRIORITIES else 'normal',
    )


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

EVENT_HANDLERS = {
    'TicketCreatedEvent': handle_ticket_created,
    'TicketUpdatedEvent': handle_ticket_updated,
    'CommentAddedEvent': handle_comment_added,
    'TicketOverdueEvent': handle_ticket_overdue,
}


@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> bool:
    """
    Dispatcher central para Domain Events.

    Roteia eventos para os handlers apropriados. Eventos sem handler
    (TicketMergedEvent, TicketDeletedEvent) são apenas logados.

    Returns:
        True se havia handler para o tipo
    """
    handler = EVENT_HANDLERS.get(event_type)

    if handler is None:
        logger.debug(f"[DISPATCHER] No handler for {event_type}")
        return False

    logger.info(f"[DISPATCHER] Routing {event_type}")
    handler.delay(event_data)
    return True


# =============================================================================
# Notification Tasks
# =============================================================================

@shared_task(bind=True, max_retries=3, default_retry_delay=120)
def notify_user(self, user_id: str, message: str, channel: str = 'email') -> None:
    logger.info(f"[NOTIFICATION] {channel.upper()} to {user_id}: {message}")


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def notify_support_team(self, ticket_id: str, message: str, priority: str = 'normal') -> None:
    logger.info(
        f"[NOTIFICATION] Support team [{priority}]: "
        f"ticket {ticket_id[:8]} - {message}"
    )


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

def build_overdue_events(tickets, now) -> List[TicketOverdueEvent]:
    """Um TicketOverdueEvent por ticket fora do prazo."""
    return [
        TicketOverdueEvent(
            aggregate_id=ticket.id,
            due_by=ticket.due_by.isoformat(),
            hours_overdue=round((now - ticket.due_by).total_seconds() / 3600, 2),
            priority=ticket.priority,
            assigned_to=ticket.assigned_to,
        )
        for ticket in tickets
    ]


@shared_task(bind=True)
def check_overdue_tickets(self) -> int:
    """
    Verifica tickets fora do prazo e publica TicketOverdueEvent.

    Executada a cada hora pelo Celery Beat.

    Returns:
        Número de tickets atrasados encontrados
    """
    # Importação tardia para evitar circular import
    from helpdesk.config.container import get_container

    logger.info("[SCHEDULED] Checking overdue tickets")

    container = get_container()
    clock = container.clock()
    now = clock()

    overdue = container.list_overdue_tickets_service().execute(now=now)
    publisher = container.event_publisher()
    publisher.publish_batch(build_overdue_events(overdue, now))

    logger.info(f"[SCHEDULED] Found {len(overdue)} overdue tickets")
    return len(overdue)
