"""
Audit Log - trilha de proveniência dos tickets.

Serviço write-mostly: `append` registra, `list` lê em ordem de
criação. Não há paginação nem limite de entradas por ticket.
"""

from datetime import datetime
import logging
from typing import List, Mapping, Optional

from helpdesk.core.shared.clock import Clock, utc_now

from .entities import ActivityAction, ActivityEntry
from .ports import ActivityRepository

logger = logging.getLogger(__name__)


class AuditLog:
    """
    Registro de atividades por ticket.

    Falhas do repositório propagam como StorageError; a trilha
    nunca é descartada silenciosamente.

    Example:
        audit = AuditLog(InMemoryActivityRepository())
        audit.append(ticket.id, ActivityAction.CREATED, {"by": "Ana"}, actor.id)
        entries = audit.list(ticket.id)
    """

    def __init__(self, activity_repo: ActivityRepository, clock: Clock = utc_now):
        self.activity_repo = activity_repo
        self.clock = clock

    def append(
        self,
        ticket_id: str,
        action: ActivityAction,
        metadata: Optional[Mapping[str, object]] = None,
        actor_id: Optional[str] = None,
        at: Optional[datetime] = None,
    ) -> ActivityEntry:
        """
        Registra uma entrada.

        Args:
            ticket_id: Ticket afetado
            action: Tipo da mudança
            metadata: Valores convertidos para str; None vira ""
            actor_id: Ator responsável
            at: Instante (default: relógio do serviço)
        """
        entry = ActivityEntry(
            ticket_id=ticket_id,
            action=ActivityAction.from_string(action),
            metadata={
                str(key): "" if value is None else str(value)
                for key, value in (metadata or {}).items()
            },
            actor_id=actor_id,
            created_at=at or self.clock(),
        )
        stored = self.activity_repo.add(entry)
        logger.debug(
            "Activity %s recorded for ticket %s (entry %s)",
            stored.action.value, ticket_id, stored.id,
        )
        return stored

    def list(self, ticket_id: str) -> List[ActivityEntry]:
        """Entradas do ticket, crescente por (created_at, id)."""
        return sorted(self.activity_repo.list_for_ticket(ticket_id), key=lambda e: e.sort_key)

    def purge(self, ticket_id: str) -> int:
        """Remove a trilha do ticket (apenas para exclusão em cascata)."""
        removed = self.activity_repo.delete_for_ticket(ticket_id)
        logger.info("Purged %d activity entries of ticket %s", removed, ticket_id)
        return removed
