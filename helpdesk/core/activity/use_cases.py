"""
Use Cases do Audit Log.
"""

from typing import List, Optional

from helpdesk.core.access.policy import AccessPolicy, Actor
from helpdesk.core.tickets.ports import TicketRepository
from helpdesk.core.tickets.use_cases import get_ticket_or_raise

from .audit_log import AuditLog
from .entities import ActivityEntry


class GetTicketActivityService:
    """
    Use Case: Ler a trilha de atividades de um ticket.

    Mesma regra de leitura do ticket: USER apenas os próprios.
    Entradas em ordem crescente de criação.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        audit_log: AuditLog,
        access_policy: Optional[AccessPolicy] = None,
    ):
        self.ticket_repo = ticket_repo
        self.audit_log = audit_log
        self.access_policy = access_policy or AccessPolicy()

    def execute(self, ticket_id: str, actor: Actor) -> List[ActivityEntry]:
        """
        Raises:
            NotFoundError: Ticket não existe
            ForbiddenError: USER lendo ticket de outro usuário
        """
        ticket = get_ticket_or_raise(self.ticket_repo, ticket_id)
        self.access_policy.ensure_can_read_ticket(actor, ticket)
        return self.audit_log.list(ticket_id)
