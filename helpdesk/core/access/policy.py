"""
Política de Acesso - capacidades por papel e posse.

Predicados consultados pelos casos de uso antes
de qualquer leitura restrita ou mutação. Os `can_*` são puros; os
`ensure_*` registram a recusa em WARNING antes de lançar ForbiddenError.

Papéis:
    ADMIN     - privilégios completos de equipe
    IT_STAFF  - mesmos privilégios operacionais do ADMIN neste núcleo
    USER      - solicitante: apenas os próprios tickets e conteúdo público
"""

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Iterable, Optional

from helpdesk.core.shared.exceptions import ForbiddenError, ValidationError

logger = logging.getLogger(__name__)


class Role(Enum):
    """Papel do ator autenticado."""

    ADMIN = "admin"
    IT_STAFF = "it_staff"
    USER = "user"

    @property
    def is_staff(self) -> bool:
        return self in (Role.ADMIN, Role.IT_STAFF)

    @classmethod
    def from_string(cls, value) -> "Role":
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower().replace("-", "_")
        for role in cls:
            if role.value == normalized:
                return role
        raise ValidationError(f"Papel inválido: {value}", field="role")


@dataclass(frozen=True)
class Actor:
    """
    Identidade do chamador, fornecida pela camada de sessão.

    Attributes:
        id: Identificador do usuário
        display_name: Nome exibido (registrado em `created{by}`)
        role: Papel do usuário
    """

    id: str
    display_name: str
    role: Role

    @property
    def is_staff(self) -> bool:
        return self.role.is_staff


class AccessPolicy:
    """
    Predicados de autorização.

    Os métodos `can_*` retornam bool; os `ensure_*` lançam
    ForbiddenError com a ação recusada.

    Example:
        policy = AccessPolicy()
        policy.ensure_can_read_ticket(actor, ticket)
    """

    USER_EDITABLE_FIELDS = frozenset({"subject", "description", "category"})

    def can_view_internal(self, role: Role) -> bool:
        return role.is_staff

    def can_mutate_status(self, role: Role, ticket=None, actor_id: Optional[str] = None) -> bool:
        return role.is_staff

    def can_delete_ticket(self, role: Role) -> bool:
        return role.is_staff

    def can_merge(self, role: Role) -> bool:
        return role.is_staff

    def can_assign(self, role: Role) -> bool:
        return role.is_staff

    def can_read_ticket(self, role: Role, ticket, actor_id: str) -> bool:
        if role.is_staff:
            return True
        return ticket.created_by == actor_id

    def can_edit_fields(
        self, role: Role, ticket, actor_id: str, fields: Iterable[str]
    ) -> bool:
        """
        USER edita apenas o próprio ticket, apenas assunto/descrição/
        categoria, e apenas enquanto aberto ou em andamento.
        """
        if role.is_staff:
            return True
        if ticket.created_by != actor_id:
            return False
        if ticket.status.is_terminal:
            return False
        return set(fields) <= self.USER_EDITABLE_FIELDS

    def ensure_can_read_ticket(self, actor: Actor, ticket) -> None:
        if not self.can_read_ticket(actor.role, ticket, actor.id):
            logger.warning("Read of ticket %s refused for %s", ticket.id, actor.id)
            raise ForbiddenError(
                f"Usuário {actor.id} não pode acessar o ticket {ticket.id}",
                action="read_ticket",
            )

    def ensure_can_edit_fields(self, actor: Actor, ticket, fields: Iterable[str]) -> None:
        fields = set(fields)
        if self.can_edit_fields(actor.role, ticket, actor.id, fields):
            return

        if ticket.created_by != actor.id:
            reason = "ticket de outro usuário"
        elif ticket.status.is_terminal:
            reason = f"ticket com status {ticket.status.value}"
        else:
            reason = "campos restritos: " + ", ".join(
                sorted(fields - self.USER_EDITABLE_FIELDS)
            )
        logger.warning("Update of ticket %s refused for %s: %s", ticket.id, actor.id, reason)
        raise ForbiddenError(
            f"Usuário {actor.id} não pode alterar o ticket {ticket.id} ({reason})",
            action="update_ticket",
        )

    def ensure_can_delete_ticket(self, actor: Actor) -> None:
        if not self.can_delete_ticket(actor.role):
            logger.warning("Ticket deletion refused for %s", actor.id)
            raise ForbiddenError(
                "Apenas a equipe de TI pode excluir tickets",
                action="delete_ticket",
            )

    def ensure_can_merge(self, actor: Actor) -> None:
        if not self.can_merge(actor.role):
            logger.warning("Ticket merge refused for %s", actor.id)
            raise ForbiddenError(
                "Apenas a equipe de TI pode mesclar tickets",
                action="merge_tickets",
            )
