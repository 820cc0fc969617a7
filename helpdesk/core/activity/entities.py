"""
Entidades do Audit Log.

ActivityEntry é imutável (frozen): uma vez registrada, nunca é
alterada. Só é removida pela exclusão em cascata do ticket.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from helpdesk.core.shared.clock import utc_now
from helpdesk.core.shared.exceptions import ValidationError


class ActivityAction(Enum):
    """Tipos de entrada no histórico do ticket."""

    CREATED = "created"
    STATUS_CHANGED = "status_changed"
    PRIORITY_CHANGED = "priority_changed"
    ASSIGNED = "assigned"
    NOTE_ADDED = "note_added"
    MERGED = "merged"

    @classmethod
    def from_string(cls, value) -> "ActivityAction":
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower().replace("-", "_")
        for action in cls:
            if action.value == normalized:
                return action
        raise ValidationError(f"Ação inválida: {value}", field="action")


@dataclass(frozen=True)
class ActivityEntry:
    """
    Registro imutável de uma mudança de estado do ticket.

    Attributes:
        ticket_id: Ticket ao qual a entrada pertence
        action: Tipo da mudança
        metadata: Pares relevantes para o tipo (ex: {"from": "medium", "to": "high"})
        actor_id: Quem causou a mudança (None para rotinas do sistema)
        created_at: Instante do registro
        id: Sequência atribuída pelo repositório; desempata entradas
            com o mesmo created_at
    """

    ticket_id: str
    action: ActivityAction
    metadata: Dict[str, str] = field(default_factory=dict)
    actor_id: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    id: Optional[int] = None

    @property
    def sort_key(self):
        return (self.created_at, self.id or 0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticket_id": self.ticket_id,
            "action": self.action.value,
            "metadata": dict(self.metadata),
            "actor_id": self.actor_id,
            "created_at": self.created_at.isoformat(),
        }
