"""
Política de SLA - prazo derivado da prioridade.

Função pura: prioridade + instante atual → prazo (due_by).
"Atrasado" é derivado, nunca armazenado.

A tabela de prazos é configuração (settings.SLA_HOURS), mas deve ser
total sobre as quatro prioridades e monotônica:
    critical <= high <= medium <= low
"""

from datetime import datetime, timedelta
from typing import Mapping, Optional

from helpdesk.core.tickets.entities import TicketEntity, TicketPriority

# Ordem de severidade, da mais alta para a mais baixa
SEVERITY_ORDER = (
    TicketPriority.CRITICAL,
    TicketPriority.HIGH,
    TicketPriority.MEDIUM,
    TicketPriority.LOW,
)

DEFAULT_SLA_HOURS = {
    "critical": 2,
    "high": 8,
    "medium": 24,
    "low": 48,
}


class SLAPolicy:
    """
    Tabela de prazos por prioridade.

    Example:
        sla = SLAPolicy.from_hours({"critical": 2, "high": 8, "medium": 24, "low": 48})
        ticket.due_by = sla.due_by(TicketPriority.HIGH, now)

    Raises:
        ValueError: Tabela incompleta, com prazo não positivo ou
            fora de ordem de severidade
    """

    def __init__(self, offsets: Mapping[TicketPriority, timedelta]):
        missing = [p.value for p in SEVERITY_ORDER if p not in offsets]
        if missing:
            raise ValueError(f"Tabela de SLA sem prioridades: {', '.join(missing)}")

        for priority in SEVERITY_ORDER:
            if offsets[priority] <= timedelta(0):
                raise ValueError(f"Prazo de SLA deve ser positivo: {priority.value}")

        for higher, lower in zip(SEVERITY_ORDER, SEVERITY_ORDER[1:]):
            if offsets[higher] > offsets[lower]:
                raise ValueError(
                    f"Tabela de SLA não monotônica: {higher.value} "
                    f"({offsets[higher]}) > {lower.value} ({offsets[lower]})"
                )

        self._offsets = {p: offsets[p] for p in SEVERITY_ORDER}

    @classmethod
    def from_hours(cls, hours: Optional[Mapping[str, float]] = None) -> "SLAPolicy":
        """Constrói a partir de {prioridade: horas} (formato de settings.SLA_HOURS)."""
        hours = dict(DEFAULT_SLA_HOURS if hours is None else hours)
        offsets = {
            TicketPriority.from_string(name): timedelta(hours=float(value))
            for name, value in hours.items()
        }
        return cls(offsets)

    def offset_for(self, priority: TicketPriority) -> timedelta:
        return self._offsets[priority]

    def due_by(self, priority: TicketPriority, now: datetime) -> datetime:
        """Prazo para a prioridade a partir de `now` (determinístico)."""
        return now + self._offsets[priority]

    def is_overdue(self, ticket: TicketEntity, now: datetime) -> bool:
        """now > due_by e status fora de {resolved, closed}."""
        return ticket.is_overdue(now)

    def to_hours(self) -> dict:
        return {
            p.value: self._offsets[p].total_seconds() / 3600
            for p in SEVERITY_ORDER
        }

    def __repr__(self) -> str:
        return f"SLAPolicy({self.to_hours()})"
