"""
Testes Unitários para SLAPolicy.
"""

from datetime import datetime, timedelta, timezone

import pytest

from helpdesk.core.sla.policy import DEFAULT_SLA_HOURS, SLAPolicy
from helpdesk.core.tickets.entities import TicketEntity, TicketPriority, TicketStatus

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestSLAPolicy:
    """Testes para a tabela de prazos."""

    @pytest.mark.parametrize(
        "priority, hours",
        [
            (TicketPriority.CRITICAL, 2),
            (TicketPriority.HIGH, 8),
            (TicketPriority.MEDIUM, 24),
            (TicketPriority.LOW, 48),
        ],
    )
    def test_prazos_padrao(self, priority, hours):
        sla = SLAPolicy.from_hours()
        assert sla.due_by(priority, NOW) == NOW + timedelta(hours=hours)

    def test_deterministico(self):
        sla = SLAPolicy.from_hours()
        assert sla.due_by(TicketPriority.HIGH, NOW) == sla.due_by(TicketPriority.HIGH, NOW)

    def test_aceita_horas_fracionadas_e_grafias(self):
        sla = SLAPolicy.from_hours({"CRITICAL": 0.5, "high": "4", "medium": 24, "low": 72})

        assert sla.offset_for(TicketPriority.CRITICAL) == timedelta(minutes=30)
        assert sla.to_hours() == {"critical": 0.5, "high": 4.0, "medium": 24.0, "low": 72.0}

    def test_tabela_incompleta(self):
        hours = dict(DEFAULT_SLA_HOURS)
        del hours["low"]
        with pytest.raises(ValueError, match="low"):
            SLAPolicy.from_hours(hours)

    def test_prazo_nao_positivo(self):
        with pytest.raises(ValueError):
            SLAPolicy.from_hours({"critical": 0, "high": 8, "medium": 24, "low": 48})

    def test_tabela_fora_de_ordem(self):
        with pytest.raises(ValueError, match="monotônica"):
            SLAPolicy.from_hours({"critical": 10, "high": 8, "medium": 24, "low": 48})

    def test_prioridades_com_mesmo_prazo_sao_aceitas(self):
        sla = SLAPolicy.from_hours({"critical": 4, "high": 4, "medium": 4, "low": 4})
        assert sla.offset_for(TicketPriority.LOW) == timedelta(hours=4)

    def test_is_overdue_delegado_ao_ticket(self):
        sla = SLAPolicy.from_hours()
        ticket = TicketEntity.create(
            subject="Teclado",
            category="hardware",
            created_by="user-1",
            due_by=NOW,
            now=NOW,
        )

        assert sla.is_overdue(ticket, NOW + timedelta(minutes=1))
        ticket.change_status(TicketStatus.RESOLVED)
        assert not sla.is_overdue(ticket, NOW + timedelta(minutes=1))
