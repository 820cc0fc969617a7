"""
Testes para os Mappers Entity ↔ Model.

Não acessam o banco: apenas instanciam models em memória.
"""

from datetime import date, datetime, timezone

from helpdesk.core.activity.entities import ActivityAction, ActivityEntry
from helpdesk.core.comments.entities import CommentEntity
from helpdesk.core.tickets.entities import TicketCategory, TicketStatus

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestTicketMapper:
    def test_enums_gravados_com_underscore(self, make_ticket):
        from helpdesk.adapters.django_app.tickets.mappers import TicketMapper

        ticket = make_ticket(category="network-vpn", status="in-progress")
        model = TicketMapper.to_model(ticket)

        assert model.category == "network_vpn"
        assert model.status == "in_progress"
        assert model.priority == "medium"
        assert model.id == ticket.id

    def test_model_volta_para_grafia_do_core(self, make_ticket):
        from helpdesk.adapters.django_app.tickets.mappers import TicketMapper

        original = make_ticket(
            category="password-reset",
            status=TicketStatus.IN_PROGRESS,
            ticket_date=date(2024, 2, 28),
            internal_notes="ver AD",
        )
        original.number = 42

        restored = TicketMapper.to_entity(TicketMapper.to_model(original))

        assert restored.number == 42
        assert restored.category == TicketCategory.PASSWORD_RESET
        assert restored.status == TicketStatus.IN_PROGRESS
        assert restored.ticket_date == date(2024, 2, 28)
        assert restored.internal_notes == "ver AD"
        assert restored.due_by == original.due_by

    def test_to_fields_exclui_chaves(self, make_ticket):
        from helpdesk.adapters.django_app.tickets.mappers import TicketMapper

        fields = TicketMapper.to_fields(make_ticket())

        assert "id" not in fields
        assert "number" not in fields
        assert fields["employee_name"] == "Bruno Silva"


class TestCommentMapper:
    def test_comentario_interno(self):
        from helpdesk.adapters.django_app.tickets.mappers import CommentMapper

        comment = CommentEntity.create("t-1", "tech-1", "Tiago", "nota", True, now=NOW)

        restored = CommentMapper.to_entity(CommentMapper.to_model(comment))

        assert restored == comment
        assert restored.is_internal is True
        assert restored.author_name == "Tiago"


class TestActivityMapper:
    def test_model_sem_id_e_metadados_como_texto(self):
        from helpdesk.adapters.django_app.tickets.mappers import ActivityMapper

        entry = ActivityEntry(
            ticket_id="t-1",
            action=ActivityAction.PRIORITY_CHANGED,
            metadata={"from": "low", "to": "high"},
            actor_id="tech-1",
            created_at=NOW,
        )

        model = ActivityMapper.to_model(entry)
        assert model.id is None
        assert model.action == "priority_changed"

        model.id = 5
        model.metadata = {"count": 3}
        restored = ActivityMapper.to_entity(model)
        assert restored.id == 5
        assert restored.metadata == {"count": "3"}
        assert restored.action == ActivityAction.PRIORITY_CHANGED
