"""
Testes de Integração dos Repositórios Django.

Usa o banco SQLite em memória criado pelo pytest-django a partir
das migrations do app `tickets`.
"""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from django.db import OperationalError

from helpdesk.core.activity.entities import ActivityAction, ActivityEntry
from helpdesk.core.comments.entities import CommentEntity
from helpdesk.core.shared.exceptions import StorageError
from helpdesk.core.tickets.dtos import TicketFilter
from helpdesk.core.tickets.entities import TicketCategory, TicketPriority, TicketStatus

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

pytestmark = pytest.mark.django_db


class TestDjangoTicketRepository:
    """Testes para DjangoTicketRepository."""

    def test_add_atribui_numeros_sequenciais(self, ticket_repo, make_ticket):
        first = ticket_repo.add(make_ticket())
        second = ticket_repo.add(make_ticket())

        assert (first.number, second.number) == (1, 2)
        assert [t.number for t in ticket_repo.list()] == [2, 1]

    def test_numero_nao_reutilizado_apos_exclusao(self, ticket_repo, make_ticket):
        ticket_repo.add(make_ticket())
        latest = ticket_repo.add(make_ticket())
        ticket_repo.delete(latest.id)

        following = ticket_repo.add(make_ticket())

        assert following.number == latest.number + 1

    def test_get_by_id(self, ticket_repo, make_ticket):
        created = ticket_repo.add(make_ticket(category="network-vpn", priority="high"))

        found = ticket_repo.get_by_id(created.id)

        assert found == created
        assert found.category == TicketCategory.NETWORK_VPN
        assert found.priority == TicketPriority.HIGH
        assert found.created_at == NOW

    def test_get_inexistente_retorna_none(self, ticket_repo):
        assert ticket_repo.get_by_id("missing") is None

    def test_save_atualiza_campos(self, ticket_repo, make_ticket):
        ticket = ticket_repo.add(make_ticket())
        ticket.change_status(TicketStatus.IN_PROGRESS)
        ticket.assign("tech-1")

        ticket_repo.save(ticket)
        found = ticket_repo.get_by_id(ticket.id)

        assert found.status == TicketStatus.IN_PROGRESS
        assert found.assigned_to == "tech-1"
        assert found.number == ticket.number

    def test_delete_e_exists(self, ticket_repo, make_ticket):
        ticket = ticket_repo.add(make_ticket())
        assert ticket_repo.exists(ticket.id)

        ticket_repo.delete(ticket.id)

        assert not ticket_repo.exists(ticket.id)

    def test_list_filtra_e_ordena(self, ticket_repo, make_ticket):
        ticket_repo.add(make_ticket(subject="VPN lenta", category="network-vpn"))
        ticket_repo.add(make_ticket(subject="Outlook", category="email", department="Vendas"))
        ticket_repo.add(make_ticket(subject="VPN caiu", category="network-vpn", created_by="user-2"))

        everything = ticket_repo.list()
        vpn = ticket_repo.list(TicketFilter(category=TicketCategory.NETWORK_VPN))
        mine = ticket_repo.list(
            TicketFilter(category=TicketCategory.NETWORK_VPN, created_by="user-1")
        )
        sales = ticket_repo.list(TicketFilter(search="VENDAS"))

        assert [t.number for t in everything] == [3, 2, 1]
        assert [t.subject for t in vpn] == ["VPN caiu", "VPN lenta"]
        assert [t.subject for t in mine] == ["VPN lenta"]
        assert [t.subject for t in sales] == ["Outlook"]

    def test_list_por_data(self, ticket_repo, make_ticket):
        ticket_repo.add(make_ticket(subject="Antigo", ticket_date=date(2024, 1, 10)))
        ticket_repo.add(make_ticket(subject="Recente", ticket_date=date(2024, 2, 28)))

        found = ticket_repo.list(TicketFilter(ticket_date_from=date(2024, 2, 1)))

        assert [t.subject for t in found] == ["Recente"]

    def test_count_by_status(self, ticket_repo, make_ticket):
        ticket_repo.add(make_ticket())
        ticket_repo.add(make_ticket(status="in-progress"))
        ticket_repo.add(make_ticket(status="in-progress", created_by="user-2"))

        counts = ticket_repo.count_by_status()
        mine = ticket_repo.count_by_status(created_by="user-1")

        assert counts[TicketStatus.OPEN] == 1
        assert counts[TicketStatus.IN_PROGRESS] == 2
        assert counts[TicketStatus.CLOSED] == 0
        assert sum(mine.values()) == 2

    def test_list_overdue(self, ticket_repo, make_ticket):
        late = ticket_repo.add(make_ticket(due_by=NOW - timedelta(hours=3)))
        later = ticket_repo.add(make_ticket(due_by=NOW - timedelta(hours=1)))
        ticket_repo.add(make_ticket(due_by=NOW - timedelta(hours=5), status="resolved"))
        ticket_repo.add(make_ticket(due_by=NOW + timedelta(hours=1)))

        found = ticket_repo.list_overdue(NOW)

        assert [t.id for t in found] == [late.id, later.id]

    def test_falha_do_banco_vira_storage_error(self, ticket_repo):
        from helpdesk.adapters.django_app.tickets.models import TicketModel

        with patch.object(TicketModel.objects, "get", side_effect=OperationalError("locked")):
            with pytest.raises(StorageError) as exc_info:
                ticket_repo.get_by_id("any")

        assert exc_info.value.operation == "ticket.get"
        assert isinstance(exc_info.value.__cause__, OperationalError)


class TestDjangoCommentRepository:
    """Testes para DjangoCommentRepository."""

    @pytest.fixture
    def ticket(self, ticket_repo, make_ticket):
        return ticket_repo.add(make_ticket())

    def test_lista_em_ordem_e_filtra_internos(self, comment_repo, ticket):
        public = CommentEntity.create(ticket.id, "user-1", "Bruno", "oi", False, now=NOW)
        internal = CommentEntity.create(
            ticket.id, "tech-1", "Tiago", "nota", True, now=NOW + timedelta(minutes=1)
        )
        comment_repo.add(internal)
        comment_repo.add(public)

        everything = comment_repo.list_for_ticket(ticket.id)
        visible = comment_repo.list_for_ticket(ticket.id, include_internal=False)

        assert [c.id for c in everything] == [public.id, internal.id]
        assert [c.id for c in visible] == [public.id]

    def test_contagens_por_ticket(self, comment_repo, ticket_repo, make_ticket, ticket):
        other = ticket_repo.add(make_ticket())
        comment_repo.add(CommentEntity.create(ticket.id, "u", "U", "a", False, now=NOW))
        comment_repo.add(CommentEntity.create(ticket.id, "t", "T", "b", True, now=NOW))

        counts = comment_repo.counts_for_tickets([ticket.id, other.id])

        assert counts == {ticket.id: (2, 1), other.id: (0, 0)}

    def test_contagens_sem_ids(self, comment_repo):
        assert comment_repo.counts_for_tickets([]) == {}

    def test_get_e_delete(self, comment_repo, ticket):
        comment = CommentEntity.create(ticket.id, "u", "U", "a", False, now=NOW)
        comment_repo.add(comment)

        assert comment_repo.get_by_id(comment.id) == comment
        comment_repo.delete(comment.id)
        assert comment_repo.get_by_id(comment.id) is None

    def test_delete_for_ticket(self, comment_repo, ticket):
        for text in ("a", "b"):
            comment_repo.add(CommentEntity.create(ticket.id, "u", "U", text, False, now=NOW))

        assert comment_repo.delete_for_ticket(ticket.id) == 2
        assert comment_repo.list_for_ticket(ticket.id) == []


class TestDjangoActivityRepository:
    """Testes para DjangoActivityRepository."""

    @pytest.fixture
    def ticket(self, ticket_repo, make_ticket):
        return ticket_repo.add(make_ticket())

    def test_add_atribui_id_sequencial(self, activity_repo, ticket):
        first = activity_repo.add(
            ActivityEntry(ticket.id, ActivityAction.CREATED, {"by": "Bruno"}, created_at=NOW)
        )
        second = activity_repo.add(
            ActivityEntry(ticket.id, ActivityAction.NOTE_ADDED, created_at=NOW)
        )

        assert first.id is not None
        assert second.id > first.id

    def test_lista_por_instante_e_id(self, activity_repo, ticket):
        later = activity_repo.add(
            ActivityEntry(ticket.id, ActivityAction.NOTE_ADDED, created_at=NOW + timedelta(seconds=1))
        )
        first = activity_repo.add(ActivityEntry(ticket.id, ActivityAction.CREATED, created_at=NOW))
        same_time = activity_repo.add(
            ActivityEntry(ticket.id, ActivityAction.ASSIGNED, {"agent": "tech-1"}, created_at=NOW)
        )

        entries = activity_repo.list_for_ticket(ticket.id)

        assert [e.id for e in entries] == [first.id, same_time.id, later.id]
        assert entries[1].metadata == {"agent": "tech-1"}

    def test_delete_e_count(self, activity_repo, ticket):
        activity_repo.add(ActivityEntry(ticket.id, ActivityAction.CREATED, created_at=NOW))
        activity_repo.add(ActivityEntry(ticket.id, ActivityAction.MERGED, created_at=NOW))

        assert activity_repo.count_for_ticket(ticket.id) == 2
        assert activity_repo.delete_for_ticket(ticket.id) == 2
        assert activity_repo.count_for_ticket(ticket.id) == 0
