"""
Testes Unitários para Use Cases de Comentários.

Coverage:
- CommentEntity.create
- AddCommentService (USER nunca cria nota interna)
- ListCommentsService (notas internas filtradas para USER)
- DeleteCommentService (apenas o autor)
"""

from datetime import datetime, timedelta, timezone

import pytest

from helpdesk.core.access.policy import AccessPolicy
from helpdesk.core.comments.dtos import AddCommentInputDTO
from helpdesk.core.comments.entities import CommentEntity
from helpdesk.core.comments.ports import InMemoryCommentRepository
from helpdesk.core.comments.use_cases import (
    AddCommentService,
    DeleteCommentService,
    ListCommentsService,
)
from helpdesk.core.shared.exceptions import ForbiddenError, NotFoundError, ValidationError
from helpdesk.core.shared.interfaces import UnitOfWork
from helpdesk.core.tickets.entities import TicketEntity
from helpdesk.core.tickets.events import CommentAddedEvent
from helpdesk.core.tickets.ports import InMemoryTicketRepository

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class RecordingUnitOfWork(UnitOfWork):
    """Unit of Work fake que guarda os eventos publicados."""

    def __init__(self):
        super().__init__()
        self.committed = False
        self.rolled_back = False
        self.published_events = []

    def _begin_transaction(self):
        self.committed = False
        self.rolled_back = False

    def commit(self):
        self.committed = True
        self.published_events.extend(self._events)
        self.clear_events()

    def rollback(self):
        self.rolled_back = True
        self.clear_events()


@pytest.fixture
def ticket_repo():
    repo = InMemoryTicketRepository()
    repo.add(TicketEntity(id="t-1", subject="Monitor piscando", created_by="user-1"))
    return repo


@pytest.fixture
def comment_repo():
    return InMemoryCommentRepository()


@pytest.fixture
def uow():
    return RecordingUnitOfWork()


@pytest.fixture
def add_service(ticket_repo, comment_repo, uow, clock):
    return AddCommentService(ticket_repo, comment_repo, uow, AccessPolicy(), clock)


@pytest.fixture
def list_service(ticket_repo, comment_repo):
    return ListCommentsService(ticket_repo, comment_repo, AccessPolicy())


class TestCommentEntity:
    def test_create_normaliza_conteudo(self):
        comment = CommentEntity.create("t-1", "u-1", "Bruno", "  obrigado  ", False, now=NOW)

        assert comment.content == "obrigado"
        assert comment.created_at == NOW

    @pytest.mark.parametrize("content", ["", "   ", None])
    def test_conteudo_vazio_invalido(self, content):
        with pytest.raises(ValidationError) as exc_info:
            CommentEntity.create("t-1", "u-1", "Bruno", content, False)
        assert exc_info.value.field == "content"

    def test_conteudo_longo_demais(self):
        with pytest.raises(ValidationError):
            CommentEntity.create(
                "t-1", "u-1", "Bruno", "x" * (CommentEntity.CONTENT_MAX_LENGTH + 1), False
            )


class TestAddCommentService:
    """Testes para AddCommentService."""

    def test_equipe_cria_nota_interna(self, add_service, uow, staff):
        output = add_service.execute(
            AddCommentInputDTO("t-1", "Trocar cabo HDMI", is_internal=True), staff
        )

        assert output.is_internal is True
        assert output.author_name == "Tiago Técnico"
        assert uow.committed
        event = uow.published_events[-1]
        assert isinstance(event, CommentAddedEvent)
        assert event.comment_id == output.id
        assert event.is_internal is True

    def test_user_nunca_cria_nota_interna(self, add_service, comment_repo, user):
        output = add_service.execute(
            AddCommentInputDTO("t-1", "Ainda pisca", is_internal=True), user
        )

        assert output.is_internal is False
        assert comment_repo.get_by_id(output.id).is_internal is False

    def test_user_nao_comenta_ticket_alheio(self, add_service, comment_repo, other_user):
        with pytest.raises(ForbiddenError):
            add_service.execute(AddCommentInputDTO("t-1", "oi"), other_user)
        assert comment_repo.count() == 0

    def test_ticket_inexistente(self, add_service, staff):
        with pytest.raises(NotFoundError):
            add_service.execute(AddCommentInputDTO("missing", "oi"), staff)

    def test_conteudo_vazio_nao_persiste(self, add_service, comment_repo, uow, staff):
        with pytest.raises(ValidationError):
            add_service.execute(AddCommentInputDTO("t-1", "  "), staff)

        assert comment_repo.count() == 0
        assert uow.rolled_back
        assert uow.published_events == []


class TestListCommentsService:
    """Testes para ListCommentsService."""

    @pytest.fixture(autouse=True)
    def seeded(self, add_service, staff, user, clock):
        add_service.execute(AddCommentInputDTO("t-1", "Abri o chamado"), user)
        clock.advance(timedelta(minutes=5))
        add_service.execute(AddCommentInputDTO("t-1", "Driver antigo", is_internal=True), staff)
        clock.advance(timedelta(minutes=5))
        add_service.execute(AddCommentInputDTO("t-1", "Vou trocar o cabo"), staff)

    def test_equipe_ve_todos_em_ordem(self, list_service, staff):
        comments = list_service.execute("t-1", staff)

        assert [c.content for c in comments] == [
            "Abri o chamado",
            "Driver antigo",
            "Vou trocar o cabo",
        ]

    def test_user_nao_ve_notas_internas(self, list_service, user):
        comments = list_service.execute("t-1", user)

        assert [c.content for c in comments] == ["Abri o chamado", "Vou trocar o cabo"]
        assert not any(c.is_internal for c in comments)

    def test_outro_user_proibido(self, list_service, other_user):
        with pytest.raises(ForbiddenError):
            list_service.execute("t-1", other_user)


class TestDeleteCommentService:
    """Testes para DeleteCommentService."""

    @pytest.fixture
    def service(self, comment_repo, uow):
        return DeleteCommentService(comment_repo, uow)

    def test_autor_remove(self, service, add_service, comment_repo, user):
        output = add_service.execute(AddCommentInputDTO("t-1", "engano"), user)

        service.execute(output.id, user)

        assert comment_repo.get_by_id(output.id) is None

    def test_admin_nao_remove_comentario_alheio(self, service, add_service, comment_repo, admin, user):
        output = add_service.execute(AddCommentInputDTO("t-1", "meu"), user)

        with pytest.raises(ForbiddenError) as exc_info:
            service.execute(output.id, admin)

        assert exc_info.value.action == "delete_comment"
        assert comment_repo.get_by_id(output.id) is not None

    def test_comentario_inexistente(self, service, user):
        with pytest.raises(NotFoundError):
            service.execute("missing", user)
