"""
Use Cases do Domínio de Comentários.

- AddCommentService: Adiciona comentário (USER nunca cria nota interna)
- ListCommentsService: Lista comentários filtrando notas internas para USER
- DeleteCommentService: Remove comentário (apenas o autor)
"""

import logging
from typing import List, Optional

from helpdesk.core.access.policy import AccessPolicy, Actor
from helpdesk.core.shared.clock import Clock, utc_now
from helpdesk.core.shared.exceptions import ForbiddenError, NotFoundError
from helpdesk.core.shared.interfaces import UnitOfWork
from helpdesk.core.tickets.events import CommentAddedEvent
from helpdesk.core.tickets.ports import TicketRepository
from helpdesk.core.tickets.use_cases import get_ticket_or_raise

from .dtos import AddCommentInputDTO, CommentOutputDTO
from .entities import CommentEntity
from .ports import CommentRepository

logger = logging.getLogger(__name__)


class AddCommentService:
    """
    Use Case: Adicionar comentário a um ticket.

    Fluxo:
    1. Ticket deve existir e ser legível pelo ator
    2. `is_internal` é forçado a False para USER
    3. Conteúdo validado na entidade (não vazio)
    4. Persistir e disparar CommentAddedEvent
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        comment_repo: CommentRepository,
        uow: UnitOfWork,
        access_policy: Optional[AccessPolicy] = None,
        clock: Clock = utc_now,
    ):
        self.ticket_repo = ticket_repo
        self.comment_repo = comment_repo
        self.uow = uow
        self.access_policy = access_policy or AccessPolicy()
        self.clock = clock

    def execute(self, input_dto: AddCommentInputDTO, actor: Actor) -> CommentOutputDTO:
        """
        Raises:
            NotFoundError: Ticket não existe
            ForbiddenError: USER comentando ticket de outro usuário
            ValidationError: Conteúdo vazio
        """
        with self.uow:
            ticket = get_ticket_or_raise(self.ticket_repo, input_dto.ticket_id)
            self.access_policy.ensure_can_read_ticket(actor, ticket)

            is_internal = input_dto.is_internal and self.access_policy.can_view_internal(
                actor.role
            )
            comment = CommentEntity.create(
                ticket_id=ticket.id,
                author_id=actor.id,
                author_name=actor.display_name,
                content=input_dto.content,
                is_internal=is_internal,
                now=self.clock(),
            )
            self.comment_repo.add(comment)

            self.uow.publish_event(
                CommentAddedEvent(
                    aggregate_id=ticket.id,
                    comment_id=comment.id,
                    author_id=actor.id,
                    is_internal=comment.is_internal,
                    content_preview=comment.content[:100],
                )
            )

        logger.info(
            "Comment %s added to ticket %s by %s (internal=%s)",
            comment.id, ticket.id, actor.id, comment.is_internal,
        )
        return CommentOutputDTO.from_entity(comment)


class ListCommentsService:
    """
    Use Case: Listar comentários de um ticket.

    Para USER a consulta já exclui notas internas
    (`include_internal=False`); a equipe vê todos.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        comment_repo: CommentRepository,
        access_policy: Optional[AccessPolicy] = None,
    ):
        self.ticket_repo = ticket_repo
        self.comment_repo = comment_repo
        self.access_policy = access_policy or AccessPolicy()

    def execute(self, ticket_id: str, actor: Actor) -> List[CommentOutputDTO]:
        ticket = get_ticket_or_raise(self.ticket_repo, ticket_id)
        self.access_policy.ensure_can_read_ticket(actor, ticket)

        comments = self.comment_repo.list_for_ticket(
            ticket_id,
            include_internal=self.access_policy.can_view_internal(actor.role),
        )
        return [CommentOutputDTO.from_entity(c) for c in comments]


class DeleteCommentService:
    """
    Use Case: Remover comentário.

    Apenas o próprio autor remove (checagem por identidade, não por papel).
    """

    def __init__(self, comment_repo: CommentRepository, uow: UnitOfWork):
        self.comment_repo = comment_repo
        self.uow = uow

    def execute(self, comment_id: str, actor: Actor) -> None:
        """
        Raises:
            NotFoundError: Comentário não existe
            ForbiddenError: Ator não é o autor
        """
        with self.uow:
            comment = self.comment_repo.get_by_id(comment_id)
            if comment is None:
                raise NotFoundError.for_entity("Comment", comment_id)
            if comment.author_id != actor.id:
                logger.warning(
                    "Comment deletion refused: %s is not the author of %s", actor.id, comment_id
                )
                raise ForbiddenError(
                    f"Apenas o autor pode remover o comentário {comment_id}",
                    action="delete_comment",
                )
            self.comment_repo.delete(comment_id)

        logger.info("Comment %s deleted by %s", comment_id, actor.id)
