"""
DTOs do Domínio de Comentários.
"""

from dataclasses import dataclass
from datetime import datetime

from .entities import CommentEntity


@dataclass(frozen=True)
class AddCommentInputDTO:
    """
    DTO de entrada para adicionar comentário.

    Attributes:
        ticket_id: Ticket comentado
        content: Texto do comentário
        is_internal: Pedido de nota interna (ignorado para USER)
    """

    ticket_id: str
    content: str
    is_internal: bool = False

    def to_dict(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "content": self.content,
            "is_internal": self.is_internal,
        }


@dataclass
class CommentOutputDTO:
    id: str
    ticket_id: str
    author_id: str
    author_name: str
    content: str
    is_internal: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, entity: CommentEntity) -> "CommentOutputDTO":
        return cls(
            id=entity.id,
            ticket_id=entity.ticket_id,
            author_id=entity.author_id,
            author_name=entity.author_name,
            content=entity.content,
            is_internal=entity.is_internal,
            created_at=entity.created_at,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticket_id": self.ticket_id,
            "author_id": self.author_id,
            "author_name": self.author_name,
            "content": self.content,
            "is_internal": self.is_internal,
            "created_at": self.created_at.isoformat(),
        }
