"""
Entidades do Domínio de Comentários.

Comentário pertence a exatamente um ticket e é público ou interno.
Comentários internos nunca chegam a um chamador USER.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
import uuid

from helpdesk.core.shared.clock import utc_now
from helpdesk.core.shared.exceptions import ValidationError


@dataclass
class CommentEntity:
    """
    Entidade de Domínio: Comentário de ticket.

    Attributes:
        id: Identificador único (UUID)
        ticket_id: Ticket ao qual pertence
        author_id: ID do autor
        author_name: Nome exibido do autor
        content: Texto (não vazio)
        is_internal: Nota interna, visível apenas à equipe
        created_at: Data/hora de criação
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    ticket_id: str = ""
    author_id: str = ""
    author_name: str = ""
    content: str = ""
    is_internal: bool = False
    created_at: datetime = field(default_factory=utc_now)

    CONTENT_MAX_LENGTH = 5000

    @classmethod
    def create(
        cls,
        ticket_id: str,
        author_id: str,
        author_name: str,
        content: str,
        is_internal: bool,
        now: Optional[datetime] = None,
    ) -> "CommentEntity":
        """
        Factory method com validações.

        Raises:
            ValidationError: Conteúdo vazio ou longo demais
        """
        if content is None or not content.strip():
            raise ValidationError("Comentário não pode ser vazio", field="content")

        clean = content.strip()
        if len(clean) > cls.CONTENT_MAX_LENGTH:
            raise ValidationError(
                f"Comentário deve ter no máximo {cls.CONTENT_MAX_LENGTH} caracteres",
                field="content",
            )

        return cls(
            ticket_id=ticket_id,
            author_id=author_id,
            author_name=author_name or "",
            content=clean,
            is_internal=bool(is_internal),
            created_at=now or utc_now(),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommentEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
