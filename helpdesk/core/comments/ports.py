"""
Ports do Domínio de Comentários.

A filtragem de notas internas acontece na consulta
(`include_internal=False`), nunca depois no chamador.
"""

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Protocol, Tuple, runtime_checkable

from .entities import CommentEntity

# (total, públicos)
CommentCounts = Tuple[int, int]


@runtime_checkable
class CommentRepository(Protocol):
    """
    Interface para persistência de comentários.

    Implementações:
    - DjangoCommentRepository (tabela ticket_comments)
    - InMemoryCommentRepository (testes)
    """

    def add(self, comment: CommentEntity) -> None:
        ...

    def get_by_id(self, comment_id: str) -> Optional[CommentEntity]:
        ...

    def delete(self, comment_id: str) -> None:
        ...

    def list_for_ticket(
        self, ticket_id: str, include_internal: bool = True
    ) -> List[CommentEntity]:
        """Comentários do ticket em ordem crescente de criação."""
        ...

    def delete_for_ticket(self, ticket_id: str) -> int:
        """Remove todos os comentários do ticket. Retorna quantos removeu."""
        ...

    def counts_for_tickets(self, ticket_ids: Iterable[str]) -> Dict[str, CommentCounts]:
        """(total, públicos) por ticket; tickets sem comentários ficam com (0, 0)."""
        ...


class InMemoryCommentRepository:
    """Implementação em memória do CommentRepository (testes)."""

    def __init__(self):
        self._comments: Dict[str, CommentEntity] = {}
        self._insertion: Dict[str, int] = {}

    def add(self, comment: CommentEntity) -> None:
        self._insertion.setdefault(comment.id, len(self._insertion))
        self._comments[comment.id] = replace(comment)

    def get_by_id(self, comment_id: str) -> Optional[CommentEntity]:
        comment = self._comments.get(comment_id)
        return replace(comment) if comment else None

    def delete(self, comment_id: str) -> None:
        self._comments.pop(comment_id, None)

    def list_for_ticket(
        self, ticket_id: str, include_internal: bool = True
    ) -> List[CommentEntity]:
        found = [
            replace(c) for c in self._comments.values()
            if c.ticket_id == ticket_id and (include_internal or not c.is_internal)
        ]
        return sorted(found, key=lambda c: (c.created_at, self._insertion[c.id]))

    def delete_for_ticket(self, ticket_id: str) -> int:
        ids = [i for i, c in self._comments.items() if c.ticket_id == ticket_id]
        for comment_id in ids:
            del self._comments[comment_id]
        return len(ids)

    def counts_for_tickets(self, ticket_ids: Iterable[str]) -> Dict[str, CommentCounts]:
        counts = {ticket_id: (0, 0) for ticket_id in ticket_ids}
        for comment in self._comments.values():
            if comment.ticket_id in counts:
                total, public = counts[comment.ticket_id]
                counts[comment.ticket_id] = (
                    total + 1,
                    public + (0 if comment.is_internal else 1),
                )
        return counts

    def count(self) -> int:
        return len(self._comments)

    def clear(self) -> None:
        self._comments.clear()
        self._insertion.clear()
