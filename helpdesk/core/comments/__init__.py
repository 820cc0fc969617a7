"""
Domínio de Comentários - notas públicas e internas dos tickets.
"""

from .dtos import AddCommentInputDTO, CommentOutputDTO
from .entities import CommentEntity
from .ports import CommentRepository, InMemoryCommentRepository

__all__ = [
    "AddCommentInputDTO",
    "CommentEntity",
    "CommentOutputDTO",
    "CommentRepository",
    "InMemoryCommentRepository",
]
