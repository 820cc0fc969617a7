"""
Domínio de Acesso - papéis, ator e política de autorização.
"""

from .policy import AccessPolicy, Actor, Role

__all__ = [
    "AccessPolicy",
    "Actor",
    "Role",
]
