"""
Domínio de SLA - cálculo de prazo por prioridade.
"""

from .policy import DEFAULT_SLA_HOURS, SLAPolicy

__all__ = [
    "DEFAULT_SLA_HOURS",
    "SLAPolicy",
]
