"""
Audit Log - trilha imutável de mudanças dos tickets.

- ActivityAction / ActivityEntry (entidades)
- ActivityRepository (port) e InMemoryActivityRepository
- AuditLog (append/list)
"""

from .audit_log import AuditLog
from .entities import ActivityAction, ActivityEntry
from .ports import ActivityRepository, InMemoryActivityRepository

__all__ = [
    "ActivityAction",
    "ActivityEntry",
    "ActivityRepository",
    "AuditLog",
    "InMemoryActivityRepository",
]
