"""
Ports do Audit Log.

O repositório de atividades é append-only: não há `save` nem
`update`. A remoção existe apenas para a cascata da exclusão de ticket.
"""

from dataclasses import replace
from itertools import count
from typing import Dict, List, Protocol, runtime_checkable

from .entities import ActivityEntry


@runtime_checkable
class ActivityRepository(Protocol):
    """
    Interface para persistência de entradas de atividade.

    Implementações:
    - DjangoActivityRepository (tabela ticket_activity)
    - InMemoryActivityRepository (testes)
    """

    def add(self, entry: ActivityEntry) -> ActivityEntry:
        """
        Registra entrada.

        Returns:
            Entrada persistida, com `id` sequencial preenchido

        Raises:
            StorageError: Se falha na persistência
        """
        ...

    def list_for_ticket(self, ticket_id: str) -> List[ActivityEntry]:
        """Entradas do ticket em ordem crescente de (created_at, id)."""
        ...

    def delete_for_ticket(self, ticket_id: str) -> int:
        """Remove todas as entradas do ticket. Retorna quantas removeu."""
        ...

    def count_for_ticket(self, ticket_id: str) -> int:
        ...


class InMemoryActivityRepository:
    """
    Implementação em memória do ActivityRepository.

    Útil para testes unitários e prototipagem.
    """

    def __init__(self):
        self._entries: Dict[int, ActivityEntry] = {}
        self._sequence = count(1)

    def add(self, entry: ActivityEntry) -> ActivityEntry:
        stored = replace(entry, id=next(self._sequence), metadata=dict(entry.metadata))
        self._entries[stored.id] = stored
        return stored

    def list_for_ticket(self, ticket_id: str) -> List[ActivityEntry]:
        entries = [e for e in self._entries.values() if e.ticket_id == ticket_id]
        return sorted(entries, key=lambda e: e.sort_key)

    def delete_for_ticket(self, ticket_id: str) -> int:
        ids = [i for i, e in self._entries.items() if e.ticket_id == ticket_id]
        for entry_id in ids:
            del self._entries[entry_id]
        return len(ids)

    def count_for_ticket(self, ticket_id: str) -> int:
        return len([e for e in self._entries.values() if e.ticket_id == ticket_id])

    def clear(self) -> None:
        self._entries.clear()
