"""
Ports (Interfaces) do Domínio de Tickets.

Define os contratos que os Adapters de infraestrutura devem implementar
para persistência e consulta de tickets.

Princípio:
    Core define interfaces → Adapters implementam
    Dependências sempre apontam para o Core

Example:
    # No Adapter (Django)
    class DjangoTicketRepository:
        def save(self, ticket: TicketEntity) -> None:
            model = TicketMapper.to_model(ticket)
            model.save()
"""

from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Protocol, runtime_checkable

from .dtos import TicketFilter
from .entities import TicketEntity, TicketStatus


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interface para persistência de Tickets.

    Implementações:
    - DjangoTicketRepository (tabela tickets via ORM)
    - InMemoryTicketRepository (testes)
    """

    def add(self, ticket: TicketEntity) -> TicketEntity:
        """
        Insere ticket novo e atribui o próximo `number` da sequência.

        Returns:
            Ticket com `number` preenchido

        Raises:
            StorageError: Se falha na persistência
        """
        ...

    def save(self, ticket: TicketEntity) -> None:
        """
        Atualiza ticket existente.

        Raises:
            StorageError: Se falha na persistência
        """
        ...

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        """Ticket encontrado ou None."""
        ...

    def delete(self, ticket_id: str) -> None:
        """Remove apenas a linha do ticket (cascata é do caso de uso)."""
        ...

    def exists(self, ticket_id: str) -> bool:
        ...

    def list(self, criteria: Optional[TicketFilter] = None) -> List[TicketEntity]:
        """Tickets que casam com o filtro, por `number` decrescente."""
        ...

    def count_by_status(
        self, created_by: Optional[str] = None, assigned_to: Optional[str] = None
    ) -> Dict[TicketStatus, int]:
        """Contagem por status, opcionalmente restrita a solicitante/técnico."""
        ...

    def list_overdue(self, now: datetime) -> List[TicketEntity]:
        """Abertos/em andamento com due_by < now, prazo mais antigo primeiro."""
        ...


class InMemoryTicketRepository:
    """
    Implementação em memória do TicketRepository.

    Guarda cópias das entidades: alterar um ticket obtido por
    `get_by_id` não afeta o armazenado até `save`.

    Example:
        repo = InMemoryTicketRepository()
        ticket = repo.add(ticket)
        found = repo.get_by_id(ticket.id)
    """

    def __init__(self):
        self._tickets: Dict[str, TicketEntity] = {}
        self._last_number = 0

    def add(self, ticket: TicketEntity) -> TicketEntity:
        self._last_number += 1
        stored = replace(ticket, number=self._last_number)
        self._tickets[stored.id] = stored
        return replace(stored)

    def save(self, ticket: TicketEntity) -> None:
        self._tickets[ticket.id] = replace(ticket)

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        ticket = self._tickets.get(ticket_id)
        return replace(ticket) if ticket else None

    def delete(self, ticket_id: str) -> None:
        self._tickets.pop(ticket_id, None)

    def exists(self, ticket_id: str) -> bool:
        return ticket_id in self._tickets

    def list(self, criteria: Optional[TicketFilter] = None) -> List[TicketEntity]:
        criteria = criteria or TicketFilter()
        found = [replace(t) for t in self._tickets.values() if criteria.matches(t)]
        return sorted(found, key=lambda t: t.number or 0, reverse=True)

    def count_by_status(
        self, created_by: Optional[str] = None, assigned_to: Optional[str] = None
    ) -> Dict[TicketStatus, int]:
        counts = {status: 0 for status in TicketStatus}
        criteria = TicketFilter(created_by=created_by, assigned_to=assigned_to)
        for ticket in self._tickets.values():
            if criteria.matches(ticket):
                counts[ticket.status] += 1
        return counts

    def list_overdue(self, now: datetime) -> List[TicketEntity]:
        overdue = [replace(t) for t in self._tickets.values() if t.is_overdue(now)]
        return sorted(overdue, key=lambda t: t.due_by)

    def count(self) -> int:
        return len(self._tickets)

    def clear(self) -> None:
        self._tickets.clear()
