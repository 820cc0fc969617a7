"""
Interfaces (Ports) compartilhadas entre Core e Adapters.

- UnitOfWork: fronteira transacional de cada caso de uso
- EventPublisher: saída de eventos após commit

Princípio: Core define interfaces; Adapters implementam.
"""

from abc import ABC, abstractmethod
from typing import List

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - Coordena transações.

    Pattern: Context Manager
        with uow:
            repo.save(entity1)
            repo.save(entity2)
            uow.publish_event(event)
        # Commit ao sair sem erro, rollback se exceção

    Eventos enfileirados só são publicados após commit bem-sucedido;
    em rollback são descartados.

    Attributes:
        atomic: True se o backend desfaz escritas no rollback. Casos de uso
            com múltiplas escritas (merge) consultam este atributo para
            sinalizar aplicação parcial.
    """

    atomic: bool = False

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    @abstractmethod
    def _begin_transaction(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Persiste as mudanças e publica eventos.

        Ordem: commit no banco, publicação dos eventos, limpeza do estado.
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz as mudanças (quando suportado) e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """Enfileira evento para publicação após commit."""
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Retorna eventos pendentes (testing/debugging)."""
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Example:
        class CeleryEventPublisher(EventPublisher):
            def publish(self, event):
                dispatch_domain_event.delay(event.to_dict())
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)
