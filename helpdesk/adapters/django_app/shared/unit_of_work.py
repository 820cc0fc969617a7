"""
Unit of Work - Implementação Django.

Gerencia transações atômicas entre múltiplos repositórios,
garantindo consistência de dados.

Responsabilidades:
- Iniciar/finalizar transações
- Commit/Rollback coordenado
- Publicar eventos após commit bem-sucedido

ACID Guarantees:
- Atomicidade: Tudo ou nada (merge, exclusão em cascata)
- Consistência: Eventos refletem estado persistido
- Isolamento: Cada caso de uso tem sua transação
"""

from typing import List, Optional
import logging

from django.db import transaction

from helpdesk.core.shared.events import DomainEvent
from helpdesk.core.shared.interfaces import EventPublisher, UnitOfWork

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Abre um bloco transaction.atomic() no início do `with` e o fecha
    no commit/rollback. Se já houver transação externa, vira savepoint.
    Eventos são publicados apenas após commit bem-sucedido.

    Example:
        with DjangoUnitOfWork() as uow:
            repo.save(entity1)
            repo.save(entity2)
            uow.publish_event(MyEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            repo.save(entity)
            uow.publish_event(MyEvent(...))
            raise ConflictError("...")
        # Rollback automático, eventos descartados
    """

    atomic = True

    def __init__(self, event_publisher: Optional[EventPublisher] = None, using: Optional[str] = None):
        """
        Args:
            event_publisher: Publicador de eventos (Celery, logging, etc)
            using: Alias do banco (default: 'default')
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._using = using
        self._atomic_block = None
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        """Entra num bloco atômico novo. Reinicia o estado da instância."""
        self._committed = False
        self._rolled_back = False
        self.clear_events()
        self._atomic_block = transaction.atomic(using=self._using)
        self._atomic_block.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Persiste todas as mudanças e publica eventos.

        Ordem de execução:
        1. Commit da transação no banco
        2. Publicar eventos para handlers assíncronos
        3. Limpar estado interno
        """
        if self._committed or self._rolled_back:
            logger.warning("Transaction already finalized")
            return

        if self._atomic_block is not None:
            block, self._atomic_block = self._atomic_block, None
            block.__exit__(None, None, None)
            logger.debug("Transaction committed")

        self._committed = True
        self._publish_events()

    def rollback(self) -> None:
        """
        Desfaz todas as mudanças e descarta eventos.

        Chamado automaticamente se exceção ocorrer dentro do contexto.
        """
        if self._committed or self._rolled_back:
            return

        try:
            if self._atomic_block is not None:
                block, self._atomic_block = self._atomic_block, None
                transaction.set_rollback(True, using=self._using)
                block.__exit__(None, None, None)
                logger.debug("Transaction rolled back")
        finally:
            self._rolled_back = True
            self.clear_events()

    def _publish_events(self) -> None:
        """
        Publica eventos para handlers assíncronos.

        Falha do publicador não desfaz o commit: o erro é logado
        e os demais eventos seguem.
        """
        events, self._events = self._events, []
        for event in events:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )

            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    logger.error(f"Failed to publish event {event.event_type}: {e}")

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Não persiste nada - apenas simula comportamento
    para testes unitários sem banco de dados. Não desfaz escritas
    (atomic = False).

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            # operações
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        """Simula início de transação."""
        self._committed = False
        self._rolled_back = False

    def commit(self) -> None:
        """Simula commit."""
        self._committed = True
        events, self._events = self._events, []
        self._published_events.extend(events)
        if self._event_publisher:
            self._event_publisher.publish_batch(events)

    def rollback(self) -> None:
        """Simula rollback."""
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        """Eventos 'publicados' em todos os commits."""
        return self._published_events

    def reset(self) -> None:
        """Reset para próximo teste."""
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()
