"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda app (repositories, políticas)
- Factory: Nova instância por chamada (services, UoW)
- Object: Valores fixos (relógio)

Ambientes:
- Container: Django ORM + publisher definido em settings
- build_testing_container(): InMemory implementations
"""

from typing import Optional

from dependency_injector import containers, providers

from helpdesk.core.access.policy import AccessPolicy
from helpdesk.core.activity.audit_log import AuditLog
from helpdesk.core.activity.ports import InMemoryActivityRepository
from helpdesk.core.activity.use_cases import GetTicketActivityService
from helpdesk.core.comments.ports import InMemoryCommentRepository
from helpdesk.core.comments.use_cases import (
    AddCommentService,
    DeleteCommentService,
    ListCommentsService,
)
from helpdesk.core.shared.clock import utc_now
from helpdesk.core.sla.policy import SLAPolicy
from helpdesk.core.tickets.ports import InMemoryTicketRepository
from helpdesk.core.tickets.use_cases import (
    CreateTicketService,
    DeleteTicketService,
    GetTicketService,
    ListOverdueTicketsService,
    ListTicketsService,
    MergeTicketsService,
    TicketStatsService,
    UpdateTicketService,
)


# =============================================================================
# Factories com import tardio (models exigem django.setup())
# =============================================================================

def _django_ticket_repository():
    from helpdesk.adapters.django_app.tickets.repositories import DjangoTicketRepository
    return DjangoTicketRepository()


def _django_comment_repository():
    from helpdesk.adapters.django_app.tickets.repositories import DjangoCommentRepository
    return DjangoCommentRepository()


def _django_activity_repository():
    from helpdesk.adapters.django_app.tickets.repositories import DjangoActivityRepository
    return DjangoActivityRepository()


def _django_unit_of_work(event_publisher):
    from helpdesk.adapters.django_app.shared.unit_of_work import DjangoUnitOfWork
    return DjangoUnitOfWork(event_publisher=event_publisher)


def _in_memory_unit_of_work(event_publisher):
    from helpdesk.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
    return InMemoryUnitOfWork(event_publisher=event_publisher)


def _settings_sla_policy() -> SLAPolicy:
    from django.conf import settings
    return SLAPolicy.from_hours(getattr(settings, 'SLA_HOURS', None))


def _settings_event_publisher():
    from django.conf import settings
    from helpdesk.adapters.django_app.events.publishers import get_event_publisher
    return get_event_publisher(getattr(settings, 'EVENT_PUBLISHER_MODE', 'logging'))


def _in_memory_event_publisher():
    from helpdesk.adapters.django_app.events.publishers import InMemoryEventPublisher
    return InMemoryEventPublisher()


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Infrastructure: relógio, publisher, políticas
    - Repositories: Persistência
    - Unit of Work: Transações
    - Services: Use Cases

    Example:
        from helpdesk.config.container import get_container

        container = get_container()
        service = container.create_ticket_service()
        result = service.execute(input_dto, actor)
    """

    # =========================================================================
    # Infrastructure
    # =========================================================================

    clock = providers.Object(utc_now)

    event_publisher = providers.Singleton(_settings_event_publisher)

    sla_policy = providers.Singleton(_settings_sla_policy)

    access_policy = providers.Singleton(AccessPolicy)

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    ticket_repository = providers.Singleton(_django_ticket_repository)

    comment_repository = providers.Singleton(_django_comment_repository)

    activity_repository = providers.Singleton(_django_activity_repository)

    audit_log = providers.Singleton(AuditLog, activity_repo=activity_repository, clock=clock)

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(_django_unit_of_work, event_publisher=event_publisher)

    # =========================================================================
    # Services / Use Cases (Factory - nova instância por chamada)
    # =========================================================================

    create_ticket_service = providers.Factory(
        CreateTicketService,
        ticket_repo=ticket_repository,
        audit_log=audit_log,
        uow=unit_of_work,
        sla_policy=sla_policy,
        access_policy=access_policy,
        clock=clock,
    )

    update_ticket_service = providers.Factory(
        UpdateTicketService,
        ticket_repo=ticket_repository,
        comment_repo=comment_repository,
        audit_log=audit_log,
        uow=unit_of_work,
        sla_policy=sla_policy,
        access_policy=access_policy,
        clock=clock,
    )

    delete_ticket_service = providers.Factory(
        DeleteTicketService,
        ticket_repo=ticket_repository,
        comment_repo=comment_repository,
        audit_log=audit_log,
        uow=unit_of_work,
        access_policy=access_policy,
    )

    merge_tickets_service = providers.Factory(
        MergeTicketsService,
        ticket_repo=ticket_repository,
        audit_log=audit_log,
        uow=unit_of_work,
        access_policy=access_policy,
        clock=clock,
    )

    # Leitura (sem UoW)
    get_ticket_service = providers.Factory(
        GetTicketService,
        ticket_repo=ticket_repository,
        comment_repo=comment_repository,
        access_policy=access_policy,
        clock=clock,
    )

    list_tickets_service = providers.Factory(
        ListTicketsService,
        ticket_repo=ticket_repository,
        comment_repo=comment_repository,
        access_policy=access_policy,
        clock=clock,
    )

    ticket_stats_service = providers.Factory(TicketStatsService, ticket_repo=ticket_repository)

    list_overdue_tickets_service = providers.Factory(
        ListOverdueTicketsService,
        ticket_repo=ticket_repository,
        clock=clock,
    )

    get_ticket_activity_service = providers.Factory(
        GetTicketActivityService,
        ticket_repo=ticket_repository,
        audit_log=audit_log,
        access_policy=access_policy,
    )

    # Comentários
    add_comment_service = providers.Factory(
        AddCommentService,
        ticket_repo=ticket_repository,
        comment_repo=comment_repository,
        uow=unit_of_work,
        access_policy=access_policy,
        clock=clock,
    )

    list_comments_service = providers.Factory(
        ListCommentsService,
        ticket_repo=ticket_repository,
        comment_repo=comment_repository,
        access_policy=access_policy,
    )

    delete_comment_service = providers.Factory(
        DeleteCommentService,
        comment_repo=comment_repository,
        uow=unit_of_work,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization).
    """
    global _container

    if _container is None:
        _container = Container()

    return _container


def reset_container() -> None:
    """Reset do container (para testes)."""
    global _container
    _container = None


# =============================================================================
# Testing Container
# =============================================================================

def build_testing_container() -> Container:
    """
    Container para testes.

    Sobrescreve (override) persistência, UoW e publisher com InMemory
    implementations e usa o SLA padrão; não depende de settings nem
    de banco.

    Example:
        container = build_testing_container()
        service = container.create_ticket_service()
        container.event_publisher().published_events
    """
    container = Container()

    container.event_publisher.override(providers.Singleton(_in_memory_event_publisher))
    container.sla_policy.override(providers.Singleton(SLAPolicy.from_hours))
    container.ticket_repository.override(providers.Singleton(InMemoryTicketRepository))
    container.comment_repository.override(providers.Singleton(InMemoryCommentRepository))
    container.activity_repository.override(providers.Singleton(InMemoryActivityRepository))
    container.unit_of_work.override(
        providers.Factory(_in_memory_unit_of_work, event_publisher=container.event_publisher)
    )

    return container
