"""
Configuração pytest para testes com Django.

Este arquivo configura:
- Django settings para testes (SQLite em memória)
- Fixtures compartilhadas dos adapters

O banco de teste é criado pelo pytest-django a partir das migrations.
"""

from datetime import datetime, timezone

import pytest


def pytest_configure(config):
    """Configura Django antes dos testes."""
    import django
    from django.conf import settings

    if not settings.configured:
        settings.configure(
            DEBUG=True,
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.contenttypes',
                'django.contrib.auth',
                'helpdesk.adapters.django_app.tickets',
            ],
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=True,
            TIME_ZONE='UTC',
            EVENT_PUBLISHER_MODE='logging',
            SLA_HOURS={'critical': 2, 'high': 8, 'medium': 24, 'low': 48},
            CELERY_TASK_ALWAYS_EAGER=True,
        )
        django.setup()


NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_ticket():
    """Factory de TicketEntity (sem number; o repositório atribui)."""
    from helpdesk.core.tickets.entities import TicketEntity

    def create_ticket(**overrides):
        params = dict(
            subject="Notebook não liga",
            category="hardware",
            created_by="user-1",
            due_by=NOW,
            now=NOW,
            employee_name="Bruno Silva",
            department="Financeiro",
        )
        params.update(overrides)
        return TicketEntity.create(**params)

    return create_ticket


@pytest.fixture
def ticket_repo():
    from helpdesk.adapters.django_app.tickets.repositories import DjangoTicketRepository
    return DjangoTicketRepository()


@pytest.fixture
def comment_repo():
    from helpdesk.adapters.django_app.tickets.repositories import DjangoCommentRepository
    return DjangoCommentRepository()


@pytest.fixture
def activity_repo():
    from helpdesk.adapters.django_app.tickets.repositories import DjangoActivityRepository
    return DjangoActivityRepository()


@pytest.fixture
def inmemory_uow():
    """Unit of Work em memória para testes unitários."""
    from helpdesk.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
    return InMemoryUnitOfWork()
