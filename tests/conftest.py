"""
Configurações globais do Pytest para o Helpdesk.

Este arquivo é carregado automaticamente pelo pytest e
fornece fixtures e configurações compartilhadas.
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from helpdesk.core.access.policy import Actor, Role


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


class FrozenClock:
    """Relógio controlável: retorna sempre `now` até ser avançado."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta) -> None:
        self.now = self.now + delta


@pytest.fixture
def clock():
    """Relógio congelado em 2024-03-01 12:00 UTC."""
    return FrozenClock(datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def admin():
    return Actor(id="admin-1", display_name="Ana Admin", role=Role.ADMIN)


@pytest.fixture
def staff():
    return Actor(id="tech-1", display_name="Tiago Técnico", role=Role.IT_STAFF)


@pytest.fixture
def user():
    return Actor(id="user-1", display_name="Bruno Silva", role=Role.USER)


@pytest.fixture
def other_user():
    return Actor(id="user-2", display_name="Carla Souza", role=Role.USER)


def pytest_configure(config):
    """Configuração do pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


def pytest_collection_modifyitems(config, items):
    """Pula testes de integração sem --run-integration."""
    skip_integration = pytest.mark.skip(reason="use --run-integration to run")

    for item in items:
        if "integration" in item.keywords and not config.getoption("--run-integration"):
            item.add_marker(skip_integration)


def pytest_addoption(parser):
    """Adiciona opções de linha de comando."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )
