"""
Shared fixtures for jobsite tests.
"""
import pytest
from datetime import date

from jobsite.config import get_config
from jobsite.domain.entities import Contractor, Staff, Project, ClientInfo
from jobsite.domain.services import PortfolioService


@pytest.fixture
def client():
    """Client with full contact data."""
    return ClientInfo(name="Laura Gomez", email="laura@example.com", phone="555-0101")


@pytest.fixture
def project(client):
    """Empty project starting and ending on 2024-01-01."""
    return Project(
        project_id=1,
        client=client,
        address="Av. Siempre Viva 742",
        start_date=date(2024, 1, 1),
        estimated_end_date=date(2024, 1, 1),
    )


@pytest.fixture
def technician():
    """Staff technician billed $100 per day."""
    return Staff(legajo=1, name="Ana", daily_rate=100, category="TECHNICIAN")


@pytest.fixture
def expert():
    """Staff expert billed $200 per day."""
    return Staff(legajo=2, name="Bruno", daily_rate=200, category="expert")


@pytest.fixture
def contractor():
    """Contractor billed $10 per hour."""
    return Contractor(legajo=3, name="Carla", hourly_rate=10)


@pytest.fixture
def service():
    """Portfolio service with empty registries and the packaged config."""
    return PortfolioService(config=get_config())
