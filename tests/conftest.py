"""
Shared fixtures: the salon's default setup anchored on 2025-10-25.
"""

from decimal import Decimal

import pendulum
import pytest

from salonslots.domain.availability_engine import AvailabilityEngine
from salonslots.domain.models import Service, WorkCycleSettings


@pytest.fixture
def settings() -> WorkCycleSettings:
    return WorkCycleSettings(anchor_date=pendulum.date(2025, 10, 25))


@pytest.fixture
def services():
    catalog = [
        Service(id="consultation", duration_minutes=15, price=Decimal("0"), category="other"),
        Service(id="brows", duration_minutes=30, price=Decimal("150"), category="brows"),
        Service(id="manicure", duration_minutes=60, price=Decimal("350"), category="nails"),
        Service(id="pedicure", duration_minutes=90, price=Decimal("450"), category="nails"),
    ]
    return {service.id: service for service in catalog}


@pytest.fixture
def engine() -> AvailabilityEngine:
    return AvailabilityEngine()
