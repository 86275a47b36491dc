from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from ecovira.data.extras_pricing import load_extras_pricing
from ecovira.services.demo_booking import DemoBookingFactory
from ecovira.services.extras_calculator import ExtrasCalculator
from ecovira.services.quote_builder import QuoteBuilder

FIXED_NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


class SequentialIdGenerator:
    """Deterministic ids: demo-test-1, demo-test-2, ..."""

    def __init__(self):
        self.count = 0

    def new_booking_id(self) -> str:
        self.count += 1
        return f"demo-test-{self.count}"

    def new_reference(self) -> str:
        return f"ECO-DEMO-T{self.count:05d}"


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def pricing():
    return load_extras_pricing()


@pytest.fixture
def calculator(pricing):
    return ExtrasCalculator(pricing)


@pytest.fixture
def builder(calculator):
    return QuoteBuilder(calculator)


@pytest.fixture
def factory(builder):
    return DemoBookingFactory(
        builder,
        id_generator=SequentialIdGenerator(),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def client():
    from ecovira.main import app

    with TestClient(app) as c:
        yield c
