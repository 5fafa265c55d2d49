"""pytest fixtures"""

import asyncio

import pytest
import pytest_asyncio

from busfixture.fixture import EndpointFixture
from busfixture.telemetry import Telemetry
from tests.emulator import Emulator


@pytest.fixture(name="telemetry")
def fixture_telemetry():
    """Fixture for creating the event sources of an endpoint."""
    telemetry = Telemetry()
    yield telemetry
    telemetry.close()


@pytest.fixture(name="endpoint_fixture")
def fixture_endpoint_fixture(telemetry: Telemetry):
    """Fixture for creating an endpoint fixture with deadlines enabled."""
    return EndpointFixture(telemetry, no_deadline=False)


@pytest_asyncio.fixture(name="emulator")
async def fixture_emulator(telemetry: Telemetry):
    """Fixture for creating an order endpoint emulator."""
    emulator = Emulator(telemetry, "127.0.0.1", port=10001)
    await emulator.start()
    yield emulator
    await asyncio.sleep(0.01)
    await emulator.stop()
