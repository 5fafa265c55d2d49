"""Simple example demonstrating waiting on endpoint telemetry.

Runs an in-process endpoint that:
  1. Receives a PlaceOrder command
  2. Publishes OrderPlaced in the background
and waits until OrderPlaced has been sent.
"""

import asyncio
import logging
from dataclasses import dataclass

from busfixture import EndpointFixture, LogicalMessage, Telemetry
from busfixture.context import (
    IncomingLogicalMessageContext,
    OutgoingLogicalMessageContext,
)

logging.basicConfig(level=logging.DEBUG)


@dataclass
class PlaceOrder:
    order_id: str


@dataclass
class OrderPlaced:
    order_id: str


async def main():
    telemetry = Telemetry()
    fixture = EndpointFixture(telemetry, default_timeout=5)

    async def handle(command: PlaceOrder):
        telemetry.incoming(
            IncomingLogicalMessageContext(LogicalMessage.from_instance(command))
        )
        await asyncio.sleep(0.5)
        telemetry.outgoing(
            OutgoingLogicalMessageContext(
                LogicalMessage.from_instance(OrderPlaced(command.order_id))
            )
        )

    tasks = set()

    async def place_order():
        tasks.add(asyncio.create_task(handle(PlaceOrder("1"))))

    result = await fixture.execute_and_wait_for_sent(place_order, OrderPlaced)
    print(f">>> Received: {result.received(PlaceOrder)}")
    print(f">>> Sent: {result.sent(OrderPlaced)}")


if __name__ == "__main__":
    asyncio.run(main())
