"""Simple order endpoint emulator used for unit testing.

Accepts commands over HTTP and processes them in the background, reporting
progress only through telemetry events.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from aiohttp import web

from busfixture.context import ActiveSagaInstance
from busfixture.telemetry import Telemetry

from . import incoming, invoked, outgoing

_LOGGER = logging.getLogger(__name__)


# pylint: disable=missing-class-docstring


@dataclass(frozen=True)
class PlaceOrder:
    order_id: str


@dataclass(frozen=True)
class CancelOrder:
    order_id: str


@dataclass(frozen=True)
class OrderPlaced:
    order_id: str


@dataclass(frozen=True)
class OrderCancelled:
    order_id: str


@dataclass
class OrderSagaData:
    order_id: str
    completed: bool = False


class PlaceOrderHandler:
    pass


class CancelOrderHandler:
    pass


class OrderSaga:
    pass


class Emulator:
    """Class for emulating a message endpoint handling orders."""

    def __init__(
        self,
        telemetry: Telemetry,
        host: str,
        port: int = 10001,
        delay: float = 0.01,
    ):
        """Initialize the emulator."""
        self._telemetry = telemetry
        self._host = host
        self._port = port
        self._delay = delay
        self._runner: web.AppRunner | None = None
        self._tasks: set[asyncio.Task] = set()
        self._sagas: dict[str, OrderSagaData] = {}

    @property
    def url(self) -> str:
        """Returns base url of the endpoint."""
        return f"http://{self._host}:{self._port}"

    @property
    def sagas(self) -> dict[str, OrderSagaData]:
        """Returns saga state by order id."""
        return self._sagas

    async def start(self):
        """Start listening for commands."""
        if self._runner is not None:
            return
        app = web.Application()
        app.router.add_post("/orders", self._place_order)
        app.router.add_post("/orders/{order_id}/cancel", self._cancel_order)
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._host, self._port)
        await site.start()
        _LOGGER.debug("Started on %s", self.url)

    async def stop(self):
        """Stop listening and abandon commands still being processed."""
        if self._runner is None:
            return
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        await self._runner.cleanup()
        self._runner = None
        _LOGGER.debug("Stopped")

    async def _place_order(self, request: web.Request) -> web.Response:
        data = await request.json()
        command = PlaceOrder(data["order_id"])
        self._schedule(self._handle_place_order(command, data.get("complete", True)))
        return web.json_response({"order_id": command.order_id}, status=202)

    async def _cancel_order(self, request: web.Request) -> web.Response:
        command = CancelOrder(request.match_info["order_id"])
        self._schedule(self._handle_cancel_order(command))
        return web.json_response({"order_id": command.order_id}, status=202)

    def _schedule(self, coro):
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _handle_place_order(self, command: PlaceOrder, complete: bool):
        await asyncio.sleep(self._delay)
        self._telemetry.incoming(incoming(command))
        self._telemetry.invoked_handler(invoked(PlaceOrderHandler, command))

        event = OrderPlaced(command.order_id)
        self._telemetry.outgoing(outgoing(event))

        # Saga picks up the published event
        await asyncio.sleep(self._delay)
        saga = self._sagas.setdefault(
            command.order_id, OrderSagaData(command.order_id)
        )
        saga.completed = complete
        self._telemetry.incoming(incoming(event))
        self._telemetry.invoked_handler(
            invoked(OrderSaga, event, ActiveSagaInstance(saga))
        )

    async def _handle_cancel_order(self, command: CancelOrder):
        await asyncio.sleep(self._delay)
        self._telemetry.incoming(incoming(command))
        self._telemetry.invoked_handler(invoked(CancelOrderHandler, command))
        self._telemetry.outgoing(outgoing(OrderCancelled(command.order_id)))

        await asyncio.sleep(self._delay)
        saga = self._sagas.get(command.order_id)
        self._telemetry.invoked_handler(
            invoked(
                OrderSaga,
                OrderCancelled(command.order_id),
                ActiveSagaInstance(saga, not_found=saga is None),
            )
        )
