import asyncio
import threading

import pytest

from nexus.payments.gateway.base import ChargeStatus, PaymentStatus
from nexus.payments.gateway.errors import GatewayUnreachable, MalformedGatewayResponse
from nexus.payments.poller import StatusPoller


class ScriptedGateway:
    """Devolve os status roteirizados em ordem; repete o último quando acaba."""

    def __init__(self, *script):
        self._script = list(script)
        self._lock = threading.Lock()
        self.calls = 0

    def create_pix_charge(self, order):
        raise NotImplementedError

    def get_charge_status(self, transaction_id):
        with self._lock:
            self.calls += 1
            step = self._script.pop(0) if len(self._script) > 1 else self._script[0]
        if isinstance(step, Exception):
            raise step
        return ChargeStatus(transaction_id, step, raw_status=step.value)


async def _collect(poller):
    return [status async for status in poller.readings()]


def test_stops_after_paid():
    gateway = ScriptedGateway(PaymentStatus.PENDING, PaymentStatus.PAID, PaymentStatus.PENDING)
    poller = StatusPoller(gateway, "tx-1", interval=0.01)

    readings = asyncio.run(_collect(poller))

    assert readings == [PaymentStatus.PENDING, PaymentStatus.PAID]
    assert gateway.calls == 2


def test_failed_is_terminal_and_not_retried():
    gateway = ScriptedGateway(PaymentStatus.FAILED, PaymentStatus.PAID)
    poller = StatusPoller(gateway, "tx-1", interval=0.01)

    assert asyncio.run(_collect(poller)) == [PaymentStatus.FAILED]
    assert gateway.calls == 1


def test_transient_errors_do_not_abort_polling():
    gateway = ScriptedGateway(
        GatewayUnreachable("down"),
        MalformedGatewayResponse("garbage"),
        PaymentStatus.PENDING,
        PaymentStatus.PAID,
    )
    poller = StatusPoller(gateway, "tx-1", interval=0.01)

    assert asyncio.run(_collect(poller)) == [PaymentStatus.PENDING, PaymentStatus.PAID]
    assert gateway.calls == 4


def test_unchanged_remote_status_maps_the_same_every_time():
    gateway = ScriptedGateway(PaymentStatus.PENDING)
    poller = StatusPoller(gateway, "tx-1", interval=0.01)

    async def scenario():
        seen = []
        async for status in poller.readings():
            seen.append(status)
            if len(seen) == 5:
                poller.cancel()
        return seen

    assert asyncio.run(scenario()) == [PaymentStatus.PENDING] * 5


def test_no_ticks_after_cancel():
    gateway = ScriptedGateway(PaymentStatus.PENDING)
    poller = StatusPoller(gateway, "tx-1", interval=0.01)

    async def scenario():
        task = poller.start()
        await asyncio.sleep(0.05)
        poller.cancel()
        result = await task
        calls_at_cancel = gateway.calls
        await asyncio.sleep(0.1)
        return result, calls_at_cancel

    result, calls_at_cancel = asyncio.run(scenario())
    assert result is None
    assert calls_at_cancel >= 1
    assert gateway.calls == calls_at_cancel


def test_cancel_before_first_tick_issues_no_request():
    gateway = ScriptedGateway(PaymentStatus.PAID)
    poller = StatusPoller(gateway, "tx-1", interval=10)

    async def scenario():
        task = poller.start()
        await asyncio.sleep(0)
        poller.cancel()
        return await asyncio.wait_for(task, timeout=1)

    assert asyncio.run(scenario()) is None
    assert gateway.calls == 0


def test_restart_after_cancel():
    gateway = ScriptedGateway(PaymentStatus.PAID)
    poller = StatusPoller(gateway, "tx-1", interval=0.01)

    async def scenario():
        poller.cancel()
        first = await poller.run()
        poller.reset()
        second = await poller.run()
        return first, second

    assert asyncio.run(scenario()) == (None, PaymentStatus.PAID)
    assert gateway.calls == 1


def test_callbacks_fire_once():
    gateway = ScriptedGateway(PaymentStatus.PENDING, PaymentStatus.PAID)
    paid, failed = [], []

    async def on_paid(transaction_id):
        paid.append(transaction_id)

    poller = StatusPoller(gateway, "tx-7", interval=0.01)
    result = asyncio.run(poller.run(on_paid=on_paid, on_failed=failed.append))

    assert result is PaymentStatus.PAID
    assert paid == ["tx-7"]
    assert failed == []


def test_settled_lookup_short_circuits_gateway():
    gateway = ScriptedGateway(PaymentStatus.PENDING)
    poller = StatusPoller(gateway, "tx-1", interval=0.01, settled=lambda _id: PaymentStatus.PAID)

    assert asyncio.run(_collect(poller)) == [PaymentStatus.PAID]
    assert gateway.calls == 0


def test_independent_pollers():
    first = ScriptedGateway(PaymentStatus.PAID)
    second = ScriptedGateway(PaymentStatus.PENDING, PaymentStatus.FAILED)

    async def scenario():
        return await asyncio.gather(
            StatusPoller(first, "a", interval=0.01).run(),
            StatusPoller(second, "b", interval=0.01).run(),
        )

    assert asyncio.run(scenario()) == [PaymentStatus.PAID, PaymentStatus.FAILED]


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        StatusPoller(ScriptedGateway(PaymentStatus.PAID), "tx", interval=0)


def test_settled_lookup_failure_does_not_abort_polling():
    gateway = ScriptedGateway(PaymentStatus.PENDING, PaymentStatus.PAID)
    lookups = []

    def flaky_settled(transaction_id):
        lookups.append(transaction_id)
        if len(lookups) == 1:
            raise RuntimeError("database is locked")
        return None

    poller = StatusPoller(gateway, "tx-1", interval=0.01, settled=flaky_settled)

    assert asyncio.run(poller.run()) is PaymentStatus.PAID
    assert gateway.calls == 2
    assert len(lookups) == 2
