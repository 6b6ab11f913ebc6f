import asyncio

import pytest

from core.connections.reload_registry import ReloadConnectionRegistry
from tests.helpers import FakeWebSocket


@pytest.mark.asyncio
async def test_broadcast_reaches_every_registered_connection():
    registry = ReloadConnectionRegistry()
    sockets = [FakeWebSocket() for _ in range(3)]
    for ws in sockets:
        await registry.register(ws)

    await registry.broadcast("reload")

    assert [ws.sent for ws in sockets] == [["reload"], ["reload"], ["reload"]]
    assert registry.active_count == 3


@pytest.mark.asyncio
async def test_broadcast_removes_broken_connection_and_delivers_to_the_rest():
    registry = ReloadConnectionRegistry()
    healthy_a = FakeWebSocket()
    broken = FakeWebSocket(broken=True)
    healthy_b = FakeWebSocket()
    for ws in (healthy_a, broken, healthy_b):
        await registry.register(ws, client="127.0.0.1:5000")

    await registry.broadcast("reload")

    assert healthy_a.sent == ["reload"]
    assert healthy_b.sent == ["reload"]
    assert broken.closed is True
    assert registry.active_count == 2
    assert await registry.contains(broken) is False
    assert await registry.contains(healthy_a) is True


@pytest.mark.asyncio
async def test_broadcast_without_connections_is_a_no_op():
    registry = ReloadConnectionRegistry()

    await registry.broadcast("reload")

    assert registry.active_count == 0


@pytest.mark.asyncio
async def test_unregister_is_idempotent():
    registry = ReloadConnectionRegistry()
    ws = FakeWebSocket()
    await registry.register(ws)

    assert await registry.unregister(ws) is True
    assert await registry.unregister(ws) is False
    assert registry.active_count == 0


@pytest.mark.asyncio
async def test_register_same_connection_twice_keeps_one_entry():
    registry = ReloadConnectionRegistry()
    ws = FakeWebSocket()

    await registry.register(ws)
    await registry.register(ws)
    await registry.broadcast("reload")

    assert registry.active_count == 1
    assert ws.sent == ["reload"]


@pytest.mark.asyncio
async def test_concurrent_registration_during_broadcast_is_safe():
    registry = ReloadConnectionRegistry()
    initial = [FakeWebSocket() for _ in range(20)]
    broken = [FakeWebSocket(broken=True) for _ in range(5)]
    for ws in initial + broken:
        await registry.register(ws)

    late = [FakeWebSocket() for _ in range(20)]
    await asyncio.gather(
        registry.broadcast("reload"),
        *(registry.register(ws) for ws in late),
    )

    assert all(ws.sent == ["reload"] for ws in initial)
    assert all(ws.closed for ws in broken)
    assert registry.active_count == len(initial) + len(late)


@pytest.mark.asyncio
async def test_concurrent_broadcasts_remove_broken_connection_once():
    registry = ReloadConnectionRegistry()
    healthy = FakeWebSocket()
    broken = FakeWebSocket(broken=True)
    await registry.register(healthy)
    await registry.register(broken)

    await asyncio.gather(registry.broadcast("reload"), registry.broadcast("reload"))

    assert healthy.sent == ["reload", "reload"]
    assert registry.active_count == 1
