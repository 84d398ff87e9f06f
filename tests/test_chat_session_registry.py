from __future__ import annotations

from betterlife.infrastructure.storage.chat_session_registry import InMemoryChatSessionRegistry


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_idle_sessions_are_evicted_when_new_one_opens():
    clock = FakeClock()
    registry = InMemoryChatSessionRegistry(idle_ttl_seconds=60, clock=clock)
    abandoned = registry.open(topic="diet", owner_id=None)
    clock.now = 30
    active = registry.open(topic="diet", owner_id=None)

    clock.now = 80
    registry.open(topic="mental_health", owner_id=None)

    assert registry.get(abandoned.session_id) is None
    assert registry.get(active.session_id) is active


def test_get_refreshes_idle_timer():
    clock = FakeClock()
    registry = InMemoryChatSessionRegistry(idle_ttl_seconds=60, clock=clock)
    session = registry.open(topic="diet", owner_id="mock-user-1")

    clock.now = 50
    assert registry.get(session.session_id) is session
    clock.now = 100

    assert registry.get(session.session_id) is session


def test_expired_session_is_gone_on_lookup():
    clock = FakeClock()
    registry = InMemoryChatSessionRegistry(idle_ttl_seconds=60, clock=clock)
    session = registry.open(topic="diet", owner_id="mock-user-1")

    clock.now = 61

    assert registry.get(session.session_id) is None


def test_capacity_evicts_least_recently_used():
    clock = FakeClock()
    registry = InMemoryChatSessionRegistry(max_sessions=2, clock=clock)
    first = registry.open(topic="diet", owner_id=None)
    second = registry.open(topic="diet", owner_id=None)
    registry.get(first.session_id)

    third = registry.open(topic="diet", owner_id=None)

    assert registry.get(second.session_id) is None
    assert registry.get(first.session_id) is first
    assert registry.get(third.session_id) is third
