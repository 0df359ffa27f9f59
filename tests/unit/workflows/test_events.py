"""EventBroadcaster fan-out, filtering, and overflow behavior."""

import asyncio

import pytest

from workflows.events import EventBroadcaster, WorkflowEvent

pytestmark = pytest.mark.asyncio


async def test_every_subscriber_receives_event():
    broadcaster = EventBroadcaster()
    first = broadcaster.subscribe()
    second = broadcaster.subscribe()

    broadcaster.publish("analysis:started", {"analysis_id": "a1", "subject": "BTC"})

    for sub in (first, second):
        event = sub.get_nowait()
        assert event.name == "analysis:started"
        assert event.analysis_id == "a1"
        assert event.payload["subject"] == "BTC"


async def test_enum_names_published_as_wire_strings():
    broadcaster = EventBroadcaster()
    sub = broadcaster.subscribe()

    broadcaster.publish(WorkflowEvent.STAGE_FINISHED, {"analysis_id": "a1", "status": "done"})

    assert sub.get_nowait().name == "stage:finished"


async def test_filtered_subscription_only_sees_its_analysis():
    broadcaster = EventBroadcaster()
    only_a1 = broadcaster.subscribe(analysis_id="a1")

    broadcaster.publish("analysis:started", {"analysis_id": "a2"})
    broadcaster.publish("analysis:started", {"analysis_id": "a1"})

    assert [e.analysis_id for e in only_a1.drain()] == ["a1"]


async def test_late_subscriber_misses_earlier_events():
    broadcaster = EventBroadcaster()
    broadcaster.publish("analysis:started", {"analysis_id": "a1"})

    late = broadcaster.subscribe()
    broadcaster.publish("analysis:completed", {"analysis_id": "a1"})

    assert [e.name for e in late.drain()] == ["analysis:completed"]


async def test_full_queue_drops_without_blocking_others():
    broadcaster = EventBroadcaster()
    slow = broadcaster.subscribe(maxsize=1)
    fast = broadcaster.subscribe()

    for i in range(3):
        broadcaster.publish("agent:message", {"analysis_id": "a1", "n": i})

    assert [e.payload["n"] for e in slow.drain()] == [0]
    assert slow.dropped == 2
    assert [e.payload["n"] for e in fast.drain()] == [0, 1, 2]


async def test_payload_is_frozen_copy():
    broadcaster = EventBroadcaster()
    sub = broadcaster.subscribe()
    payload = {"analysis_id": "a1"}

    broadcaster.publish("analysis:started", payload)
    payload["analysis_id"] = "changed"

    event = sub.get_nowait()
    assert event.analysis_id == "a1"
    with pytest.raises(TypeError):
        event.payload["analysis_id"] = "x"  # type: ignore[index]


async def test_close_unsubscribes():
    broadcaster = EventBroadcaster()
    with broadcaster.subscribe() as sub:
        assert broadcaster.subscriber_count == 1

    assert sub.closed
    assert broadcaster.subscriber_count == 0
    broadcaster.publish("analysis:started", {"analysis_id": "a1"})
    assert sub.drain() == []
    sub.close()


async def test_async_iteration_waits_for_events():
    broadcaster = EventBroadcaster()
    sub = broadcaster.subscribe()

    async def consume():
        received = []
        async for event in sub:
            received.append(event.name)
            if event.name == "analysis:completed":
                return received

    task = asyncio.create_task(consume())
    await asyncio.sleep(0)
    broadcaster.publish("analysis:started", {"analysis_id": "a1"})
    broadcaster.publish("analysis:completed", {"analysis_id": "a1"})

    assert await asyncio.wait_for(task, timeout=1) == ["analysis:started", "analysis:completed"]


async def test_publish_without_subscribers_is_noop():
    EventBroadcaster().publish("analysis:started", {"analysis_id": "a1"})


async def test_queue_size_must_be_positive():
    with pytest.raises(ValueError, match="maxsize"):
        EventBroadcaster().subscribe(maxsize=0)
