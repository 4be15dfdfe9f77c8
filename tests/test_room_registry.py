"""
Room Registry Tests
"""

import asyncio

import pytest

from lingua_relay.services.rooms.registry import RoomRegistry


def test_create_room_generates_unique_ids_with_default_label():
    registry = RoomRegistry(default_label="Unknown Hotel")

    first = registry.create_room()
    second = registry.create_room("Grand Palace")

    assert first != second
    assert first.startswith("room_")
    assert registry.get_stats(first).label == "Unknown Hotel"
    assert registry.get_stats(second).label == "Grand Palace"
    assert registry.get_stats(second).member_count == 0


def test_blank_label_falls_back_to_default():
    registry = RoomRegistry(default_label="Unknown Hotel")
    room_id = registry.create_room("   ")
    assert registry.get_room(room_id).label == "Unknown Hotel"


def test_ensure_room_is_idempotent():
    registry = RoomRegistry()

    assert registry.ensure_room("r1") is True
    registry.add_member("r1", "conn-a")
    assert registry.ensure_room("r1") is False

    assert registry.get_stats("r1").member_count == 1
    assert len(registry) == 1


def test_membership_changes_are_counted_once():
    registry = RoomRegistry()
    registry.ensure_room("r1")

    registry.add_member("r1", "conn-a")
    registry.add_member("r1", "conn-a")
    registry.add_member("r1", "conn-b")

    assert registry.members("r1") == ("conn-a", "conn-b")
    assert registry.get_stats("r1").member_count == 2

    registry.remove_member("r1", "conn-a")
    assert registry.members("r1") == ("conn-b",)


def test_mutations_on_unknown_room_do_not_raise():
    registry = RoomRegistry()

    assert registry.remove_member("missing", "conn-a") is False
    assert registry.add_member("missing", "conn-a") is False
    assert registry.get_stats("missing") is None
    assert registry.get_room("missing") is None
    assert registry.members("missing") == ()
    assert "missing" not in registry


def test_checked_delete_never_removes_a_room_that_regained_a_member():
    registry = RoomRegistry()
    registry.ensure_room("r1")
    registry.add_member("r1", "conn-a")
    registry.remove_member("r1", "conn-a")

    # member comes back between the two checks
    registry.add_member("r1", "conn-a")
    assert registry.delete_if_empty("r1") is False
    assert registry.delete_if_empty("r1") is False
    assert "r1" in registry

    registry.remove_member("r1", "conn-a")
    assert registry.delete_if_empty("r1") is True
    assert registry.delete_if_empty("r1") is False
    assert "r1" not in registry


@pytest.mark.asyncio
async def test_scheduled_cleanup_deletes_empty_room():
    registry = RoomRegistry()
    registry.ensure_room("r2")

    registry.schedule_cleanup("r2", 0.01)
    assert registry.sweeper.is_pending("r2")
    await asyncio.sleep(0.05)

    assert "r2" not in registry
    assert not registry.sweeper.is_pending("r2")


@pytest.mark.asyncio
async def test_scheduled_cleanup_rechecks_membership_at_fire_time():
    registry = RoomRegistry()
    registry.ensure_room("r2")

    registry.schedule_cleanup("r2", 0.01)
    registry.add_member("r2", "conn-a")
    await asyncio.sleep(0.05)

    assert "r2" in registry
    assert registry.members("r2") == ("conn-a",)


@pytest.mark.asyncio
async def test_repeated_scheduling_is_safe():
    registry = RoomRegistry()
    registry.ensure_room("r3")

    for _ in range(5):
        registry.schedule_cleanup("r3", 0.01)
    await asyncio.sleep(0.05)

    assert "r3" not in registry


@pytest.mark.asyncio
async def test_cancel_cleanup_keeps_room():
    registry = RoomRegistry()
    registry.ensure_room("r4")

    registry.schedule_cleanup("r4", 0.01)
    assert registry.cancel_cleanup("r4") is True
    await asyncio.sleep(0.05)

    assert "r4" in registry
    assert registry.cancel_cleanup("r4") is False


@pytest.mark.asyncio
async def test_shutdown_cancels_pending_cleanups():
    registry = RoomRegistry()
    registry.ensure_room("r5")
    registry.schedule_cleanup("r5", 10)

    await registry.shutdown()

    assert not registry.sweeper.is_pending("r5")
    assert "r5" in registry


def test_lifecycle_events_are_reported_to_sink():
    seen = []
    registry = RoomRegistry(on_event=lambda action, room_id, **fields: seen.append((action, room_id, fields)))

    registry.ensure_room("r1")
    registry.add_member("r1", "conn-a")
    registry.remove_member("r1", "conn-a")
    registry.delete_if_empty("r1")

    assert [action for action, _, _ in seen] == ["created", "member_joined", "member_left", "deleted"]
    assert seen[1][2] == {"connection_id": "conn-a"}
