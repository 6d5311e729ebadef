"""Integration tests for group scoping against PostgreSQL.

Each test runs on empty tracking tables; see conftest.py.
"""

from datetime import UTC, datetime

import pytest

from tracking.domain.aggregates import Device, Event, Place, User
from tracking.domain.value_objects import Circle, PasswordDigest, Point, Polygon
from tracking.ports.exceptions import (
    DuplicateKeyError,
    InvalidIdentifierError,
    MissingGeometryError,
    NotFoundError,
)

pytestmark = pytest.mark.integration

SQUARE = Polygon.from_coordinates([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])


class TestCrossGroupIsolation:
    """Records of one group are invisible to every other group."""

    @pytest.mark.asyncio
    async def test_device_in_other_group_is_not_found(self, repositories):
        await repositories.devices.create("g1", Device(id="d1"))

        with pytest.raises(NotFoundError):
            await repositories.devices.get("g2", "d1")
        with pytest.raises(NotFoundError):
            await repositories.devices.delete("g2", "d1")

        assert await repositories.devices.list("g2") == []
        assert (await repositories.devices.get("g1", "d1")).id == "d1"

    @pytest.mark.asyncio
    async def test_spoofed_group_is_overwritten(self, repositories):
        await repositories.users.create("g1", User(login="a@x.com", group_id="g2"))

        assert (await repositories.users.get("g1", "a@x.com")).group_id == "g1"
        with pytest.raises(NotFoundError):
            await repositories.users.get("g2", "a@x.com")

    @pytest.mark.asyncio
    async def test_login_is_global(self, repositories):
        await repositories.users.create("g1", User(login="a@x.com"))

        with pytest.raises(DuplicateKeyError):
            await repositories.users.create("g2", User(login="a@x.com"))


class TestDevices:
    @pytest.mark.asyncio
    async def test_round_trip_hides_digest(self, repositories):
        await repositories.devices.create(
            "g1",
            Device(
                id="tracker-7",
                display_name="Bike",
                device_type="gps",
                password=PasswordDigest.from_plaintext("pin"),
            ),
        )

        device = await repositories.devices.get("g1", "tracker-7")

        assert device.id == "tracker-7"
        assert device.display_name == "Bike"
        assert device.device_type == "gps"
        assert device.password is None

    @pytest.mark.asyncio
    async def test_get_is_repeatable(self, repositories):
        await repositories.devices.create("g1", Device(id="d1", display_name="Phone"))

        first = await repositories.devices.get("g1", "d1")
        second = await repositories.devices.get("g1", "d1")

        assert first == second

    @pytest.mark.asyncio
    async def test_update_of_missing_device_fails(self, repositories):
        with pytest.raises(NotFoundError):
            await repositories.devices.update("g1", Device(id="ghost"))

        assert await repositories.devices.list("g1") == []


class TestUserLogin:
    @pytest.mark.asyncio
    async def test_login_returns_verifiable_digest(self, repositories):
        await repositories.users.create(
            "g1",
            User(login="a@x.com", password=PasswordDigest.from_plaintext("secret1")),
        )

        user = await repositories.users.login("a@x.com")

        assert user.group_id == "g1"
        assert user.password.verify("secret1")
        assert not user.password.verify("wrong")
        assert (await repositories.users.get("g1", "a@x.com")).password is None

    @pytest.mark.asyncio
    async def test_update_without_password_keeps_digest(self, repositories):
        await repositories.users.create(
            "g1",
            User(login="a@x.com", password=PasswordDigest.from_plaintext("secret1")),
        )

        await repositories.users.update("g1", User(login="a@x.com", display_name="A"))

        user = await repositories.users.login("a@x.com")
        assert user.display_name == "A"
        assert user.password.verify("secret1")


class TestEvents:
    @pytest.mark.asyncio
    async def test_batch_gets_ids_and_timestamps(self, repositories):
        stored = await repositories.events.create(
            "g1", "d1", Event(), Event(), Event()
        )

        assert len({event.id for event in stored}) == 3
        assert all(event.timestamp is not None for event in stored)
        events = await repositories.events.list("g1", "d1")
        assert sorted(e.id for e in events) == sorted(e.id for e in stored)
        assert await repositories.events.devices("g1") == {"d1"}

    @pytest.mark.asyncio
    async def test_events_stay_with_group_after_device_moves(self, repositories):
        await repositories.devices.create("g1", Device(id="d1"))
        (event,) = await repositories.events.create(
            "g1", "d1", Event(event_type="Arrive")
        )

        await repositories.devices.update("g2", Device(id="d1"))

        assert (await repositories.devices.get("g2", "d1")).id == "d1"
        assert [e.id for e in await repositories.events.list("g1", "d1")] == [event.id]
        assert await repositories.events.list("g2", "d1") == []

    @pytest.mark.asyncio
    async def test_payload_round_trip(self, repositories):
        when = datetime(2024, 5, 1, 12, 30, tzinfo=UTC)
        (created,) = await repositories.events.create(
            "g1",
            "d1",
            Event(
                timestamp=when,
                event_type="Check-in",
                location=Point(longitude=4.35, latitude=50.85),
                accuracy=8.0,
                power_level=77,
                emoji="📍",
                comment="arrived",
                extra={"sensor": {"temperature": 21.5, "unit": "C"}, "armed": True},
            ),
        )

        event = await repositories.events.get("g1", "d1", created.id)

        assert event.timestamp == when
        assert event.location == Point(longitude=4.35, latitude=50.85)
        assert event.power_level == 77
        assert event.emoji == "📍"
        assert event.extra == {"sensor": {"temperature": 21.5, "unit": "C"}, "armed": True}

    @pytest.mark.asyncio
    async def test_malformed_event_id(self, repositories):
        with pytest.raises(InvalidIdentifierError):
            await repositories.events.get("g1", "d1", "not-an-event-id")


class TestPlaces:
    @pytest.mark.asyncio
    async def test_circle_round_trips_and_polygon_is_dropped(self, repositories):
        circle = Circle(center=Point(longitude=4.35, latitude=50.85), radius=150.0)

        created = await repositories.places.create(
            "g1", Place(display_name="Office", circle=circle, polygon=SQUARE)
        )
        place = await repositories.places.get("g1", created.id)

        assert place.circle == circle
        assert place.polygon is None

    @pytest.mark.asyncio
    async def test_place_without_geometry_is_not_persisted(self, repositories):
        with pytest.raises(MissingGeometryError):
            await repositories.places.create("g1", Place(id="p1"))

        assert await repositories.places.list("g1") == []
