"""Tests for the owner-scoped record store."""

import asyncio

from reflection_portal import supabase_client as db
from reflection_portal.tests.conftest import make_curriculum_item


class TestNewestFirst:
    def test_sorts_descending_with_unstamped_last(self):
        rows = [
            {"id": "old", "created_at": "2025-03-01T00:00:00+00:00"},
            {"id": "none"},
            {"id": "new", "created_at": "2025-04-01T00:00:00+00:00"},
            {"id": "blank", "created_at": ""},
        ]
        assert [r["id"] for r in db.newest_first(rows)] == ["new", "old", "none", "blank"]


class TestRecordStore:
    def test_create_stamps_owner_and_time(self, fake_db, owner):
        row = db.create_record(db.CURRICULUM_ITEMS, owner, {"id": "ignored", "activity": "Camp"})
        assert row["owner_id"] == "1234"
        assert row["created_at"]
        assert row["id"] != "ignored"

    def test_list_filters_by_owner(self, fake_db, owner, other_owner):
        fake_db.store[db.CURRICULUM_ITEMS].extend([
            make_curriculum_item(activity="Mine"),
            make_curriculum_item(activity="Theirs", owner_id=other_owner.owner_id),
        ])
        rows = db.list_records(db.CURRICULUM_ITEMS, owner)
        assert [r["activity"] for r in rows] == ["Mine"]

    def test_list_sorts_newest_first(self, fake_db, owner):
        fake_db.store[db.CURRICULUM_ITEMS].extend([
            make_curriculum_item(activity="A", created_at="2025-03-01T00:00:00+00:00"),
            make_curriculum_item(activity="C", created_at=None),
            make_curriculum_item(activity="B", created_at="2025-05-01T00:00:00+00:00"),
        ])
        rows = db.list_records(db.CURRICULUM_ITEMS, owner)
        assert [r["activity"] for r in rows] == ["B", "A", "C"]

    def test_update_only_touches_own_record(self, fake_db, owner, other_owner):
        theirs = make_curriculum_item(owner_id=other_owner.owner_id)
        fake_db.store[db.CURRICULUM_ITEMS].append(theirs)

        assert db.update_record(db.CURRICULUM_ITEMS, owner, theirs["id"], {"activity": "Hijack"}) == {}
        assert theirs["activity"] == "Reading week"

    def test_update_ignores_identity_columns(self, fake_db, owner):
        item = make_curriculum_item()
        fake_db.store[db.CURRICULUM_ITEMS].append(item)

        db.update_record(db.CURRICULUM_ITEMS, owner, item["id"],
                         {"activity": "Renamed", "owner_id": "0000", "created_at": "x"})
        assert item["activity"] == "Renamed"
        assert item["owner_id"] == "1234"
        assert item["created_at"] != "x"
        assert item["updated_at"]

    def test_delete(self, fake_db, owner, other_owner):
        mine = make_curriculum_item()
        theirs = make_curriculum_item(owner_id=other_owner.owner_id)
        fake_db.store[db.CURRICULUM_ITEMS].extend([mine, theirs])

        assert db.delete_record(db.CURRICULUM_ITEMS, owner, theirs["id"]) is False
        assert db.delete_record(db.CURRICULUM_ITEMS, owner, mine["id"]) is True
        assert fake_db.store[db.CURRICULUM_ITEMS] == [theirs]

    def test_get_record(self, fake_db, owner, other_owner):
        theirs = make_curriculum_item(owner_id=other_owner.owner_id)
        fake_db.store[db.CURRICULUM_ITEMS].append(theirs)
        assert db.get_record(db.CURRICULUM_ITEMS, owner, theirs["id"]) is None
        assert db.get_record(db.CURRICULUM_ITEMS, other_owner, theirs["id"])["id"] == theirs["id"]


class TestSubscribe:
    def test_yields_initial_snapshot_then_changes(self, fake_db, owner):
        fake_db.store[db.CURRICULUM_ITEMS].append(make_curriculum_item(activity="First"))

        async def collect():
            stream = db.subscribe(db.CURRICULUM_ITEMS, owner, interval=0.01)
            first = await stream.__anext__()
            db.create_record(db.CURRICULUM_ITEMS, owner, {"activity": "Second"})
            second = await stream.__anext__()
            await stream.aclose()
            return first, second

        loop = asyncio.new_event_loop()
        try:
            first, second = loop.run_until_complete(collect())
        finally:
            loop.close()

        assert [r["activity"] for r in first] == ["First"]
        assert [r["activity"] for r in second] == ["Second", "First"]
