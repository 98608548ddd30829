"""Tests for the curriculum reflection service."""

import pytest

from reflection_portal.errors import RecordValidationError
from reflection_portal.matrix.scale import ScaleConfig
from reflection_portal.tests.conftest import make_curriculum_item


class TestCleanItem:
    def test_requires_activity(self):
        from reflection_portal.services.curriculum import clean_item

        with pytest.raises(RecordValidationError):
            clean_item({"activity": "   ", "importance": "3"})

    def test_coerces_scores(self):
        from reflection_portal.services.curriculum import clean_item

        item = clean_item({"activity": " Camp ", "importance": "3", "satisfaction": "-1.5"})
        assert item["activity"] == "Camp"
        assert item["importance"] == 3.0
        assert item["satisfaction"] == -1.5

    def test_missing_scores_default_to_zero(self):
        from reflection_portal.services.curriculum import clean_item

        item = clean_item({"activity": "Camp"})
        assert item["importance"] == 0
        assert item["satisfaction"] == 0

    def test_non_numeric_score(self):
        from reflection_portal.services.curriculum import clean_item

        with pytest.raises(RecordValidationError):
            clean_item({"activity": "Camp", "importance": "high"})

    @pytest.mark.parametrize("bad", ["nan", "inf", "-inf", "NaN"])
    def test_non_finite_score(self, bad):
        from reflection_portal.services.curriculum import clean_item

        with pytest.raises(RecordValidationError):
            clean_item({"activity": "Camp", "importance": "1", "satisfaction": bad})


class TestCrud:
    def test_create_and_list(self, fake_db, owner):
        from reflection_portal.services.curriculum import create_item, get_items

        create_item(owner, {"activity": "Camp", "importance": "2", "satisfaction": "1"})
        [item] = get_items(owner)
        assert item["activity"] == "Camp"
        assert item["owner_id"] == owner.owner_id

    def test_update(self, fake_db, owner):
        from reflection_portal.services.curriculum import get_item, update_item

        item = make_curriculum_item()
        fake_db.store["curriculum_items"].append(item)

        update_item(owner, item["id"], {"activity": "Reading month", "importance": "5", "satisfaction": "5"})
        saved = get_item(owner, item["id"])
        assert saved["activity"] == "Reading month"
        assert saved["importance"] == 5.0

    def test_delete(self, fake_db, owner):
        from reflection_portal.services.curriculum import delete_item, get_items

        item = make_curriculum_item()
        fake_db.store["curriculum_items"].append(item)
        assert delete_item(owner, item["id"]) is True
        assert get_items(owner) == []


class TestQuadrants:
    def test_with_quadrants_and_summary(self):
        from reflection_portal.services.curriculum import quadrant_summary, with_quadrants

        items = [
            make_curriculum_item(activity="A", importance=5, satisfaction=5),
            make_curriculum_item(activity="B", importance=-5, satisfaction=5),
            make_curriculum_item(activity="C", importance=5, satisfaction=-5),
            make_curriculum_item(activity="D", importance=-5, satisfaction=-5),
            make_curriculum_item(activity="E", importance=0, satisfaction=0),
        ]
        rows = with_quadrants(items, ScaleConfig())
        assert [r["quadrant"]["code"] for r in rows] == ["Q1", "Q2", "Q3", "Q4", "Q1"]
        assert quadrant_summary(items, ScaleConfig()) == {"Q1": 2, "Q2": 1, "Q3": 1, "Q4": 1}

    def test_classification_follows_scale(self):
        from reflection_portal.services.curriculum import with_quadrants

        items = [make_curriculum_item(importance=2, satisfaction=2)]
        assert with_quadrants(items, ScaleConfig())[0]["quadrant"]["code"] == "Q1"
        assert with_quadrants(items, ScaleConfig(0, 10, 1))[0]["quadrant"]["code"] == "Q4"

    def test_to_points(self):
        from reflection_portal.services.curriculum import to_points

        [point] = to_points([make_curriculum_item(id="x", activity="Camp", importance="2")])
        assert point.id == "x"
        assert point.importance == 2.0
