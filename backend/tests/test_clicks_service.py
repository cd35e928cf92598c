"""Tests for the click store queries."""

from datetime import datetime

from tracker.models import Click
from tracker.services.clicks import (
    find_todays_click,
    get_advanced_stats,
    get_day_bounds,
    increment_click_count,
    insert_click,
    list_recent_clicks,
)

from conftest import at


class TestDayBounds:
    """get_day_bounds"""

    def test_bounds(self):
        start, end = get_day_bounds(datetime(2026, 10, 19, 23, 59, 59))
        assert start == datetime(2026, 10, 19)
        assert end == datetime(2026, 10, 20)


class TestInsertAndFind:
    """insert_click / find_todays_click / increment_click_count"""

    def test_insert_defaults(self, db):
        click_id = insert_click(db, "203.0.113.1", "UA", "direct", "Chile", now=at(19, 8))
        db.commit()

        click = db.get(Click, click_id)
        assert click.click_count == 1
        assert click.country == "Chile"
        assert click.timestamp == at(19, 8)

    def test_ids_increase(self, db):
        first = insert_click(db, "203.0.113.1", "UA", "direct", "Chile")
        second = insert_click(db, "203.0.113.2", "UA", "direct", "Chile")
        assert second > first

    def test_find_same_day(self, db):
        click_id = insert_click(db, "203.0.113.1", "UA", "direct", "Chile", now=at(19, 0, 0, 1))
        db.commit()

        found = find_todays_click(db, "203.0.113.1", now=at(19, 23, 59, 59))
        assert found is not None
        assert found.id == click_id

    def test_find_other_day(self, db):
        insert_click(db, "203.0.113.1", "UA", "direct", "Chile", now=at(18, 23, 59, 59))
        db.commit()

        assert find_todays_click(db, "203.0.113.1", now=at(19, 0, 0, 0)) is None

    def test_find_other_ip(self, db):
        insert_click(db, "203.0.113.1", "UA", "direct", "Chile", now=at(19))
        db.commit()

        assert find_todays_click(db, "203.0.113.2", now=at(19)) is None

    def test_increment_keeps_timestamp(self, db):
        click_id = insert_click(db, "203.0.113.1", "UA", "direct", "Chile", now=at(19, 9))
        db.commit()

        increment_click_count(db, click_id)
        increment_click_count(db, click_id)
        db.commit()
        db.expire_all()

        click = db.get(Click, click_id)
        assert click.click_count == 3
        assert click.timestamp == at(19, 9)


class TestListRecent:
    """list_recent_clicks"""

    def test_newest_first(self, db):
        insert_click(db, "203.0.113.1", "UA", "direct", "Chile", now=at(17))
        insert_click(db, "203.0.113.2", "UA", "direct", "Peru", now=at(19))
        insert_click(db, "203.0.113.3", "UA", "direct", "Chile", now=at(18))
        db.commit()

        ips = [c.ip_address for c in list_recent_clicks(db)]
        assert ips == ["203.0.113.2", "203.0.113.3", "203.0.113.1"]

    def test_limit(self, db):
        for i in range(5):
            insert_click(db, f"203.0.113.{i}", "UA", "direct", "Chile", now=at(19, i))
        db.commit()

        recent = list_recent_clicks(db, limit=2)
        assert [c.ip_address for c in recent] == ["203.0.113.4", "203.0.113.3"]

    def test_same_timestamp_ordered_by_id(self, db):
        first = insert_click(db, "203.0.113.1", "UA", "direct", "Chile", now=at(19))
        second = insert_click(db, "203.0.113.2", "UA", "direct", "Chile", now=at(19))
        db.commit()

        assert [c.id for c in list_recent_clicks(db)] == [second, first]


class TestAdvancedStats:
    """get_advanced_stats"""

    def test_empty(self, db):
        assert get_advanced_stats(db) == {
            "total_clicks": 0,
            "unique_ips": 0,
            "repeated_clicks": 0,
            "countries": [],
            "unique_countries": 0,
        }

    def test_aggregates(self, db):
        a = insert_click(db, "203.0.113.1", "UA", "direct", "Chile", now=at(18))
        insert_click(db, "203.0.113.1", "UA", "direct", "Chile", now=at(19))
        b = insert_click(db, "203.0.113.2", "UA", "direct", "Peru", now=at(19))
        insert_click(db, "127.0.0.1", "UA", "direct", "local", now=at(19))
        increment_click_count(db, a)
        increment_click_count(db, b)
        increment_click_count(db, b)
        db.commit()

        stats = get_advanced_stats(db)
        assert stats["total_clicks"] == 4
        assert stats["unique_ips"] == 3
        assert stats["repeated_clicks"] == 3
        assert stats["countries"] == ["Chile", "Peru", "local"]
        assert stats["unique_countries"] == 3
