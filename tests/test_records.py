"""Tests for record types and timestamps."""

from datetime import datetime, timedelta, timezone

from udstore.hashing import md5_hex, provide_key
from udstore.records import (
    BackupData,
    Clock,
    DataContainer,
    format_timestamp,
    is_data_container,
    parse_timestamp,
)


class TestIsDataContainer:
    def test_valid_record(self):
        assert is_data_container({"key": "k", "storedAt": "t", "data": 1})

    def test_null_data_counts_as_present(self):
        assert is_data_container({"key": "k", "storedAt": "t", "data": None})

    def test_missing_data(self):
        assert not is_data_container({"key": "k", "storedAt": "t"})

    def test_non_string_key(self):
        assert not is_data_container({"key": 1, "storedAt": "t", "data": 1})

    def test_non_string_stored_at(self):
        assert not is_data_container({"key": "k", "storedAt": 0, "data": 1})

    def test_not_a_dict(self):
        assert not is_data_container(["k", "t", 1])
        assert not is_data_container("record")
        assert not is_data_container(None)


class TestWireForm:
    def test_data_container_dict(self):
        record = DataContainer(key="Taro", stored_at="2024-01-01T00:00:00.000Z", data={"age": 20})
        raw = record.to_dict()
        assert raw == {"key": "Taro", "storedAt": "2024-01-01T00:00:00.000Z", "data": {"age": 20}}
        assert DataContainer.from_dict(raw) == record

    def test_backup_data_dict(self):
        snapshot = BackupData(key="abc", stored_at="2024-01-01T00:00:00.000Z", json="[]")
        assert snapshot.to_dict()["json"] == "[]"
        assert BackupData.from_dict(snapshot.to_dict()) == snapshot


class TestTimestamps:
    def test_format_uses_z_and_milliseconds(self):
        dt = datetime(2024, 5, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)
        assert format_timestamp(dt) == "2024-05-01T10:00:00.123Z"

    def test_format_converts_to_utc(self):
        tz = timezone(timedelta(hours=9))
        dt = datetime(2024, 5, 1, 19, 0, 0, tzinfo=tz)
        assert format_timestamp(dt) == "2024-05-01T10:00:00.000Z"

    def test_parse_z_suffix(self):
        dt = parse_timestamp("2024-05-01T10:00:00.123Z")
        assert dt == datetime(2024, 5, 1, 10, 0, 0, 123000, tzinfo=timezone.utc)

    def test_parse_naive_is_utc(self):
        dt = parse_timestamp("2024-05-01T10:00:00")
        assert dt.tzinfo == timezone.utc


class TestClock:
    def test_strictly_increasing(self):
        clock = Clock()
        stamps = [clock.now() for _ in range(50)]
        assert all(a < b for a, b in zip(stamps, stamps[1:]))

    def test_millisecond_precision(self):
        clock = Clock()
        assert clock.now().microsecond % 1000 == 0

    def test_timestamp_round_trips(self):
        clock = Clock()
        stamp = clock.timestamp()
        assert stamp.endswith("Z")
        assert format_timestamp(parse_timestamp(stamp)) == stamp


class TestHashing:
    def test_md5_hex(self):
        assert md5_hex("") == "d41d8cd98f00b204e9800998ecf8427e"
        assert len(md5_hex("[]")) == 32

    def test_provide_key_ignores_dict_order(self):
        assert provide_key({"a": 1, "b": 2}) == provide_key({"b": 2, "a": 1})

    def test_provide_key_distinguishes_values(self):
        assert provide_key({"a": 1}) != provide_key({"a": 2})
