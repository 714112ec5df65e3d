"""Tests for backup records and most-recent-first retention."""

import pytest

from decision_log.core.backup_rotation import (
    Backup, decode_backups, find_backup, push_backup,
)


def _backup(n: int) -> Backup:
    return Backup(id=f"b{n}", timestamp=f"2024-01-0{n}T00:00:00.000Z", reason="test")


def test_push_keeps_newest_first():
    backups = []
    for n in range(1, 4):
        backups = push_backup(backups, _backup(n))
    assert [b.id for b in backups] == ["b3", "b2", "b1"]


def test_sixth_backup_evicts_oldest():
    backups = []
    for n in range(1, 7):
        backups = push_backup(backups, _backup(n), retention=5)
    assert [b.id for b in backups] == ["b6", "b5", "b4", "b3", "b2"]


def test_find_backup():
    backups = [_backup(1), _backup(2)]
    assert find_backup(backups, "b2").id == "b2"
    assert find_backup(backups, "nope") is None


def test_round_trip_through_dicts():
    backup = Backup(id="x", timestamp="t", reason="r", decisions=[{"id": "d1"}])
    assert decode_backups([backup.to_dict()]) == [backup]
    assert backup.summary() == {"id": "x", "timestamp": "t", "reason": "r", "count": 1}


def test_decode_none_is_empty():
    assert decode_backups(None) == []


@pytest.mark.parametrize("raw", [{"id": "x"}, [{"timestamp": "t"}], "garbage"])
def test_decode_corrupt_raises(raw):
    with pytest.raises((KeyError, TypeError, ValueError)):
        decode_backups(raw)
