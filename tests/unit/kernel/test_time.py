from __future__ import annotations

from datetime import datetime, timezone

import pytest

from hexpack.kernel.time import epoch_seconds, isoformat_z, parse_iso8601


@pytest.mark.unit
def test_isoformat_z_uses_z_suffix():
    dt = datetime(2020, 5, 12, 14, 23, 0, tzinfo=timezone.utc)
    assert isoformat_z(dt) == "2020-05-12T14:23:00Z"


@pytest.mark.unit
def test_isoformat_z_treats_naive_as_utc():
    assert isoformat_z(datetime(2020, 5, 12, 14, 23, 0)) == "2020-05-12T14:23:00Z"


@pytest.mark.unit
def test_parse_iso8601_round_trips_z_suffix():
    dt = parse_iso8601("2020-05-12T14:23:00Z")
    assert dt == datetime(2020, 5, 12, 14, 23, 0, tzinfo=timezone.utc)


@pytest.mark.unit
def test_parse_iso8601_rejects_naive_values():
    with pytest.raises(ValueError):
        parse_iso8601("2020-05-12T14:23:00")


@pytest.mark.unit
def test_epoch_seconds_is_whole_seconds():
    dt = datetime(2020, 5, 12, 14, 23, 0, 500_000, tzinfo=timezone.utc)
    assert epoch_seconds(dt) == 1589293380
