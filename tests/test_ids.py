import re
from datetime import datetime

import pytest

from ids import generate_registration_id, to_base36, utc_now_iso

pytestmark = pytest.mark.unit

ID_PATTERN = re.compile(r"EVT-[0-9A-Z]+-[0-9A-Z]{5}")


def test_generated_ids_match_pattern():
    for _ in range(200):
        registration_id = generate_registration_id()
        assert ID_PATTERN.fullmatch(registration_id)
        assert registration_id == registration_id.upper()


def test_timestamp_part_is_base36_milliseconds():
    registration_id = generate_registration_id(now_ms=1_700_000_000_000)
    assert registration_id.split("-")[1] == to_base36(1_700_000_000_000)
    assert int(registration_id.split("-")[1], 36) == 1_700_000_000_000


def test_ids_differ_within_the_same_millisecond():
    ids = {generate_registration_id(now_ms=42) for _ in range(50)}
    assert len(ids) > 1


@pytest.mark.parametrize("number,expected", [(0, "0"), (35, "Z"), (36, "10"), (1295, "ZZ")])
def test_to_base36(number, expected):
    assert to_base36(number) == expected


def test_to_base36_rejects_negative():
    with pytest.raises(ValueError):
        to_base36(-1)


def test_utc_now_iso_format():
    stamp = utc_now_iso()
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", stamp)
    datetime.fromisoformat(stamp.replace("Z", "+00:00"))
