"""Tests for culture-aware number and date parsing."""

from datetime import datetime

import pytest

from climaseries.core.binding import INVARIANT, Culture
from climaseries.core.exceptions import ConfigurationError


class TestCulture:
    def test_invariant_is_default(self):
        assert Culture.from_name(None) is INVARIANT
        assert Culture.from_name("") is INVARIANT
        assert Culture.from_name("invariant") is INVARIANT

    def test_unknown_culture(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Culture.from_name("xx-XX")

        assert exc_info.value.error_code == "CONFIGURATION_ERROR"
        assert "de-DE" in exc_info.value.details["known"]

    @pytest.mark.parametrize(
        ("culture", "raw", "expected"),
        [
            ("invariant", "1,234.5", 1234.5),
            ("en-US", "-12.25", -12.25),
            ("de-DE", "1.234,5", 1234.5),
            ("fr-FR", "1 234,5", 1234.5),
        ],
    )
    def test_parse_float(self, culture, raw, expected):
        assert Culture.from_name(culture).parse_float(raw) == expected

    def test_parse_float_rejects_garbage(self):
        with pytest.raises(ValueError):
            INVARIANT.parse_float("twelve")

    def test_day_first_cultures(self):
        assert INVARIANT.parse_datetime("03/04/2020") == datetime(2020, 3, 4)
        assert Culture.from_name("en-GB").parse_datetime("03/04/2020") == datetime(2020, 4, 3)
        assert Culture.from_name("de-DE").parse_datetime("03.04.2020") == datetime(2020, 4, 3)

    def test_iso_dates_parse_in_every_culture(self):
        for name in ("invariant", "en-US", "en-GB", "de-DE", "fr-FR"):
            assert Culture.from_name(name).parse_datetime("2020-04-03") == datetime(2020, 4, 3)

    def test_parse_datetime_rejects_garbage(self):
        with pytest.raises(ValueError):
            INVARIANT.parse_datetime("not a date")

    @pytest.mark.parametrize("raw", ["1 234,5", "1\u00a0234,5", "1\u202f234,5"])
    def test_french_group_separators(self, raw):
        assert Culture.from_name("fr-FR").parse_float(raw) == 1234.5

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("2020-01-01T01:00:00+01:00", datetime(2020, 1, 1)),
            ("2020-01-01T00:00:00Z", datetime(2020, 1, 1)),
            ("01/01/2020 03:30 -02:00", datetime(2020, 1, 1, 5, 30)),
        ],
    )
    def test_offsets_become_naive_utc(self, raw, expected):
        parsed = INVARIANT.parse_datetime(raw)

        assert parsed == expected
        assert parsed.tzinfo is None
