"""
Tests for the PVOutput batch formatter.
"""

import math
import struct
from datetime import datetime, timezone

import pytest

from pvsync.models.sample import Sample
from pvsync.services.formatter import format_batch, format_number, format_records


def make_sample(id, when, power=1500, temperature=21.5, voltage=230.0):
    """Build a detached sample for a UTC datetime."""
    return Sample(
        id=id,
        device_id=2,
        tracker_id=1,
        timestamp=int(when.timestamp()),
        energy_generation=123456,
        power_generation=power,
        temperature=temperature,
        voltage=voltage,
        uploaded=False,
    )


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def f32(value):
    """Value as read back from a float32 column."""
    return struct.unpack("f", struct.pack("f", value))[0]


class TestFormatNumber:
    """Tests for reading rendering."""

    def test_integer(self):
        assert format_number(1500) == "1500"

    def test_integral_float_has_no_fraction(self):
        assert format_number(230.0) == "230"

    def test_fractional_float(self):
        assert format_number(21.5) == "21.5"
        assert format_number(231.7) == "231.7"

    def test_negative_float(self):
        assert format_number(-3.25) == "-3.25"

    @pytest.mark.parametrize("reading, expected", [
        (21.3, "21.3"),
        (231.7, "231.7"),
        (0.1, "0.1"),
        (-12.35, "-12.35"),
        (3.3333333, "3.3333333"),
    ])
    def test_float32_reading_uses_shortest_form(self, reading, expected):
        """Test that readings stored as float32 are sent with float32 precision."""
        assert repr(f32(reading)) != expected
        assert format_number(f32(reading)) == expected

    def test_no_exponent(self):
        """Test that very small and large readings are written out in full."""
        assert format_number(f32(1e-7)) == "0.0000001"
        assert format_number(f32(1e20)) == "100000000000000000000"

    def test_negative_zero(self):
        assert format_number(-0.0) == "-0"

    def test_non_finite_values(self):
        """Test NaN and infinity rendering."""
        assert format_number(math.nan) == "NaN"
        assert format_number(math.inf) == "inf"
        assert format_number(-math.inf) == "-inf"

    def test_out_of_float32_range_saturates(self):
        assert format_number(1e300) == "inf"
        assert format_number(-1e300) == "-inf"


class TestFormatRecords:
    """Tests for record layout."""

    def test_single_record_layout(self):
        """Test the full field layout of one record (summer time, UTC+2)."""
        sample = make_sample(1, utc(2024, 6, 1, 10, 0), power=1500, temperature=21.5, voltage=230.0)

        assert format_records([sample]) == "20240601,12:00,-1,1500,-1,-1,21.5,230;"

    def test_energy_generation_suppressed(self):
        """Test that energy generation is never sent."""
        sample = make_sample(1, utc(2024, 6, 1, 10, 0))

        fields = format_records([sample]).rstrip(";").split(",")

        assert fields[2] == "-1"
        assert "123456" not in fields

    def test_records_keep_input_order(self):
        """Test that record order follows the batch order."""
        samples = [
            make_sample(1, utc(2024, 6, 1, 10, 0), power=100),
            make_sample(2, utc(2024, 6, 1, 10, 5), power=200),
            make_sample(3, utc(2024, 6, 1, 10, 10), power=300),
        ]

        records = format_records(samples).split(";")

        assert records[-1] == ""
        assert [r.split(",")[3] for r in records[:-1]] == ["100", "200", "300"]
        assert [r.split(",")[1] for r in records[:-1]] == ["12:00", "12:05", "12:10"]

    def test_winter_time_offset(self):
        """Test that winter samples use UTC+1."""
        sample = make_sample(1, utc(2024, 1, 15, 23, 30))

        assert format_records([sample]).startswith("20240116,00:30,")

    def test_before_dst_switch(self):
        """Test 2024-03-31T00:30Z, still CET (switch happens at 01:00 UTC)."""
        sample = make_sample(1, utc(2024, 3, 31, 0, 30))

        assert format_records([sample]).startswith("20240331,01:30,")

    def test_after_dst_switch(self):
        """Test 2024-03-31T01:30Z, already CEST."""
        sample = make_sample(1, utc(2024, 3, 31, 1, 30))

        assert format_records([sample]).startswith("20240331,03:30,")

    def test_custom_timezone(self):
        """Test that the reference timezone can be changed."""
        sample = make_sample(1, utc(2024, 6, 1, 10, 0))

        assert format_records([sample], tz="UTC").startswith("20240601,10:00,")


class TestFormatBatch:
    """Tests for the full payload."""

    def test_payload_starts_with_preamble(self):
        """Test the c1=2&data= prefix followed by the records."""
        samples = [
            make_sample(1, utc(2024, 6, 1, 10, 0), power=1500),
            make_sample(2, utc(2024, 6, 1, 10, 5), power=1520, temperature=22.0, voltage=231.4),
        ]

        payload = format_batch(samples)

        assert payload == (
            "c1=2&data="
            "20240601,12:00,-1,1500,-1,-1,21.5,230;"
            "20240601,12:05,-1,1520,-1,-1,22,231.4;"
        )

    def test_float32_readings_in_payload(self):
        """Test that float32 temperature and voltage match the logger's precision."""
        sample = make_sample(1, utc(2024, 6, 1, 10, 0), power=1500, temperature=f32(21.3), voltage=f32(231.7))

        assert format_batch([sample]) == "c1=2&data=20240601,12:00,-1,1500,-1,-1,21.3,231.7;"

    def test_empty_batch_rejected(self):
        """Test that an empty batch never produces a payload."""
        with pytest.raises(ValueError):
            format_batch([])
