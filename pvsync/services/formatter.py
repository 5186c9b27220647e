"""
Batch Formatter - builds the PVOutput addbatchstatus payload

Each sample becomes one record:

    YYYYMMDD,HH:MM,<energy>,<power>,<v3>,<v4>,<temperature>,<voltage>;

Energy, consumption energy (v3) and consumption power (v4) are sent as -1
so PVOutput ignores them.
"""

import math
import struct
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from pvsync.models.sample import Sample

# c1=2: only generation values are lifetime totals
PREAMBLE = "c1=2&data="

PLACEHOLDER = "-1"
RECORD_SEPARATOR = ","
RECORD_TERMINATOR = ";"

DEFAULT_TZ = "Europe/Amsterdam"


def _to_float32(value: float) -> bytes:
    """Pack value as a float32; out-of-range values saturate to infinity."""
    try:
        return struct.pack("<f", value)
    except OverflowError:
        return struct.pack("<f", math.copysign(math.inf, value))


def format_float32(value: float) -> str:
    """
    Render a reading stored as float32 in its shortest round-trip form.

    The logger writes float32 readings, so 21.3 arrives as
    21.299999237060547 and must be sent as "21.3". No exponent is used,
    integral values have no fractional part (230.0 -> 230), and
    non-finite values render as NaN, inf and -inf.
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"

    packed = _to_float32(value)
    narrowed = struct.unpack("<f", packed)[0]
    if math.isinf(narrowed):
        return "inf" if narrowed > 0 else "-inf"

    # 9 significant digits always round-trip a float32
    for digits in range(1, 10):
        text = f"{narrowed:.{digits}g}"
        if _to_float32(float(text)) == packed:
            break
    return format(Decimal(text), "f")


def format_number(value: int | float) -> str:
    """Render a reading: integers as-is, floats as float32."""
    if isinstance(value, int):
        return str(value)
    return format_float32(value)


def format_record(sample: Sample, tz: ZoneInfo) -> str:
    """Format one sample as a terminated record."""
    local = datetime.fromtimestamp(sample.timestamp, tz=tz)
    fields = [
        local.strftime("%Y%m%d"),
        local.strftime("%H:%M"),
        PLACEHOLDER,  # energy generation
        format_number(sample.power_generation),
        PLACEHOLDER,
        PLACEHOLDER,
        format_number(sample.temperature),
        format_number(sample.voltage),
    ]
    return RECORD_SEPARATOR.join(fields) + RECORD_TERMINATOR


def format_records(samples: Sequence[Sample], tz: str | ZoneInfo = DEFAULT_TZ) -> str:
    """Concatenate the records of samples, keeping their order."""
    zone = tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz)
    return "".join(format_record(sample, zone) for sample in samples)


def format_batch(samples: Sequence[Sample], tz: str | ZoneInfo = DEFAULT_TZ) -> str:
    """
    Build the full request payload for a batch.

    Args:
        samples: Samples of one tracker in ascending id order
        tz: Timezone the date/time fields are expressed in

    Returns:
        "c1=2&data=" followed by one record per sample
    """
    if not samples:
        raise ValueError("Cannot format an empty batch")
    return PREAMBLE + format_records(samples, tz)
