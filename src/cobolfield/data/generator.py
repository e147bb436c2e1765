"""Synthetic field values and records for fixtures, fuzzing and benchmarks.

Values are drawn from a seeded ``random.Random`` so runs are reproducible:
- numerics cover the full digit budget of the geometry, both signs when signed
- text fields get short upper-case tokens padded by the record encoder
"""

from __future__ import annotations

import random
import string
from collections.abc import Sequence

from cobolfield.copybook.geometry import FieldGeometry, FieldKind
from cobolfield.copybook.parser import CopybookField
from cobolfield.copybook.record import _slots, encode_record
from cobolfield.numeric.value import DecimalValue
from cobolfield.numeric.zoned import DEFAULT_CODEPAGE


def random_decimal(rng: random.Random, geometry: FieldGeometry) -> DecimalValue:
    magnitude = rng.randint(0, 10**geometry.total_digits - 1)
    negative = geometry.signed and rng.random() < 0.5
    return DecimalValue(magnitude, negative, geometry.scale)


def generate_values(
    geometry: FieldGeometry, count: int = 100, *, seed: int = 1234
) -> list[DecimalValue]:
    rng = random.Random(seed)
    return [random_decimal(rng, geometry) for _ in range(count)]


def generate_records(
    fields: Sequence[CopybookField],
    count: int = 8,
    *,
    seed: int = 1234,
    codepage: str = DEFAULT_CODEPAGE,
) -> tuple[bytes, list[dict[str, object]]]:
    """Build ``count`` fixed-length records plus the values that went into them."""
    rng = random.Random(seed)
    records: list[bytes] = []
    metadata: list[dict[str, object]] = []
    for _ in range(count):
        values: dict[str, object] = {}
        for name, field in _slots(fields):
            geometry = field.geometry
            if geometry.kind is FieldKind.ALPHANUMERIC:
                size = rng.randint(0, geometry.length)
                values[name] = "".join(rng.choice(string.ascii_uppercase) for _ in range(size))
            else:
                values[name] = random_decimal(rng, geometry)
        records.append(encode_record(fields, values, codepage))
        metadata.append(values)
    return b"".join(records), metadata
