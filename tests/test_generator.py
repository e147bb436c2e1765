from cobolfield.copybook.geometry import FieldGeometry
from cobolfield.copybook.parser import parse_copybook
from cobolfield.copybook.record import decode_record, iter_fixed_records, record_length
from cobolfield.data.generator import generate_records, generate_values

LAYOUT = """
 01  TXN-REC.
     05  TXN-ID    PIC 9(9) COMP.
     05  MEMO      PIC X(8).
     05  AMOUNT    PIC S9(7)V99 COMP-3.
     05  RATE      PIC S9V9(4).
     05  TAG       PIC X(3) OCCURS 2.
"""


def test_generate_values_respects_geometry():
    geometry = FieldGeometry.from_picture("9(3)V9")
    values = generate_values(geometry, count=50, seed=5)
    assert len(values) == 50
    assert all(not value.negative and value.scale == 1 for value in values)
    assert all(value.digit_count <= 4 for value in values)
    assert values == generate_values(geometry, count=50, seed=5)


def test_generate_records_decode_back_to_metadata():
    fields = parse_copybook(LAYOUT)
    data, meta = generate_records(fields, count=6, seed=3)
    length = record_length(fields)
    assert len(data) == 6 * length
    assert len(meta) == 6

    bodies = list(iter_fixed_records(data, length))
    for body, values in zip(bodies, meta, strict=True):
        assert decode_record(fields, body) == values

    again, _ = generate_records(fields, count=6, seed=3)
    assert again == data
