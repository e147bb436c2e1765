from cobolfield.copybook.parser import parse_copybook


def test_parse_copybook_extracts_fields_and_occurs():
    text = """
     01  CUSTOMER-REC.
         05  NAME        PIC X(10).
         05  BALANCE     PIC 9(5)   USAGE COMP-3.
         05  BRANCH      PIC X(4)   OCCURS 2.
    """
    fields = parse_copybook(text)
    assert len(fields) == 3
    assert fields[0].name == "NAME"
    assert fields[1].usage == "COMP-3"
    assert fields[2].occurs == 2
    assert fields[1].storage_length == 3


def test_parse_copybook_usage_aliases_and_redefines():
    text = """
      * account layout
     01  ACCT-REC.
         05  ACCT-ID     PIC 9(9) BINARY.
         05  ACCT-ALT    REDEFINES ACCT-ID PIC X(4).
         05  RATE        PIC SV9(4) COMPUTATIONAL-3.
         05  LIMIT-AMT   PIC S9(7)V99 PACKED-DECIMAL.
         05  STATUS-CD   PIC X.
    """
    fields = parse_copybook(text)
    assert [field.name for field in fields] == ["ACCT-ID", "RATE", "LIMIT-AMT", "STATUS-CD"]
    assert fields[0].usage == "BINARY"
    assert fields[1].usage == "COMP-3"
    assert fields[2].usage == "COMP-3"
    assert fields[3].usage is None
    assert fields[1].geometry.scale == 4
    assert [field.storage_length for field in fields] == [4, 3, 5, 1]


def test_parse_copybook_skips_redefined_groups():
    text = """
     01  REC.
         05  A           PIC X(10).
         05  B           REDEFINES A.
             10  B1      PIC X(5).
             10  B2      PIC X(5).
         05  C           PIC 9(3).
    """
    fields = parse_copybook(text)
    assert [field.name for field in fields] == ["A", "C"]


def test_parse_copybook_repeats_group_occurs():
    text = """
     01  ORDER-REC.
         05  ORDER-ID    PIC 9(3).
         05  LINE-ITEM   OCCURS 2 TIMES.
             10  SKU     PIC X(4).
             10  QTY     PIC 9(2).
                 88  QTY-ZERO VALUE 0.
         05  TOTAL       PIC 9(5).
    """
    fields = parse_copybook(text)
    assert [field.name for field in fields] == [
        "ORDER-ID",
        "SKU_0",
        "QTY_0",
        "SKU_1",
        "QTY_1",
        "TOTAL",
    ]
