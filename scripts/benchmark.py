"""Micro-benchmarks for the record codecs on synthetic data."""

from __future__ import annotations

import time

from cobolfield.copybook.parser import parse_copybook
from cobolfield.copybook.record import decode_record, iter_fixed_records, record_length
from cobolfield.data.generator import generate_records

LAYOUT = """
 01  TXN-REC.
     05  TXN-ID     PIC 9(9) COMP.
     05  ACCOUNT    PIC X(12).
     05  AMOUNT     PIC S9(9)V99 COMP-3.
     05  BALANCE    PIC S9(11)V99.
     05  RATE       PIC SV9(5) COMP-3.
"""


def benchmark_decode(records: int = 1000, runs: int = 3) -> dict[str, float]:
    fields = parse_copybook(LAYOUT)
    data, _ = generate_records(fields, count=records)
    length = record_length(fields)
    total_bytes = len(data)
    best = None
    for _ in range(runs):
        start = time.perf_counter()
        for body in iter_fixed_records(data, length):
            decode_record(fields, body)
        elapsed = time.perf_counter() - start
        best = elapsed if best is None or elapsed < best else best
    mbps = (total_bytes / 1_000_000) / best if best else 0.0
    return {"records": records, "bytes": total_bytes, "best_seconds": best or 0.0, "mbps": mbps}


if __name__ == "__main__":
    result = benchmark_decode()
    print(result)
