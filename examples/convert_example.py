#!/usr/bin/env python3
"""Converter examples -- 3 cases showing direct conversion, the processor
with several sinks, and vibration metric exclusion.

Directly runnable (no external services required).

Usage::

    python examples/convert_example.py           # Case 1 (default)
    python examples/convert_example.py --case 2   # Processor fan-out
    python examples/convert_example.py --case 3   # Vibration exclusion
"""

from __future__ import annotations

import argparse

SAMPLE_PAYLOADS = [
    {
        "SensorNodeId": "0x0000A1B2",
        "Type": "scalar",
        "Timestamp": 1700000000,
        "Temperature": 21.5,
        "Humidity": 41,
        "BatteryAlert": True,
        "Vibration": {
            "RMS": {"X": 12, "Y": 9, "Z": 30},
            "A-P2P": {"X": 150},
            "Kurtosis": {"Z": 310},
        },
    },
    {"SensorNodeId": "0x0000A1B2", "Type": "burst", "Timestamp": 1700000060},
    {"Type": "scalar", "Timestamp": 1700000120, "Humidity": 40},
]


# ---------------------------------------------------------------------------
# Case 1: Direct conversion into a console sink
# ---------------------------------------------------------------------------


def run_case_1() -> None:
    """Convert a single payload and print every measurement."""
    from treon_converter import PayloadConverter
    from treon_converter.sinks import ConsoleSink

    print("=== Case 1: Direct conversion ===\n")

    with ConsoleSink() as sink:
        PayloadConverter().convert(SAMPLE_PAYLOADS[0], sink)


# ---------------------------------------------------------------------------
# Case 2: Processor with a console sink and a callback
# ---------------------------------------------------------------------------


def run_case_2() -> None:
    """Run all sample payloads; the burst is skipped, the id-less one logs an error."""
    from treon_converter import PayloadProcessor
    from treon_converter.sinks import ConsoleSink

    print("=== Case 2: Processor fan-out ===\n")

    per_series: dict[str, int] = {}

    processor = PayloadProcessor()
    processor.add_sink(ConsoleSink(fmt="json"))
    processor.add_sink(lambda m: per_series.update({m.ingestion_id: per_series.get(m.ingestion_id, 0) + 1}))
    stats = processor.run(SAMPLE_PAYLOADS)

    print(f"\n{stats.payloads} payloads, {stats.measurements} measurements, {stats.errors} errors")
    for ingestion_id, count in per_series.items():
        print(f"  {ingestion_id:<36} x{count}")


# ---------------------------------------------------------------------------
# Case 3: Skipping vibration metrics
# ---------------------------------------------------------------------------


def run_case_3() -> None:
    """Exclude the raw ``Kurtosis`` metric and collect the rest in memory."""
    from treon_converter import PayloadConverter

    print("=== Case 3: Vibration exclusion ===\n")

    converter = PayloadConverter(vibration_exclude=["Kurtosis"])
    for m in converter.measurements(SAMPLE_PAYLOADS[0]):
        print(f"  {m.ingestion_id:<36} {m.value:>10.3f}")


# ---------------------------------------------------------------------------

_CASES = {1: run_case_1, 2: run_case_2, 3: run_case_3}

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Treon converter examples")
    parser.add_argument("--case", type=int, default=1, choices=sorted(_CASES))
    _CASES[parser.parse_args().case]()
