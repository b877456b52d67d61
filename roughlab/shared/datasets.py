#!/usr/bin/env python3
"""Utility helpers for loading tabular datasets from the packaged data directory."""

from __future__ import annotations

import csv
from importlib.resources import files
from typing import List, Sequence, Tuple

MISSING_TOKENS = ("", "?")


def parse_cell(text: str) -> object:
    """Parse one CSV cell: float when possible, ``None`` when missing, else the stripped string."""
    text = text.strip()
    if text in MISSING_TOKENS:
        return None
    try:
        return float(text)
    except ValueError:
        return text


def load_csv_dataset(name: str) -> Tuple[List[List[object]], Sequence[str]]:
    """Load a CSV dataset bundled under ``roughlab.data``.

    Returns a tuple ``(rows, column_names)``; each row is a list of parsed
    cells (see :func:`parse_cell`), ready for
    :func:`roughlab.shared.dataset.build`.
    """
    resource = files("roughlab.data").joinpath(name)
    if not resource.is_file():
        raise FileNotFoundError(f"Dataset {name!r} not found in roughlab.data.")

    with resource.open("r", encoding="utf-8", newline="") as handle:
        reader = csv.reader(handle)
        header = next(reader)
        rows = [[parse_cell(cell) for cell in record] for record in reader if record]

    column_names = tuple(col.strip() for col in header)
    for line, row in enumerate(rows, start=2):
        if len(row) != len(column_names):
            raise ValueError(f"{name}:{line}: expected {len(column_names)} fields, found {len(row)}")
    return rows, column_names
