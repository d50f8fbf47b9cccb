from __future__ import annotations

import pandas as pd

from ..excel.reader import coerce_number
from ..models.processing_result import Redistribution

"""Tabular preview of a planned redistribution (used by `--inspect`)."""

__all__ = [
    "PREVIEW_COLUMNS",
    "build_preview_frame",
]

PREVIEW_COLUMNS = ["ref", "policy", "rows", "original", "assigned", "assigned_total", "delta"]


def build_preview_frame(result: Redistribution) -> pd.DataFrame:
    """One row per dissolved merge.

    delta = assigned_total - original for numeric originals (rounding residue of
    a weight split, or 0 for a box count); NaN when the original is not a number.
    """
    records = []
    for outcome in result.outcomes:
        original = coerce_number(outcome.original)
        total = round(outcome.assigned_total, 2)
        records.append(
            {
                "ref": outcome.ref,
                "policy": outcome.policy,
                "rows": outcome.end_row - outcome.start_row + 1,
                "original": outcome.original,
                "assigned": ", ".join(_fmt(v) for v in outcome.assigned),
                "assigned_total": total,
                "delta": round(total - original, 2) if original is not None else float("nan"),
            }
        )
    return pd.DataFrame.from_records(records, columns=PREVIEW_COLUMNS)


def _fmt(value: object) -> str:
    if isinstance(value, float):
        return f"{value:.2f}"
    return "" if value is None else str(value)
