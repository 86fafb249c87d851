"""Formal pipeline invariants.

This file documents what each stage MUST produce. This is architecture, not code.
Use this file as a reviewer anchor and system reference.
"""

PIPELINE_INVARIANTS = {
    "load": [
        "Grid table has a unique 'id' column and an opaque geometry column",
        "Wide table has a unique 'id' column plus one column per period (YYYY-MM-DD)",
        "Every wide-table cell id exists in the grid",
        "Date columns are resampled to the configured frequency, ascending",
    ],

    "reshape": [
        "Exactly n_cells x n_dates observations",
        "Order: date-column order, then wide-table row order within each date",
        "Missing values are passed through as None, never dropped or filled",
    ],

    "aggregate": [
        "One summary per distinct observation date, strictly ascending",
        "0 <= valid_count <= cell count",
        "valid_count == 0 implies every statistic is None",
        "Standard deviation is the population value (ddof=0)",
    ],

    "change": [
        "Input has at least one summary (else InsufficientDataError)",
        "Unavailable baseline/latest propagate; never replaced by zero",
        "Classification is one of improvement, decline, stable",
        "Computed once per run and reused by every report table",
    ],

    "report": [
        "Tables are written only after every stage succeeded",
        "Missing values are written as empty cells, not zero",
    ],
}

# Which stages are optional vs required
STAGE_REQUIREMENTS = {
    "load": "REQUIRED",
    "reshape": "REQUIRED",
    "aggregate": "REQUIRED",
    "change": "REQUIRED",
    "report": "REQUIRED",
    "plot": "OPTIONAL",      # Only if visualization.enabled
}
