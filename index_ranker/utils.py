# index_ranker/utils.py — Shared utility functions
import numpy as np

def _safe(val, default=np.nan):
    """Safely convert value to float, returning default for None/NaN/inf/non-numeric."""
    if val is None:
        return default
    try:
        f = float(val)
        return f if np.isfinite(f) else default
    except (TypeError, ValueError):
        return default
