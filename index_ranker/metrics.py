# index_ranker/metrics.py — Regression score + trailing returns
from typing import Optional, Sequence
import numpy as np
from index_ranker.config import CFG
from index_ranker.models import ScoreResult

def compute_slope_score(prices: Sequence[float], window: int,
                        annual_days: int = CFG["annual_days"]) -> Optional[ScoreResult]:
    """
    Log-linear momentum score over the last `window` closes.

      1. y = ln(close) for the last `window` closes, x = 0..window-1
      2. OLS: slope = Σ(dx·dy) / Σ(dx²), intercept = ȳ − slope·x̄
      3. R² = 1 − SS_res / SS_tot, with SS_tot = (n−1)·var(y, ddof=1)
      4. annualized = e^(slope·annual_days) − 1
      5. score = annualized × R²

    R² is NOT clamped: it drops below 0 when the line fits worse than the mean.

    Returns None when the series is shorter than the window, the window has
    fewer than 2 points, any close is non-positive or non-finite, or either
    sum of squares is degenerate (< 1e-10, e.g. a flat series).
    """
    if prices is None or window < 2 or len(prices) < window:
        return None

    recent = np.asarray(prices, dtype=float)[-window:]
    if not np.all(np.isfinite(recent)) or np.any(recent <= 0):
        return None

    y = np.log(recent)
    x = np.arange(window, dtype=float)
    n = window
    mean_x = x.sum() / n
    mean_y = y.sum() / n

    dx = x - mean_x
    dy = y - mean_y
    numerator = float(np.sum(dx * dy))
    denominator = float(np.sum(dx * dx))
    if abs(denominator) < 1e-10:
        return None

    slope = numerator / denominator
    intercept = mean_y - slope * mean_x

    residuals = y - (slope * x + intercept)
    ss_res = float(np.sum(residuals * residuals))

    variance = float(np.var(y, ddof=1))
    ss_tot = (n - 1) * variance
    if abs(ss_tot) < 1e-10:
        return None   # flat prices: R² is 0/0

    r_squared = 1.0 - ss_res / ss_tot
    annualized = float(np.exp(slope * annual_days)) - 1.0
    return ScoreResult(
        slope=slope,
        r_squared=r_squared,
        annualized_return=annualized,
        score=annualized * r_squared,
    )


def compute_trailing_return(prices: Sequence[float], days: int) -> float:
    """% return over the last `days` sessions; 0.0 without days+1 closes."""
    if prices is None or days < 1 or len(prices) < days + 1:
        return 0.0
    closes = np.asarray(prices, dtype=float)
    current = float(closes[-1])
    past = float(closes[-1 - days])
    if past == 0:
        return 0.0
    return (current - past) / past * 100
