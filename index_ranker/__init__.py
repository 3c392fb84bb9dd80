# index_ranker/__init__.py — A-share index momentum ranker
#
# Ranks the major A-share indices by slope × R² of their log closes and
# enriches each row with a realtime quote.
# Import anything directly: `from index_ranker import compute_slope_score, CFG`
#
# Module layout:
#   config.py         — CFG, provider endpoints, market ids, index universe
#   models.py         — Instrument / ScoreResult / Quote / RankedInstrument
#   utils.py          — _safe() shared float parsing helper
#   data_indices.py   — tracked index registry
#   data_eastmoney.py — historical daily closes (Eastmoney K-line)
#   data_sina.py      — realtime quotes (Sina hq)
#   metrics.py        — regression score + trailing returns
#   composite.py      — merge, highlight rule, sorting
#   summary.py        — summary stats, DataFrame view, console output
#   pipeline.py       — async refresh, RankingBoard, run_pipeline

from index_ranker.config import CFG
from index_ranker.models import (
    Instrument, ScoreResult, Quote, RankedInstrument, RefreshResult,
    RankingError, NoDataError,
)
from index_ranker.metrics import compute_slope_score, compute_trailing_return
from index_ranker.composite import is_highlighted, sort_ranked
from index_ranker.pipeline import refresh, RankingBoard, run_pipeline

__version__ = "1.0"
