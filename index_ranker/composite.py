# index_ranker/composite.py — Merge, highlight rule, sorting
from operator import attrgetter
from typing import Iterable, List, Optional, Sequence
from index_ranker.config import CFG, SORT_KEYS
from index_ranker.models import Instrument, Quote, RankedInstrument, ScoreResult

def build_ranked(instrument: Instrument, closes: Sequence[float], stats: ScoreResult,
                 returns_20d: float, returns_25d: float,
                 quote: Optional[Quote] = None) -> RankedInstrument:
    # A missing or zero realtime price falls back to the last close
    current_price = (quote.current_price if quote else 0.0) or float(closes[-1])
    change_pct = (quote.price_change_pct if quote else 0.0) or 0.0
    return RankedInstrument(
        code=instrument.code,
        name=instrument.name,
        quote_key=instrument.quote_key,
        current_price=current_price,
        price_change_pct=change_pct,
        slope=stats.slope,
        r_squared=stats.r_squared,
        annualized_return=stats.annualized_return,
        score=stats.score,
        returns_20d=returns_20d,
        returns_25d=returns_25d,
    )


def is_highlighted(item: RankedInstrument, thresholds: dict = None) -> bool:
    """Strong, steady trend: score, 20D and 25D returns all above threshold."""
    t = thresholds if thresholds is not None else CFG["highlight"]
    return (item.score > t["score"]
            and item.returns_20d > t["returns_20d"]
            and item.returns_25d > t["returns_25d"])


def apply_highlights(items: Iterable[RankedInstrument],
                     thresholds: dict = None) -> List[RankedInstrument]:
    return [item.model_copy(update={"highlighted": is_highlighted(item, thresholds)})
            for item in items]


def sort_ranked(items: Iterable[RankedInstrument], key: str = None) -> List[RankedInstrument]:
    """Descending by `key`; order among exact ties is not guaranteed."""
    key = key if key is not None else CFG["sort_by"]
    if key not in SORT_KEYS:
        raise ValueError(f"sort key must be one of {SORT_KEYS}, got {key!r}")
    return sorted(items, key=attrgetter(key), reverse=True)
