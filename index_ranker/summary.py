# index_ranker/summary.py — Summary stats, DataFrame view, console output
from typing import Sequence
import numpy as np
import pandas as pd
from index_ranker.config import CFG, FRIENDLY_NAMES
from index_ranker.models import RankedInstrument

def to_frame(results: Sequence[RankedInstrument]) -> pd.DataFrame:
    """Ranking as a DataFrame in its given order, with a 1-based rank column."""
    df = pd.DataFrame([r.model_dump() for r in results])
    if df.empty:
        return df
    df.insert(0, "rank", range(1, len(df) + 1))
    return df


def summarize(results: Sequence[RankedInstrument], window: int = None) -> dict:
    scores = [r.score for r in results]
    return {
        "count":       len(results),
        "highlighted": sum(1 for r in results if r.highlighted),
        "strong":      sum(1 for s in scores if s > CFG["highlight"]["score"]),
        "avg_score":   float(np.mean(scores)) if scores else np.nan,
        "window":      window if window is not None else CFG["window"],
    }


def _print_summary(results: Sequence[RankedInstrument], window: int = None):
    df = to_frame(results)
    if df.empty:
        print("  ℹ️  Nothing to show")
        return

    print("\n" + "=" * 65)
    print("  INDEX RANKING")
    print("=" * 65)
    show = ["rank", "code", "name", "current_price", "price_change_pct",
            "score", "r_squared", "annualized_return",
            "returns_20d", "returns_25d", "highlighted"]
    view = df[show].copy()
    view["code"] = view["code"].str.upper()
    view["highlighted"] = view["highlighted"].map({True: "★", False: ""})
    print(view.rename(columns=FRIENDLY_NAMES).to_string(
        index=False,
        formatters={FRIENDLY_NAMES["score"]: "{:.4f}".format},
        float_format=lambda v: f"{v:.2f}"))

    stats = summarize(results, window)
    print("\n  SUMMARY")
    print("-" * 45)
    print(f"  Highlighted:          {stats['highlighted']}")
    print(f"  Score > {CFG['highlight']['score']}:          {stats['strong']}")
    print(f"  Average score:        {stats['avg_score']:.4f}")
    print(f"  Window:               {stats['window']} sessions")
