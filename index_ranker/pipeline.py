# index_ranker/pipeline.py — Main orchestration (refresh, RankingBoard, run_pipeline)
import asyncio
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Sequence
import aiohttp
from tqdm import tqdm
from index_ranker.config import CFG, SORT_KEYS
from index_ranker.models import (
    Instrument, Quote, RankedInstrument, RefreshResult, RankingError, NoDataError,
)
from index_ranker.data_indices import get_index_universe
from index_ranker.data_eastmoney import fetch_history
from index_ranker.data_sina import fetch_quote
from index_ranker.metrics import compute_slope_score, compute_trailing_return
from index_ranker.composite import build_ranked, apply_highlights, sort_ranked
from index_ranker.summary import _print_summary

HistoryFetcher = Callable[[aiohttp.ClientSession, str], Awaitable[Optional[List[float]]]]
QuoteFetcher = Callable[[aiohttp.ClientSession, str], Awaitable[Optional[Quote]]]

NO_DATA_MESSAGE = "no data available, check the network connection or retry later"


async def _rank_one(session: aiohttp.ClientSession, instrument: Instrument, window: int,
                    history_fetcher: HistoryFetcher,
                    quote_fetcher: QuoteFetcher) -> Optional[RankedInstrument]:
    """History → score → returns → realtime quote for one index. None = excluded."""
    closes = await history_fetcher(session, instrument.code)
    if not closes or len(closes) < max(window, CFG["min_history"]):
        return None

    stats = compute_slope_score(closes, window, CFG["annual_days"])
    if stats is None:
        return None

    short_days, long_days = CFG["return_windows"]
    returns_20d = compute_trailing_return(closes, short_days)
    returns_25d = compute_trailing_return(closes, long_days)

    # Quote failures only default the price columns; the row is kept
    quote = await quote_fetcher(session, instrument.quote_key)
    return build_ranked(instrument, closes, stats, returns_20d, returns_25d, quote)


async def refresh(instruments: Optional[Sequence[Instrument]] = None,
                  window: Optional[int] = None,
                  sort_by: Optional[str] = None,
                  *,
                  session: Optional[aiohttp.ClientSession] = None,
                  history_fetcher: HistoryFetcher = fetch_history,
                  quote_fetcher: QuoteFetcher = fetch_quote) -> RefreshResult:
    """
    Fetch, score and rank every instrument concurrently.

    Returns a RefreshResult holding either a non-empty ranking sorted by
    `sort_by` (descending) with highlights applied, or an error and no rows.
    Individual instruments that lack history or a usable fit are dropped
    silently. Nothing is retried; call again to retry.
    """
    instruments = list(instruments) if instruments is not None else get_index_universe()
    window = window if window is not None else CFG["window"]
    sort_by = sort_by if sort_by is not None else CFG["sort_by"]
    if window < 2:
        raise ValueError(f"window must be >= 2, got {window}")
    if sort_by not in SORT_KEYS:
        raise ValueError(f"sort key must be one of {SORT_KEYS}, got {sort_by!r}")

    own_session = session is None
    if own_session:
        session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=CFG["timeout"]))
    tasks = [asyncio.ensure_future(
                 _rank_one(session, inst, window, history_fetcher, quote_fetcher))
             for inst in instruments]
    error = None
    with tqdm(total=len(tasks), desc="Indices (async)",
              disable=not CFG["show_progress"]) as bar:
        for task in tasks:
            task.add_done_callback(lambda _: bar.update(1))
        try:
            rows = await asyncio.gather(*tasks)
        except Exception as e:
            error = RankingError(f"data load failed: {e}")
        finally:
            # no per-instrument task may outlive the refresh or its session
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            if own_session:
                await session.close()
    if error is not None:
        return RefreshResult(error=error)

    valid = [r for r in rows if r is not None]
    dropped = len(instruments) - len(valid)
    if not valid:
        print(f"  ⚠️  0/{len(instruments)} indices usable")
        return RefreshResult(error=NoDataError(NO_DATA_MESSAGE))
    if dropped:
        print(f"  ℹ️  {dropped}/{len(instruments)} indices excluded (no data or short history)")

    ranked = sort_ranked(apply_highlights(valid), sort_by)
    return RefreshResult(results=tuple(ranked))


class RankingBoard:
    """
    Holds the last successful ranking for a consumer (dashboard, script).

    Every refresh builds a complete new tuple and swaps it in at once, so
    readers never see a half-updated ranking. A failed refresh keeps the
    previous rows. When refreshes overlap, only the most recently started
    one may publish; an older one finishing late is discarded.
    """

    def __init__(self, instruments: Optional[Sequence[Instrument]] = None,
                 window: Optional[int] = None, sort_by: Optional[str] = None,
                 **fetchers):
        self.instruments = list(instruments) if instruments is not None else get_index_universe()
        self.window = window if window is not None else CFG["window"]
        self.sort_by = sort_by if sort_by is not None else CFG["sort_by"]
        self._fetchers = fetchers   # history_fetcher / quote_fetcher / session
        self.results: tuple = ()
        self.last_update: Optional[datetime] = None
        self.error: Optional[RankingError] = None
        self._generation = 0

    async def refresh(self) -> RefreshResult:
        self._generation += 1
        generation = self._generation
        outcome = await refresh(self.instruments, self.window, self.sort_by, **self._fetchers)
        if generation != self._generation:
            return outcome   # superseded by a newer refresh
        self.error = outcome.error
        if outcome.ok:
            self.results = outcome.results
            self.last_update = outcome.generated
        return outcome

    @property
    def highlighted(self) -> tuple:
        return tuple(r for r in self.results if r.highlighted)


def run_pipeline(window: Optional[int] = None, sort_by: Optional[str] = None,
                 codes: Optional[Sequence[str]] = None) -> RefreshResult:
    """Blocking one-shot refresh with console output, for scripts."""
    window = window if window is not None else CFG["window"]
    instruments = get_index_universe(codes)
    print("=" * 65)
    print("  A-SHARE INDEX MOMENTUM RANKING")
    print(f"  {datetime.now().strftime('%Y-%m-%d %H:%M')}  ·  window={window}")
    print("=" * 65)

    outcome = asyncio.run(refresh(instruments, window, sort_by))
    if not outcome.ok:
        print(f"\n❌  {outcome.error}")
        return outcome

    print(f"\n✅  {len(outcome.results)}/{len(instruments)} indices ranked")
    _print_summary(outcome.results, window)
    return outcome
