# index_ranker/data_eastmoney.py — Historical daily closes (Eastmoney K-line API)
import asyncio
from typing import List, Optional
import aiohttp
from index_ranker.config import (
    CFG, EM_KLINE_URL, EM_KLINE_PARAMS, EM_HEADERS, EM_CLOSE_FIELD, MARKET_IDS,
)
from index_ranker.utils import _safe

def to_secid(code: str) -> Optional[str]:
    """sh000300 → '1.000300'; None when the exchange prefix has no market id."""
    if not code or len(code) < 3:
        return None
    market = MARKET_IDS.get(code[:2].lower())
    if market is None:
        return None
    return f"{market}.{code[2:]}"


def parse_klines(payload) -> Optional[List[float]]:
    """
    Extract closes from a K-line payload: {"data": {"klines": ["date,open,close,..."]}}.
    Bars arrive oldest → newest. Any malformed bar rejects the whole payload.
    """
    try:
        klines = payload["data"]["klines"]
    except (KeyError, TypeError):
        return None   # "data": null for unknown secids
    if not klines or not isinstance(klines, list):
        return None

    closes = []
    for bar in klines:
        if not isinstance(bar, str):
            return None
        parts = bar.split(",")
        close = _safe(parts[EM_CLOSE_FIELD], None) if len(parts) > EM_CLOSE_FIELD else None
        if close is None:
            return None
        closes.append(close)
    return closes


async def fetch_history(session: aiohttp.ClientSession, code: str,
                        limit: int = CFG["kline_limit"]) -> Optional[List[float]]:
    """Most recent `limit` daily closes for `code`, or None on any provider failure."""
    secid = to_secid(code)
    if secid is None:
        print(f"  ⚠️  {code}: no market id for prefix '{code[:2]}' — skipped")
        return None

    params = {**EM_KLINE_PARAMS, "secid": secid, "lmt": str(limit)}
    timeout = aiohttp.ClientTimeout(total=CFG["timeout"])
    try:
        async with session.get(EM_KLINE_URL, params=params,
                               headers=EM_HEADERS, timeout=timeout) as resp:
            resp.raise_for_status()
            payload = await resp.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        print(f"  ⚠️  {code}: history fetch failed: {e!r}")
        return None

    closes = parse_klines(payload)
    if closes is None:
        print(f"  ⚠️  {code}: history payload empty or malformed")
    return closes
