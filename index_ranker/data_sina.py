# index_ranker/data_sina.py — Realtime quotes (Sina hq API)
import asyncio
import re
from typing import Optional
import aiohttp
from index_ranker.config import (
    CFG, SINA_QUOTE_URL, SINA_HEADERS, SINA_ENCODING,
    SINA_PRICE_FIELD, SINA_PREV_CLOSE_FIELD,
)
from index_ranker.models import Quote
from index_ranker.utils import _safe

# var hq_str_s_sh000300="沪深300,3912.31,3899.12,...";
_payload_re = re.compile(r'="([^"]+)"')

def parse_quote(text: str) -> Optional[Quote]:
    """
    Parse one hq line. Field 1 is the current price, field 2 the previous
    close; the % change is derived from the two. None on any parse failure.
    """
    if not text:
        return None
    m = _payload_re.search(text)
    if not m:
        return None   # empty payload: unknown symbol or market closed
    parts = m.group(1).split(",")
    if len(parts) <= max(SINA_PRICE_FIELD, SINA_PREV_CLOSE_FIELD):
        return None
    current = _safe(parts[SINA_PRICE_FIELD], None)
    prev_close = _safe(parts[SINA_PREV_CLOSE_FIELD], None)
    if current is None or prev_close is None or prev_close == 0:
        return None
    return Quote(
        current_price=current,
        price_change_pct=(current - prev_close) / prev_close * 100,
    )


async def fetch_quote(session: aiohttp.ClientSession, quote_key: str) -> Optional[Quote]:
    """Realtime quote for `quote_key`, or None on any provider failure."""
    url = SINA_QUOTE_URL.format(key=quote_key)
    timeout = aiohttp.ClientTimeout(total=CFG["timeout"])
    try:
        async with session.get(url, headers=SINA_HEADERS, timeout=timeout) as resp:
            resp.raise_for_status()
            text = await resp.text(encoding=SINA_ENCODING, errors="replace")
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        print(f"  ⚠️  {quote_key}: realtime quote failed: {e!r}")
        return None

    quote = parse_quote(text)
    if quote is None:
        print(f"  ⚠️  {quote_key}: realtime quote unparseable")
    return quote
