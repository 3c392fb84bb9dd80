"""
Unit tests for the data boundary: index registry, Eastmoney K-line history,
Sina realtime quotes. No network: fetchers get a fake session.
Run: python -m pytest test_data_sources.py -v
"""

import asyncio
import json
import pytest
import aiohttp
import sys
import os

# Add parent dir to path
sys.path.insert(0, os.path.dirname(__file__))

from index_ranker.config import CFG, MARKET_IDS, INDEX_UNIVERSE
from index_ranker.data_indices import get_index_universe
from index_ranker.data_eastmoney import to_secid, parse_klines, fetch_history
from index_ranker.data_sina import parse_quote, fetch_quote


# ═══════════════════════════════════════════════════
#  HELPER: fake aiohttp session
# ═══════════════════════════════════════════════════

class FakeResponse:
    def __init__(self, payload=None, text="", status=200):
        self.payload = payload
        self._text = text
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise aiohttp.ClientError(f"HTTP {self.status}")

    async def json(self, content_type="application/json"):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload

    async def text(self, encoding=None, errors="strict"):
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response


def make_kline_payload(closes):
    bars = [f"2024-01-{i + 1:02d},{c - 1:.2f},{c:.2f},{c + 2:.2f},{c - 2:.2f},123456"
            for i, c in enumerate(closes)]
    return {"rc": 0, "data": {"code": "000300", "market": 1, "klines": bars}}


# ═══════════════════════════════════════════════════
#  TEST: Index registry
# ═══════════════════════════════════════════════════

class TestIndexUniverse:
    def test_ten_indices(self):
        universe = get_index_universe()
        assert len(universe) == len(INDEX_UNIVERSE) == 10

    def test_codes_unique_and_mapped(self):
        universe = get_index_universe()
        assert len({i.code for i in universe}) == len(universe)
        for inst in universe:
            assert inst.prefix in MARKET_IDS, f"{inst.code} has no market id"
            assert inst.quote_key == f"s_{inst.code}"

    def test_subset_keeps_requested_order(self):
        subset = get_index_universe(["sz399006", "SH000300"])
        assert [i.code for i in subset] == ["sz399006", "sh000300"]

    def test_unknown_code_raises(self):
        with pytest.raises(ValueError):
            get_index_universe(["sh999999"])

    def test_instrument_is_immutable(self):
        inst = get_index_universe()[0]
        with pytest.raises(Exception):
            inst.code = "sz000000"


# ═══════════════════════════════════════════════════
#  TEST: Eastmoney K-line history
# ═══════════════════════════════════════════════════

class TestSecid:
    def test_shanghai(self):
        assert to_secid("sh000300") == "1.000300"

    def test_shenzhen(self):
        assert to_secid("sz399006") == "0.399006"

    def test_unknown_prefix(self):
        assert to_secid("bj899050") is None
        assert to_secid("") is None


class TestParseKlines:
    def test_extracts_close_field_in_order(self):
        closes = parse_klines(make_kline_payload([3500.0, 3510.5, 3498.25]))
        assert closes == [3500.0, 3510.5, 3498.25]

    def test_null_data(self):
        assert parse_klines({"rc": 0, "data": None}) is None

    def test_empty_klines(self):
        assert parse_klines({"data": {"klines": []}}) is None

    def test_not_a_dict(self):
        assert parse_klines(None) is None
        assert parse_klines([1, 2, 3]) is None

    def test_klines_not_a_list(self):
        assert parse_klines({"data": {"klines": 7}}) is None
        assert parse_klines({"data": {"klines": {"a": "b"}}}) is None
        assert parse_klines({"data": {"klines": "2024-01-02,1,3500,1,1,1"}}) is None

    def test_data_not_a_dict(self):
        assert parse_klines({"data": "oops"}) is None
        assert parse_klines({"data": [1, 2]}) is None

    def test_malformed_bar_rejects_payload(self):
        payload = make_kline_payload([3500.0, 3510.0])
        payload["data"]["klines"].append("2024-01-03,3500.00")
        assert parse_klines(payload) is None

    def test_non_numeric_close_rejects_payload(self):
        payload = {"data": {"klines": ["2024-01-02,1,abc,1,1,1"]}}
        assert parse_klines(payload) is None


class TestFetchHistory:
    def test_success_builds_request(self):
        session = FakeSession(FakeResponse(make_kline_payload([1.0, 2.0, 3.0])))
        closes = asyncio.run(fetch_history(session, "sh000300"))
        assert closes == [1.0, 2.0, 3.0]
        _, kwargs = session.calls[0]
        assert kwargs["params"]["secid"] == "1.000300"
        assert kwargs["params"]["lmt"] == str(CFG["kline_limit"])
        assert kwargs["params"]["klt"] == "101"
        assert kwargs["params"]["fqt"] == "1"

    def test_network_error_is_no_data(self):
        session = FakeSession(exc=aiohttp.ClientConnectionError("refused"))
        assert asyncio.run(fetch_history(session, "sz399001")) is None

    def test_timeout_is_no_data(self):
        session = FakeSession(exc=asyncio.TimeoutError())
        assert asyncio.run(fetch_history(session, "sz399001")) is None

    def test_http_error_is_no_data(self):
        session = FakeSession(FakeResponse(status=502))
        assert asyncio.run(fetch_history(session, "sh000001")) is None

    def test_bad_json_is_no_data(self):
        session = FakeSession(FakeResponse(json.JSONDecodeError("bad", "<html>", 0)))
        assert asyncio.run(fetch_history(session, "sh000001")) is None

    def test_scalar_klines_is_no_data(self):
        session = FakeSession(FakeResponse({"rc": 0, "data": {"klines": 7}}))
        assert asyncio.run(fetch_history(session, "sh000300")) is None

    def test_non_dict_data_is_no_data(self):
        session = FakeSession(FakeResponse({"rc": 0, "data": "oops"}))
        assert asyncio.run(fetch_history(session, "sh000300")) is None

    def test_unknown_prefix_skips_request(self):
        session = FakeSession(FakeResponse(make_kline_payload([1.0])))
        assert asyncio.run(fetch_history(session, "hk800000")) is None
        assert session.calls == []


# ═══════════════════════════════════════════════════
#  TEST: Sina realtime quotes
# ═══════════════════════════════════════════════════

SINA_LINE = 'var hq_str_s_sh000300="沪深300,4000.00,3900.00,100.00,2.56,123456,7890";\n'


class TestParseQuote:
    def test_price_and_change(self):
        quote = parse_quote(SINA_LINE)
        assert quote.current_price == pytest.approx(4000.0)
        assert quote.price_change_pct == pytest.approx((4000 - 3900) / 3900 * 100)

    def test_empty_payload(self):
        assert parse_quote('var hq_str_s_sh000300="";') is None

    def test_no_assignment(self):
        assert parse_quote("<html>forbidden</html>") is None
        assert parse_quote("") is None

    def test_too_few_fields(self):
        assert parse_quote('var hq_str_x="name,1.0";') is None

    def test_non_numeric_fields(self):
        assert parse_quote('var hq_str_x="name,abc,3900";') is None

    def test_zero_previous_close(self):
        assert parse_quote('var hq_str_x="name,4000,0";') is None


class TestFetchQuote:
    def test_success(self):
        session = FakeSession(FakeResponse(text=SINA_LINE))
        quote = asyncio.run(fetch_quote(session, "s_sh000300"))
        assert quote.current_price == pytest.approx(4000.0)
        url, kwargs = session.calls[0]
        assert url.endswith("list=s_sh000300")
        assert "Referer" in kwargs["headers"]

    def test_network_error_is_no_data(self):
        session = FakeSession(exc=aiohttp.ServerDisconnectedError())
        assert asyncio.run(fetch_quote(session, "s_sh000300")) is None

    def test_unparseable_is_no_data(self):
        session = FakeSession(FakeResponse(text="garbage"))
        assert asyncio.run(fetch_quote(session, "s_sh000300")) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
