# index_ranker/config.py — Configuration, provider endpoints, constants

# ════════════════════════════════════════════════════════════
#  CONFIGURATION
# ════════════════════════════════════════════════════════════
CFG = {
    "window":         25,    # regression window (sessions)
    "annual_days":    250,   # trading days per year for annualization
    "min_history":    25,    # effective minimum = max(window, min_history)
    "kline_limit":    120,   # daily bars requested per index
    "return_windows": (20, 25),
    "timeout":        10,    # seconds, per request
    "sort_by":        "score",
    "show_progress":  True,
    "highlight": {
        # all three must hold at once
        "score":       0.7,
        "returns_20d": 1.0,   # %
        "returns_25d": 4.0,   # %
    },
}

SORT_KEYS = ("score", "returns_20d", "returns_25d")

assert CFG["window"] >= 2, "Regression window needs at least 2 points"
assert CFG["kline_limit"] >= max(CFG["window"], CFG["min_history"]), \
    "kline_limit must cover the regression window"
assert CFG["sort_by"] in SORT_KEYS, f"sort_by must be one of {SORT_KEYS}"

# ════════════════════════════════════════════════════════════
#  HISTORICAL K-LINE PROVIDER (Eastmoney)
# ════════════════════════════════════════════════════════════
EM_KLINE_URL = "https://push2his.eastmoney.com/api/qt/stock/kline/get"
EM_KLINE_PARAMS = {
    "fields1": "f1,f2,f3,f4,f5,f6",
    "fields2": "f51,f52,f53,f54,f55,f56,f57,f58,f59,f60,f61",
    "klt":     "101",        # daily bars
    "fqt":     "1",          # forward-adjusted
    "end":     "20500101",
}
# bar layout: date, open, close, high, low, volume, ...
EM_CLOSE_FIELD = 2

EM_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept":  "application/json, text/plain, */*",
    "Referer": "https://quote.eastmoney.com/",
}

# Exchange prefix → Eastmoney market id (secid = "<id>.<6-digit code>")
MARKET_IDS = {
    "sh": 1,
    "sz": 0,
}

# ════════════════════════════════════════════════════════════
#  REALTIME QUOTE PROVIDER (Sina hq)
# ════════════════════════════════════════════════════════════
SINA_QUOTE_URL = "https://hq.sinajs.cn/list={key}"
SINA_HEADERS = {
    "User-Agent": EM_HEADERS["User-Agent"],
    "Referer":    "https://finance.sina.com.cn/",   # hq rejects requests without it
}
SINA_ENCODING = "gbk"
SINA_PRICE_FIELD = 1
SINA_PREV_CLOSE_FIELD = 2

# ════════════════════════════════════════════════════════════
#  INDEX UNIVERSE — (code, display name, quote key)
# ════════════════════════════════════════════════════════════
INDEX_UNIVERSE = [
    ("sh000001", "上证指数", "s_sh000001"),
    ("sz399001", "深证成指", "s_sz399001"),
    ("sz399006", "创业板指", "s_sz399006"),
    ("sh000300", "沪深300",  "s_sh000300"),
    ("sh000016", "上证50",   "s_sh000016"),
    ("sh000905", "中证500",  "s_sh000905"),
    ("sh000852", "中证1000", "s_sh000852"),
    ("sz399005", "中小板指", "s_sz399005"),
    ("sz399008", "中小300",  "s_sz399008"),
    ("sh000688", "科创50",   "s_sh000688"),
]

FRIENDLY_NAMES = {
    "rank":              "Rank",
    "code":              "Code",
    "name":              "Index",
    "current_price":     "Last",
    "price_change_pct":  "Chg %",
    "score":             "Score",
    "r_squared":         "R²",
    "annualized_return": "Ann. Return",
    "returns_20d":       "20D %",
    "returns_25d":       "25D %",
    "highlighted":       "★",
}
