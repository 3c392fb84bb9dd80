# index_ranker/data_indices.py — Tracked index registry
from typing import Iterable, List, Optional
from index_ranker.config import INDEX_UNIVERSE, MARKET_IDS
from index_ranker.models import Instrument

INDICES: tuple = tuple(
    Instrument(code=code, name=name, quote_key=quote_key)
    for code, name, quote_key in INDEX_UNIVERSE
)

_BY_CODE = {inst.code: inst for inst in INDICES}
assert len(_BY_CODE) == len(INDICES), "Index codes must be unique"
assert all(inst.prefix in MARKET_IDS for inst in INDICES), \
    "Every tracked index needs a market id"


def get_index_universe(codes: Optional[Iterable[str]] = None) -> List[Instrument]:
    """Return the tracked indices, optionally restricted to `codes` (in that order)."""
    if codes is None:
        return list(INDICES)
    selected = []
    for code in codes:
        inst = _BY_CODE.get(code.lower())
        if inst is None:
            raise ValueError(f"Unknown index code: {code!r}")
        selected.append(inst)
    return selected
