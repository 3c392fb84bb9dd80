"""
Data models for the index ranker.
No fetching or scoring logic, only Pydantic models and the pipeline errors.
"""

from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class RankingError(RuntimeError):
    """A refresh produced no usable ranking."""


class NoDataError(RankingError):
    """Every instrument was excluded (no history, too short, or degenerate fit)."""


class Instrument(BaseModel):
    """A tracked index. Static configuration, never mutated."""
    model_config = ConfigDict(frozen=True)

    code: str = Field(..., description="Exchange-prefixed code, e.g. sh000300")
    name: str = Field(..., description="Display name")
    quote_key: str = Field(..., description="Realtime provider symbol, e.g. s_sh000300")

    @property
    def prefix(self) -> str:
        return self.code[:2].lower()

    @property
    def symbol(self) -> str:
        return self.code[2:]


class ScoreResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    slope: float = Field(..., description="OLS slope of log close per session")
    r_squared: float = Field(..., description="Goodness of fit, not clamped to [0, 1]")
    annualized_return: float = Field(..., description="exp(slope * annual_days) - 1")
    score: float = Field(..., description="annualized_return * r_squared")


class Quote(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_price: float = Field(..., description="Last traded price")
    price_change_pct: float = Field(..., description="% change vs previous close")


class RankedInstrument(BaseModel):
    """One row of the published ranking, rebuilt on every refresh."""
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    quote_key: str
    current_price: float = Field(..., description="Realtime price, or last close as fallback")
    price_change_pct: float = Field(0.0, description="Realtime % change, 0 when unavailable")
    slope: float
    r_squared: float
    annualized_return: float
    score: float
    returns_20d: float = Field(0.0, description="Trailing 20-session return, %")
    returns_25d: float = Field(0.0, description="Trailing 25-session return, %")
    highlighted: bool = False


class RefreshResult(BaseModel):
    """Outcome of one refresh: a non-empty ranking, or an error and no rows."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    results: Tuple[RankedInstrument, ...] = ()
    error: Optional[RankingError] = None
    generated: datetime = Field(default_factory=datetime.now)

    @property
    def ok(self) -> bool:
        return self.error is None
