"""Asset identity model."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

AssetClass = Literal["stock", "forex", "crypto"]


class Asset(BaseModel):
    """A tradable instrument. Immutable once registered with the store."""

    model_config = ConfigDict(frozen=True)

    id: int
    symbol: str
    name: str
    asset_class: AssetClass
    exchange: str | None = None
    active: bool = True
    price_precision: int = Field(default=2, ge=0)
