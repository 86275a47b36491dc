from pydantic import Field

from ecovira.schemas.extras import BookingExtras, CamelModel


class FeeItem(CamelModel):
    label: str | None = None
    amount: float
    currency: str | None = None


class QuoteRequest(CamelModel):
    base: float
    currency: str
    extras: BookingExtras | None = None
    cabin_class: str = "economy"
    passengers: int = 1
    markup_pct: float = 0
    fees: list[FeeItem] = Field(default_factory=list)
    fx_rate: float | None = None
    target_currency: str | None = None
