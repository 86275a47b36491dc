"""Quote builder — base fare + markup + extras + fees, with optional FX."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from ecovira.data.currency import format_price, normalize_currency, round_amount, to_stripe_unit_amount
from ecovira.errors import CurrencyMismatchError, ValidationError
from ecovira.schemas.quote import QuoteRequest
from ecovira.services.extras_calculator import ZERO, ExtrasCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Quote:
    """A point-in-time price. Never mutated; a re-quote builds a new one."""
    base: Decimal
    markup: Decimal
    seats: Decimal
    baggage: Decimal
    insurance: Decimal
    fees: Decimal
    currency: str
    fx_applied: bool = False
    cabin_class: str = "economy"
    passengers: int = 1

    @property
    def extras_total(self) -> Decimal:
        return self.seats + self.baggage + self.insurance

    @property
    def total(self) -> Decimal:
        return self.base + self.markup + self.extras_total + self.fees

    @property
    def profit(self) -> Decimal:
        return self.total - self.base - self.extras_total - self.fees

    @property
    def total_minor_units(self) -> int:
        """Total as a Stripe unit_amount."""
        return to_stripe_unit_amount(self.total, self.currency)

    def to_dict(self) -> dict:
        return {
            "base": {"amount": float(self.base), "currency": self.currency},
            "extrasTotal": {"amount": float(self.extras_total), "currency": self.currency},
            "total": {"amount": float(self.total), "currency": self.currency},
            "profit": {"amount": float(self.profit), "currency": self.currency},
            "breakdown": {
                "markupAmount": float(self.markup),
                "seats": float(self.seats),
                "baggage": float(self.baggage),
                "insurance": float(self.insurance),
                "feesTotal": float(self.fees),
                "fxApplied": self.fx_applied,
            },
            "cabinClass": self.cabin_class,
            "passengers": self.passengers,
            "totalMinorUnits": self.total_minor_units,
            "display": format_price(self.total, self.currency),
        }


class QuoteBuilder:
    """Builds quotes. Pure: equal requests always produce equal quotes."""

    def __init__(self, calculator: ExtrasCalculator):
        self.calculator = calculator

    def build_quote(self, request: QuoteRequest) -> Quote:
        if request.base < 0:
            raise ValidationError("Base amount must be >= 0")
        if request.markup_pct < 0:
            raise ValidationError("Markup percentage must be >= 0")
        if request.passengers < 1:
            raise ValidationError(f"Passenger count must be >= 1, got {request.passengers}")

        base = Decimal(str(request.base))
        currency = normalize_currency(request.currency)
        fx_applied = False

        if request.fx_rate is not None and request.target_currency:
            if request.fx_rate <= 0:
                raise ValidationError("FX rate must be > 0")
            base = base * Decimal(str(request.fx_rate))
            currency = normalize_currency(request.target_currency)
            fx_applied = True

        extras = self.calculator.calculate(
            request.extras,
            cabin_class=request.cabin_class,
            passengers=request.passengers,
            currency=currency,
        )
        foreign = sorted(c for c in extras.totals if c != currency)
        if foreign:
            raise CurrencyMismatchError(
                f"Extras priced in {', '.join(foreign)} cannot be added to a {currency} quote"
            )

        fees = ZERO
        for fee in request.fees:
            fee_currency = normalize_currency(fee.currency or currency)
            if fee_currency != currency:
                label = fee.label or "fee"
                raise CurrencyMismatchError(f"{label} is in {fee_currency}, quote is in {currency}")
            fees += Decimal(str(fee.amount))

        base = round_amount(base, currency)
        markup = base * Decimal(str(request.markup_pct)) / 100

        quote = Quote(
            base=base,
            markup=round_amount(markup, currency),
            seats=round_amount(extras.seats, currency),
            baggage=round_amount(extras.baggage, currency),
            insurance=round_amount(extras.insurance, currency),
            fees=round_amount(fees, currency),
            currency=currency,
            fx_applied=fx_applied,
            cabin_class=request.cabin_class,
            passengers=request.passengers,
        )
        # Fails early when the total does not fit a Stripe unit_amount
        quote.total_minor_units
        logger.debug(f"Quote built: {format_price(quote.total, currency)} ({request.cabin_class}, {request.passengers} pax)")
        return quote
