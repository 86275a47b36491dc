"""Extras calculator — prices seats, baggage and insurance from the pricing table.

Client-supplied prices on a selection are never trusted: every component is
re-priced from the table for the cabin at quote time.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from ecovira.data.currency import normalize_currency
from ecovira.data.extras_pricing import DEFAULT_SEAT_KEY, ExtrasPricing
from ecovira.errors import ConfigurationError, ValidationError
from ecovira.schemas.extras import BookingExtras, HotelBookingSelection, InsuranceSelection

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
MAX_STAY_NIGHTS = 365


@dataclass(frozen=True)
class LineItem:
    kind: str  # seat | baggage | insurance
    key: str
    quantity: int
    unit_price: Decimal
    amount: Decimal
    currency: str


@dataclass(frozen=True)
class ExtrasBreakdown:
    seats: Decimal = ZERO
    baggage: Decimal = ZERO
    insurance: Decimal = ZERO
    items: tuple[LineItem, ...] = ()
    totals: Mapping[str, Decimal] = field(default_factory=dict)

    @property
    def total(self) -> Decimal:
        return self.seats + self.baggage + self.insurance


def normalize_cabin(cabin_class: str) -> str:
    return cabin_class.strip().lower().replace(" ", "_")


class ExtrasCalculator:
    """Prices booking extras against an immutable pricing table."""

    def __init__(self, pricing: ExtrasPricing):
        self.pricing = pricing
        self._seat_types = pricing.seat_types()

    def _cabin_prices(self, cabin_class: str) -> Mapping[str, Decimal]:
        cabin = normalize_cabin(cabin_class)
        prices = self.pricing.seats.get(cabin)
        if prices is None:
            raise ValidationError(f"Unknown cabin class: {cabin_class!r}")
        return prices

    def seat_price(self, cabin_class: str, seat_type: str) -> Decimal:
        """Table price for a seat type, falling back to the cabin default."""
        prices = self._cabin_prices(cabin_class)
        key = seat_type.strip().lower()
        if key not in self._seat_types:
            raise ValidationError(f"Unknown seat type: {seat_type!r}")
        if key in prices:
            return prices[key]
        if DEFAULT_SEAT_KEY not in prices:
            raise ConfigurationError(f"No default seat price for cabin {cabin_class!r}")
        return prices[DEFAULT_SEAT_KEY]

    def bag_price(self, bag_type: str, quantity: int = 1) -> Decimal:
        unit = self.pricing.baggage.get(bag_type.strip().lower())
        if unit is None:
            raise ValidationError(f"Unknown bag type: {bag_type!r}")
        if quantity < 0:
            raise ValidationError(f"Bag quantity must be >= 0, got {quantity}")
        return unit * quantity

    def _insurance_terms(self, selection: InsuranceSelection, passengers: int) -> tuple[Decimal, int]:
        """Tier unit price and how many times it is charged."""
        tier_price = self.pricing.insurance.get(selection.type.strip().lower())
        if tier_price is None:
            raise ValidationError(f"Unknown insurance tier: {selection.type!r}")
        if passengers < 1:
            raise ValidationError(f"Passenger count must be >= 1, got {passengers}")
        per_passenger = (
            selection.per_passenger
            if selection.per_passenger is not None
            else self.pricing.insurance_per_passenger
        )
        return tier_price, passengers if per_passenger else 1

    def insurance_price(self, selection: InsuranceSelection | None, passengers: int = 1) -> Decimal:
        if selection is None or not selection.selected:
            return ZERO
        unit, quantity = self._insurance_terms(selection, passengers)
        return unit * quantity

    def calculate(
        self,
        extras: BookingExtras | None,
        cabin_class: str = "economy",
        passengers: int = 1,
        currency: str = "AUD",
    ) -> ExtrasBreakdown:
        """Total every extra, grouped by the currency each selection is charged in.

        Selections without a currency are charged in ``currency``. Carry-on is
        always included and never priced.
        """
        if extras is None:
            return ExtrasBreakdown()

        default_currency = normalize_currency(currency)
        items: list[LineItem] = []

        for seat in extras.seats:
            price = self.seat_price(cabin_class, seat.seat_type)
            items.append(LineItem(
                kind="seat",
                key=seat.seat_number or seat.seat_type,
                quantity=1,
                unit_price=price,
                amount=price,
                currency=normalize_currency(seat.currency or default_currency),
            ))

        for bag in extras.baggage.checked_bags:
            amount = self.bag_price(bag.type, bag.quantity)
            if bag.quantity == 0:
                continue
            items.append(LineItem(
                kind="baggage",
                key=bag.type,
                quantity=bag.quantity,
                unit_price=self.bag_price(bag.type),
                amount=amount,
                currency=normalize_currency(bag.currency or default_currency),
            ))

        insurance = extras.insurance
        if insurance is not None and insurance.selected:
            unit, quantity = self._insurance_terms(insurance, passengers)
            items.append(LineItem(
                kind="insurance",
                key=insurance.type,
                quantity=quantity,
                unit_price=unit,
                amount=unit * quantity,
                currency=normalize_currency(insurance.currency or default_currency),
            ))

        totals: dict[str, Decimal] = {}
        for item in items:
            totals[item.currency] = totals.get(item.currency, ZERO) + item.amount

        return ExtrasBreakdown(
            seats=sum((i.amount for i in items if i.kind == "seat"), ZERO),
            baggage=sum((i.amount for i in items if i.kind == "baggage"), ZERO),
            insurance=sum((i.amount for i in items if i.kind == "insurance"), ZERO),
            items=tuple(items),
            totals=totals,
        )


def stay_total(selection: HotelBookingSelection, nights: int) -> Decimal:
    """Room nightly rate x nights x rooms, plus breakfast and late checkout."""
    if nights < 1:
        raise ValidationError(f"Nights must be >= 1, got {nights}")
    if nights > MAX_STAY_NIGHTS:
        raise ValidationError(f"Nights must be <= {MAX_STAY_NIGHTS}, got {nights}")
    if selection.number_of_rooms < 1:
        raise ValidationError(f"Number of rooms must be >= 1, got {selection.number_of_rooms}")
    if selection.adults < 1 or selection.children < 0:
        raise ValidationError("A stay needs at least one adult and a non-negative child count")

    room_total = Decimal(str(selection.room.price_per_night)) * nights * selection.number_of_rooms

    breakfast_total = ZERO
    breakfast = selection.extras.breakfast
    if breakfast and breakfast.selected:
        guests = selection.adults + selection.children
        breakfast_total = Decimal(str(breakfast.price_per_person)) * guests * nights

    late_checkout_total = ZERO
    late_checkout = selection.extras.late_checkout
    if late_checkout and late_checkout.selected:
        late_checkout_total = Decimal(str(late_checkout.price))

    return room_total + breakfast_total + late_checkout_total
