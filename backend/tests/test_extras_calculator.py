"""
Tests for the extras calculator.
Seat, baggage and insurance pricing against the default table.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from ecovira.data.extras_pricing import CABIN_CLASSES, DEFAULT_EXTRAS_PRICING, ExtrasPricing, SEAT_TYPES
from ecovira.errors import ConfigurationError, ValidationError
from ecovira.schemas.extras import (
    BaggageSelection,
    BookingExtras,
    CheckedBag,
    HotelBookingSelection,
    InsuranceSelection,
    SeatSelection,
)
from ecovira.services.extras_calculator import ExtrasCalculator, stay_total


class TestSeatPrice:
    """Seat lookup per cabin class."""

    def test_every_table_entry_is_deterministic_and_non_negative(self, calculator):
        for cabin in CABIN_CLASSES:
            for seat_type in SEAT_TYPES:
                first = calculator.seat_price(cabin, seat_type)
                assert first == calculator.seat_price(cabin, seat_type)
                assert first >= 0

    def test_table_values(self, calculator):
        assert calculator.seat_price("economy", "exit") == Decimal("15")
        assert calculator.seat_price("economy", "window") == Decimal("0")
        assert calculator.seat_price("business", "preferred") == Decimal("35")
        assert calculator.seat_price("first", "aisle") == Decimal("60")

    def test_cabin_and_seat_type_are_case_insensitive(self, calculator):
        assert calculator.seat_price("Business", "EXIT") == Decimal("40")

    def test_missing_entry_falls_back_to_cabin_default(self):
        raw = {**DEFAULT_EXTRAS_PRICING, "seats": {"economy": {"default": 5, "exit": 15}}}
        calc = ExtrasCalculator(ExtrasPricing.from_dict(raw))

        assert calc.seat_price("economy", "window") == Decimal("5")
        assert calc.seat_price("economy", "exit") == Decimal("15")

    def test_unknown_seat_type_raises(self, calculator):
        with pytest.raises(ValidationError):
            calculator.seat_price("economy", "cockpit")

    def test_unknown_cabin_raises(self, calculator):
        with pytest.raises(ValidationError):
            calculator.seat_price("steerage", "window")

    def test_cabin_without_default_raises_configuration_error(self):
        pricing = ExtrasPricing(
            seats={"economy": {"exit": Decimal("15")}},
            baggage={"20kg": Decimal("35")},
            insurance={"basic": Decimal("25")},
        )
        calc = ExtrasCalculator(pricing)

        with pytest.raises(ConfigurationError):
            calc.seat_price("economy", "window")


class TestBaggageAndInsurance:
    """Checked bags and travel insurance."""

    def test_bag_price_is_unit_times_quantity(self, calculator):
        assert calculator.bag_price("30kg", 2) == Decimal("110")
        assert calculator.bag_price("extra", 0) == Decimal("0")

    def test_unknown_bag_type_raises(self, calculator):
        with pytest.raises(ValidationError):
            calculator.bag_price("50kg", 1)

    def test_negative_quantity_raises(self, calculator):
        with pytest.raises(ValidationError):
            calculator.bag_price("20kg", -1)

    def test_premium_per_passenger(self, calculator):
        insurance = InsuranceSelection(selected=True, type="premium", per_passenger=True)
        assert calculator.insurance_price(insurance, passengers=2) == Decimal("90")

    def test_flat_insurance_ignores_passenger_count(self, calculator):
        insurance = InsuranceSelection(selected=True, type="basic", per_passenger=False)
        assert calculator.insurance_price(insurance, passengers=4) == Decimal("25")

    def test_per_passenger_defaults_to_table_flag(self, calculator):
        insurance = InsuranceSelection(selected=True, type="basic")
        assert calculator.insurance_price(insurance, passengers=3) == Decimal("75")

    def test_unselected_insurance_is_free(self, calculator):
        insurance = InsuranceSelection(selected=False, type="premium")
        assert calculator.insurance_price(insurance, passengers=2) == Decimal("0")
        assert calculator.insurance_price(None) == Decimal("0")

    def test_unknown_tier_raises(self, calculator):
        with pytest.raises(ValidationError):
            calculator.insurance_price(InsuranceSelection(selected=True, type="platinum"))


class TestCalculate:
    """Aggregated extras totals."""

    def test_total_is_sum_of_components(self, calculator):
        extras = BookingExtras(
            seats=[
                SeatSelection(seat_number="12A", seat_type="window"),
                SeatSelection(seat_number="14C", seat_type="exit"),
            ],
            baggage=BaggageSelection(
                carry_on=True,
                checked_bags=[CheckedBag(type="20kg", quantity=1), CheckedBag(type="30kg", quantity=2)],
            ),
            insurance=InsuranceSelection(selected=True, type="premium", per_passenger=True),
        )

        result = calculator.calculate(extras, cabin_class="business", passengers=2, currency="AUD")

        seats = calculator.seat_price("business", "window") + calculator.seat_price("business", "exit")
        bags = calculator.bag_price("20kg", 1) + calculator.bag_price("30kg", 2)
        insurance = calculator.insurance_price(extras.insurance, 2)
        assert result.seats == seats == Decimal("70")
        assert result.baggage == bags == Decimal("145")
        assert result.insurance == insurance == Decimal("90")
        assert result.total == Decimal("305")
        assert result.totals == {"AUD": Decimal("305")}

    def test_carry_on_is_never_priced(self, calculator):
        extras = BookingExtras(baggage=BaggageSelection(carry_on=True, checked_bags=[]))
        result = calculator.calculate(extras)

        assert result.total == Decimal("0")
        assert result.items == ()

    def test_client_price_is_ignored(self, calculator):
        extras = BookingExtras(seats=[SeatSelection(seat_type="exit", price=1, currency="AUD")])
        assert calculator.calculate(extras).seats == Decimal("15")

    def test_totals_grouped_by_currency(self, calculator):
        extras = BookingExtras(
            seats=[SeatSelection(seat_type="exit", currency="usd")],
            baggage=BaggageSelection(checked_bags=[CheckedBag(type="20kg", quantity=1)]),
        )
        result = calculator.calculate(extras, currency="AUD")

        assert result.totals == {"USD": Decimal("15"), "AUD": Decimal("35")}

    def test_no_extras(self, calculator):
        assert calculator.calculate(None).total == Decimal("0")


class TestStayTotal:
    """Hotel stay pricing."""

    def test_room_breakfast_and_late_checkout(self):
        selection = HotelBookingSelection.model_validate({
            "room": {"pricePerNight": 200},
            "numberOfRooms": 2,
            "adults": 2,
            "children": 1,
            "extras": {
                "breakfast": {"selected": True, "pricePerPerson": 20},
                "lateCheckout": {"selected": True, "price": 50},
            },
        })

        # 200*3*2 + 20*3*3 + 50
        assert stay_total(selection, nights=3) == Decimal("1430")

    def test_unselected_extras_are_free(self):
        selection = HotelBookingSelection.model_validate({
            "room": {"pricePerNight": 150},
            "extras": {"breakfast": {"selected": False, "pricePerPerson": 20}},
        })
        assert stay_total(selection, nights=2) == Decimal("300")

    def test_zero_nights_raises(self):
        selection = HotelBookingSelection.model_validate({"room": {"pricePerNight": 150}})
        with pytest.raises(ValidationError):
            stay_total(selection, nights=0)

    def test_stay_longer_than_a_year_raises(self):
        selection = HotelBookingSelection.model_validate({"room": {"pricePerNight": 150}})
        with pytest.raises(ValidationError, match="365"):
            stay_total(selection, nights=10**9)

    @pytest.mark.parametrize("payload", [
        {"room": {"pricePerNight": -100}},
        {"room": {"pricePerNight": 100}, "extras": {"breakfast": {"selected": True, "pricePerPerson": -5}}},
        {"room": {"pricePerNight": 100}, "extras": {"lateCheckout": {"selected": True, "price": -50}}},
    ], ids=["room", "breakfast", "late-checkout"])
    def test_negative_stay_prices_are_rejected(self, payload):
        with pytest.raises(PydanticValidationError, match="greater than or equal to 0"):
            HotelBookingSelection.model_validate(payload)
