"""Demo booking factory — synthetic bookings for end-to-end testing.

Records produced here have the same shape as a real supplier booking, so code
downstream of checkout cannot tell them apart structurally. Nothing is sent
to any supplier.
"""

import itertools
import logging
import secrets
import string
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, time as dt_time, timedelta, timezone
from typing import Protocol

from ecovira.data.currency import format_price, normalize_currency, round_amount
from ecovira.data.demo_constants import (
    DEMO_BOOKING_IDS,
    DEMO_BOOKING_REFERENCES,
    DEMO_FLIGHT,
    DEMO_FLIGHT_DURATION_MINUTES,
    DEMO_HOTEL_NAME,
    DEMO_REFERENCE_PREFIX,
    LEGACY_TEST_REFERENCE,
    TEST_TRIP_ID,
    departure_offset_from_id,
)
from ecovira.errors import ValidationError
from ecovira.schemas.booking import DemoFlightBookingRequest, DemoStayBookingRequest
from ecovira.schemas.quote import QuoteRequest
from ecovira.services.extras_calculator import stay_total
from ecovira.services.payment_router import choose_payment_provider
from ecovira.services.quote_builder import Quote, QuoteBuilder

logger = logging.getLogger(__name__)

_REFERENCE_ALPHABET = string.ascii_uppercase + string.digits
_REFERENCE_LENGTH = 6


class IdGenerator(Protocol):
    def new_booking_id(self) -> str: ...

    def new_reference(self) -> str: ...


class TimeRandomIdGenerator:
    """Booking ids from epoch millis, a process-local sequence and a random suffix."""

    def __init__(self):
        self._sequence = itertools.count(1)

    def new_booking_id(self) -> str:
        millis = time.time_ns() // 1_000_000
        return f"demo-{millis}-{next(self._sequence)}-{secrets.token_hex(4)}"

    def new_reference(self) -> str:
        suffix = "".join(secrets.choice(_REFERENCE_ALPHABET) for _ in range(_REFERENCE_LENGTH))
        return f"{DEMO_REFERENCE_PREFIX}{suffix}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DemoBooking:
    booking_id: str
    booking_reference: str
    supplier_reference: str
    payment_id: str
    payment_provider: str
    passenger_email: str
    passenger_last_name: str
    created_at: datetime
    itinerary: dict
    passenger_count: int = 1
    phone_number: str | None = None
    sms_opt_in: bool = False
    status: str = "ticketed"
    is_demo: bool = True
    quote: Quote | None = field(default=None, compare=False)

    def to_dict(self) -> dict:
        return {
            "id": self.booking_id,
            "bookingReference": self.booking_reference,
            "supplierReference": self.supplier_reference,
            "paymentId": self.payment_id,
            "paymentProvider": self.payment_provider,
            "status": self.status,
            "isDemo": self.is_demo,
            "passengerEmail": self.passenger_email,
            "passengerLastName": self.passenger_last_name,
            "phoneNumber": self.phone_number,
            "smsOptIn": self.sms_opt_in,
            "passengerCount": self.passenger_count,
            "createdAt": self.created_at.isoformat(),
            "itinerary": self.itinerary,
            "quote": self.quote.to_dict() if self.quote else None,
        }

    def to_trip(self) -> dict:
        """The booking in the shape returned by the demo trip lookup."""
        item = self.itinerary["items"][0]
        data = item["itemData"]
        trip = {
            "id": self.booking_id,
            "bookingReference": self.booking_reference,
            "status": self.status,
            "supplierReference": self.supplier_reference,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.created_at.isoformat(),
            "passengerLastName": self.passenger_last_name,
            "passengerCount": self.passenger_count,
            "total": self.itinerary["total"],
            "currency": self.itinerary["currency"],
        }
        if item["type"] == "flight":
            trip["flightData"] = {
                "airlineIata": data["airlineIata"],
                "flightNumber": data["flightNumber"],
                "departureAirport": data["departureAirport"],
                "arrivalAirport": data["arrivalAirport"],
                "scheduledDeparture": data["scheduledDeparture"],
                "scheduledArrival": data["scheduledArrival"],
                "pnr": self.supplier_reference,
            }
            trip["route"] = {
                "from": data["departureAirport"],
                "to": data["arrivalAirport"],
                "departDate": data["scheduledDeparture"],
            }
        else:
            trip["stayData"] = data
        return trip


class DemoBookingRepository:
    """Created demo bookings kept in process memory, oldest evicted first."""

    def __init__(self, max_entries: int = 1000):
        self.max_entries = max_entries
        self._bookings: OrderedDict[str, DemoBooking] = OrderedDict()

    def __len__(self) -> int:
        return len(self._bookings)

    def add(self, booking: DemoBooking) -> None:
        self._bookings[booking.booking_id] = booking
        self._bookings.move_to_end(booking.booking_id)
        while len(self._bookings) > self.max_entries:
            evicted, _ = self._bookings.popitem(last=False)
            logger.debug(f"Evicted demo booking {evicted}")

    def get(self, booking_id: str) -> DemoBooking | None:
        return self._bookings.get(booking_id)


class DemoBookingFactory:
    """Builds demo flight and stay bookings without calling a supplier."""

    def __init__(
        self,
        quote_builder: QuoteBuilder,
        id_generator: IdGenerator | None = None,
        default_currency: str = "AUD",
        departure_offset_hours: int = 72,
        flight_base_fare: float = 250,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.quote_builder = quote_builder
        self.id_generator = id_generator or TimeRandomIdGenerator()
        self.default_currency = normalize_currency(default_currency)
        self.departure_offset_hours = departure_offset_hours
        self.flight_base_fare = flight_base_fare
        self.clock = clock

    def _booking(self, request, itinerary: dict, passenger_count: int, quote: Quote | None = None) -> DemoBooking:
        now = self.clock()
        millis = int(now.timestamp() * 1000)
        decision = choose_payment_provider(request.payment_method, itinerary["currency"])
        return DemoBooking(
            booking_id=self.id_generator.new_booking_id(),
            booking_reference=self.id_generator.new_reference(),
            supplier_reference=f"DEMOPNR{millis}",
            payment_id=f"demo-payment-{millis}",
            payment_provider=decision.provider,
            passenger_email=request.passenger_email,
            passenger_last_name=request.passenger_last_name,
            phone_number=request.phone_number,
            sms_opt_in=request.sms_opt_in,
            passenger_count=passenger_count,
            created_at=now,
            itinerary=itinerary,
            quote=quote,
        )

    def create_flight_booking(self, request: DemoFlightBookingRequest) -> DemoBooking:
        if not request.flight_id or not request.passenger_email or not request.passenger_last_name:
            raise ValidationError("Missing required fields")

        currency = normalize_currency(request.currency or self.default_currency)
        quote = self.quote_builder.build_quote(QuoteRequest(
            base=self.flight_base_fare,
            currency=currency,
            extras=request.extras,
            cabin_class=request.cabin_class,
            passengers=request.passengers,
        ))

        departure = self.clock() + timedelta(hours=self.departure_offset_hours)
        arrival = departure + timedelta(minutes=DEMO_FLIGHT_DURATION_MINUTES)
        item_data = {
            "flightId": request.flight_id,
            "airlineIata": DEMO_FLIGHT["airline"],
            "flightNumber": DEMO_FLIGHT["flight_number"],
            "departureAirport": DEMO_FLIGHT["from"],
            "arrivalAirport": DEMO_FLIGHT["to"],
            "scheduledDeparture": departure.isoformat(),
            "scheduledArrival": arrival.isoformat(),
            "cabinClass": request.cabin_class,
            "price": float(quote.base),
            "currency": currency,
            "extras": request.extras.model_dump(by_alias=True) if request.extras else None,
            "raw": {"demo": True},
        }
        itinerary = {
            "status": "confirmed",
            "total": float(quote.total),
            "currency": currency,
            "items": [{"type": "flight", "itemData": item_data}],
        }

        booking = self._booking(request, itinerary, request.passengers, quote)
        logger.info(
            f"Demo flight booking {booking.booking_id} ({booking.booking_reference}) "
            f"created for {format_price(quote.total, currency)} via {booking.payment_provider}"
        )
        return booking

    def create_stay_booking(self, request: DemoStayBookingRequest) -> DemoBooking:
        if (
            not request.hotel_id
            or not request.passenger_email
            or not request.passenger_last_name
            or request.booking_selection is None
        ):
            raise ValidationError("Missing required fields")

        selection = request.booking_selection
        currency = normalize_currency(request.currency or self.default_currency)
        total = round_amount(stay_total(selection, request.nights), currency)

        check_in = request.check_in or self.clock().date()
        check_in_at = datetime.combine(check_in, dt_time.min, tzinfo=timezone.utc)
        try:
            check_out_at = check_in_at + timedelta(days=request.nights)
        except OverflowError:
            raise ValidationError(f"Check-out date out of range for check-in {check_in.isoformat()}")
        item_data = {
            "hotelId": request.hotel_id,
            "hotelName": DEMO_HOTEL_NAME,
            "checkIn": check_in_at.isoformat(),
            "checkOut": check_out_at.isoformat(),
            "nights": request.nights,
            "room": selection.room.model_dump(by_alias=True),
            "numberOfRooms": selection.number_of_rooms,
            "adults": selection.adults,
            "children": selection.children,
            "extras": selection.extras.model_dump(by_alias=True),
            "total": float(total),
            "currency": currency,
        }
        itinerary = {
            "status": "confirmed",
            "total": float(total),
            "currency": currency,
            "items": [{"type": "stay", "itemData": item_data}],
        }

        booking = self._booking(request, itinerary, selection.adults + selection.children)
        logger.info(
            f"Demo stay booking {booking.booking_id} ({booking.booking_reference}) "
            f"created for {format_price(total, currency)} via {booking.payment_provider}"
        )
        return booking


def generate_mock_trip(departure_offset_hours: int = 72, now: datetime | None = None) -> dict:
    """A ticketed MEL->SYD trip departing ``departure_offset_hours`` from now."""
    now = now or _utcnow()
    departure = now + timedelta(hours=departure_offset_hours)
    arrival = departure + timedelta(minutes=DEMO_FLIGHT_DURATION_MINUTES)
    return {
        "id": TEST_TRIP_ID,
        "bookingReference": LEGACY_TEST_REFERENCE,
        "itineraryId": "test-itinerary-123",
        "status": "ticketed",
        "supplierReference": "TESTPNR123",
        "createdAt": (now - timedelta(days=7)).isoformat(),
        "updatedAt": now.isoformat(),
        "flightData": {
            "airlineIata": DEMO_FLIGHT["airline"],
            "flightNumber": DEMO_FLIGHT["flight_number"],
            "departureAirport": DEMO_FLIGHT["from"],
            "arrivalAirport": DEMO_FLIGHT["to"],
            "scheduledDeparture": departure.isoformat(),
            "scheduledArrival": arrival.isoformat(),
            "pnr": "TESTPNR123",
            "ticketNumber": "TEST123456789",
        },
        "passengerLastName": "TEST",
        "passengerCount": 1,
        "route": {
            "from": DEMO_FLIGHT["from"],
            "to": DEMO_FLIGHT["to"],
            "departDate": departure.isoformat(),
        },
    }


def get_demo_trip(booking_id: str, default_offset_hours: int = 72, now: datetime | None = None) -> dict | None:
    """Mock trip for test-/demo- ids, None for anything else."""
    if booking_id == TEST_TRIP_ID or booking_id.startswith("test-"):
        return generate_mock_trip(default_offset_hours, now)
    for kind, fixed_id in DEMO_BOOKING_IDS.items():
        if booking_id == fixed_id:
            trip = generate_mock_trip(default_offset_hours, now)
            trip["id"] = booking_id
            trip["bookingReference"] = DEMO_BOOKING_REFERENCES[kind]
            return trip
    if booking_id.startswith("demo-"):
        hours = departure_offset_from_id(booking_id, default_offset_hours)
        trip = generate_mock_trip(hours, now)
        trip["id"] = booking_id
        return trip
    return None
