from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase keys on the wire and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


class SeatSelection(CamelModel):
    seat_number: str = ""
    seat_type: str
    price: float | None = None
    currency: str | None = None


class CheckedBag(CamelModel):
    type: str
    quantity: int = 1
    price: float | None = None
    currency: str | None = None


class BaggageSelection(CamelModel):
    carry_on: bool = True  # always included
    checked_bags: list[CheckedBag] = Field(default_factory=list)


class InsuranceSelection(CamelModel):
    selected: bool = False
    type: str = "basic"
    price: float | None = None
    currency: str | None = None
    per_passenger: bool | None = None


class BookingExtras(CamelModel):
    seats: list[SeatSelection] = Field(default_factory=list)
    baggage: BaggageSelection = Field(default_factory=BaggageSelection)
    insurance: InsuranceSelection | None = None


class RoomSelection(CamelModel):
    id: str | None = None
    name: str | None = None
    price_per_night: float = Field(ge=0)


class BreakfastSelection(CamelModel):
    selected: bool = False
    price_per_person: float = Field(0, ge=0)


class LateCheckoutSelection(CamelModel):
    selected: bool = False
    price: float = Field(0, ge=0)


class StayExtras(CamelModel):
    breakfast: BreakfastSelection | None = None
    late_checkout: LateCheckoutSelection | None = None


class HotelBookingSelection(CamelModel):
    room: RoomSelection
    number_of_rooms: int = 1
    adults: int = 1
    children: int = 0
    extras: StayExtras = Field(default_factory=StayExtras)
