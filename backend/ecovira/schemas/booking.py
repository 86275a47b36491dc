from datetime import date

from ecovira.schemas.extras import BookingExtras, CamelModel, HotelBookingSelection


class DemoFlightBookingRequest(CamelModel):
    # Required fields are checked by the factory so the error envelope stays uniform
    flight_id: str | None = None
    cabin_class: str = "economy"
    passengers: int = 1
    currency: str | None = None
    extras: BookingExtras | None = None
    payment_method: str | None = None
    passenger_email: str | None = None
    passenger_last_name: str | None = None
    phone_number: str | None = None
    sms_opt_in: bool = False


class DemoStayBookingRequest(CamelModel):
    hotel_id: str | None = None
    check_in: date | None = None
    nights: int = 1
    currency: str | None = None
    booking_selection: HotelBookingSelection | None = None
    payment_method: str | None = None
    passenger_email: str | None = None
    passenger_last_name: str | None = None
    phone_number: str | None = None
    sms_opt_in: bool = False
