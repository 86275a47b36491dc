"""Demo booking router — synthetic flight and stay bookings."""

from fastapi import APIRouter, Depends, HTTPException

from ecovira.config import settings
from ecovira.dependencies import get_demo_booking_factory, get_demo_booking_repository
from ecovira.schemas.booking import DemoFlightBookingRequest, DemoStayBookingRequest
from ecovira.services.demo_booking import DemoBookingFactory, DemoBookingRepository, get_demo_trip

router = APIRouter()


def require_demo_mode():
    if not settings.demo_mode_enabled:
        raise HTTPException(status_code=403, detail="Demo bookings are disabled")


@router.post("/demo", dependencies=[Depends(require_demo_mode)])
async def create_demo_booking(
    req: DemoFlightBookingRequest,
    factory: DemoBookingFactory = Depends(get_demo_booking_factory),
    repository: DemoBookingRepository = Depends(get_demo_booking_repository),
):
    """Create a demo flight booking priced with the requested extras."""
    booking = factory.create_flight_booking(req)
    repository.add(booking)
    return {
        "ok": True,
        "bookingId": booking.booking_id,
        "bookingReference": booking.booking_reference,
        "message": "Demo booking created successfully",
        "booking": booking.to_dict(),
    }


@router.post("/demo-stay", dependencies=[Depends(require_demo_mode)])
async def create_demo_stay_booking(
    req: DemoStayBookingRequest,
    factory: DemoBookingFactory = Depends(get_demo_booking_factory),
    repository: DemoBookingRepository = Depends(get_demo_booking_repository),
):
    """Create a demo hotel stay booking."""
    booking = factory.create_stay_booking(req)
    repository.add(booking)
    return {
        "ok": True,
        "bookingId": booking.booking_id,
        "bookingReference": booking.booking_reference,
        "message": "Demo stay booking created successfully",
        "booking": booking.to_dict(),
    }


@router.get("/demo/{booking_id}", dependencies=[Depends(require_demo_mode)])
async def get_demo_booking(
    booking_id: str,
    repository: DemoBookingRepository = Depends(get_demo_booking_repository),
):
    """Return a booking created in this process, or a mock trip for demo/test ids."""
    booking = repository.get(booking_id)
    if booking is not None:
        return {"ok": True, "trip": booking.to_trip()}

    trip = get_demo_trip(booking_id, settings.demo_departure_offset_hours)
    if trip is None:
        raise HTTPException(status_code=404, detail="Trip not found")
    return {"ok": True, "trip": trip}
