"""Hardcoded demo booking references for end-to-end testing.

These references must always resolve in demo mode, never "Trip Not Found".
"""

import re

DEMO_BOOKING_REFERENCES: dict[str, str] = {
    "FLIGHT": "ECO-DEMO-FLT",
    "STAY": "ECO-DEMO-HTL",
    "CAR": "ECO-DEMO-CAR",
    "TRANSFER": "ECO-DEMO-TRF",
}

DEMO_BOOKING_IDS: dict[str, str] = {
    "FLIGHT": "demo-flight-booking-001",
    "STAY": "demo-stay-booking-001",
    "CAR": "demo-car-booking-001",
    "TRANSFER": "demo-transfer-booking-001",
}

DEMO_REFERENCE_PREFIX = "ECO-DEMO-"
LEGACY_TEST_REFERENCE = "TEST123"
DEMO_LAST_NAME = "Smith"
TEST_LAST_NAME = "test"
TEST_TRIP_ID = "test-trip-123"

DEMO_BOOKING_ID_PREFIXES = ("demo-", "test-")

# Encoded offsets above this fall back to the default
MAX_DEPARTURE_OFFSET_HOURS = 24 * 365

# "demo-48h" encodes a departure 48 hours from now
_DEPARTURE_OFFSET_RE = re.compile(r"demo-(\d+)h")

# Synthetic flight used for every demo flight booking
DEMO_FLIGHT: dict[str, str] = {
    "airline": "QF",
    "flight_number": "QF101",
    "from": "MEL",
    "to": "SYD",
}
DEMO_FLIGHT_DURATION_MINUTES = 90
DEMO_HOTEL_NAME = "Ecovira Luxury Hotel"


def is_demo_reference(reference: str) -> bool:
    """Check if a booking reference matches a demo reference."""
    ref = reference.strip().upper()
    return (
        ref in DEMO_BOOKING_REFERENCES.values()
        or ref == LEGACY_TEST_REFERENCE
        or ref.startswith(DEMO_REFERENCE_PREFIX)
    )


def is_demo_last_name(last_name: str) -> bool:
    name = last_name.strip().lower()
    return name in (DEMO_LAST_NAME.lower(), TEST_LAST_NAME)


def is_demo_booking(reference: str, last_name: str) -> bool:
    """Demo credentials need both a demo reference and a demo last name."""
    return is_demo_reference(reference) and is_demo_last_name(last_name)


def is_demo_booking_id(booking_id: str) -> bool:
    return booking_id == TEST_TRIP_ID or booking_id.startswith(DEMO_BOOKING_ID_PREFIXES)


def departure_offset_from_id(booking_id: str, default: int = 72) -> int:
    """Hours until departure encoded in a demo id, e.g. 'demo-48h' -> 48."""
    match = _DEPARTURE_OFFSET_RE.match(booking_id)
    if not match:
        return default
    digits = match.group(1)
    if len(digits) > len(str(MAX_DEPARTURE_OFFSET_HOURS)) or int(digits) > MAX_DEPARTURE_OFFSET_HOURS:
        return default
    return int(digits)
