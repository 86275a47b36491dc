"""Currency utilities — minor units, rounding and Stripe unit amounts."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ecovira.errors import ValidationError

# Currencies whose smallest unit is not 1/100.
# Source: https://stripe.com/docs/currencies
MINOR_UNITS_BY_CURRENCY: dict[str, int] = {
    # Zero decimal
    "BIF": 1, "CLP": 1, "DJF": 1, "GNF": 1, "JPY": 1, "KMF": 1,
    "KRW": 1, "MGA": 1, "PYG": 1, "RWF": 1, "UGX": 1, "VND": 1,
    "VUV": 1, "XAF": 1, "XOF": 1, "XPF": 1,
    # Three decimal
    "BHD": 1000, "JOD": 1000, "KWD": 1000, "OMR": 1000, "TND": 1000,
}

DEFAULT_MINOR_UNIT = 100

CURRENCY_SYMBOLS: dict[str, str] = {
    "AUD": "A$", "USD": "$", "CAD": "CA$", "GBP": "£", "EUR": "€",
    "JPY": "¥", "NZD": "NZ$", "SGD": "S$", "HKD": "HK$", "INR": "₹",
    "KRW": "₩", "AED": "AED",
}


def normalize_currency(currency: str) -> str:
    """Upper-case and trim an ISO 4217 code."""
    return currency.strip().upper()


def minor_unit_for_currency(currency: str) -> int:
    """Multiplier from a display amount to the currency's smallest unit."""
    return MINOR_UNITS_BY_CURRENCY.get(normalize_currency(currency), DEFAULT_MINOR_UNIT)


def round_amount(amount: Decimal, currency: str) -> Decimal:
    """Round half-up to the currency's minor unit (0.01 for most, 1 for JPY)."""
    exponent = Decimal(1) / Decimal(minor_unit_for_currency(currency))
    if not amount.is_finite():
        raise ValidationError(f"Amount must be a finite number, got {amount}")
    try:
        return amount.quantize(exponent, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"Amount {amount:.6g} {currency} is out of range")


def to_stripe_unit_amount(amount: Decimal, currency: str) -> int:
    """Convert a display amount to Stripe's integer unit_amount."""
    if not amount.is_finite():
        raise ValidationError(f"Amount must be a finite number, got {amount}")
    scaled = amount * minor_unit_for_currency(currency)
    try:
        return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        raise ValidationError(f"Amount {amount:.6g} {currency} is out of range")


def from_stripe_unit_amount(unit_amount: int, currency: str) -> Decimal:
    """Convert Stripe's unit_amount back to a display amount."""
    return Decimal(unit_amount) / Decimal(minor_unit_for_currency(currency))


def format_price(amount: Decimal | float, currency: str = "AUD") -> str:
    """Format a price with currency symbol for display."""
    code = normalize_currency(currency)
    symbol = CURRENCY_SYMBOLS.get(code, code + " ")
    places = len(str(minor_unit_for_currency(code))) - 1
    return f"{symbol}{float(amount):,.{places}f}"
