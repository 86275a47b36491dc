"""Extras pricing table — seat, baggage and insurance prices per cabin.

Amounts carry no currency of their own; they are charged in the currency of
the quote they end up in.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from types import MappingProxyType
from typing import Any

from ecovira.errors import ConfigurationError

logger = logging.getLogger(__name__)

CABIN_CLASSES = ("economy", "business", "first")
SEAT_TYPES = ("window", "aisle", "middle", "exit", "preferred")
BAG_TYPES = ("20kg", "30kg", "extra")
INSURANCE_TIERS = ("basic", "premium")

# Key used for the per-cabin fallback seat price
DEFAULT_SEAT_KEY = "default"

DEFAULT_EXTRAS_PRICING: dict[str, Any] = {
    "seats": {
        "economy": {
            "default": 0,  # free for economy
            "window": 0,
            "aisle": 0,
            "middle": 0,
            "exit": 15,
            "preferred": 10,
        },
        "business": {
            "default": 25,
            "window": 30,
            "aisle": 30,
            "middle": 25,
            "exit": 40,
            "preferred": 35,
        },
        "first": {
            "default": 50,
            "window": 60,
            "aisle": 60,
            "middle": 50,
            "exit": 75,
            "preferred": 65,
        },
    },
    "baggage": {
        "20kg": 35,
        "30kg": 55,
        "extra": 75,
    },
    "insurance": {
        "basic": 25,
        "premium": 45,
        "perPassenger": True,
    },
}


def _to_price(value: Any, where: str) -> Decimal:
    if isinstance(value, bool):
        raise ConfigurationError(f"Price for {where} must be a number, got {value!r}")
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ConfigurationError(f"Price for {where} must be a number, got {value!r}")
    if not price.is_finite() or price < 0:
        raise ConfigurationError(f"Price for {where} must be a non-negative number, got {value!r}")
    return price


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name)
    if not isinstance(section, Mapping) or not section:
        raise ConfigurationError(f"Pricing table is missing the '{name}' section")
    return section


@dataclass(frozen=True)
class ExtrasPricing:
    """Immutable extras price table, loaded once and shared by reference."""
    seats: Mapping[str, Mapping[str, Decimal]]
    baggage: Mapping[str, Decimal]
    insurance: Mapping[str, Decimal]
    insurance_per_passenger: bool = True

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ExtrasPricing":
        seats_raw = _section(raw, "seats")
        seats: dict[str, Mapping[str, Decimal]] = {}
        for cabin, prices in seats_raw.items():
            if not isinstance(prices, Mapping):
                raise ConfigurationError(f"Seat prices for cabin '{cabin}' must be a mapping")
            if DEFAULT_SEAT_KEY not in prices:
                raise ConfigurationError(f"Seat prices for cabin '{cabin}' have no '{DEFAULT_SEAT_KEY}' entry")
            seats[cabin.lower()] = MappingProxyType({
                seat_type: _to_price(price, f"seat {cabin}/{seat_type}")
                for seat_type, price in prices.items()
            })

        baggage = {
            bag_type: _to_price(price, f"bag {bag_type}")
            for bag_type, price in _section(raw, "baggage").items()
        }

        insurance_raw = dict(_section(raw, "insurance"))
        per_passenger = insurance_raw.pop("perPassenger", insurance_raw.pop("per_passenger", True))
        insurance = {
            tier: _to_price(price, f"insurance {tier}")
            for tier, price in insurance_raw.items()
        }
        if not insurance:
            raise ConfigurationError("Pricing table has no insurance tiers")

        return cls(
            seats=MappingProxyType(seats),
            baggage=MappingProxyType(baggage),
            insurance=MappingProxyType(insurance),
            insurance_per_passenger=bool(per_passenger),
        )

    def seat_types(self) -> frozenset[str]:
        """Every seat type any cabin knows about, plus the canonical ones."""
        known = set(SEAT_TYPES)
        for prices in self.seats.values():
            known.update(k for k in prices if k != DEFAULT_SEAT_KEY)
        return frozenset(known)

    def to_dict(self) -> dict:
        """Serializable view in the same shape as the source table."""
        return {
            "seats": {
                cabin: {k: float(v) for k, v in prices.items()}
                for cabin, prices in self.seats.items()
            },
            "baggage": {k: float(v) for k, v in self.baggage.items()},
            "insurance": {
                **{k: float(v) for k, v in self.insurance.items()},
                "perPassenger": self.insurance_per_passenger,
            },
        }


def load_extras_pricing(path: str | Path | None = None) -> ExtrasPricing:
    """Build the pricing table from a JSON file, or the built-in defaults."""
    if not path:
        return ExtrasPricing.from_dict(DEFAULT_EXTRAS_PRICING)

    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigurationError(f"Pricing file not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Pricing file {path} is not valid JSON: {e}")

    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"Pricing file {path} must contain a JSON object")

    pricing = ExtrasPricing.from_dict(raw)
    logger.info(f"Loaded extras pricing from {path} ({len(pricing.seats)} cabins)")
    return pricing
