"""Payment router — picks the payment provider for a checkout."""

import logging
from dataclasses import dataclass
from typing import Literal

logger = logging.getLogger(__name__)

PaymentProvider = Literal["stripe", "nowpayments"]

CARD_PROVIDER: PaymentProvider = "stripe"
CRYPTO_PROVIDER: PaymentProvider = "nowpayments"

KNOWN_METHODS = {"card", "crypto"}


@dataclass(frozen=True)
class PaymentDecision:
    provider: PaymentProvider
    reason: str


def choose_payment_provider(method: str | None = None, currency: str | None = None) -> PaymentDecision:
    """Crypto goes to NOWPayments; anything else, including junk, goes to card.

    The method is trimmed and matched case-insensitively, so ``" CRYPTO "``
    also routes to NOWPayments. ``currency`` does not influence the choice yet.
    """
    normalized = (method or "").strip().lower()
    if normalized == "crypto":
        return PaymentDecision(provider=CRYPTO_PROVIDER, reason="Crypto payment selected")

    if normalized and normalized not in KNOWN_METHODS:
        logger.debug(f"Unrecognized payment method {method!r}, falling back to card")
    return PaymentDecision(provider=CARD_PROVIDER, reason="Default to card payment")
