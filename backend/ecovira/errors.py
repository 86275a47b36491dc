"""Pricing errors — raised synchronously by the pricing core, never partial."""


class PricingError(Exception):
    """Base class for all pricing core errors."""


class ValidationError(PricingError):
    """A selection key, amount or required field was not accepted."""


class CurrencyMismatchError(PricingError):
    """Components of a single quote were priced in different currencies."""


class ConfigurationError(PricingError):
    """The pricing table is missing a required entry or is malformed."""
