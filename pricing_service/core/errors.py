"""Pricing error taxonomy.

``ValidationError`` is a caller mistake and ``ConfigurationError`` is a
deployment/data mistake. Both abort the calculation; no partial quote is
ever returned.
"""


class PricingError(Exception):
    """Base class for every failure raised by the pricing engine"""


class ValidationError(PricingError):
    """The quote request is unusable (empty items, negative distance, bad date, ...)"""


class ConfigurationError(PricingError):
    """The rate table has no entry for the requested service type"""
