from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class ConfigurationError(DomainError):
    """A required setting is missing."""


class BillingError(DomainError):
    """Base for billing failures."""


class InvalidTierError(BillingError):
    """The requested tier or price reference is not recognized."""


class SignatureInvalidError(BillingError):
    """The webhook payload did not pass Stripe signature verification."""


class ProviderUnavailableError(BillingError):
    """The call to Stripe failed; the cause is chained for logging."""
