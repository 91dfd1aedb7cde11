"""Exceptions raised by the settlement calculators."""


class SettlementInputError(ValueError):
    """Raised when a calculator receives missing or invalid input.

    Validation happens before any computation starts; the message is meant
    to be shown to the caller as-is.
    """
    pass


class TaxRulesNotFoundError(FileNotFoundError):
    """Raised when no tax rules file exists for the requested year."""
    pass
