"""
Exception taxonomy for SwiftChain services.

Every error carries an HTTP ``status_code`` and a stable ``code`` so the API
layer can render it without knowing which service raised it.
"""


class SwiftChainError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or self.code


class InvalidAmount(SwiftChainError, ValueError):
    """Amount is missing, not a number, or below the allowed minimum."""
    status_code = 400
    code = "invalid_amount"


class UnsupportedCurrency(SwiftChainError, ValueError):
    """Currency or asset is not supported."""
    status_code = 400
    code = "unsupported_currency"


class MissingField(SwiftChainError, ValueError):
    """A required field is absent."""
    status_code = 400
    code = "missing_field"

    def __init__(self, field_name: str):
        super().__init__(f"Missing required field: {field_name}")
        self.field_name = field_name


class InsufficientBalance(SwiftChainError, ValueError):
    """Wallet balance does not cover the requested amount."""
    status_code = 400
    code = "insufficient_balance"


class DuplicateHash(SwiftChainError, ValueError):
    """Transaction hash is already tracked."""
    status_code = 409
    code = "duplicate_hash"


class NotFound(SwiftChainError, LookupError):
    """Requested record does not exist."""
    status_code = 404
    code = "not_found"


class UpstreamUnavailable(SwiftChainError):
    """Price provider could not be reached or returned unusable data."""
    status_code = 503
    code = "upstream_unavailable"


class InvalidAddress(SwiftChainError, ValueError):
    """Not a valid Ethereum address."""
    status_code = 400
    code = "invalid_address"
