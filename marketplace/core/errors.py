class MarketplaceError(Exception):
    """
    Base class for every error raised by the marketplace core.

    `message` is safe to show to the user.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(MarketplaceError):
    """No identity is present for an operation that needs one."""


class RemoteFailure(MarketplaceError):
    """The remote store, storage or auth service rejected the call or was unreachable."""


class ValidationFailure(MarketplaceError):
    """Input rejected before any remote call was made."""


class ProductNotFound(MarketplaceError):
    """No product row with the requested id."""
