"""Exceptions for the tenancy bounded context."""


class UnauthenticatedError(Exception):
    """Raised when a request carries no resolvable user identity.

    The presentation layer maps this to HTTP 401.
    """

    pass
