"""Exceptions raised by the browsing engine."""


class ValidationError(ValueError):
    """Raised when a filter state cannot be compiled into a store query.

    Only contract violations raise this (e.g. a product type that no
    category offers). Drift in user-supplied values is normalized instead.
    """

    pass
