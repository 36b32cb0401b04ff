"""Exceptions raised by the search backend."""


class SearchBackendError(Exception):
    """The search backend could not execute a query."""

    def __init__(self, message: str, term: str | None = None):
        super().__init__(message)
        self.message = message
        self.term = term
