"""Custom exceptions for apidoc2md."""


class Apidoc2mdError(Exception):
    """Base exception for apidoc2md operations."""


class ResolutionError(Apidoc2mdError):
    """An input could not be resolved into an API document."""


class FetchError(ResolutionError):
    """Error during remote document fetching."""


class DocumentNotFoundError(FetchError):
    """The requested API document does not exist at the given location."""


class RateLimitError(FetchError):
    """Rate limited by the remote host."""


class ParseError(Apidoc2mdError):
    """Error while building the document tree."""
