"""Errors raised by the combiner, each mapped to an HTTP status."""


class CombineError(Exception):
    """Base class. ``error`` is the short message shown to clients."""

    status_code = 500
    error = "Failed to process files"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(detail or self.error)

    def to_dict(self) -> dict:
        if self.status_code >= 500:
            return {"error": self.error, "details": self.detail or self.error}
        return {"error": self.detail or self.error}


class MissingParameterError(CombineError):
    status_code = 400
    error = "Both sequencesUrl and metadataUrl are required"


class InvalidParameterError(MissingParameterError):
    error = "Invalid parameter"


class FetchError(CombineError):
    """Upstream document unavailable or malformed."""

    def __init__(self, url: str, detail: str):
        self.url = url
        super().__init__(f"{url}: {detail}")


class ProcessingError(CombineError):
    """Unexpected failure while joining or formatting records."""


class NoMatchError(CombineError):
    status_code = 404
    error = "No sequences matched the required fields"
