"""Custom exceptions for the link metadata pipeline."""


class LinkMetadataError(Exception):
    """Base exception for all link metadata errors."""

    pass


# ─── Unfurl Errors ───────────────────────────────────────────────


class UnfurlError(LinkMetadataError):
    """Base exception for failures talking to the unfurl API."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        self.message = message
        super().__init__(f"[{url}] {message}")


class UnfurlHTTPError(UnfurlError):
    """Raised when the unfurl API answers with a non-2xx status."""

    def __init__(self, url: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(url, f"HTTP error {status_code}")


class UnfurlConnectionError(UnfurlError):
    """Raised when the unfurl API cannot be reached or times out."""

    def __init__(self, url: str, reason: str) -> None:
        self.reason = reason
        super().__init__(url, f"Connection failed: {reason}")


class UnfurlPayloadError(UnfurlError):
    """Raised when the unfurl API returns a body we cannot use."""

    def __init__(self, url: str, reason: str) -> None:
        self.reason = reason
        super().__init__(url, f"Malformed payload: {reason}")
