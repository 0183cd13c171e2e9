from typing import Any, Dict, List, Optional


class RelayError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    public_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)

    def to_content(self) -> Dict[str, Any]:
        return {"error": self.public_message}


class ValidationError(RelayError):
    """Caller input is missing or malformed. Safe to show as-is."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.public_message = message


class SchemaError(RelayError):
    """Upstream payload does not match the expected envelope."""

    status_code = 400
    public_message = "Invalid data from Goodreads API"

    def __init__(self, details: List[Dict[str, Any]]):
        super().__init__(f"{len(details)} schema check(s) failed")
        self.details = details

    def to_content(self) -> Dict[str, Any]:
        return {"error": self.public_message, "details": self.details}


class UpstreamError(RelayError):
    """Network failure, timeout, non-2xx status or unparsable body from the catalog."""


class ConfigurationError(RuntimeError):
    pass
