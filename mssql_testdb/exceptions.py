from typing import Any, Mapping, Optional


class InvalidConnectionString(ValueError):
    """Raised when a base connection string cannot be parsed.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (offending segment, position)
    """

    def __init__(self, message: str = "Invalid connection string", details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class InvalidArgument(ValueError):
    """Raised when a required argument is missing or has the wrong type."""

    def __init__(self, message: str = "Invalid argument", details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message
