"""DMHelper exceptions."""

from typing import Any, Optional


ERROR_MESSAGES = {
    "UNEXPECTED_SHAPE": "Unexpected catalog response shape",
    "MISSING_FIELD": "Required field missing from catalog response",
    "INVALID_IDENTIFIER_TYPE": "Product identifier is not a number",
    "TRANSPORT": "Catalog request failed",
    "INVALID_RESPONSE": "Product not found",
}


class DMHelperError(Exception):
    """
    Structured exception for lookup and parsing failures.

    Usage:
        try:
            record = service.lookup("4008400109609")
        except DMHelperError as e:
            console.print(f"Error: {e.message}")
    """

    def __init__(self, code: str, message: str = "", **data: Any) -> None:
        self.code = code
        self.message = message or ERROR_MESSAGES.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "data": self.data,
        }


# ---------------------------
# Response parsing
# ---------------------------
class ParseError(DMHelperError):
    pass


class UnexpectedShapeError(ParseError):
    def __init__(self, message: str = "", **data: Any) -> None:
        super().__init__("UNEXPECTED_SHAPE", message, **data)


class MissingFieldError(ParseError):
    def __init__(self, field: str) -> None:
        super().__init__("MISSING_FIELD", f"Missing field: {field}", field=field)

    @property
    def field(self) -> str:
        return self.data["field"]


class InvalidIdentifierTypeError(ParseError):
    def __init__(self, received: str) -> None:
        super().__init__(
            "INVALID_IDENTIFIER_TYPE",
            f"gtin must be a number, got {received}",
            received=received,
        )


# ---------------------------
# Lookup
# ---------------------------
class ProductLookupError(DMHelperError):
    pass


class TransportError(ProductLookupError):
    def __init__(self, url: str, message: str = "", status_code: Optional[int] = None) -> None:
        super().__init__("TRANSPORT", message, url=url, status_code=status_code)

    @property
    def url(self) -> str:
        return self.data["url"]

    @property
    def status_code(self) -> Optional[int]:
        return self.data.get("status_code")


class InvalidResponseError(ProductLookupError):
    def __init__(self, cause: ParseError) -> None:
        super().__init__("INVALID_RESPONSE", cause.message, reason=cause.code)
        self.cause = cause
