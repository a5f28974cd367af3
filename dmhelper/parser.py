# dmhelper/parser.py
import logging
import math
from typing import Any, List, Optional, Tuple, Union

from pydantic import ValidationError

from .errors import (
    InvalidIdentifierTypeError,
    MissingFieldError,
    ParseError,
    UnexpectedShapeError,
)
from .models import CatalogImage, CatalogProduct, ProductRecord

logger = logging.getLogger(__name__)


def _dotted(loc: Tuple[Union[str, int], ...]) -> str:
    return ".".join(str(part) for part in loc)


def parse_price(raw: str) -> float:
    """Best-effort price parse. Anything unusable becomes 0.0."""
    try:
        value = float(raw.strip())
    except ValueError:
        logger.warning("Unparseable price %r, using 0.0", raw)
        return 0.0
    if not math.isfinite(value) or value < 0:
        logger.warning("Out of range price %r, using 0.0", raw)
        return 0.0
    return value


def clean_image_src(src: str) -> str:
    return src.strip().strip('"').strip()


def _translate(exc: ValidationError, prefix: Tuple[Union[str, int], ...] = ()) -> ParseError:
    # first error in field order decides the outcome
    err = exc.errors()[0]
    field = _dotted(prefix + tuple(err["loc"]))
    if err["type"] == "invalid_identifier_type":
        return InvalidIdentifierTypeError(err.get("ctx", {}).get("received", "unknown"))
    if err["type"] == "missing":
        return MissingFieldError(field)
    return UnexpectedShapeError(f"Invalid field {field}: {err['msg']}", field=field)


class ResponseParser:
    """Turns a decoded catalog payload into a ProductRecord."""

    def parse(self, raw_payload: Any) -> ProductRecord:
        if not isinstance(raw_payload, dict):
            raise UnexpectedShapeError(
                f"Expected a JSON object, got {type(raw_payload).__name__}"
            )
        if not raw_payload:
            raise UnexpectedShapeError("Catalog response is an empty object")

        try:
            payload = CatalogProduct.model_validate(raw_payload)
        except ValidationError as e:
            raise _translate(e) from e

        image = self._first_image(payload.images)
        return ProductRecord(
            identifier=payload.gtin,
            name=payload.title.headline,
            unit_price=parse_price(payload.price.price),
            image_reference=image,
        )

    def _first_image(self, images: List[Any]) -> Optional[str]:
        if not images:
            return None
        try:
            first = CatalogImage.model_validate(images[0])
        except ValidationError as e:
            raise _translate(e, ("images", 0)) from e
        return clean_image_src(first.src) or None


_default_parser = ResponseParser()


def parse_product(raw_payload: Any) -> ProductRecord:
    return _default_parser.parse(raw_payload)
