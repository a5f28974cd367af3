# tests/test_parser.py
import pytest
from pydantic import ValidationError

from dmhelper.errors import (
    InvalidIdentifierTypeError,
    MissingFieldError,
    UnexpectedShapeError,
)
from dmhelper.models import ProductRecord
from dmhelper.parser import ResponseParser, parse_price, parse_product


def test_parse_full_payload(nivea_payload):
    record = parse_product(nivea_payload)
    assert record.identifier == "4008400109609"
    assert record.name == "Nivea Creme"
    assert record.unit_price == 2.99
    assert record.image_reference == "http://x/y.jpg"


def test_parse_is_deterministic(nivea_payload):
    parser = ResponseParser()
    a = parser.parse(nivea_payload)
    b = parser.parse(nivea_payload)
    assert a.model_dump() == b.model_dump()


def test_empty_object_is_unexpected_shape():
    with pytest.raises(UnexpectedShapeError):
        parse_product({})


@pytest.mark.parametrize("raw", [[], "product", None, 42, [{"gtin": 1}]])
def test_non_object_is_unexpected_shape(raw):
    with pytest.raises(UnexpectedShapeError):
        parse_product(raw)


def test_unparseable_price_defaults_to_zero(nivea_payload):
    nivea_payload["price"]["price"] = "N/A"
    record = parse_product(nivea_payload)
    assert record.unit_price == 0.0
    assert record.name == "Nivea Creme"


@pytest.mark.parametrize("raw", ["", "abc", "-1.50", "nan", "inf", "2,99"])
def test_parse_price_lenient(raw):
    assert parse_price(raw) == 0.0


def test_parse_price_trims_whitespace():
    assert parse_price(" 1.45 ") == 1.45


def test_string_gtin_is_rejected(nivea_payload):
    nivea_payload["gtin"] = "4008400109609"
    with pytest.raises(InvalidIdentifierTypeError) as exc:
        parse_product(nivea_payload)
    assert exc.value.code == "INVALID_IDENTIFIER_TYPE"


def test_bool_gtin_is_rejected(nivea_payload):
    nivea_payload["gtin"] = True
    with pytest.raises(InvalidIdentifierTypeError):
        parse_product(nivea_payload)


def test_float_gtin_rendered_without_exponent(nivea_payload):
    nivea_payload["gtin"] = 4.008400109609e12
    assert parse_product(nivea_payload).identifier == "4008400109609"


@pytest.mark.parametrize(
    "mutate, field",
    [
        (lambda p: p.pop("gtin"), "gtin"),
        (lambda p: p["title"].pop("headline"), "title.headline"),
        (lambda p: p.pop("title"), "title"),
        (lambda p: p["price"].pop("price"), "price.price"),
        (lambda p: p.pop("images"), "images"),
        (lambda p: p["images"][0].pop("src"), "images.0.src"),
    ],
)
def test_missing_fields(nivea_payload, mutate, field):
    mutate(nivea_payload)
    with pytest.raises(MissingFieldError) as exc:
        parse_product(nivea_payload)
    assert exc.value.field == field


def test_numeric_price_is_unexpected_shape(nivea_payload):
    nivea_payload["price"]["price"] = 2.99
    with pytest.raises(UnexpectedShapeError) as exc:
        parse_product(nivea_payload)
    assert exc.value.data["field"] == "price.price"


def test_empty_headline_is_rejected(nivea_payload):
    nivea_payload["title"]["headline"] = ""
    with pytest.raises(UnexpectedShapeError):
        parse_product(nivea_payload)


def test_no_images(nivea_payload):
    nivea_payload["images"] = []
    assert parse_product(nivea_payload).image_reference is None


def test_first_image_is_unquoted(nivea_payload):
    nivea_payload["images"] = [{"src": '"http://x/a.jpg"'}, {"src": "http://x/b.jpg"}]
    assert parse_product(nivea_payload).image_reference == "http://x/a.jpg"


def test_extra_fields_are_ignored(nivea_payload):
    nivea_payload["brand"] = {"name": "Nivea"}
    assert parse_product(nivea_payload).identifier == "4008400109609"


def test_records_compare_by_identifier():
    a = ProductRecord(identifier="1", name="A", unit_price=1.0)
    b = ProductRecord(identifier="1", name="B", unit_price=2.0)
    c = ProductRecord(identifier="2", name="A", unit_price=1.0)
    assert a == b
    assert a != c
    assert len({a, b, c}) == 2


def test_record_identifier_is_immutable():
    record = ProductRecord(identifier="1", name="A")
    with pytest.raises(ValidationError):
        record.identifier = "2"


@pytest.mark.parametrize("extra", [{}, {"src": None}, "http://x/z.jpg", {"src": 5}])
def test_later_images_are_not_validated(nivea_payload, extra):
    nivea_payload["images"].append(extra)
    assert parse_product(nivea_payload).image_reference == "http://x/y.jpg"


def test_malformed_first_image(nivea_payload):
    nivea_payload["images"] = ["http://x/y.jpg"]
    with pytest.raises(UnexpectedShapeError) as exc:
        parse_product(nivea_payload)
    assert exc.value.data["field"] == "images.0"


def test_images_must_be_a_list(nivea_payload):
    nivea_payload["images"] = {"src": "http://x/y.jpg"}
    with pytest.raises(UnexpectedShapeError) as exc:
        parse_product(nivea_payload)
    assert exc.value.data["field"] == "images"


def test_blank_headline_is_rejected(nivea_payload):
    nivea_payload["title"]["headline"] = "   "
    with pytest.raises(UnexpectedShapeError):
        parse_product(nivea_payload)


def test_headline_is_trimmed(nivea_payload):
    nivea_payload["title"]["headline"] = "  Nivea Creme "
    assert parse_product(nivea_payload).name == "Nivea Creme"
