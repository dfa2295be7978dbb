"""Tests for product form parsing helpers"""
import pytest

from nutrition_service.api.forms import ProductForm, parse_number, parse_product_fields
from nutrition_service.core.errors import ValidationError


class TestProductForm:

    def test_first_missing_follows_field_order(self):
        form = ProductForm(fields={"name": "Tea", "calories": "1"})
        assert form.first_missing() == "weight"

    def test_empty_value_counts_as_missing(self):
        form = ProductForm(fields={"name": ""})
        assert form.first_missing() == "name"

    def test_provided_ignores_unknown_and_empty(self):
        form = ProductForm(fields={"fat": "1", "sugar": "", "colour": "red"})
        assert form.provided() == {"fat": "1"}


class TestParseNumber:

    @pytest.mark.parametrize("raw,expected", [("0", 0.0), ("3.8", 3.8), (" 12 ", 12.0), ("1e2", 100.0)])
    def test_valid(self, raw, expected):
        assert parse_number("fat", raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "-0.5", "inf", "NaN"])
    def test_invalid(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            parse_number("fat", raw)
        assert exc_info.value.message == "Invalid value for fat"
        assert exc_info.value.details == {"field": "fat"}

    def test_parse_product_fields_keeps_name_text(self):
        assert parse_product_fields({"name": "7Up", "sodium": "0.01"}) == {"name": "7Up", "sodium": 0.01}
