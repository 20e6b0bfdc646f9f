"""
공급사 응답 필드 파싱 테스트
"""

from decimal import Decimal

import pytest

from dropship_engine.providers.parsing import (
    parse_dimensions,
    parse_images,
    parse_optional_decimal,
    parse_price,
    parse_stock,
    parse_tags,
    split_full_name,
)


class TestParsePrice:
    """가격 파싱 테스트"""

    def test_currency_string(self):
        """통화 기호와 단위가 포함된 가격"""
        assert parse_price("$19.99 USD") == Decimal("19.99")

    @pytest.mark.parametrize(
        "value,expected",
        [
            (25, Decimal("25")),
            (12.5, Decimal("12.5")),
            ("1,299.50", Decimal("1299.50")),
            ("€ 7", Decimal("7")),
            ("-5.00", Decimal("5.00")),
            ("$.99", Decimal("0.99")),
            (".5", Decimal("0.5")),
        ],
    )
    def test_numeric_inputs(self, value, expected):
        assert parse_price(value) == expected

    @pytest.mark.parametrize("value", [None, "", "free", "N/A", "$", "..", True, [], {}])
    def test_no_digits_defaults_to_zero(self, value):
        """숫자가 없으면 0"""
        assert parse_price(value) == Decimal(0)

    @pytest.mark.parametrize(
        "value", ["-$3", "--1", "12.3.4", "1e5", "$-0.01", "abc-99xyz", "  ", "\n", "½"]
    )
    def test_never_negative(self, value):
        """잘못된 문자열도 음수를 반환하지 않음"""
        assert parse_price(value) >= 0


class TestParseStock:
    """재고 파싱 테스트"""

    @pytest.mark.parametrize(
        "value,expected",
        [(10, 10), ("42", 42), ("7.9", 7), (-3, 0), ("-8", 0), ("12 units", 12)],
    )
    def test_values(self, value, expected):
        assert parse_stock(value) == expected

    def test_missing_uses_default(self):
        assert parse_stock(None) == 0
        assert parse_stock("", default=9999) == 9999
        assert parse_stock("none", default=5) == 5


def test_parse_optional_decimal():
    """선택 수치 필드"""
    assert parse_optional_decimal("1.5 kg") == Decimal("1.5")
    assert parse_optional_decimal(".5 kg") == Decimal("0.5")
    assert parse_optional_decimal(None) is None
    assert parse_optional_decimal("unknown") is None


class TestParseDimensions:
    """규격 파싱 테스트"""

    def test_dict(self):
        dims = parse_dimensions({"length": 10, "width": "20", "height": 5.5})
        assert dims.length == Decimal("10")
        assert dims.width == Decimal("20")
        assert dims.height == Decimal("5.5")

    def test_string(self):
        dims = parse_dimensions("10x20x5")
        assert (dims.length, dims.width, dims.height) == (Decimal(10), Decimal(20), Decimal(5))

    @pytest.mark.parametrize("value", [None, "10x20", {"length": 1}, 42, "axbxc"])
    def test_invalid(self, value):
        assert parse_dimensions(value) is None


def test_parse_tags():
    """태그 파싱 (리스트, 쉼표 문자열)"""
    assert parse_tags("summer, cotton ,, sale") == {"summer", "cotton", "sale"}
    assert parse_tags(["a", None, " b "]) == {"a", "b"}
    assert parse_tags(None) == set()


class TestParseImages:
    """이미지 파싱 테스트"""

    def test_dedupe_preserves_order(self):
        urls = parse_images(["b.jpg", "a.jpg", "b.jpg", "c.jpg", "a.jpg"])
        assert urls == ["b.jpg", "a.jpg", "c.jpg"]

    def test_dict_items_with_key_priority(self):
        images = [
            {"preview_url": "p1.png", "url": "u1.png"},
            {"url": "u2.png"},
            {"thumbnail_url": None},
        ]
        assert parse_images(images, "preview_url", "url") == ["p1.png", "u2.png"]

    def test_single_string_and_garbage(self):
        assert parse_images("only.jpg") == ["only.jpg"]
        assert parse_images(None) == []
        assert parse_images(123) == []


class TestSplitFullName:
    """이름 분리 테스트"""

    def test_first_token_and_remainder(self):
        assert split_full_name("Jane Mary Doe") == ("Jane", "Mary Doe")

    def test_single_token(self):
        assert split_full_name("Cher") == ("Cher", "")

    def test_empty(self):
        assert split_full_name("") == ("", "")
        assert split_full_name(None) == ("", "")
