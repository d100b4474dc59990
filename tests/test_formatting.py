"""Slugs and prices."""

from __future__ import annotations

import pytest

from magicmenu.utils.formatting import format_price, slugify, split_list


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Tokyo Sushi Bar", "tokyo-sushi-bar"),
        ("  Bella   Italia  ", "bella-italia"),
        ("Joe's Diner!", "joes-diner"),
        ("Fish -- & -- Chips", "fish-chips"),
        ("-Leading and trailing-", "leading-and-trailing"),
        ("Café Rouge", "caf-rouge"),
        ("!!!", ""),
        ("", ""),
        (None, ""),
    ],
)
def test_slugify(name, expected):
    assert slugify(name) == expected


def test_colliding_names_share_a_slug():
    assert slugify("Tokyo Sushi Bar") == slugify("tokyo  sushi-bar!")


@pytest.mark.parametrize(
    "cents, code, expected",
    [
        (1234, "USD", "$12.34"),
        (0, "USD", "$0.00"),
        (None, "USD", "$0.00"),
        (5, "usd", "$0.05"),
        (123456, "USD", "$1,234.56"),
        (999, "EUR", "€9.99"),
        (1500, "GBP", "£15.00"),
        (150000, "JPY", "¥1,500"),
        (1250, "JPY", "¥13"),
        (-1250, "JPY", "-¥13"),
        (1234, "CHF", "CHF 12.34"),
        (-250, "USD", "-$2.50"),
    ],
)
def test_format_price(cents, code, expected):
    assert format_price(cents, code) == expected


def test_format_price_defaults_to_usd():
    assert format_price(0) == "$0.00"


def test_split_list():
    assert split_list("Salmon, Lemon , ,None, Herbs") == ["Salmon", "Lemon", "Herbs"]
    assert split_list(None) == []
