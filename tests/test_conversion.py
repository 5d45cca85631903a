import logging

import pytest

from ingredient_utils.conversion import (
    ConversionResult,
    UnitConverter,
    UnitSystem,
    convert,
    convert_recipe_ingredients,
    format_amount,
    round_half_up,
)
from ingredient_utils.database import DirectoryUnavailable, MeasurementUnit, UnitDirectory, UnitSource
from ingredient_utils.ingredients import parse, parse_amount


@pytest.mark.parametrize(
    "amount, unit, expected_amount, expected_unit, expected_text",
    [
        (2, "cup", 473.0, "ml", "473 ml"),
        (2, "cups", 473.0, "ml", "473 ml"),
        (1, "lb", 454.0, "g", "454 g"),
        (3, "lb", 1.36, "kg", "1.36 kg"),
        (5, "cup", 1.18, "L", "1.18 L"),
        (1, "tsp", 5.0, "ml", "5 ml"),
        (2, "oz", 57.0, "g", "57 g"),
        (2, "T", 30.0, "ml", "30 ml"),
        (2, "Tbsp", 30.0, "ml", "30 ml"),
    ],
)
def test_convert_to_metric(converter, amount, unit, expected_amount, expected_unit, expected_text):
    result = converter.convert(amount, unit, UnitSystem.METRIC)
    assert result == ConversionResult(expected_amount, expected_unit, expected_text)


@pytest.mark.parametrize(
    "amount, unit, expected_amount, expected_unit, expected_text",
    [
        (500, "g", 1.1, "lb", "1.1 lb"),
        (100, "g", 3.5, "oz", "3½ oz"),
        (1, "kg", 2.2, "lb", "2.2 lb"),
        (500, "ml", 2.11, "cup", "2.11 cups"),
        (30, "ml", 2.0, "tbsp", "2 tbsp"),
        (5, "ml", 1.0, "tsp", "1 tsp"),
        (1, "l", 4.23, "cup", "4.23 cups"),
        (236.588, "ml", 1.0, "cup", "1 cup"),
    ],
)
def test_convert_to_imperial(
    converter, amount, unit, expected_amount, expected_unit, expected_text
):
    result = converter.convert(amount, unit, UnitSystem.IMPERIAL)
    assert result == ConversionResult(expected_amount, expected_unit, expected_text)


@pytest.mark.parametrize(
    "amount, unit, target, expected_text",
    [
        (1, "cup", UnitSystem.IMPERIAL, "1 cup"),
        (2, "cups", UnitSystem.IMPERIAL, "2 cups"),
        (500, "g", UnitSystem.METRIC, "500 g"),
        (1.5, "kg", UnitSystem.METRIC, "1½ kg"),
        (2, "cup", UnitSystem.NATIVE, "2 cups"),
    ],
)
def test_convert_keeps_units_already_in_target(converter, amount, unit, target, expected_text):
    result = converter.convert(amount, unit, target)
    assert result.amount == float(amount)
    assert result.unit == unit
    assert result.display_text == expected_text


@pytest.mark.parametrize(
    "amount, unit, expected_text",
    [
        (3, "cloves", "3 cloves"),
        (1, "pinch", "1 pinch"),
        (2, "furlong", "2 furlong"),
        (2, None, "2"),
        (None, "cup", "cup"),
        (None, None, ""),
    ],
)
def test_convert_passes_through_unconvertible(converter, amount, unit, expected_text):
    for target in UnitSystem:
        result = converter.convert(amount, unit, target)
        assert result.unit == unit
        assert result.amount == (None if amount is None else float(amount))
        assert result.display_text == expected_text


def test_scale_is_applied_before_conversion(converter):
    scaled = converter.convert(1, "cup", UnitSystem.METRIC, scale=2)
    assert scaled == converter.convert(2, "cup", UnitSystem.METRIC)
    assert converter.convert(1.5, "cups", "native", scale=2).display_text == "3 cups"
    assert converter.convert(3, "eggs", "metric", scale=0.5).display_text == "1½ eggs"


@pytest.mark.parametrize(
    "amount, unit, target, scale",
    [
        (250, "g", UnitSystem.IMPERIAL, 2),
        (0.5, "kg", UnitSystem.IMPERIAL, 4),
        (100, "ml", UnitSystem.IMPERIAL, 3),
        (8, "oz", UnitSystem.METRIC, 0.5),
        (1, "lb", UnitSystem.METRIC, 3),
        (1, "tbsp", UnitSystem.METRIC, 4),
    ],
)
def test_scaling_commutes_with_conversion(converter, amount, unit, target, scale):
    scaled = converter.convert(amount, unit, target, scale=scale)
    assert scaled == converter.convert(amount * scale, unit, target)

    base = converter.convert(amount, unit, target)
    if base.unit == scaled.unit:
        assert scaled.amount == pytest.approx(base.amount * scale, rel=0.03)


def test_convert_accepts_system_names(converter):
    assert converter.convert(2, "cup", "metric").unit == "ml"
    with pytest.raises(ValueError):
        converter.convert(2, "cup", "cubits")


def test_module_level_convert_uses_bundled_units():
    assert convert(1, "lb", UnitSystem.METRIC).display_text == "454 g"


def test_unit_directory_outage_passes_through(mocker, caplog):
    cup = MeasurementUnit("cup", "cup", "cups", "volume", metric_ml=236.588)
    source = mocker.Mock(spec=UnitSource)
    source.load_units.side_effect = [DirectoryUnavailable("connection refused"), [cup]]
    converter = UnitConverter(UnitDirectory(source))

    with caplog.at_level(logging.WARNING):
        result = converter.convert(2, "cup", UnitSystem.METRIC)
    assert result == ConversionResult(2.0, "cup", "2 cups")
    assert "connection refused" in caplog.text

    assert converter.convert(2, "cup", UnitSystem.METRIC).unit == "ml"


@pytest.mark.parametrize(
    "value, places, expected",
    [(2.5, 0, 3.0), (0.5, 0, 1.0), (3.49, 0, 3.0), (1.005, 2, 1.01), (2.675, 2, 2.68)],
)
def test_round_half_up(value, places, expected):
    assert round_half_up(value, places) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.25, "¼"),
        (0.333, "⅓"),
        (0.5, "½"),
        (1.5, "1½"),
        (2.666, "2⅔"),
        (4.75, "4¾"),
        (473.0, "473"),
        (2.1, "2.1"),
        (1.36, "1.36"),
        (5.25, "5.25"),
        (0.004, "0"),
        (None, ""),
    ],
)
def test_format_amount(value, expected):
    assert format_amount(value) == expected


@pytest.mark.parametrize("value", [0.25, 0.5, 1.5, 3.0, 2.1])
def test_formatted_amounts_parse_back(value):
    assert parse_amount(format_amount(value)) == pytest.approx(value)


def test_convert_recipe_ingredients(converter):
    ingredients = [
        parse("2 cups flour, sifted"),
        parse("3 eggs"),
        parse("Salt to taste"),
    ]
    converted = convert_recipe_ingredients(
        ingredients, UnitSystem.METRIC, scale=2, converter=converter
    )

    assert [c.display_text for c in converted] == [
        "946 ml flour, sifted",
        "6 eggs",
        "Salt, to taste",
    ]
    assert converted[0].amount == 946.0
    assert converted[0].unit == "ml"
    assert converted[2].amount is None


def test_module_level_convert_survives_outage(mocker):
    source = mocker.Mock(spec=UnitSource)
    source.load_units.side_effect = DirectoryUnavailable("down")

    result = convert(2, "cup", UnitSystem.METRIC, units=UnitDirectory(source))

    assert result == ConversionResult(2.0, "cup", "2 cups")


def test_injected_empty_directory_is_used(mocker):
    source = mocker.Mock(spec=UnitSource)
    source.load_units.return_value = []
    units = UnitDirectory(source)
    converter = UnitConverter(units)

    assert converter.units is units
    assert units.is_loaded is False
    assert converter.convert(2, "cup", UnitSystem.METRIC) == ConversionResult(2.0, "cup", "2 cups")
