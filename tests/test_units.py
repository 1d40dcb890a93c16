import pytest

from gridtiles.units import parse_max_voltage, parse_power_output


def test_parse_max_voltage_takes_highest_circuit() -> None:
    assert parse_max_voltage("20000;400") == 20000
    assert parse_max_voltage("110000; 380000 ;20000") == 380000


def test_parse_max_voltage_skips_unparsable_tokens() -> None:
    assert parse_max_voltage("abc;15000;10 kV") == 15000
    assert parse_max_voltage("medium;;") == 0


def test_parse_max_voltage_unknown_is_zero() -> None:
    assert parse_max_voltage(None) == 0
    assert parse_max_voltage("") == 0
    assert parse_max_voltage("1_000") == 0


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1.2 GW", 1200.0),
        ("250 MW", 250.0),
        ("250mw", 250.0),
        ("500 kW", 0.5),
        ("3000000 W", 3.0),
        ("75", 75.0),
        ("  4.5 gw ", 4500.0),
    ],
)
def test_parse_power_output_converts_to_megawatts(value, expected) -> None:
    assert parse_power_output(value) == pytest.approx(expected)


def test_parse_power_output_does_not_strip_mw_as_watts() -> None:
    # "MW" must be matched before the bare "W" suffix.
    assert parse_power_output("2 MW") == pytest.approx(2.0)


def test_parse_power_output_rejects_garbage() -> None:
    assert parse_power_output("yes") == 0.0
    assert parse_power_output("MW") == 0.0
    assert parse_power_output("nan MW") == 0.0
    assert parse_power_output(None) == 0.0
