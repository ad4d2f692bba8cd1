from __future__ import annotations

import pytest

from envpoll.station.acquisition import RawConversion
from envpoll.station.calibration import CalibrationSet
from envpoll.station.compensation import _tdiv, compensate, compensation_terms

# Datasheet example values (MS5611-01BA03, "typical values" column)
DATASHEET_CAL = CalibrationSet(c1=40127, c2=36924, c3=23317, c4=23282, c5=33464, c6=28312)
DATASHEET_RAW = RawConversion(d1=9085466, d2=8569150)


def test_datasheet_vector_terms() -> None:
    terms = compensation_terms(DATASHEET_CAL, DATASHEET_RAW)
    assert terms.d_t == 2366
    assert terms.temp == 2007
    assert terms.off == 2420281617
    assert terms.sens == 1315097036
    assert terms.p == 100009


def test_datasheet_vector_reading() -> None:
    reading = compensate(DATASHEET_CAL, DATASHEET_RAW)
    assert reading.temperature == pytest.approx(20.07)
    assert reading.pressure == pytest.approx(1000.09)


def test_compensation_is_deterministic() -> None:
    first = compensate(DATASHEET_CAL, DATASHEET_RAW)
    second = compensate(DATASHEET_CAL, DATASHEET_RAW)
    assert first == second


def test_negative_dt_uses_signed_truncating_arithmetic() -> None:
    raw = RawConversion(d1=9085466, d2=DATASHEET_CAL.c5 * 256 - 1000)
    terms = compensation_terms(DATASHEET_CAL, raw)
    assert terms.d_t == -1000
    # -28312000 / 2**23 = -3.375: truncation gives -3, flooring would give -4
    assert terms.temp == 1997
    assert terms.off == 36924 * 2**16 - 181890
    assert terms.sens == 40127 * 2**15 - 91082
    assert terms.p == 99987
    reading = compensate(DATASHEET_CAL, raw)
    assert reading.temperature == pytest.approx(19.97)
    assert reading.pressure == pytest.approx(999.87)


def test_extreme_inputs_do_not_wrap() -> None:
    cal = CalibrationSet(c1=0xFFFF, c2=0xFFFF, c3=0xFFFF, c4=0xFFFF, c5=0xFFFF, c6=0xFFFF)
    raw = RawConversion(d1=0xFFFFFF, d2=0)
    terms = compensation_terms(cal, raw)
    assert terms.d_t == -0xFFFF * 256
    assert terms.temp < 2000
    assert terms.off < 0xFFFF * 2**16


@pytest.mark.parametrize(
    ("numerator", "denominator", "expected"),
    [(7, 2, 3), (-7, 2, -3), (7, -2, -3), (-7, -2, 3), (-1, 128, 0), (0, 5, 0)],
)
def test_tdiv_truncates_toward_zero(numerator: int, denominator: int, expected: int) -> None:
    assert _tdiv(numerator, denominator) == expected
