"""
First-order MS5611 compensation.

The manufacturer's second-order correction for temperatures below 20 °C is
not applied; readings in that range carry the first-order error.
"""
from __future__ import annotations

from dataclasses import dataclass

from .acquisition import RawConversion
from .calibration import CalibrationSet


@dataclass(frozen=True)
class CompensationTerms:
    d_t: int
    temp: int
    off: int
    sens: int
    p: int


@dataclass(frozen=True)
class CompensatedReading:
    temperature: float  # degC
    pressure: float  # hPa


def _tdiv(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero (Python's ``//`` floors)."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def compensation_terms(calibration: CalibrationSet, raw: RawConversion) -> CompensationTerms:
    c1, c2, c3, c4, c5, c6 = calibration.as_tuple()
    d_t = raw.d2 - c5 * 2**8
    temp = 2000 + _tdiv(d_t * c6, 2**23)
    off = c2 * 2**16 + _tdiv(c4 * d_t, 2**7)
    sens = c1 * 2**15 + _tdiv(c3 * d_t, 2**8)
    p = _tdiv(_tdiv(raw.d1 * sens, 2**21) - off, 2**15)
    return CompensationTerms(d_t=d_t, temp=temp, off=off, sens=sens, p=p)


def compensate(calibration: CalibrationSet, raw: RawConversion) -> CompensatedReading:
    terms = compensation_terms(calibration, raw)
    return CompensatedReading(temperature=terms.temp / 100.0, pressure=terms.p / 100.0)
