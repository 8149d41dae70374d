import numpy as np
import pytest

from raster_colour.errors import ConfigurationError
from raster_colour.sample_types import (
    SAMPLE_TYPES,
    SampleType,
    natural_range,
    sample_type_for_dtype,
    sample_type_info,
    to_signed,
    to_unsigned,
    wider,
)


def test_natural_ranges_are_exact():
    assert natural_range(SampleType.BYTE) == (0.0, 255.0)
    assert natural_range(SampleType.USHORT) == (0.0, 65535.0)
    assert natural_range(SampleType.SHORT) == (-32768.0, 32767.0)
    assert natural_range(SampleType.INT) == (float(-(2**31)), float(2**31 - 1))
    flt_max = float(np.finfo(np.float32).max)
    assert natural_range(SampleType.FLOAT) == (-flt_max, flt_max)
    assert natural_range(SampleType.DOUBLE)[1] == np.finfo(np.float64).max


def test_undefined_has_no_behaviour():
    assert natural_range(SampleType.UNDEFINED) is None
    assert SampleType.UNDEFINED not in SAMPLE_TYPES
    with pytest.raises(ConfigurationError):
        sample_type_info(SampleType.UNDEFINED)


def test_short_remap_round_trips_every_value():
    values = np.arange(-32768, 32768, dtype=np.int16)
    unsigned = to_unsigned(values, SampleType.SHORT)
    assert unsigned.dtype == np.uint16
    assert unsigned[0] == 0
    assert unsigned[-1] == 65535
    np.testing.assert_array_equal(to_signed(unsigned, SampleType.SHORT), values)
    np.testing.assert_array_equal(
        to_unsigned(to_signed(unsigned, SampleType.SHORT), SampleType.SHORT), unsigned
    )


def test_int_remap_shifts_by_two_to_the_31():
    values = np.array([-(2**31), -1, 0, 2**31 - 1], dtype=np.int32)
    unsigned = to_unsigned(values, SampleType.INT)
    assert unsigned.dtype == np.uint32
    assert unsigned.tolist() == [0, 2**31 - 1, 2**31, 2**32 - 1]
    np.testing.assert_array_equal(to_signed(unsigned, SampleType.INT), values)


@pytest.mark.parametrize(
    "sample_type, dtype",
    [
        (SampleType.BYTE, np.uint8),
        (SampleType.USHORT, np.uint16),
        (SampleType.FLOAT, np.float32),
        (SampleType.DOUBLE, np.float64),
    ],
)
def test_unsigned_and_float_types_pass_through(sample_type, dtype):
    values = np.array([0, 1, 7], dtype=dtype)
    np.testing.assert_array_equal(to_unsigned(values, sample_type), values)
    np.testing.assert_array_equal(to_signed(values, sample_type), values)


def test_short_narrowing_saturates_truncates_and_wraps():
    narrow = sample_type_info(SampleType.SHORT).narrow
    assert narrow(12.9) == 12.0
    assert narrow(-12.9) == -12.0
    assert narrow(40000.0) == -25536.0
    assert narrow(1e12) == -1.0  # int32 max, low 16 bits all set
    assert narrow(float("nan")) == 0.0


def test_int_and_float_narrowing():
    narrow_int = sample_type_info(SampleType.INT).narrow
    assert narrow_int(3e9) == float(2**31 - 1)
    assert narrow_int(-3e9) == float(-(2**31))
    narrow_float = sample_type_info(SampleType.FLOAT).narrow
    assert narrow_float(0.1) == float(np.float32(0.1))
    assert sample_type_info(SampleType.DOUBLE).narrow(0.1) == 0.1


def test_scan_excludes_no_data_and_nan():
    scan = sample_type_info(SampleType.FLOAT).scan
    samples = np.array([np.nan, 1.5, -2.0, -9999.0], dtype=np.float32)
    assert scan(samples, -9999.0) == (-2.0, 1.5)


def test_scan_compares_unsigned_types_unsigned():
    scan = sample_type_info(SampleType.USHORT).scan
    samples = np.array([0, 65535, 100, 40000], dtype=np.uint16)
    assert scan(samples, 65535.0) == (0.0, 40000.0)
    assert scan(samples, None) == (0.0, 65535.0)


def test_scan_signed_short():
    scan = sample_type_info(SampleType.SHORT).scan
    samples = np.array([-5, 7, -999], dtype=np.int16)
    assert scan(samples, -999.0) == (-5.0, 7.0)


def test_scan_without_usable_samples_is_none():
    scan = sample_type_info(SampleType.DOUBLE).scan
    assert scan(np.array([], dtype=np.float64), None) is None
    assert scan(np.array([-1.0, -1.0]), -1.0) is None
    assert scan(np.array([np.nan]), None) is None


def test_dtype_lookup_and_wider():
    assert sample_type_for_dtype(np.float32) is SampleType.FLOAT
    assert sample_type_for_dtype("int16") is SampleType.SHORT
    with pytest.raises(ConfigurationError):
        sample_type_for_dtype(np.int64)
    assert wider(SampleType.SHORT, SampleType.FLOAT) is SampleType.FLOAT
    assert wider(SampleType.DOUBLE, SampleType.BYTE) is SampleType.DOUBLE
    assert wider(SampleType.INT, SampleType.INT) is SampleType.INT
