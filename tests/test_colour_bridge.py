from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from raster_colour.colour_bridge import (
    ColourConversionSession,
    ConversionCase,
    bridge_description,
    classify,
    convert,
)
from raster_colour.colour_space import IHS, LINEAR_GRAY, SRGB, IHSColourSpace
from raster_colour.converter_cache import ConverterCache
from raster_colour.core_types import PixelDescription, Raster, Rect
from raster_colour.errors import ConfigurationError
from raster_colour.sample_types import SampleType

RGB8 = PixelDescription((8, 8, 8), SampleType.BYTE, SRGB)
GRAY8 = PixelDescription((8,), SampleType.BYTE, LINEAR_GRAY)
IHS8 = PixelDescription((8, 8, 8), SampleType.BYTE, IHS)


def _pixels(rows, dtype):
    return np.array(rows, dtype=dtype)


# Classification


def test_classify_all_six_cases():
    other_ihs = PixelDescription((8, 8, 8), SampleType.BYTE, IHSColourSpace())
    assert classify(IHS8, other_ihs) is ConversionCase.BOTH_PERCEPTUAL
    assert classify(IHS8, GRAY8) is ConversionCase.SRC_PERCEPTUAL_DST_NON_RGB
    assert classify(IHS8, RGB8) is ConversionCase.SRC_PERCEPTUAL_DST_RGB
    assert classify(GRAY8, IHS8) is ConversionCase.DST_PERCEPTUAL_SRC_NON_RGB
    assert classify(RGB8, IHS8) is ConversionCase.DST_PERCEPTUAL_SRC_RGB
    assert classify(RGB8, GRAY8) is ConversionCase.NEITHER_PERCEPTUAL


def test_bridge_uses_the_wider_side():
    ihs16 = PixelDescription((16, 16, 16), SampleType.SHORT, IHS)
    bridge = bridge_description(ihs16, GRAY8)
    assert bridge.sample_type is SampleType.SHORT
    assert bridge.component_sizes == (16, 16, 16)
    assert bridge.colour_space is SRGB

    bridge = bridge_description(GRAY8, IHS8)
    assert bridge.sample_type is SampleType.BYTE
    assert bridge.component_sizes == (8, 8, 8)


# Device legs


def test_neither_perceptual_identity_over_region_only():
    cache = ConverterCache()
    rng = np.random.default_rng(7)
    src = Raster(rng.integers(0, 256, size=(4, 4, 3), dtype=np.uint8))
    dst = Raster.zeros(4, 4, 3, SampleType.BYTE)
    session = ColourConversionSession(RGB8, RGB8, cache)
    assert session.case is ConversionCase.NEITHER_PERCEPTUAL

    session.convert(src, dst, Rect(1, 1, 2, 2))
    np.testing.assert_array_equal(dst.data[1:3, 1:3], src.data[1:3, 1:3])
    mask = np.ones((4, 4), dtype=bool)
    mask[1:3, 1:3] = False
    assert not dst.data[mask].any()


def test_region_is_aligned_with_raster_origins():
    cache = ConverterCache()
    src = Raster(np.full((2, 2, 3), 200, dtype=np.uint8), x=5, y=7)
    dst = Raster.zeros(4, 4, 3, SampleType.BYTE, x=4, y=6)
    convert(src, RGB8, dst, RGB8, Rect(5, 7, 2, 2), cache)
    assert dst.data[1:3, 1:3].tolist() == [[[200] * 3] * 2] * 2
    assert dst.data[0].sum() == 0


def test_region_outside_source_is_rejected():
    src = Raster.zeros(2, 2, 3, SampleType.BYTE)
    dst = Raster.zeros(4, 4, 3, SampleType.BYTE)
    with pytest.raises(ConfigurationError):
        convert(src, RGB8, dst, RGB8, Rect(1, 1, 2, 2), ConverterCache())


def test_integral_rgb_to_gray():
    src = Raster(_pixels([[[255, 255, 255], [0, 0, 0]]], np.uint8))
    dst = Raster.zeros(2, 1, 1, SampleType.BYTE)
    convert(src, RGB8, dst, GRAY8, cache=ConverterCache())
    assert dst.data[..., 0].tolist() == [[255, 0]]


def test_float_source_uses_xyz_path_without_converter():
    cache = ConverterCache()
    src_desc = PixelDescription((32, 32, 32), SampleType.FLOAT, SRGB)
    session = ColourConversionSession(src_desc, RGB8, cache)
    assert session.converter is None
    assert cache.constructed == 0

    src = Raster(_pixels([[[0.2, 0.2, 0.2], [1.0, 1.0, 1.0], [0.0, 0.0, 0.0]]], np.float32))
    dst = Raster.zeros(3, 1, 3, SampleType.BYTE)
    session.convert(src, dst)
    expected = np.array([[[51] * 3, [255] * 3, [0] * 3]])
    assert np.abs(dst.data.astype(int) - expected).max() <= 1


def test_float_destination_normalises_by_type_range():
    dst_desc = PixelDescription((64, 64, 64), SampleType.DOUBLE, SRGB)
    short_rgb = PixelDescription((16, 16, 16), SampleType.SHORT, SRGB)

    src = Raster(_pixels([[[51, 51, 51]]], np.uint8))
    dst = Raster.zeros(1, 1, 3, SampleType.DOUBLE)
    convert(src, RGB8, dst, dst_desc, cache=ConverterCache())
    np.testing.assert_allclose(dst.data, 0.2, atol=1e-5)

    src = Raster(_pixels([[[-32768, -32768, -32768], [32767, 32767, 32767]]], np.int16))
    dst = Raster.zeros(2, 1, 3, SampleType.DOUBLE)
    convert(src, short_rgb, dst, dst_desc, cache=ConverterCache())
    np.testing.assert_allclose(dst.data[0, 0], 0.0, atol=1e-6)
    np.testing.assert_allclose(dst.data[0, 1], 1.0, atol=1e-5)


# Perceptual legs


def test_src_perceptual_to_rgb():
    src = Raster(_pixels([[[128, 0, 0], [255, 0, 0]]], np.uint8))
    dst = Raster.zeros(2, 1, 3, SampleType.BYTE)
    session = ColourConversionSession(IHS8, RGB8, ConverterCache())
    assert session.converter is None
    session.convert(src, dst)
    assert dst.data.tolist() == [[[128, 128, 128], [255, 255, 255]]]


def test_rgb_to_dst_perceptual():
    src = Raster(_pixels([[[100, 100, 100], [0, 0, 0]]], np.uint8))
    dst = Raster.zeros(2, 1, 3, SampleType.BYTE)
    convert(src, RGB8, dst, IHS8, cache=ConverterCache())
    assert dst.data.tolist() == [[[100, 0, 0], [0, 0, 0]]]


def test_both_perceptual_goes_through_bridge():
    other = PixelDescription((8, 8, 8), SampleType.BYTE, IHSColourSpace())
    src = Raster(_pixels([[[128, 0, 0]]], np.uint8))
    dst = Raster.zeros(1, 1, 3, SampleType.BYTE)
    session = ColourConversionSession(IHS8, other, ConverterCache())
    assert session.bridge is not None
    session.convert(src, dst)
    assert dst.data.tolist() == [[[128, 0, 0]]]


def test_perceptual_legs_remap_signed_shorts():
    ihs16 = PixelDescription((16, 16, 16), SampleType.SHORT, IHS)
    other16 = PixelDescription((16, 16, 16), SampleType.SHORT, IHSColourSpace())
    # zero is mid-scale once shifted to unsigned
    src = Raster(_pixels([[[0, -32768, -32768]]], np.int16))
    dst = Raster.zeros(1, 1, 3, SampleType.SHORT)
    convert(src, ihs16, dst, other16, cache=ConverterCache())
    assert dst.data.tolist() == [[[0, -32768, -32768]]]

    rgb16 = PixelDescription((16, 16, 16), SampleType.SHORT, SRGB)
    rgb = Raster.zeros(1, 1, 3, SampleType.SHORT)
    convert(src, ihs16, rgb, rgb16, cache=ConverterCache())
    assert rgb.data.tolist() == [[[0, 0, 0]]]


def test_src_perceptual_to_non_rgb_uses_bridge_and_converter():
    cache = ConverterCache()
    session = ColourConversionSession(IHS8, GRAY8, cache)
    assert session.case is ConversionCase.SRC_PERCEPTUAL_DST_NON_RGB
    assert cache.constructed == 1

    src = Raster(_pixels([[[255, 0, 0], [0, 0, 0]]], np.uint8))
    dst = Raster.zeros(2, 1, 1, SampleType.BYTE)
    session.convert(src, dst)
    assert dst.data[..., 0].tolist() == [[255, 0]]


def test_non_rgb_to_dst_perceptual_uses_bridge_and_converter():
    cache = ConverterCache()
    session = ColourConversionSession(GRAY8, IHS8, cache)
    assert session.case is ConversionCase.DST_PERCEPTUAL_SRC_NON_RGB
    assert (LINEAR_GRAY, SRGB) in cache

    src = Raster(_pixels([[255, 0]], np.uint8))
    dst = Raster.zeros(2, 1, 3, SampleType.BYTE)
    session.convert(src, dst)
    assert dst.data.tolist() == [[[255, 0, 0], [0, 0, 0]]]


# Sessions and the shared cache


def test_sessions_share_one_converter():
    cache = ConverterCache()
    first = ColourConversionSession(RGB8, GRAY8, cache)
    second = ColourConversionSession(RGB8, GRAY8, cache)
    assert first.converter is second.converter
    assert cache.constructed == 1


def test_concurrent_tiles_in_one_session():
    cache = ConverterCache()
    session = ColourConversionSession(RGB8, GRAY8, cache)
    rng = np.random.default_rng(11)
    src = Raster(rng.integers(0, 256, size=(8, 8, 3), dtype=np.uint8))
    dst = Raster.zeros(8, 8, 1, SampleType.BYTE)
    tiles = [Rect(x, y, 4, 4) for y in (0, 4) for x in (0, 4)]

    with ThreadPoolExecutor(max_workers=4) as ex:
        list(ex.map(lambda r: session.convert(src, dst, r), tiles))

    whole = Raster.zeros(8, 8, 1, SampleType.BYTE)
    session.convert(src, whole)
    np.testing.assert_array_equal(dst.data, whole.data)
    assert cache.constructed == 1


def test_debug_reports_the_case(capsys):
    ColourConversionSession(RGB8, GRAY8, ConverterCache(), debug=True)
    out = capsys.readouterr().out
    assert "[debug] [convert]" in out
    assert "Case: NEITHER_PERCEPTUAL" in out
