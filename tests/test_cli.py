import numpy as np
import pytest
from PIL import Image, TiffImagePlugin, TiffTags

import raster_preview


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "RASTER_COLOUR_OVERWRITE_COLOR_MODEL",
        "RASTER_COLOUR_BRUTE_FORCE_MINMAX",
        "RASTER_COLOUR_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


def _float_tiff(path, rows, tiffinfo=None):
    img = Image.fromarray(np.array(rows, dtype=np.float32))
    if tiffinfo is None:
        img.save(path)
    else:
        img.save(path, tiffinfo=tiffinfo)
    return path


def test_brute_force_preview(tmp_path, capsys):
    src = _float_tiff(tmp_path / "elev.tif", [[0.0, 50.0], [100.0, 25.0]])
    assert raster_preview.main([str(src), "--brute-force"]) == 0

    out = tmp_path / "elev_preview.png"
    with Image.open(out) as im:
        assert im.mode == "RGBA"
        rgba = np.array(im)
    assert rgba[..., 0].tolist() == [[0, 127], [255, 63]]
    assert (rgba[..., 1] == rgba[..., 0]).all()
    assert (rgba[..., 3] == 255).all()

    printed = capsys.readouterr().out
    assert "[range]" in printed
    assert "Max: 100" in printed


def test_custom_output_path(tmp_path):
    src = _float_tiff(tmp_path / "in.tif", [[1.0, 2.0]])
    out = tmp_path / "sub.png"
    assert raster_preview.main([str(src), "--out", str(out), "--brute-force"]) == 0
    assert out.exists()
    assert not (tmp_path / "in_preview.png").exists()


def test_no_data_tag_turns_on_alpha(tmp_path):
    info = TiffImagePlugin.ImageFileDirectory_v2()
    info[42113] = "-1"
    info.tagtype[42113] = TiffTags.ASCII
    src = _float_tiff(tmp_path / "nd.tif", [[-1.0, 0.0], [50.0, 100.0]], info)

    assert raster_preview.main([str(src), "--brute-force"]) == 0
    with Image.open(tmp_path / "nd_preview.png") as im:
        rgba = np.array(im)
    assert rgba[..., 3].tolist() == [[0, 255], [255, 255]]
    assert rgba[0, 0, 0] == 0
    assert rgba[1, 1, 0] == 255


def test_env_flag_enables_brute_force(tmp_path, monkeypatch):
    monkeypatch.setenv("RASTER_COLOUR_BRUTE_FORCE_MINMAX", "1")
    src = _float_tiff(tmp_path / "env.tif", [[0.0, 10.0]])
    assert raster_preview.main([str(src)]) == 0
    with Image.open(tmp_path / "env_preview.png") as im:
        assert np.array(im)[..., 0].tolist() == [[0, 255]]


def test_natural_range_fallback_warns(tmp_path, capsys):
    src = _float_tiff(tmp_path / "flat.tif", [[0.0, 10.0]])
    assert raster_preview.main([str(src)]) == 0
    out = capsys.readouterr().out
    assert "[warn] flat.tif: no min/max tags" in out
    assert (tmp_path / "flat_preview.png").exists()


def test_multi_band_input_is_rejected(tmp_path, capsys):
    src = tmp_path / "rgb.png"
    Image.new("RGB", (2, 2), (10, 20, 30)).save(src)
    assert raster_preview.main([str(src)]) == 1
    assert "[error] no display mapping" in capsys.readouterr().err
    assert not (tmp_path / "rgb_preview.png").exists()


def test_missing_file(tmp_path, capsys):
    assert raster_preview.main([str(tmp_path / "nope.tif")]) == 1
    assert "[error] not found" in capsys.readouterr().err


def test_unreadable_file(tmp_path, capsys):
    src = tmp_path / "junk.tif"
    src.write_bytes(b"not an image")
    assert raster_preview.main([str(src)]) == 1
    assert "[error] cannot read" in capsys.readouterr().err


def test_debug_flag_prints_range_tier(tmp_path, capsys):
    src = _float_tiff(tmp_path / "dbg.tif", [[0.0, 1.0]])
    assert raster_preview.main([str(src), "--brute-force", "--debug"]) == 0
    out = capsys.readouterr().out
    assert "[debug]" in out
    assert "Tier: scan" in out
