"""Test atomic filesystem operations.

Tests for sigpad.utils.fs:
    - atomic_write_bytes writes content and leaves no tmp file
    - atomic_save_image for uint8 and float arrays, and PIL images
    - YAML roundtrip preserves structure and key order
    - load_yaml: missing file, empty file, malformed YAML
    - ensure_dir creates parents

Run:
    pytest tests/test_fs.py -v
"""

import numpy as np
import pytest
import yaml
from PIL import Image

from sigpad.utils import fs


def test_ensure_dir(tmp_path):
    target = tmp_path / "a" / "b" / "c"
    out = fs.ensure_dir(target)
    assert out == target
    assert target.is_dir()
    # Second call is harmless
    fs.ensure_dir(target)


def test_atomic_write_bytes(tmp_path):
    path = tmp_path / "nested" / "blob.bin"
    fs.atomic_write_bytes(path, b"\x00\x01signature")

    assert path.read_bytes() == b"\x00\x01signature"
    assert list(path.parent.iterdir()) == [path], "tmp file should be gone"


def test_atomic_write_bytes_overwrites(tmp_path):
    path = tmp_path / "blob.bin"
    fs.atomic_write_bytes(path, b"first")
    fs.atomic_write_bytes(path, b"second")
    assert path.read_bytes() == b"second"


def test_atomic_save_image_uint8_rgba(tmp_path):
    arr = np.zeros((6, 9, 4), dtype=np.uint8)
    arr[2, 3] = (10, 20, 30, 200)
    path = tmp_path / "out" / "sig.png"

    fs.atomic_save_image(arr, path)

    with Image.open(path) as img:
        assert img.mode == "RGBA"
        assert img.size == (9, 6)
        assert img.getpixel((3, 2)) == (10, 20, 30, 200)
    assert sorted(p.name for p in path.parent.iterdir()) == ["sig.png"]


def test_atomic_save_image_float(tmp_path):
    arr = np.full((4, 4, 3), 0.5, dtype=np.float32)
    arr[0, 0] = 2.0  # clipped
    path = tmp_path / "grey.png"

    fs.atomic_save_image(arr, path)

    with Image.open(path) as img:
        assert img.getpixel((1, 1)) == (128, 128, 128)
        assert img.getpixel((0, 0)) == (255, 255, 255)


def test_atomic_save_image_pil(tmp_path):
    path = tmp_path / "pil.png"
    fs.atomic_save_image(Image.new("RGBA", (5, 3), (1, 2, 3, 4)), path)
    with Image.open(path) as img:
        assert img.getpixel((4, 2)) == (1, 2, 3, 4)


def test_yaml_roundtrip(tmp_path):
    data = {
        "schema": "pad.v1",
        "pad": {"min_width": 0.5, "max_width": 2.5, "pen_color": "navy"},
        "surface": {"width": 600, "height": 200},
    }
    path = tmp_path / "cfg.yaml"
    fs.atomic_yaml_dump(data, path)

    loaded = fs.load_yaml(path)
    assert loaded == data
    assert list(loaded) == ["schema", "pad", "surface"]


def test_load_yaml_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        fs.load_yaml(tmp_path / "nope.yaml")


def test_load_yaml_empty(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert fs.load_yaml(path) == {}


def test_load_yaml_malformed(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("pad: [unclosed\n", encoding="utf-8")
    with pytest.raises(yaml.YAMLError):
        fs.load_yaml(path)
