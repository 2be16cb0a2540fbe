"""Atomic file output and YAML config I/O.

A host that polls an exported signature (e.g. a form backend waiting for the
user to finish signing) must never read a half-written PNG. Every write here
goes to a temporary sibling first and is renamed over the target once
complete; on failure the sibling is removed and RuntimeError is raised.

Usage:
    from sigpad.utils import fs
    fs.atomic_save_image(surface.to_uint8(), "out/signature.png")
    cfg = fs.load_yaml("configs/pad.v1.yaml")
"""

import contextlib
import os
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

import numpy as np
import yaml
from PIL import Image

PathLike = Union[str, Path]


def ensure_dir(p: PathLike) -> Path:
    """mkdir -p; returns the directory as a Path."""
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


@contextlib.contextmanager
def _replace_on_success(path: Path, tmp_path: Path, what: str) -> Iterator[Path]:
    """Yield tmp_path for writing; rename it onto path if the body succeeds."""
    ensure_dir(path.parent)
    try:
        yield tmp_path
        # POSIX rename overwrites atomically
        tmp_path.replace(path)
    except Exception as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise RuntimeError(f"Failed to write {what} {path} atomically: {e}") from e


def atomic_write_bytes(path: PathLike, data: bytes, tmp_suffix: str = ".tmp") -> None:
    """Write bytes through a fsync'd temporary file.

    Parameters
    ----------
    path : str or Path
        Destination
    data : bytes
        Full file content
    tmp_suffix : str
        Appended to the destination name for the temporary file

    Raises
    ------
    RuntimeError
        Write or rename failed (the temporary file is removed)
    """
    path = Path(path)
    with _replace_on_success(path, path.with_suffix(path.suffix + tmp_suffix), "file") as tmp:
        with open(tmp, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())


def _as_pil(img: Union[np.ndarray, Image.Image]) -> Image.Image:
    if isinstance(img, Image.Image):
        return img
    arr = np.asarray(img)
    if np.issubdtype(arr.dtype, np.floating):
        arr = np.round(np.clip(arr, 0.0, 1.0) * 255.0)
    if arr.dtype != np.uint8:
        arr = np.clip(arr, 0, 255).astype(np.uint8)
    return Image.fromarray(arr)


def atomic_save_image(
    img: Union[np.ndarray, Image.Image],
    path: PathLike,
    pil_kwargs: Optional[Dict[str, Any]] = None
) -> None:
    """Encode and save an image without exposing partial files.

    Parameters
    ----------
    img : np.ndarray or PIL.Image.Image
        (H, W, 4) / (H, W, 3) / (H, W) arrays, uint8 or float in [0, 1]
        (floats are clipped and scaled), or a Pillow image saved as-is
    path : str or Path
        Destination; the extension picks the format
    pil_kwargs : dict, optional
        Extra Image.save() arguments (e.g. optimize=True)
    """
    path = Path(path)
    pil_img = _as_pil(img)
    # Real extension stays last so Pillow can infer the format
    tmp_path = path.with_name(f"{path.stem}.tmp{path.suffix}")
    with _replace_on_success(path, tmp_path, "image") as tmp:
        pil_img.save(tmp, **(pil_kwargs or {}))


def atomic_yaml_dump(obj: Any, path: PathLike) -> None:
    """Dump with safe_dump (key order kept) and write atomically."""
    text = yaml.safe_dump(obj, default_flow_style=False, sort_keys=False, allow_unicode=True)
    atomic_write_bytes(path, text.encode('utf-8'))


def load_yaml(path: PathLike) -> Dict[str, Any]:
    """Parse a YAML file with safe_load.

    Returns an empty dict for an empty file.

    Raises
    ------
    FileNotFoundError
        Missing file
    yaml.YAMLError
        Malformed YAML (message names the file)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e
