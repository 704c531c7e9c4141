"""Filesystem helpers: atomic writes and YAML handling.

Provides:
    - Atomic writes: tmp file → fsync → rename (readers never see partial files)
    - YAML load/dump (PyYAML safe_load / safe_dump)
    - Atomic PNG save for preview images (Pillow)
    - Directory creation with exist_ok semantics

Used by:
    - validators: loading sand_garden.v1.yaml configs
    - scripts/preview_rake.py: writing rake_preview.png and metadata.yaml

All paths go through pathlib.Path.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
import yaml
from PIL import Image


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory (and parents) if missing; return it as a Path."""
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(
    path: Union[str, Path],
    data: bytes,
    tmp_suffix: str = ".tmp"
) -> None:
    """Write bytes to ``path`` atomically.

    Parameters
    ----------
    path : Union[str, Path]
        Target file path
    data : bytes
        Payload
    tmp_suffix : str
        Suffix of the sibling temporary file, default ".tmp"

    Raises
    ------
    RuntimeError
        If the write or rename fails; the temporary file is removed.
    """
    path = Path(path)
    ensure_dir(path.parent)
    tmp_path = path.with_suffix(path.suffix + tmp_suffix)

    try:
        with open(tmp_path, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    except OSError as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise RuntimeError(f"Failed to write {path} atomically: {e}") from e


def atomic_write_text(path: Union[str, Path], text: str, encoding: str = "utf-8") -> None:
    """Write text atomically (see atomic_write_bytes)."""
    atomic_write_bytes(path, text.encode(encoding))


def atomic_save_image(
    img: Union[np.ndarray, Image.Image],
    path: Union[str, Path],
    pil_kwargs: Optional[Dict[str, Any]] = None
) -> None:
    """Save an image atomically.

    Parameters
    ----------
    img : Union[np.ndarray, PIL.Image.Image]
        - numpy uint8 (H, W) or (H, W, 3)
        - numpy float (H, W) or (H, W, 3) in [0, 1] (scaled to uint8)
        - an existing Pillow image
    path : Union[str, Path]
        Target path; the extension selects the format
    pil_kwargs : dict, optional
        Extra keyword arguments for ``Image.save``
    """
    path = Path(path)
    ensure_dir(path.parent)

    if isinstance(img, np.ndarray):
        if img.dtype != np.uint8:
            img = (np.clip(img, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)
        img = Image.fromarray(img)

    fmt = path.suffix.lstrip('.').upper() or 'PNG'
    if fmt == 'JPG':
        fmt = 'JPEG'

    tmp_path = path.with_suffix(path.suffix + '.tmp')
    try:
        img.save(tmp_path, format=fmt, **(pil_kwargs or {}))
        tmp_path.replace(path)
    except OSError as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise RuntimeError(f"Failed to save image {path} atomically: {e}") from e


def atomic_yaml_dump(obj: Any, path: Union[str, Path]) -> None:
    """Dump ``obj`` as YAML atomically (safe_dump, insertion order kept)."""
    yaml_str = yaml.safe_dump(
        obj,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True
    )
    atomic_write_text(path, yaml_str)


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML file with safe_load.

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist
    yaml.YAMLError
        If parsing fails (message includes the path)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e
