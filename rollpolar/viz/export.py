from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image


def save_png(image: np.ndarray, out_path: Path) -> Path:
    """Write an (H, W, 4) uint8 RGBA buffer as PNG, creating parent folders."""
    out_path = Path(out_path).expanduser().resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    arr = np.ascontiguousarray(image, dtype=np.uint8)
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError(f"expected an (H, W, 4) RGBA buffer, got shape {arr.shape}")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise ValueError("cannot write an empty image")
    Image.fromarray(arr).save(out_path, format="PNG")
    return out_path
