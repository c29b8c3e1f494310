from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from rollpolar.io.control_file import ControlData, load_control_file
from rollpolar.parser.bpolar import DecodedPolar, load_polar_file


@dataclass
class PolarSession:
    """
    Caller-owned state for one interactive analysis: the last control file,
    the last decoded polar and a render generation counter.

    Only the most recent render request is allowed to publish its image;
    an older one sees ``is_current`` turn false and may stop early.
    """

    control: Optional[ControlData] = None
    polar: Optional[DecodedPolar] = None
    polar_path: Optional[Path] = None
    _generation: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def load_control(self, path: Path) -> ControlData:
        self.control = load_control_file(path)
        return self.control

    def load_polar(self, path: Path) -> DecodedPolar:
        decoded = load_polar_file(path)
        self.polar = decoded
        self.polar_path = Path(path)
        return decoded

    def begin_render(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._generation

    def cancel_check(self, token: int) -> Callable[[], bool]:
        """Callback for ``render_polar_chart(cancel=...)``; true once superseded."""
        return lambda: not self.is_current(token)
