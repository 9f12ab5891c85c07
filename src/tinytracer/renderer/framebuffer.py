# renderer/framebuffer.py
import numpy as np

from tinytracer.core.vector import Color
from tinytracer.renderer.tone_mapping import gamma2_tone_mapping


class FrameBuffer:
    """
    Per-pixel sample sums for one frame, indexed [y, x] with y = 0 the top row.

    Only the orchestrating thread writes to it. Each pixel receives exactly
    one (pre-summed) result; finalize() divides by samples_per_pixel.
    """
    def __init__(self, width: int, height: int, samples_per_pixel: int):
        self.width = width
        self.height = height
        self.samples_per_pixel = samples_per_pixel
        self.accumulation_buffer = np.zeros((height, width, 3), dtype=np.float64)
        self._written = np.zeros((height, width), dtype=bool)
        self._filled = 0

    @property
    def filled(self) -> int:
        return self._filled

    @property
    def is_complete(self) -> bool:
        return self._filled == self.width * self.height

    def accumulate(self, x: int, y: int, color: Color):
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValueError(
                f"pixel ({x}, {y}) outside {self.width}x{self.height} frame"
            )
        if self._written[y, x]:
            raise ValueError(f"pixel ({x}, {y}) already received its result")
        cell = self.accumulation_buffer[y, x]
        cell[0] += color.x
        cell[1] += color.y
        cell[2] += color.z
        self._written[y, x] = True
        self._filled += 1

    def finalize(self) -> np.ndarray:
        """Tone-mapped (H, W, 3) uint8 image. The frame must be complete."""
        if not self.is_complete:
            raise RuntimeError(
                f"frame incomplete: {self._filled} of {self.width * self.height} pixels written"
            )
        return gamma2_tone_mapping(self.accumulation_buffer, self.samples_per_pixel)

    def to_bytes(self) -> bytes:
        """Flat RGB8 bytes, row-major, top row first."""
        return self.finalize().tobytes()
