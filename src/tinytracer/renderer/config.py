# renderer/config.py
"""
Render configuration.

All parameters of a render live in one RenderConfig value that is built once
(by the CLI or by a test) and handed to the camera, the shading estimator and
the scheduler.
"""
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

Triple = Tuple[float, float, float]
SphereSpec = Tuple[Triple, float]

# The original demo scene: a small sphere resting on a very large "ground" one.
DEFAULT_SPHERES: Tuple[SphereSpec, ...] = (
    ((0.0, 0.0, -1.0), 0.5),
    ((0.0, -100.5, -1.0), 100.0),
)


@dataclass(frozen=True)
class RenderConfig:
    image_width: int = 600
    aspect_ratio: float = 16.0 / 9.0
    samples_per_pixel: int = 100
    max_depth: int = 50
    num_workers: int = 4

    viewport_height: float = 2.0
    focal_length: float = 1.0

    # Hits at t <= t_min are ignored. 0.0 reproduces the reference image,
    # self-intersection acne included.
    t_min: float = 0.0
    diffuse_attenuation: float = 0.5
    sky_horizon: Triple = (1.0, 1.0, 1.0)
    sky_zenith: Triple = (0.5, 0.7, 1.0)

    spheres: Tuple[SphereSpec, ...] = field(default=DEFAULT_SPHERES)
    output_path: str = "image.png"
    seed: Optional[int] = None
    dispatch_rays: bool = False

    @property
    def image_height(self) -> int:
        return int(self.image_width / self.aspect_ratio)

    @property
    def pixel_count(self) -> int:
        return self.image_width * self.image_height

    @property
    def effective_samples_per_pixel(self) -> int:
        """Samples that end up summed in every pixel of the frame buffer."""
        return 1 if self.dispatch_rays else self.samples_per_pixel

    def validate(self) -> "RenderConfig":
        """Raise ValueError if the configuration cannot be rendered."""
        if self.aspect_ratio <= 0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.image_width < 2 or self.image_height < 2:
            raise ValueError(
                f"image must be at least 2x2 pixels, got "
                f"{self.image_width}x{self.image_height}"
            )
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be >= 1, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.num_workers < 1:
            raise ValueError(f"num_workers must be >= 1, got {self.num_workers}")
        for center, radius in self.spheres:
            if len(center) != 3:
                raise ValueError(f"sphere center must have 3 components, got {center!r}")
            if not radius > 0:
                raise ValueError(f"sphere radius must be positive, got {radius}")
        return self

    def with_overrides(self, **changes) -> "RenderConfig":
        """Copy with the given fields replaced. None is a value like any other."""
        return replace(self, **changes)
