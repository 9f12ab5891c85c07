# camera/camera.py
from tinytracer.core.vector import Vector3
from tinytracer.core.ray import Ray


class Camera:
    """
    Fixed pinhole camera looking down -z from `origin`.

    The viewport is `viewport_height` world units tall, `aspect_ratio` times
    as wide, and sits `focal_length` in front of the eye. Everything is
    derived once; get_ray() is a pure function of (u, v).
    """
    def __init__(self, aspect_ratio: float, viewport_height: float = 2.0,
                 focal_length: float = 1.0, origin: Vector3 = None):
        self.aspect_ratio = aspect_ratio
        self.viewport_height = viewport_height
        self.focal_length = focal_length

        viewport_width = viewport_height * aspect_ratio
        self.origin = origin if origin is not None else Vector3(0.0, 0.0, 0.0)
        self.horizontal = Vector3(viewport_width, 0.0, 0.0)
        self.vertical = Vector3(0.0, viewport_height, 0.0)
        self.lower_left_corner = (self.origin -
                                  self.horizontal / 2.0 -
                                  self.vertical / 2.0 -
                                  Vector3(0.0, 0.0, focal_length))

    @classmethod
    def from_config(cls, config) -> "Camera":
        return cls(config.aspect_ratio,
                   viewport_height=config.viewport_height,
                   focal_length=config.focal_length)

    def get_ray(self, u: float, v: float) -> Ray:
        """
        Generates a ray passing through the viewport coordinates (u, v),
        with (0, 0) the lower-left and (1, 1) the upper-right corner.
        """
        direction = (self.lower_left_corner +
                     self.horizontal * u +
                     self.vertical * v -
                     self.origin)
        return Ray(self.origin, direction)
