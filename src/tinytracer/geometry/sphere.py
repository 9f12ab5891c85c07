# geometry/sphere.py
import math
from typing import Optional
from tinytracer.core.vector import Vector3
from tinytracer.core.ray import Ray
from tinytracer.geometry.hittable import Hittable, HitRecord


class Sphere(Hittable):
    """
    Represents a sphere defined by its center and radius.
    """
    __slots__ = ("_center", "_radius")

    def __init__(self, center: Vector3, radius: float):
        if not radius > 0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self._center = center
        self._radius = float(radius)

    @property
    def center(self) -> Vector3:
        return self._center

    @property
    def radius(self) -> float:
        return self._radius

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        oc = ray.origin - self._center
        a = ray.direction.length_squared()
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self._radius * self._radius
        discriminant = half_b * half_b - a * c

        if discriminant < 0:
            return None

        sqrt_disc = math.sqrt(discriminant)
        # Find the nearest root that lies in the acceptable range
        root = (-half_b - sqrt_disc) / a
        if root <= t_min or root > t_max:
            root = (-half_b + sqrt_disc) / a
            if root <= t_min or root > t_max:
                return None

        rec = HitRecord()
        rec.t = root
        rec.p = ray.at(rec.t)
        outward_normal = (rec.p - self._center) / self._radius
        rec.set_face_normal(ray, outward_normal)
        return rec

    def __repr__(self) -> str:
        return f"Sphere({self._center!r}, {self._radius})"
