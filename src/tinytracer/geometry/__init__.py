from tinytracer.geometry.hittable import HitRecord, Hittable
from tinytracer.geometry.sphere import Sphere
from tinytracer.geometry.world import HittableList

__all__ = ["HitRecord", "Hittable", "Sphere", "HittableList"]
