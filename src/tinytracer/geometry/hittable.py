# geometry/hittable.py
from typing import Optional
from tinytracer.core.vector import Vector3
from tinytracer.core.ray import Ray


class HitRecord:
    """
    Where a ray met a surface and which way the surface faced it.

    The shading loop only needs the point and the stored normal: it scatters
    from p toward p + normal + a random unit vector. Because the normal is
    always flipped to oppose the incoming ray, that bounce leaves on the side
    the ray came from, whether it hit a sphere from outside or from inside.
    """
    __slots__ = ("p", "normal", "t", "front_face")

    def __init__(self, p: Vector3 = None, normal: Vector3 = None,
                 t: float = 0.0, front_face: bool = True):
        self.p = p
        self.normal = normal
        # Always within the (t_min, t_max] window the query was made with.
        self.t = t
        self.front_face = front_face

    def set_face_normal(self, ray: Ray, outward_normal: Vector3):
        """
        Stores outward_normal, negated when the ray travels along it.
        outward_normal must be unit length.
        """
        self.front_face = ray.direction.dot(outward_normal) < 0
        self.normal = outward_normal if self.front_face else -outward_normal

    def __repr__(self) -> str:
        return (f"HitRecord(p={self.p!r}, normal={self.normal!r}, "
                f"t={self.t}, front_face={self.front_face})")


class Hittable:
    """
    Anything the shading loop can query: a single sphere or a whole scene.

    hit() returns the closest intersection whose parameter lies in
    (t_min, t_max], or None when there is none. Implementations must be safe
    to call from several render workers at once, so they may not mutate
    themselves while answering.
    """
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        raise NotImplementedError(f"{type(self).__name__} does not implement hit()")
