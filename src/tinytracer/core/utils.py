# core/utils.py
from tinytracer.core.vector import Vector3


def random_in_unit_sphere(rng) -> Vector3:
    """
    Returns a random point inside a unit sphere by rejection sampling the
    enclosing cube.
    """
    while True:
        p = Vector3.random(rng, -1.0, 1.0)
        if p.length_squared() < 1.0:
            return p


def random_unit_vector(rng) -> Vector3:
    """
    Returns a random unit vector (uniformly distributed over the sphere).
    """
    return random_in_unit_sphere(rng).unit_vector()


def random_in_hemisphere(normal: Vector3, rng) -> Vector3:
    """
    Returns a random point of the unit ball lying in the hemisphere around
    `normal`. Samples from the opposite side are mirrored through the origin.
    """
    in_unit_sphere = random_in_unit_sphere(rng)
    if in_unit_sphere.dot(normal) > 0.0:
        return in_unit_sphere
    return -in_unit_sphere
