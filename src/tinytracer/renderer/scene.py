# renderer/scene.py
from typing import Iterable
from tinytracer.core.vector import Vector3
from tinytracer.geometry.sphere import Sphere
from tinytracer.geometry.world import HittableList
from tinytracer.renderer.config import DEFAULT_SPHERES, SphereSpec


def build_scene(spheres: Iterable[SphereSpec] = DEFAULT_SPHERES) -> HittableList:
    """
    Builds the world from (center, radius) pairs.

    The returned list is shared by every render worker and must not be
    modified once rendering has started.
    """
    world = HittableList()
    for center, radius in spheres:
        world.add(Sphere(Vector3(*center), radius))
    return world
