# renderer/shading.py
"""
Monte-Carlo shading estimator.

Every surface is an ideal diffuser that keeps a fixed fraction of the light
per bounce, and the only light source is a sky gradient. Directions are
drawn uniformly from the unit ball around the normal without a cosine
weight; the resulting bias is part of the reference look.
"""
import math
from tinytracer.core.ray import Ray
from tinytracer.core.utils import random_in_hemisphere
from tinytracer.core.vector import Color, Vector3
from tinytracer.geometry.hittable import Hittable

DIFFUSE_ATTENUATION = 0.5
SKY_HORIZON = Color(1.0, 1.0, 1.0)
SKY_ZENITH = Color(0.5, 0.7, 1.0)


def sky_color(direction: Vector3, horizon: Color = SKY_HORIZON,
              zenith: Color = SKY_ZENITH) -> Color:
    """
    Background gradient: blends horizon into zenith by the height of the
    normalized direction.
    """
    unit_direction = direction.unit_vector()
    t = 0.5 * (unit_direction.y + 1.0)
    return horizon * (1.0 - t) + zenith * t


def ray_color(ray: Ray, world: Hittable, depth: int, rng, *,
              t_min: float = 0.0,
              attenuation: float = DIFFUSE_ATTENUATION,
              horizon: Color = SKY_HORIZON,
              zenith: Color = SKY_ZENITH) -> Color:
    """
    Returns the color seen along the ray after at most `depth` diffuse
    bounces. A path that runs out of bounces contributes black.

    Written as a loop rather than recursion: the throughput is multiplied by
    `attenuation` at every hit, and the escaping ray picks up the sky.
    """
    throughput = 1.0
    while depth > 0:
        rec = world.hit(ray, t_min, math.inf)
        if rec is None:
            return sky_color(ray.direction, horizon, zenith) * throughput

        target = rec.p + random_in_hemisphere(rec.normal, rng)
        ray = Ray(rec.p, target - rec.p)
        throughput *= attenuation
        depth -= 1
    return Color(0.0, 0.0, 0.0)
