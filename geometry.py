import numpy as np
from utils import vec, dot, add, sub, scale, normalize

class Hit:
    def __init__(self, t, point=None, normal=None, color=None):
        """Create a Hit with the given data.

        Parameters:
          t : float -- the t value of the intersection along the normalized ray direction
          point : (3,) -- the 3D point where the intersection happens
          normal : (3,) -- the 3D outward-facing unit normal to the surface at the hit point
          color : (3,) -- the flat color of the surface
        """
        self.t = t
        self.point = point
        self.normal = normal
        self.color = color

# Value to represent absence of an intersection
no_hit = Hit(np.inf)


class Surface:
    """Common base for everything a ray can hit."""

    def intersect(self, ray):
        """Return the Hit for this surface along the ray, or no_hit."""
        raise NotImplementedError


class Sphere(Surface):

    def __init__(self, center, radius, color):
        """Create a sphere with the given center and radius.

        Parameters:
          center : (3,) -- a 3D point specifying the sphere's center
          radius : float -- a Python float specifying the sphere's radius
          color : (3,) -- the solid color of the sphere
        """
        self.center = vec(center)
        self.radius = float(radius)
        self.color = vec(color)

    def intersect(self, ray):
        """Computes the first intersection between a ray and this sphere.

        The smaller root of the quadratic is used whatever its sign, so a
        sphere lying behind the ray origin still registers a hit.  Spheres
        with a non-positive radius are never hit.

        Parameters:
          ray : Ray -- the ray to intersect with the sphere
        Return:
          Hit -- the hit data
        """
        if self.radius <= 0.0:
            return no_hit

        d = normalize(ray.direction)
        v = sub(ray.origin, self.center)
        v_d = dot(v, d)
        delta = v_d * v_d - (dot(v, v) - self.radius * self.radius)
        if delta < 0:
            return no_hit

        root = np.sqrt(delta)
        t = min(-v_d + root, -v_d - root)
        point = add(ray.origin, scale(d, t))
        normal = normalize(sub(point, self.center))
        return Hit(t, point, normal, self.color)


def sphere_hit(sphere, ray):
    """Returns (point of hit, normal) for the ray and sphere, or None."""
    hit = sphere.intersect(ray)
    if hit is no_hit:
        return None
    return hit.point, hit.normal
