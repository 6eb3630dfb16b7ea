import sys
import numpy as np
from geometry import Sphere, no_hit
from utils import *

"""
Core implementation of the ray caster.  Rays are cast once per pixel with no
recursion: the visible surface is shaded by a single cosine factor and the
color is returned as-is.
"""

CAMERA_FACING_FIRST_HIT = 'camera-facing-first-hit'
DIRECTIONAL_LIGHT_NEAREST = 'directional-light-nearest'
LIGHTING_MODES = (CAMERA_FACING_FIRST_HIT, DIRECTIONAL_LIGHT_NEAREST)

ORTHOGRAPHIC = 'orthographic'
PERSPECTIVE = 'perspective'
PROJECTIONS = (ORTHOGRAPHIC, PERSPECTIVE)

# depth of the default perspective point behind the image plane
PERSPECTIVE_DEPTH = -200.0


class PixelOutOfBoundsError(IndexError):
    """A viewport was asked for a pixel outside the image."""


class Ray:

    def __init__(self, origin, direction):
        """Create a ray with the given origin and direction.

        Parameters:
          origin : (3,) -- the start point of the ray, a 3D point
          direction : (3,) -- the direction of the ray, a 3D vector (not necessarily normalized)
        """
        self.origin = vec(origin)
        self.direction = vec(direction)


class OrthographicCamera:
    """Parallel projection looking down +z from the image plane z = 0."""

    direction = vec([0., 0., 1.])

    def generate_ray(self, x, y):
        return Ray(vec([x, y, 0.]), self.direction)


class PerspectiveCamera:

    def __init__(self, perspective_point):
        """Create a pinhole camera whose rays all pass through perspective_point."""
        self.perspective_point = vec(perspective_point)

    def generate_ray(self, x, y):
        """Compute the ray leaving the image plane at pixel (x, y)."""
        origin = vec([x, y, 0.])
        return Ray(origin, normalize(sub(origin, self.perspective_point)))


class DirectionalLight:

    def __init__(self, direction):
        """Create a light shining from the given direction (surface towards light)."""
        self.direction = normalize(direction)

    def illuminate(self, hit):
        """Compute the shading at a surface point due to this light."""
        cos_theta = max(0.0, dot(hit.normal, self.direction))
        return scale(hit.color, cos_theta)


def camera_facing(ray, hit):
    """Shade a hit by how directly its surface faces the ray."""
    cos_theta = abs(dot(hit.normal, normalize(ray.direction)))
    return scale(hit.color, cos_theta)


class Scene:

    def __init__(self, surfs, bg_color=black):
        """Create a scene containing the given objects, in order."""
        self.surfs = list(surfs)
        self.bg_color = vec(bg_color)

    def first_hit(self, ray):
        """Return the hit on the first surface in list order that the ray meets."""
        for surf in self.surfs:
            hit = surf.intersect(ray)
            if hit is not no_hit:
                return hit
        return no_hit

    def nearest_hit(self, ray):
        """Return the hit whose point lies closest to the ray origin.

        Distance is measured from the origin, not by t; on a tie the earlier
        surface in the list is kept.
        """
        closest_hit = no_hit
        closest_dist_sq = np.inf
        for surf in self.surfs:
            hit = surf.intersect(ray)
            if hit is no_hit:
                continue
            offset = sub(hit.point, ray.origin)
            dist_sq = dot(offset, offset)
            if dist_sq < closest_dist_sq:
                closest_hit = hit
                closest_dist_sq = dist_sq
        return closest_hit


def shade(ray, scene, lighting=CAMERA_FACING_FIRST_HIT, light=None):
    """Color seen along the ray, or the scene background if nothing is hit."""
    if lighting == CAMERA_FACING_FIRST_HIT:
        hit = scene.first_hit(ray)
        if hit is no_hit:
            return scene.bg_color
        return camera_facing(ray, hit)
    if lighting == DIRECTIONAL_LIGHT_NEAREST:
        if light is None:
            raise ValueError('lighting mode %r needs a light' % (lighting,))
        hit = scene.nearest_hit(ray)
        if hit is no_hit:
            return scene.bg_color
        return light.illuminate(hit)
    raise ValueError('Unknown lighting mode %r' % (lighting,))


class RenderSettings:

    def __init__(self, width, height, projection=ORTHOGRAPHIC, lighting=CAMERA_FACING_FIRST_HIT,
                 light_direction=None, perspective_point=None, max_value=255):
        """Create the fixed parameters of a render.

        Parameters:
          width, height : int -- image size in pixels, both positive
          projection : str -- ORTHOGRAPHIC or PERSPECTIVE
          lighting : str -- CAMERA_FACING_FIRST_HIT or DIRECTIONAL_LIGHT_NEAREST
          light_direction : (3,) -- direction towards the light, needed by DIRECTIONAL_LIGHT_NEAREST
          perspective_point : (3,) -- eye point of the perspective camera, defaults to (w/2, h/2, -200)
          max_value : int -- largest channel value of the output image
        """
        for name, size in (('width', width), ('height', height)):
            if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size <= 0:
                raise ValueError('%s must be a positive integer, got %r' % (name, size))
        if projection not in PROJECTIONS:
            raise ValueError('Unknown projection %r' % (projection,))
        if lighting not in LIGHTING_MODES:
            raise ValueError('Unknown lighting mode %r' % (lighting,))
        if lighting == DIRECTIONAL_LIGHT_NEAREST and light_direction is None:
            raise ValueError('lighting mode %r needs a light_direction' % (lighting,))

        self.width = int(width)
        self.height = int(height)
        self.projection = projection
        self.lighting = lighting
        # normalized up front so a zero-length direction is rejected with the other settings
        self.light_direction = None if light_direction is None else vec(normalize(light_direction))
        if perspective_point is None:
            perspective_point = [self.width / 2, self.height / 2, PERSPECTIVE_DEPTH]
        self.perspective_point = vec(perspective_point)
        self.max_value = max_value

    def make_camera(self):
        if self.projection == PERSPECTIVE:
            return PerspectiveCamera(self.perspective_point)
        return OrthographicCamera()

    def make_light(self):
        if self.light_direction is None:
            return None
        return DirectionalLight(self.light_direction)


def _is_pixel_index(v):
    return isinstance(v, (int, np.integer)) and not isinstance(v, bool)


def make_viewport(settings, scene):
    """Return the function mapping a pixel (x, y) to its color.

    The returned function has no side effects and can be called any number
    of times for any pixel inside the image.
    """
    camera = settings.make_camera()
    light = settings.make_light()
    width, height = settings.width, settings.height

    def render(x, y):
        if not (_is_pixel_index(x) and _is_pixel_index(y)
                and 0 <= x < width and 0 <= y < height):
            raise PixelOutOfBoundsError(
                'pixel (%r, %r) outside %dx%d image' % (x, y, width, height))
        ray = camera.generate_ray(x, y)
        return shade(ray, scene, settings.lighting, light)

    return render


def render_image(settings, scene, verbose=True):
    """
    render a ray cast image, rows top to bottom, pixels left to right.
    """
    viewport = make_viewport(settings, scene)
    nx, ny = settings.width, settings.height

    output_image = np.zeros((ny, nx, 3), np.float64)

    for i in range(ny):
        if verbose:
            print(f"rendering row {i+1}/{ny}...", file=sys.stderr)
        for j in range(nx):
            output_image[i, j] = viewport(j, i)

    return output_image
