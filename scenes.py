import ray
from imagefile import save_png, write_ppm_image
from utils import *

class SceneDef(object):
    def __init__(self, settings, scene):
        self.settings = settings
        self.scene = scene

    def with_settings(self, **overrides):
        """Copy of this definition with some RenderSettings fields replaced."""
        s = self.settings
        params = dict(width=s.width, height=s.height, projection=s.projection,
                      lighting=s.lighting, light_direction=s.light_direction,
                      perspective_point=None, max_value=s.max_value)
        if 'width' not in overrides and 'height' not in overrides:
            params['perspective_point'] = s.perspective_point
        params.update(overrides)
        return SceneDef(settings=ray.RenderSettings(**params), scene=self.scene)

    def viewport(self):
        return ray.make_viewport(self.settings, self.scene)

    def render(self, output_path=None, verbose=True):
        pix = ray.render_image(self.settings, self.scene, verbose=verbose)
        if output_path is None:
            return pix
        if str(output_path).lower().endswith('.png'):
            save_png(pix, output_path)
        else:
            with open(output_path, 'w') as f:
                write_ppm_image(f, pix, self.settings.max_value)
        return pix


def SingleSphereExample():
    # a red sphere filling the middle of a 640x360 image, seen head on
    scene = ray.Scene([
        ray.Sphere(vec([320, 180, 100]), 100, red),
    ])
    settings = ray.RenderSettings(640, 360)
    return SceneDef(settings=settings, scene=scene)


def OverlappingSpheresExample():
    scene = ray.Scene([
        ray.Sphere(vec([260, 180, 160]), 110, blue),
        ray.Sphere(vec([380, 180, 100]), 90, red),
        ray.Sphere(vec([320, 300, 60]), 50, green),
    ])
    settings = ray.RenderSettings(640, 360,
                                  lighting=ray.DIRECTIONAL_LIGHT_NEAREST,
                                  light_direction=vec([-1, -1, -1]))
    return SceneDef(settings=settings, scene=scene)


def PerspectiveExample():
    scene = ray.Scene([
        ray.Sphere(vec([200, 180, 300]), 80, red),
        ray.Sphere(vec([320, 180, 500]), 80, green),
        ray.Sphere(vec([440, 180, 700]), 80, blue),
    ])
    settings = ray.RenderSettings(640, 360, projection=ray.PERSPECTIVE)
    return SceneDef(settings=settings, scene=scene)


EXAMPLES = {
    'single-sphere': SingleSphereExample,
    'overlapping-spheres': OverlappingSpheresExample,
    'perspective': PerspectiveExample,
}
