from utils import *
from ray import *
from scenes import SceneDef
from cli import render


tan  = vec([0.7, 0.6, 0.3])
slate = vec([0.3, 0.3, 0.8])
gray = vec([0.35, 0.35, 0.35])

# three spheres in a row, the middle one pushed back so its neighbours overlap it
scene = Scene([
    Sphere(vec([200, 180, 120]), 90, tan),
    Sphere(vec([440, 180, 120]), 90, slate),
    Sphere(vec([320, 180, 220]), 120, gray),
])

settings = RenderSettings(640, 360,
                          projection=PERSPECTIVE,
                          lighting=DIRECTIONAL_LIGHT_NEAREST,
                          light_direction=vec([0.5, -1.0, -1.0]))

render(SceneDef(settings, scene), "three_spheres.png")
