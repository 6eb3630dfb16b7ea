import unittest
import numpy as np
from ray import *
from geometry import sphere_hit
from utils import normalize, vec, dot, add, sub, scale, div, ZeroLengthVectorError

def assert_direction_matches(v, w):
    np.testing.assert_almost_equal(normalize(v), normalize(w))


class TestVectorMath(unittest.TestCase):

    def test_arithmetic(self):
        a = vec([1, 2, 3])
        b = vec([4, -5, 6])
        self.assertEqual(dot(a, b), 12.0)
        np.testing.assert_array_equal(add(a, b), [5, -3, 9])
        np.testing.assert_array_equal(sub(a, b), [-3, 7, -3])
        np.testing.assert_array_equal(scale(a, 2), [2, 4, 6])
        np.testing.assert_array_equal(div(a, 2), [0.5, 1, 1.5])

    def test_values_are_immutable(self):
        a = vec([1, 2, 3])
        with self.assertRaises(ValueError):
            a[0] = 5
        b = add(a, a)
        np.testing.assert_array_equal(a, [1, 2, 3])
        np.testing.assert_array_equal(b, [2, 4, 6])

    def test_divide_by_zero_is_ieee(self):
        v = div(vec([1, -1, 0]), 0)
        self.assertEqual(v[0], np.inf)
        self.assertEqual(v[1], -np.inf)
        self.assertTrue(np.isnan(v[2]))

    def test_normalize(self):
        np.testing.assert_almost_equal(normalize(vec([3, 0, 4])), [0.6, 0, 0.8])
        for u in (vec([1, 0, 0]), normalize(vec([1, 2, 3])), normalize(vec([-7, 0.5, 2]))):
            np.testing.assert_allclose(normalize(u), u, atol=1e-12)

    def test_normalize_zero_vector(self):
        with self.assertRaises(ZeroLengthVectorError):
            normalize(vec([0, 0, 0]))


class TestSphereIntersect(unittest.TestCase):

    def confirm_hit(self, sphere, ray):
        # make sure hit is self-consistent, then return it
        hit = sphere.intersect(ray)
        self.assertLess(hit.t, np.inf)
        np.testing.assert_almost_equal(ray.origin + hit.t * normalize(ray.direction), hit.point)
        np.testing.assert_almost_equal(normalize(hit.point - sphere.center), hit.normal)
        self.assertAlmostEqual(np.linalg.norm(hit.point - sphere.center), sphere.radius)
        self.assertIs(hit.color, sphere.color)
        return hit

    def test_unitsphere_hits(self):
        unit_sphere = Sphere(vec([0,0,0]), 1.0, red)
        # dead center hit
        hit = self.confirm_hit(unit_sphere, Ray(vec([2.0,0.0,0.0]), vec([-1.0,0.0,0.0])))
        self.assertAlmostEqual(hit.t, 1.0)
        np.testing.assert_almost_equal(hit.normal, [1, 0, 0])
        # dead center with non-unit direction, t is measured along the unit direction
        hit = self.confirm_hit(unit_sphere, Ray(vec([3.0,0.0,0.0]), vec([-2.0,0.0,0.0])))
        self.assertAlmostEqual(hit.t, 2.0)
        # off center hit
        hit = self.confirm_hit(unit_sphere, Ray(vec([1.0,0.5,0.0]), vec([-1.0,0.0,0.0])))
        self.assertAlmostEqual(hit.t, 1 - np.sin(np.pi/3))
        # center hit from off axis
        hit = self.confirm_hit(unit_sphere, Ray(vec([2.0,3.0,4.0]), vec([-2.0,-3.0,-4.0])))
        self.assertAlmostEqual(hit.t, np.sqrt(29) - 1)

    def test_unitsphere_misses(self):
        unit_sphere = Sphere(vec([0,0,0]), 1.0, red)
        # on axis miss
        hit = unit_sphere.intersect(Ray(vec([2.0,3.0,0.0]), vec([-1.0,0.0,0.0])))
        self.assertIs(hit, no_hit)
        self.assertEqual(hit.t, np.inf)
        self.assertIsNone(sphere_hit(unit_sphere, Ray(vec([2.0,3.0,0.0]), vec([-1.0,0.0,0.0]))))

    def test_tangent_ray_hits(self):
        unit_sphere = Sphere(vec([0,0,0]), 1.0, red)
        hit = self.confirm_hit(unit_sphere, Ray(vec([2.0,1.0,0.0]), vec([-1.0,0.0,0.0])))
        np.testing.assert_almost_equal(hit.point, [0, 1, 0])
        np.testing.assert_almost_equal(hit.normal, [0, 1, 0])

    def test_hits_behind_origin_count(self):
        unit_sphere = Sphere(vec([0,0,0]), 1.0, red)
        # sphere entirely behind the ray
        hit = self.confirm_hit(unit_sphere, Ray(vec([2.0,0.0,0.0]), vec([1.0,0.0,0.0])))
        self.assertAlmostEqual(hit.t, -3.0)
        np.testing.assert_almost_equal(hit.point, [-1, 0, 0])
        # origin inside the sphere takes the root behind it
        hit = self.confirm_hit(unit_sphere, Ray(vec([0.0,0.0,0.0]), vec([1.0,0.0,0.0])))
        self.assertAlmostEqual(hit.t, -1.0)

    def test_nonunit_hits(self):
        # all the same as the first case, but scaled by 3 and shifted by (-1, -5, -7)
        sphere = Sphere(vec([-1,-5,-7]), 3.0, green)
        hit = self.confirm_hit(sphere, Ray(vec([5.0,-5.0,-7.0]), vec([-3.0,0.0,0.0])))
        self.assertAlmostEqual(hit.t, 3.0)
        hit = self.confirm_hit(sphere, Ray(vec([2.0,-3.5,-7.0]), vec([-3.0,0.0,0.0])))
        self.assertAlmostEqual(hit.t, 3 * (1 - np.sin(np.pi/3)))

    def test_sphere_hit_tuple(self):
        unit_sphere = Sphere(vec([0,0,0]), 1.0, red)
        point, normal = sphere_hit(unit_sphere, Ray(vec([0.0,0.0,-5.0]), vec([0.0,0.0,1.0])))
        np.testing.assert_almost_equal(point, [0, 0, -1])
        np.testing.assert_almost_equal(normal, [0, 0, -1])

    def test_degenerate_radius_never_hits(self):
        through_center = Ray(vec([0.0,0.0,-5.0]), vec([0.0,0.0,1.0]))
        self.assertIs(Sphere(vec([0,0,0]), 0.0, red).intersect(through_center), no_hit)
        self.assertIs(Sphere(vec([0,0,0]), -2.0, red).intersect(through_center), no_hit)

    def test_zero_direction(self):
        unit_sphere = Sphere(vec([0,0,0]), 1.0, red)
        with self.assertRaises(ZeroLengthVectorError):
            unit_sphere.intersect(Ray(vec([2.0,0.0,0.0]), vec([0.0,0.0,0.0])))

    def test_random_rays(self):
        rng = np.random.default_rng(4620)
        n_hits = 0
        for _ in range(500):
            sphere = Sphere(rng.uniform(-10, 10, 3), rng.uniform(0.5, 5), white)
            ray = Ray(rng.uniform(-10, 10, 3), rng.uniform(-1, 1, 3))
            d = normalize(ray.direction)
            v = sub(ray.origin, sphere.center)
            v_d = dot(v, d)
            delta = v_d * v_d - (dot(v, v) - sphere.radius * sphere.radius)
            hit = sphere.intersect(ray)
            if delta < 0:
                self.assertIs(hit, no_hit)
                continue
            n_hits += 1
            self.assertIsNot(hit, no_hit)
            self.assertAlmostEqual(np.linalg.norm(hit.point - sphere.center), sphere.radius, delta=1e-6)
            self.assertAlmostEqual(dot(hit.normal, hit.normal), 1.0, delta=1e-9)
        self.assertGreater(n_hits, 0)


class TestShading(unittest.TestCase):

    def setUp(self):
        self.forward = Ray(vec([0, 0, 0]), vec([0, 0, 1]))
        self.far_red = Sphere(vec([0, 0, 10]), 1.0, red)
        self.near_green = Sphere(vec([0, 0, 5]), 1.0, green)
        self.head_on = DirectionalLight(vec([0, 0, -1]))

    def test_camera_facing_head_on(self):
        scene = Scene([self.near_green])
        np.testing.assert_almost_equal(shade(self.forward, scene), green)

    def test_camera_facing_off_center(self):
        scene = Scene([self.near_green])
        ray = Ray(vec([0.5, 0, 0]), vec([0, 0, 3]))
        np.testing.assert_almost_equal(shade(ray, scene), [0, np.sqrt(3) / 2, 0])

    def test_camera_facing_uses_absolute_cosine(self):
        # from inside the sphere the chosen root is behind the origin and the normal faces along the ray
        scene = Scene([Sphere(vec([0, 0, 0]), 2.0, red)])
        np.testing.assert_almost_equal(shade(self.forward, scene), red)

    def test_first_hit_wins_regardless_of_depth(self):
        scene = Scene([self.far_red, self.near_green])
        np.testing.assert_almost_equal(shade(self.forward, scene, CAMERA_FACING_FIRST_HIT), red)
        scene = Scene([self.near_green, self.far_red])
        np.testing.assert_almost_equal(shade(self.forward, scene, CAMERA_FACING_FIRST_HIT), green)

    def test_nearest_hit_wins_regardless_of_order(self):
        for surfs in ([self.far_red, self.near_green], [self.near_green, self.far_red]):
            color = shade(self.forward, Scene(surfs), DIRECTIONAL_LIGHT_NEAREST, self.head_on)
            np.testing.assert_almost_equal(color, green)

    def test_overlapping_spheres(self):
        # the spheres intersect each other; the front surface of the red one is closer
        front = Sphere(vec([0, 0, 5]), 1.0, red)
        back = Sphere(vec([0, 0, 6]), 1.0, green)
        for surfs in ([front, back], [back, front]):
            scene = Scene(surfs)
            np.testing.assert_almost_equal(scene.nearest_hit(self.forward).point, [0, 0, 4])
            color = shade(self.forward, scene, DIRECTIONAL_LIGHT_NEAREST, self.head_on)
            np.testing.assert_almost_equal(color, red)
        # off axis the red one is still in front
        ray = Ray(vec([0, 0.9, 0]), vec([0, 0, 1]))
        for surfs in ([front, back], [back, front]):
            hit = Scene(surfs).nearest_hit(ray)
            self.assertIs(hit.color, front.color)
            self.assertAlmostEqual(hit.point[2], 5 - np.sqrt(0.19))
        np.testing.assert_almost_equal(shade(ray, Scene([front, back])), front.color * np.sqrt(0.19))
        # first-hit ignores depth even when the spheres overlap
        np.testing.assert_almost_equal(shade(self.forward, Scene([back, front])), green)

    def test_nearest_tie_keeps_earlier(self):
        scene = Scene([Sphere(vec([0, 0, 5]), 1.0, blue), self.near_green])
        color = shade(self.forward, scene, DIRECTIONAL_LIGHT_NEAREST, self.head_on)
        np.testing.assert_almost_equal(color, blue)

    def test_nearest_is_by_distance_from_origin(self):
        # the sphere behind the origin registers at t = -4, closer than the one ahead at t = 9
        behind = Sphere(vec([0, 0, -3]), 1.0, blue)
        scene = Scene([self.far_red, behind])
        hit = scene.nearest_hit(self.forward)
        self.assertIs(hit.color, behind.color)
        np.testing.assert_almost_equal(hit.point, [0, 0, -4])
        color = shade(self.forward, scene, DIRECTIONAL_LIGHT_NEAREST, self.head_on)
        np.testing.assert_almost_equal(color, blue)

    def test_directional_light_angle(self):
        scene = Scene([self.near_green])
        # light at 60 degrees from the surface normal
        light = DirectionalLight(vec([0, np.sqrt(3), -1]))
        color = shade(self.forward, scene, DIRECTIONAL_LIGHT_NEAREST, light)
        np.testing.assert_almost_equal(color, 0.5 * green)
        # light behind the surface leaves it dark
        light = DirectionalLight(vec([0, 0, 1]))
        color = shade(self.forward, scene, DIRECTIONAL_LIGHT_NEAREST, light)
        np.testing.assert_almost_equal(color, black)

    def test_colors_are_not_clamped(self):
        scene = Scene([Sphere(vec([0, 0, 5]), 1.0, vec([2.0, 0.5, 0.0]))])
        np.testing.assert_almost_equal(shade(self.forward, scene), [2.0, 0.5, 0.0])

    def test_background(self):
        miss = Ray(vec([50, 50, 0]), vec([0, 0, 1]))
        scene = Scene([self.far_red, self.near_green])
        np.testing.assert_array_equal(shade(miss, scene), black)
        np.testing.assert_array_equal(shade(miss, scene, DIRECTIONAL_LIGHT_NEAREST, self.head_on), black)
        np.testing.assert_array_equal(shade(miss, Scene([])), black)
        np.testing.assert_array_equal(shade(miss, Scene([], bg_color=white)), white)

    def test_bad_lighting(self):
        scene = Scene([self.near_green])
        with self.assertRaises(ValueError):
            shade(self.forward, scene, 'phong')
        with self.assertRaises(ValueError):
            shade(self.forward, scene, DIRECTIONAL_LIGHT_NEAREST)
        with self.assertRaises(ZeroLengthVectorError):
            DirectionalLight(vec([0, 0, 0]))


class TestCamera(unittest.TestCase):

    def test_orthographic(self):
        cam = OrthographicCamera()
        for x, y in ((0, 0), (3, 4), (639, 359)):
            ray = cam.generate_ray(x, y)
            np.testing.assert_array_equal(ray.origin, [x, y, 0])
            np.testing.assert_array_equal(ray.direction, [0, 0, 1])

    def test_perspective(self):
        cam = PerspectiveCamera(vec([320, 180, -200]))
        # center ray is straight down the axis
        ray = cam.generate_ray(320, 180)
        np.testing.assert_array_equal(ray.origin, [320, 180, 0])
        np.testing.assert_almost_equal(ray.direction, [0, 0, 1])
        # corner rays spread out from the perspective point
        ray = cam.generate_ray(0, 0)
        np.testing.assert_array_equal(ray.origin, [0, 0, 0])
        assert_direction_matches(ray.direction, vec([-320, -180, 200]))
        self.assertAlmostEqual(dot(ray.direction, ray.direction), 1.0)

    def test_settings_camera(self):
        self.assertIsInstance(RenderSettings(10, 10).make_camera(), OrthographicCamera)
        cam = RenderSettings(640, 360, projection=PERSPECTIVE).make_camera()
        self.assertIsInstance(cam, PerspectiveCamera)
        np.testing.assert_array_equal(cam.perspective_point, [320, 180, -200])


class TestViewport(unittest.TestCase):

    def setUp(self):
        self.scene = Scene([Sphere(vec([320, 180, 100]), 100, red)])
        self.settings = RenderSettings(640, 360)

    def test_sphere_front_center(self):
        render = make_viewport(self.settings, self.scene)
        np.testing.assert_almost_equal(render(320, 180), [1, 0, 0])

    def test_far_pixel_is_background(self):
        render = make_viewport(self.settings, self.scene)
        np.testing.assert_array_equal(render(0, 0), [0, 0, 0])

    def test_out_of_bounds(self):
        render = make_viewport(self.settings, self.scene)
        for x, y in ((-1, 0), (0, -1), (640, 0), (0, 360), (640, 360)):
            with self.assertRaises(PixelOutOfBoundsError):
                render(x, y)
        # last valid pixel is fine
        render(639, 359)
        render(np.int64(639), np.int64(359))

    def test_non_integer_pixel(self):
        render = make_viewport(self.settings, self.scene)
        for x, y in ((1.5, 0), (0, 2.0), (True, 0), ('3', 3)):
            with self.assertRaises(PixelOutOfBoundsError):
                render(x, y)

    def test_idempotent(self):
        for settings in (self.settings,
                         RenderSettings(640, 360, projection=PERSPECTIVE),
                         RenderSettings(640, 360, lighting=DIRECTIONAL_LIGHT_NEAREST,
                                        light_direction=vec([1, -1, -1]))):
            render = make_viewport(settings, self.scene)
            for x, y in ((320, 180), (300, 150), (5, 5)):
                first = render(x, y)
                second = render(x, y)
                self.assertEqual(np.asarray(first).tobytes(), np.asarray(second).tobytes())

    def test_render_image_matches_viewport(self):
        scene = Scene([Sphere(vec([4, 3, 10]), 3, blue)])
        settings = RenderSettings(8, 6)
        img = render_image(settings, scene, verbose=False)
        self.assertEqual(img.shape, (6, 8, 3))
        render = make_viewport(settings, scene)
        for y in range(6):
            for x in range(8):
                np.testing.assert_array_equal(img[y, x], render(x, y))
        np.testing.assert_almost_equal(img[3, 4], blue)
        np.testing.assert_array_equal(img[0, 0], black)


if __name__ == '__main__':
    unittest.main()
