import contextlib
import io
import os
import tempfile
import unittest

import numpy as np
from PIL import Image

import cli
import ray
from imagefile import format_ppm, ppm_value, save_png, write_ppm_image
from scenes import EXAMPLES, SceneDef, SingleSphereExample, PerspectiveExample
from utils import vec, red, green, blue, black


class TestRenderSettings(unittest.TestCase):

    def test_defaults(self):
        s = ray.RenderSettings(640, 360)
        self.assertEqual(s.projection, ray.ORTHOGRAPHIC)
        self.assertEqual(s.lighting, ray.CAMERA_FACING_FIRST_HIT)
        self.assertEqual(s.max_value, 255)
        self.assertIsNone(s.make_light())
        np.testing.assert_array_equal(s.perspective_point, [320, 180, -200])

    def test_bad_sizes(self):
        for w, h in ((0, 10), (10, 0), (-1, 10), (2.5, 10), (True, 10), ('8', 8)):
            with self.assertRaises(ValueError):
                ray.RenderSettings(w, h)

    def test_bad_modes(self):
        with self.assertRaises(ValueError):
            ray.RenderSettings(10, 10, projection='fisheye')
        with self.assertRaises(ValueError):
            ray.RenderSettings(10, 10, lighting='phong')
        with self.assertRaises(ValueError):
            ray.RenderSettings(10, 10, lighting=ray.DIRECTIONAL_LIGHT_NEAREST)

    def test_light(self):
        s = ray.RenderSettings(10, 10, lighting=ray.DIRECTIONAL_LIGHT_NEAREST,
                               light_direction=vec([0, 0, -2]))
        np.testing.assert_almost_equal(s.make_light().direction, [0, 0, -1])
        np.testing.assert_almost_equal(s.light_direction, [0, 0, -1])

    def test_zero_light_direction(self):
        with self.assertRaises(ValueError):
            ray.RenderSettings(4, 3, lighting=ray.DIRECTIONAL_LIGHT_NEAREST,
                               light_direction=vec([0, 0, 0]))


class TestPPM(unittest.TestCase):

    def test_format(self):
        colors = {(0, 0): red, (1, 0): vec([0, 0.2, 1])}
        text = format_ppm(lambda x, y: colors[(x, y)], 2, 1)
        self.assertEqual(text, "P3\n2 1\n255\n255 0 0\n0 51 255\n")

    def test_row_major(self):
        text = format_ppm(lambda x, y: vec([x / 10, y / 10, 0]), 2, 2, max_value=10)
        self.assertEqual(text.splitlines(),
                         ["P3", "2 2", "10", "0 0 0", "1 0 0", "0 1 0", "1 1 0"])

    def test_values_not_clamped(self):
        self.assertEqual(ppm_value(1.2), 306)
        self.assertEqual(ppm_value(0.0), 0)
        self.assertEqual(ppm_value(1.0, 15), 15)

    def test_halves_round_to_even(self):
        self.assertEqual(ppm_value(0.5, 1), 0)
        self.assertEqual(ppm_value(1.5, 1), 2)
        self.assertEqual(ppm_value(2.5, 1), 2)
        self.assertEqual(ppm_value(0.5, 5), 2)

    def test_image_matches_viewport(self):
        scene = ray.Scene([ray.Sphere(vec([4, 3, 10]), 3, blue)])
        settings = ray.RenderSettings(8, 6)
        pixels = ray.render_image(settings, scene, verbose=False)
        out = io.StringIO()
        write_ppm_image(out, pixels)
        self.assertEqual(out.getvalue(), format_ppm(ray.make_viewport(settings, scene), 8, 6))


class TestPNG(unittest.TestCase):

    def test_save_clips(self):
        pixels = np.array([[[1.5, -0.2, 0.5], [0.0, 1.0, 0.2]]])
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'out.png')
            save_png(pixels, path)
            with Image.open(path) as im:
                self.assertEqual(im.size, (2, 1))
                data = np.array(im.convert('RGB'))
        np.testing.assert_array_equal(data[0, 0], [255, 0, 128])
        np.testing.assert_array_equal(data[0, 1], [0, 255, 51])


class TestScenes(unittest.TestCase):

    def test_single_sphere(self):
        scene_def = SingleSphereExample()
        render = scene_def.viewport()
        np.testing.assert_almost_equal(render(320, 180), red)
        np.testing.assert_array_equal(render(0, 0), black)
        with self.assertRaises(ray.PixelOutOfBoundsError):
            render(640, 0)

    def test_perspective(self):
        render = PerspectiveExample().viewport()
        np.testing.assert_almost_equal(render(320, 180), green)

    def test_examples_build(self):
        for name, factory in EXAMPLES.items():
            scene_def = factory()
            self.assertIsInstance(scene_def, SceneDef, name)
            color = scene_def.viewport()(320, 180)
            self.assertEqual(np.shape(color), (3,))
            self.assertTrue(np.all(np.asarray(color) >= 0), name)

    def test_with_settings(self):
        scene_def = PerspectiveExample()
        same_size = scene_def.with_settings(lighting=ray.CAMERA_FACING_FIRST_HIT)
        np.testing.assert_array_equal(same_size.settings.perspective_point, [320, 180, -200])
        smaller = scene_def.with_settings(width=64, height=36)
        np.testing.assert_array_equal(smaller.settings.perspective_point, [32, 18, -200])
        self.assertIs(smaller.scene, scene_def.scene)
        with self.assertRaises(ValueError):
            scene_def.with_settings(width=0)

    def test_render_to_files(self):
        scene_def = SceneDef(ray.RenderSettings(8, 6), ray.Scene([ray.Sphere(vec([4, 3, 10]), 3, red)]))
        with tempfile.TemporaryDirectory() as tmp:
            ppm_path = os.path.join(tmp, 'out.ppm')
            pixels = scene_def.render(ppm_path, verbose=False)
            with open(ppm_path) as f:
                lines = f.read().splitlines()
            png_path = os.path.join(tmp, 'out.png')
            scene_def.render(png_path, verbose=False)
            self.assertTrue(os.path.exists(png_path))
        self.assertEqual(pixels.shape, (6, 8, 3))
        self.assertEqual(lines[:3], ["P3", "8 6", "255"])
        self.assertEqual(len(lines), 3 + 8 * 6)
        self.assertEqual(lines[3 + 3 * 8 + 4], "255 0 0")


class TestCommandLine(unittest.TestCase):

    def run_main(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            status = cli.main(argv)
        return status, out.getvalue(), err.getvalue()

    def test_ppm_to_stdout(self):
        status, out, err = self.run_main(['--width', '4', '--height', '3', '--quiet'])
        self.assertEqual(status, 0)
        lines = out.splitlines()
        self.assertEqual(lines[:3], ["P3", "4 3", "255"])
        self.assertEqual(len(lines), 3 + 12)
        self.assertEqual(err, "")

    def test_lighting_override(self):
        status, out, err = self.run_main(['--scene', 'perspective', '--width', '4', '--height', '3',
                                          '--lighting', ray.DIRECTIONAL_LIGHT_NEAREST,
                                          '--light-direction', '0', '0', '-1', '--quiet'])
        self.assertEqual(status, 0)
        self.assertTrue(out.startswith("P3\n4 3\n255\n"))

    def test_zero_light_direction_is_an_error(self):
        status, out, err = self.run_main(['--width', '4', '--height', '3',
                                          '--lighting', ray.DIRECTIONAL_LIGHT_NEAREST,
                                          '--light-direction', '0', '0', '0', '--quiet'])
        self.assertEqual(status, 2)
        self.assertEqual(out, "")
        self.assertIn("Error:", err)

    def test_missing_light_is_an_error(self):
        status, out, err = self.run_main(['--lighting', ray.DIRECTIONAL_LIGHT_NEAREST, '--quiet'])
        self.assertEqual(status, 2)
        self.assertEqual(out, "")
        self.assertIn("Error:", err)

    def test_output_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'img.png')
            status, out, err = self.run_main(['--width', '4', '--height', '3', '-o', path])
            self.assertEqual(status, 0)
            with Image.open(path) as im:
                self.assertEqual(im.size, (4, 3))
        self.assertIn("rendering row 3/3...", err)


if __name__ == '__main__':
    unittest.main()
