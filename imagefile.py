import io
import numpy as np
from PIL import Image


def ppm_value(channel, max_value=255):
    """Convert a float channel to a PPM sample.

    Values are not clamped.  Exact halves round to even, like Python's round.
    """
    return int(round(max_value * float(channel)))

def _write_header(f, width, height, max_value):
    f.write("P3\n")
    f.write(f"{width} {height}\n")
    f.write(f"{max_value}\n")

def write_ppm(f, viewport, width, height, max_value=255):
    """Write a plain-text (P3) PPM image to the open text file f.

    Parameters:
      viewport : function (x, y) -> (3,) -- the color of each pixel
      width, height : int -- image size; pixels are visited y outer, x inner
      max_value : int -- the value written for a channel of 1.0
    """
    _write_header(f, width, height, max_value)
    for y in range(height):
        for x in range(width):
            r, g, b = viewport(x, y)
            f.write(f"{ppm_value(r, max_value)} {ppm_value(g, max_value)} {ppm_value(b, max_value)}\n")

def format_ppm(viewport, width, height, max_value=255):
    out = io.StringIO()
    write_ppm(out, viewport, width, height, max_value)
    return out.getvalue()

def write_ppm_image(f, pixels, max_value=255):
    """Write an already rendered (height, width, 3) float array as a P3 PPM."""
    height, width = pixels.shape[:2]
    write_ppm(f, lambda x, y: pixels[y, x], width, height, max_value)

def to_rgb8(pixels):
    return np.clip(np.round(255.0 * pixels), 0, 255).astype(np.uint8)

def save_png(pixels, path):
    """Save a (height, width, 3) float image as PNG, clipping channels to [0, 1]."""
    Image.fromarray(to_rgb8(pixels)).save(path)
