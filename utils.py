import numpy as np


class ZeroLengthVectorError(ValueError):
    """Raised when a zero-length vector is normalized."""


def vec(list):
    """Handy shorthand to make a read-only double-precision float array."""
    v = np.array(list, dtype=np.float64)
    v.setflags(write=False)
    return v

def dot(a, b):
    """Sum of the per-component products of a and b."""
    return float(np.dot(a, b))

def add(a, b):
    return np.add(a, b)

def sub(a, b):
    return np.subtract(a, b)

def scale(v, s):
    """Multiply every component of v by the scalar s."""
    return np.multiply(v, s)

def div(v, s):
    """Divide every component of v by the scalar s.

    Dividing by zero follows IEEE semantics (inf or nan), no guard.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        return np.divide(np.asarray(v, np.float64), s)

def normalize(v):
    """Return a unit vector in the direction of the vector v."""
    length_sq = dot(v, v)
    if length_sq == 0.0:
        raise ZeroLengthVectorError("cannot normalize zero-length vector %r" % (tuple(v),))
    return div(v, np.sqrt(length_sq))


black = vec([0.0, 0.0, 0.0])
white = vec([1.0, 1.0, 1.0])
red = vec([1.0, 0.0, 0.0])
green = vec([0.0, 1.0, 0.0])
blue = vec([0.0, 0.0, 1.0])
