# dpdgeom/geometry.py
import numpy as np


class Point3D:
    """
    Mutable point / vector in 3D space.

    Packing generators translate points in place, analysis code only
    reads them. numpy.asarray(point) gives a (3,) float array.
    """

    __slots__ = ("x", "y", "z")

    def __init__(self, x=0.0, y=0.0, z=0.0):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    @classmethod
    def from_sequence(cls, seq):
        x, y, z = seq
        return cls(x, y, z)

    def translate(self, vector):
        """Add vector (Point3D or length-3 sequence) in place."""
        dx, dy, dz = vector
        self.x += dx
        self.y += dy
        self.z += dz
        return self

    def norm(self):
        return float(np.sqrt(self.x * self.x + self.y * self.y + self.z * self.z))

    def distance_to(self, other):
        ox, oy, oz = other
        dx = self.x - ox
        dy = self.y - oy
        dz = self.z - oz
        return float(np.sqrt(dx * dx + dy * dy + dz * dz))

    def as_array(self):
        return np.array([self.x, self.y, self.z], dtype=float)

    def __array__(self, dtype=None, copy=None):
        arr = self.as_array()
        if dtype is not None:
            arr = arr.astype(dtype)
        return arr

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __len__(self):
        return 3

    def __eq__(self, other):
        if not isinstance(other, Point3D):
            return NotImplemented
        return self.x == other.x and self.y == other.y and self.z == other.z

    __hash__ = None

    def __repr__(self):
        return f"Point3D({self.x!r}, {self.y!r}, {self.z!r})"


# ------------------------------------------------------------
# Particle position sets
# ------------------------------------------------------------
def as_positions(positions):
    """
    Convert a particle position set to a float array of shape (N, 3).

    Accepts an (N, 3) array-like or a sequence of Point3D.
    None stays None, an empty input gives an array of shape (0, 3).
    """
    if positions is None:
        return None

    if isinstance(positions, np.ndarray):
        arr = positions.astype(float, copy=False)
    else:
        arr = np.asarray([np.asarray(p, dtype=float) for p in positions], dtype=float)

    if arr.size == 0:
        return arr.reshape(0, 3)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"positions must have shape (N, 3), got {arr.shape}")
    return arr


def as_points(positions):
    """Convert an (N, 3) array to a list of Point3D."""
    if positions is None:
        return None
    return [Point3D(x, y, z) for x, y, z in np.asarray(positions, dtype=float)]


def is_empty(positions):
    return positions is None or len(positions) < 1


# ------------------------------------------------------------
# Simulation box
# ------------------------------------------------------------
class BoxGeometry:
    """
    Orthorhombic simulation box with per-axis periodic boundaries.

    Box lengths must be positive. Half lengths are cached for the
    minimum image correction. Instances are immutable.
    """

    def __init__(self, length_x, length_y, length_z,
                 periodic_x=True, periodic_y=True, periodic_z=True):
        # written as not (> 0) so NaN lengths are rejected too
        if not (length_x > 0 and length_y > 0 and length_z > 0):
            raise ValueError(
                f"Box lengths must be positive, got ({length_x}, {length_y}, {length_z})"
            )

        self._lengths = np.array([length_x, length_y, length_z], dtype=float)
        self._half_lengths = 0.5 * self._lengths
        self._periodic = np.array([periodic_x, periodic_y, periodic_z], dtype=bool)

        for arr in (self._lengths, self._half_lengths, self._periodic):
            arr.flags.writeable = False

    @property
    def lengths(self):
        return self._lengths

    @property
    def half_lengths(self):
        return self._half_lengths

    @property
    def periodic(self):
        return self._periodic

    def volume(self):
        """Box volume (length units cubed)."""
        return float(np.prod(self._lengths))

    # --- Boundary conditions ---
    def minimum_image(self, delta):
        """
        Apply the minimum image convention to difference vector(s).

        delta : array, shape (3,) or (N, 3)

        On periodic axes a component larger than half the box length is
        reduced by one box length, one smaller than minus half the box
        length is increased by one box length. Non-periodic axes are
        left untouched.
        """
        dr = np.array(delta, dtype=float)
        over = self._periodic & (dr > self._half_lengths)
        under = self._periodic & (dr < -self._half_lengths)
        dr = np.where(over, dr - self._lengths, dr)
        dr = np.where(under, dr + self._lengths, dr)
        return dr

    def distance(self, position_a, position_b):
        dr = self.minimum_image(np.asarray(position_a, dtype=float) - np.asarray(position_b, dtype=float))
        return float(np.sqrt(np.dot(dr, dr)))

    def distances(self, origin, others):
        """Distances from one origin to each row of others, shape (M,)."""
        dr = self.minimum_image(np.asarray(origin, dtype=float) - np.asarray(others, dtype=float))
        return np.sqrt(np.sum(dr * dr, axis=-1))

    def __repr__(self):
        lx, ly, lz = self._lengths
        px, py, pz = (bool(p) for p in self._periodic)
        return f"{type(self).__name__}({lx}, {ly}, {lz}, periodic=({px}, {py}, {pz}))"


class SegmentedBoxGeometry(BoxGeometry):
    """
    Fully periodic box with a histogram segment (bin) length.

    Only distances up to the smallest half box length are binned, farther
    pairs could be counted again through a wrapped image.
    """

    def __init__(self, segment_length, length_x, length_y, length_z):
        if not segment_length > 0:
            raise ValueError(f"Segment length must be positive, got {segment_length}")
        super().__init__(length_x, length_y, length_z, True, True, True)

        self._segment_length = float(segment_length)
        self._minimum_half_length = float(np.min(self.half_lengths))

    @property
    def segment_length(self):
        return self._segment_length

    @property
    def minimum_half_length(self):
        return self._minimum_half_length

    def bin_index(self, distance):
        # distance == k * segment falls into bin k
        return int(distance / self._segment_length)

    def bin_indices(self, distances):
        return (np.asarray(distances, dtype=float) / self._segment_length).astype(np.int64)

    def max_bin_index(self):
        return self.bin_index(self._minimum_half_length)

    def bin_edges(self, n_bins):
        return self._segment_length * np.arange(n_bins + 1, dtype=float)

    def bin_centers(self, n_bins):
        return self._segment_length * (np.arange(n_bins, dtype=float) + 0.5)

    def __repr__(self):
        lx, ly, lz = self.lengths
        return f"SegmentedBoxGeometry({self._segment_length}, {lx}, {ly}, {lz})"
