# dpdgeom/packing.py
"""
Dense sphere packings (simple cubic, hexagonal close, face centered cubic)
inside a cuboid or a sphere.

All generators return sphere centers as a float array of shape (N, 3),
or None for a non-positive particle radius or region dimension. Cuboid
packings start at the origin corner, sphere packings are centered on the
origin. An optional start_vector translates the result in place.

Hexagonal layers are built from rows at spacing sqrt(3) * r in y; every
second row is shifted by r in x. Successive layers are spaced
2/3 * sqrt(6) * r in z and shifted by 1/3 (B) or 2/3 (C) row spacing in y.
"""
import logging

import numpy as np

from dpdgeom.constants import SQRT3, get_lattice_name, get_region_name, layer_spacing, row_spacing

LOGGER = logging.getLogger(__name__)


def _is_in_globe(x, y, z, r_sphere):
    return np.sqrt(x * x + y * y + z * z) <= r_sphere


def _as_array(positions):
    return np.array(positions, dtype=float).reshape(-1, 3)


def move_vector(coordinates, start_vector):
    """Translate coordinates in place by start_vector and return them."""
    if coordinates is None or start_vector is None:
        return coordinates
    coordinates += np.asarray(start_vector, dtype=float)
    return coordinates


def _fit_row(x0, y, z, n_max, d, r_sphere):
    """
    Number of spheres x0, x0 + d, ... of one row inside the globe.
    Shrinks n_max until the outermost sphere fits.
    """
    while n_max > 0 and not _is_in_globe(d * (n_max - 1) + x0, y, z, r_sphere):
        n_max -= 1
    return n_max


def _emit_row(positions, x0, y, z, n, d, mirror_y=False, mirror_z=False):
    """
    Append a row of n spheres starting at x0 and its mirror images.
    Spheres on a mirror plane are appended once.
    """
    for k in range(n):
        x = d * k + x0
        xs = (x, -x) if x != 0.0 else (x,)
        ys = (y, -y) if mirror_y and y != 0.0 else (y,)
        zs = (z, -z) if mirror_z and z != 0.0 else (z,)
        for xi in xs:
            for zi in zs:
                for yi in ys:
                    positions.append((xi, yi, zi))


# ============================================================
#                       SIMPLE CUBIC
# ============================================================

def simple_cubic_in_cuboid(r_particle, x_cuboid, y_cuboid, z_cuboid, start_vector=None):
    """
    Simple cubic packing in the cuboid [0, x] x [0, y] x [0, z].
    floor(edge / 2r) + 1 spheres per axis, x runs fastest.
    """
    if r_particle <= 0 or x_cuboid <= 0 or y_cuboid <= 0 or z_cuboid <= 0:
        return None

    d = 2 * r_particle
    nx = int(x_cuboid / 2 / r_particle + 1)
    ny = int(y_cuboid / 2 / r_particle + 1)
    nz = int(z_cuboid / 2 / r_particle + 1)

    positions = []
    for i in range(nz):
        for j in range(ny):
            for k in range(nx):
                positions.append((d * k, d * j, d * i))

    return move_vector(_as_array(positions), start_vector)


def simple_cubic_in_sphere(r_particle, r_sphere, start_vector=None):
    """
    Simple cubic packing in a sphere around the origin.

    Only the octant x, y, z >= 0 is fitted: n_in_row[i][j] is the number
    of spheres on the x axis side of row j in layer i. The equatorial layer
    is completed by 4-fold rotation about z, all other layers additionally
    by mirroring at z = 0. Spheres on the z axis are placed once per layer.
    """
    if r_particle <= 0 or r_sphere <= 0:
        return None

    d = 2 * r_particle
    n = int(r_sphere / d + 1)   # spheres from the center to the edge

    n_in_row = [[0] * n for _ in range(n)]
    n_in_row[0][0] = n
    for i in range(n):
        j_begin = 1 if i == 0 else 0
        # row i of the equatorial layer bounds every row of layer i
        n_max = n_in_row[0][i]
        for j in range(j_begin, n):
            n_max = _fit_row(0.0, d * j, d * i, n_max, d, r_sphere)
            n_in_row[i][j] = n_max

    positions = [(0.0, 0.0, 0.0)]
    for j in range(n):
        for k in range(1, n_in_row[0][j]):
            positions.append((k * d, j * d, 0.0))
            positions.append((j * d, -k * d, 0.0))
            positions.append((-k * d, -j * d, 0.0))
            positions.append((-j * d, k * d, 0.0))

    for i in range(1, n):
        positions.append((0.0, 0.0, i * d))
        positions.append((0.0, 0.0, -i * d))
        for j in range(n):
            for k in range(1, n_in_row[i][j]):
                for z in (i * d, -i * d):
                    positions.append((k * d, j * d, z))
                    positions.append((j * d, -k * d, z))
                    positions.append((-k * d, -j * d, z))
                    positions.append((-j * d, k * d, z))

    return move_vector(_as_array(positions), start_vector)


# ============================================================
#                 HEXAGONAL / FCC IN CUBOID
# ============================================================

# Per layer type: (y offset in row spacings, row parity shifted by r in x)
_HCP_LAYERS = ((0.0, 1), (1.0 / 3, 0))
_FCC_LAYERS = ((0.0, 1), (1.0 / 3, 0), (2.0 / 3, 1))


def _close_packed_in_cuboid(r_particle, x_cuboid, y_cuboid, z_cuboid, layers):
    d = 2 * r_particle
    row = row_spacing(r_particle)
    h = layer_spacing(r_particle)

    nx_plain = int(x_cuboid / d + 1)     # rows starting at x = 0
    nx_shifted = int(x_cuboid / d + 0.5)  # rows starting at x = r
    # row count per layer type, B and C rows start higher in y
    ny = [int((y_cuboid - offset * row) / row + 1) for offset, _ in layers]
    nz = int(z_cuboid / h + 1)

    positions = []
    for i in range(nz):
        layer = i % len(layers)
        offset, shifted_parity = layers[layer]
        for j in range(ny[layer]):
            if j % 2 == shifted_parity:
                x0, nx = r_particle, nx_shifted
            else:
                x0, nx = 0.0, nx_plain
            y = row * (offset + j)
            for k in range(nx):
                positions.append((d * k + x0, y, h * i))
    return positions


def hexagonal_close_in_cuboid(r_particle, x_cuboid, y_cuboid, z_cuboid, start_vector=None):
    """
    Hexagonal close packing (ABAB...) in the cuboid [0, x] x [0, y] x [0, z].
    Row and column counts of A and B layers are fitted independently.
    """
    if r_particle <= 0 or x_cuboid <= 0 or y_cuboid <= 0 or z_cuboid <= 0:
        return None
    positions = _close_packed_in_cuboid(r_particle, x_cuboid, y_cuboid, z_cuboid, _HCP_LAYERS)
    return move_vector(_as_array(positions), start_vector)


def face_centered_cubic_in_cuboid(r_particle, x_cuboid, y_cuboid, z_cuboid, start_vector=None):
    """
    Face centered cubic packing (ABCABC...) in the cuboid [0, x] x [0, y] x [0, z].
    Row and column counts of A, B and C layers are fitted independently.
    """
    if r_particle <= 0 or x_cuboid <= 0 or y_cuboid <= 0 or z_cuboid <= 0:
        return None
    positions = _close_packed_in_cuboid(r_particle, x_cuboid, y_cuboid, z_cuboid, _FCC_LAYERS)
    return move_vector(_as_array(positions), start_vector)


# ============================================================
#                 HEXAGONAL / FCC IN SPHERE
# ============================================================

# Row rules per layer type, for rows with y >= 0 (plus) and y < 0 (minus):
# (|y| in row spacings at row j = offset + j, x shifted by r on even rows)
_A_PLUS, _A_MINUS = (0.0, False), (1.0, True)
_B_PLUS, _B_MINUS = (1.0 / 3, True), (2.0 / 3, False)
_C_PLUS, _C_MINUS = (2.0 / 3, False), (1.0 / 3, True)


def _row_start(rule, j, r_particle):
    offset, shift_even = rule
    if (j % 2 == 0) == shift_even:
        return r_particle
    return 0.0


def _fit_octant(rules, z_values, n_rows, n_x, r_particle, r_sphere):
    """
    Sphere counts of the half rows x >= 0 of one octant (pair).

    rules[i] is the row rule of layer i at height z_values[i]. Returns
    an (n_layers, n_rows) integer array.
    """
    d = 2 * r_particle
    row = row_spacing(r_particle)
    counts = np.zeros((len(z_values), n_rows), dtype=int)
    for i, (rule, z) in enumerate(zip(rules, z_values)):
        for j in range(n_rows):
            y = row * (rule[0] + j)
            counts[i, j] = _fit_row(_row_start(rule, j, r_particle), y, z, n_x, d, r_sphere)
    return counts


def hexagonal_close_in_sphere(r_particle, r_sphere, start_vector=None):
    """
    Hexagonal close packing in a sphere around the origin.

    The equatorial layer is an A layer, layers at +-z are of the same
    type, so every layer is fitted for z >= 0 only and mirrored. A layers
    are also symmetric in y, B layers have separate plus and minus rows.
    """
    if r_particle <= 0 or r_sphere <= 0:
        return None

    d = 2 * r_particle
    row = row_spacing(r_particle)
    h = layer_spacing(r_particle)
    n_x = int(r_sphere / d + 1)
    n_rows = int(r_sphere / row + 1)
    n_layers = int(r_sphere / h + 1)

    z_values = [h * i for i in range(n_layers)]
    plus_rules = [_A_PLUS if i % 2 == 0 else _B_PLUS for i in range(n_layers)]
    minus_rules = [_A_MINUS if i % 2 == 0 else _B_MINUS for i in range(n_layers)]

    octant_plus = _fit_octant(plus_rules, z_values, n_rows, n_x, r_particle, r_sphere)
    octant_minus = _fit_octant(minus_rules, z_values, n_rows, n_x, r_particle, r_sphere)

    positions = []
    for i in range(n_layers):
        z = z_values[i]
        if i % 2 == 0:
            for j in range(n_rows):
                x0 = _row_start(_A_PLUS, j, r_particle)
                _emit_row(positions, x0, row * j, z, octant_plus[i, j], d,
                          mirror_y=True, mirror_z=True)
        else:
            for j in range(n_rows):
                x0 = _row_start(_B_PLUS, j, r_particle)
                _emit_row(positions, x0, row * (1.0 / 3 + j), z, octant_plus[i, j], d,
                          mirror_z=True)
            for j in range(n_rows):
                x0 = _row_start(_B_MINUS, j, r_particle)
                _emit_row(positions, x0, -row * (2.0 / 3 + j), z, octant_minus[i, j], d,
                          mirror_z=True)

    LOGGER.debug("HCP in sphere: %d spheres (r=%g, R=%g)", len(positions), r_particle, r_sphere)
    return move_vector(_as_array(positions), start_vector)


def face_centered_cubic_in_sphere(r_particle, r_sphere, start_vector=None):
    """
    Face centered cubic packing in a sphere around the origin.

    Layers ABCABC... above and including the equatorial A layer, CBACBA...
    below it. Without a mirror plane in z or y, the four quarters
    (upper/lower z times plus/minus y) are fitted independently, each row
    is mirrored in x only.
    """
    if r_particle <= 0 or r_sphere <= 0:
        return None

    d = 2 * r_particle
    row = row_spacing(r_particle)
    h = layer_spacing(r_particle)
    n_x = int(r_sphere / d + 1)
    n_rows = int(r_sphere / row + 1)
    n_layers = int(r_sphere / h + 1)

    upper_z = [h * i for i in range(n_layers)]
    lower_z = [h * (i + 1) for i in range(n_layers)]
    upper_plus = [(_A_PLUS, _B_PLUS, _C_PLUS)[i % 3] for i in range(n_layers)]
    upper_minus = [(_A_MINUS, _B_MINUS, _C_MINUS)[i % 3] for i in range(n_layers)]
    lower_plus = [(_C_PLUS, _B_PLUS, _A_PLUS)[i % 3] for i in range(n_layers)]
    lower_minus = [(_C_MINUS, _B_MINUS, _A_MINUS)[i % 3] for i in range(n_layers)]

    octant_1 = _fit_octant(upper_plus, upper_z, n_rows, n_x, r_particle, r_sphere)
    octant_4 = _fit_octant(upper_minus, upper_z, n_rows, n_x, r_particle, r_sphere)
    octant_5 = _fit_octant(lower_plus, lower_z, n_rows, n_x, r_particle, r_sphere)
    octant_8 = _fit_octant(lower_minus, lower_z, n_rows, n_x, r_particle, r_sphere)

    positions = []
    for i in range(n_layers):
        for j in range(n_rows):
            rule = upper_plus[i]
            _emit_row(positions, _row_start(rule, j, r_particle), row * (rule[0] + j),
                      upper_z[i], octant_1[i, j], d)
        for j in range(n_rows):
            rule = upper_minus[i]
            _emit_row(positions, _row_start(rule, j, r_particle), -row * (rule[0] + j),
                      upper_z[i], octant_4[i, j], d)
    for i in range(n_layers):
        for j in range(n_rows):
            rule = lower_plus[i]
            _emit_row(positions, _row_start(rule, j, r_particle), row * (rule[0] + j),
                      -lower_z[i], octant_5[i, j], d)
        for j in range(n_rows):
            rule = lower_minus[i]
            _emit_row(positions, _row_start(rule, j, r_particle), -row * (rule[0] + j),
                      -lower_z[i], octant_8[i, j], d)

    LOGGER.debug("FCC in sphere: %d spheres (r=%g, R=%g)", len(positions), r_particle, r_sphere)
    return move_vector(_as_array(positions), start_vector)


# ============================================================
#                        DISPATCH
# ============================================================

def particle_coordinates(lattice, region, r_particle, *dimensions, start_vector=None):
    """
    Packing by name, e.g. particle_coordinates("fcc", "sphere", 1.0, 5.0).

    dimensions are (x, y, z) for a cuboid and (radius,) for a sphere.
    Unknown names or a wrong number of dimensions give None.
    """
    lattice_name = get_lattice_name(lattice)
    region_name = get_region_name(region)
    if lattice_name is None or region_name is None:
        return None

    if region_name == "cuboid":
        if len(dimensions) != 3:
            LOGGER.error("Cuboid packing needs 3 dimensions, got %d", len(dimensions))
            return None
        generator = {
            "sc": simple_cubic_in_cuboid,
            "hcp": hexagonal_close_in_cuboid,
            "fcc": face_centered_cubic_in_cuboid,
        }[lattice_name]
    else:
        if len(dimensions) != 1:
            LOGGER.error("Sphere packing needs 1 dimension, got %d", len(dimensions))
            return None
        generator = {
            "sc": simple_cubic_in_sphere,
            "hcp": hexagonal_close_in_sphere,
            "fcc": face_centered_cubic_in_sphere,
        }[lattice_name]

    return generator(r_particle, *dimensions, start_vector=start_vector)
