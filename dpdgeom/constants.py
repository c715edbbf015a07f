import logging

import numpy as np

LOGGER = logging.getLogger(__name__)

# Hexagonal lattice constants, computed once
SQRT3 = float(np.sqrt(3.0))
SQRT6 = float(np.sqrt(6.0))

# Returned by the distance engine when no average can be formed
UNAVAILABLE = -1.0

# Separator of pair-distance token strings
GENERAL_SEPARATOR = "|"


# Row spacing in y of a hexagonal layer (Å or DPD length units)
def row_spacing(r_particle):
    return SQRT3 * r_particle


# Spacing in z between two close-packed layers
def layer_spacing(r_particle):
    return SQRT6 * 2.0 * r_particle / 3.0


# Returns the canonical lattice name
def get_lattice_name(id):
    key = str(id).strip().lower()
    if key in ("sc", "simple_cubic", "simplecubic"):
        name = "sc"
    elif key in ("hcp", "hexagonal_close", "hexagonal_close_packed"):
        name = "hcp"
    elif key in ("fcc", "face_centered_cubic", "facecenteredcubic"):
        name = "fcc"
    else:
        LOGGER.error("Invalid lattice entered: %r", id)
        return None
    return name


# Returns the canonical region name
def get_region_name(id):
    key = str(id).strip().lower()
    if key in ("cuboid", "box"):
        name = "cuboid"
    elif key in ("sphere", "globe"):
        name = "sphere"
    else:
        LOGGER.error("Invalid region entered: %r", id)
        return None
    return name
