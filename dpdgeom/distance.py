# dpdgeom/distance.py
import logging

import numpy as np

from dpdgeom.constants import GENERAL_SEPARATOR, UNAVAILABLE
from dpdgeom.geometry import BoxGeometry, as_positions, is_empty

LOGGER = logging.getLogger(__name__)

# Default of the optional second position set
_SAME_TYPE = object()


class DistanceCalculator:
    """
    Average distances between particles in the simulation box.

    Distances use the minimum image convention on the periodic axes of
    the box only. Degenerate position sets give UNAVAILABLE (-1.0),
    a malformed box raises at construction.
    """

    def __init__(self, box):
        if not isinstance(box, BoxGeometry):
            raise ValueError(f"box must be a BoxGeometry, got {type(box).__name__}")
        self.box = box

    @classmethod
    def from_lengths(cls, length_x, length_y, length_z,
                     periodic_x=True, periodic_y=True, periodic_z=True):
        return cls(BoxGeometry(length_x, length_y, length_z, periodic_x, periodic_y, periodic_z))

    # ------------------------------------------------------------
    # Same particle type
    # ------------------------------------------------------------
    def equal_particle_pair_average_distance(self, positions):
        """
        Mean distance over all unordered pairs i < j of one position set.

        positions : array-like (N, 3) or sequence of Point3D

        Returns UNAVAILABLE for None, an empty set or a single particle.
        """
        if is_empty(positions):
            return UNAVAILABLE
        pos = as_positions(positions)
        N = pos.shape[0]

        accumulated = 0.0
        n_distances = 0
        for i in range(N - 1):
            r = self.box.distances(pos[i], pos[i + 1:])
            accumulated += float(np.sum(r))
            n_distances += r.shape[0]

        if n_distances == 0:
            LOGGER.debug("Single particle, no pair distance available")
            return UNAVAILABLE
        return accumulated / n_distances

    # ------------------------------------------------------------
    # Different particle types
    # ------------------------------------------------------------
    def different_particle_pair_average_distance(self, positions_a, positions_b):
        """
        Mean distance over the full cross product of two position sets,
        divided by |A| * |B|. UNAVAILABLE if either set is None or empty.
        """
        if is_empty(positions_a) or is_empty(positions_b):
            return UNAVAILABLE
        pos_a = as_positions(positions_a)
        pos_b = as_positions(positions_b)

        accumulated = 0.0
        for i in range(pos_a.shape[0]):
            accumulated += float(np.sum(self.box.distances(pos_a[i], pos_b)))

        n_distances = pos_a.shape[0] * pos_b.shape[0]
        return accumulated / n_distances

    def average_distance(self, positions_a, positions_b=_SAME_TYPE):
        """
        Same-type average for one set, cross-type average for two.
        An explicit None as second set gives UNAVAILABLE.
        """
        if positions_b is _SAME_TYPE:
            return self.equal_particle_pair_average_distance(positions_a)
        return self.different_particle_pair_average_distance(positions_a, positions_b)

    # ------------------------------------------------------------
    # Batch over named particle types
    # ------------------------------------------------------------
    def particle_pair_average_distances(self, named_positions):
        """
        Average distances for every unordered pair of particle types.

        named_positions : mapping particle name -> positions

        Returns a list of ParticlePairAverageDistance in insertion order
        (A-A, A-B, ..., B-B, ...). Pairs without a result are skipped.
        """
        names = list(named_positions)
        results = []
        for i, name_i in enumerate(names):
            for name_j in names[i:]:
                if name_i == name_j:
                    value = self.equal_particle_pair_average_distance(named_positions[name_i])
                else:
                    value = self.different_particle_pair_average_distance(
                        named_positions[name_i], named_positions[name_j]
                    )
                if value == UNAVAILABLE:
                    LOGGER.debug("No average distance for particle pair %s-%s", name_i, name_j)
                    continue
                results.append(ParticlePairAverageDistance((name_i, name_j), value))
        return results


class ParticlePairAverageDistance:
    """Average distance of a particle pair, e.g. ("A", "B", 1.37)."""

    def __init__(self, particle_pair, average_distance):
        if particle_pair is None or len(particle_pair) != 2:
            raise ValueError("particle_pair must contain exactly two particles")
        if not particle_pair[0]:
            raise ValueError("First particle of particle_pair is empty")
        if not particle_pair[1]:
            raise ValueError("Second particle of particle_pair is empty")
        if average_distance < 0.0:
            raise ValueError(f"average_distance must not be negative, got {average_distance}")

        self.particle_pair = (str(particle_pair[0]), str(particle_pair[1]))
        self.average_distance = float(average_distance)

    @classmethod
    def from_token_string(cls, token_string):
        """Parse "A|B|distance"."""
        if not token_string:
            raise ValueError("token_string is empty")
        tokens = token_string.split(GENERAL_SEPARATOR)
        if len(tokens) != 3:
            raise ValueError(f"token_string must have three tokens: {token_string!r}")
        return cls((tokens[0], tokens[1]), float(tokens[2]))

    @property
    def first_particle(self):
        return self.particle_pair[0]

    @property
    def second_particle(self):
        return self.particle_pair[1]

    @property
    def token_string(self):
        return GENERAL_SEPARATOR.join(
            (self.first_particle, self.second_particle, repr(self.average_distance))
        )

    @property
    def underscore_concatenated_pair(self):
        return f"{self.first_particle}_{self.second_particle}"

    def __eq__(self, other):
        if not isinstance(other, ParticlePairAverageDistance):
            return NotImplemented
        return (self.particle_pair == other.particle_pair
                and self.average_distance == other.average_distance)

    def __hash__(self):
        return hash((self.particle_pair, self.average_distance))

    def __repr__(self):
        return f"ParticlePairAverageDistance({self.particle_pair!r}, {self.average_distance!r})"
