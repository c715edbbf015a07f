# dpdgeom/distribution.py
import logging

import numpy as np

from dpdgeom.geometry import SegmentedBoxGeometry, as_positions, is_empty

LOGGER = logging.getLogger(__name__)

_SAME_TYPE = object()


def _accumulate(accumulated, frequencies):
    """Add frequencies to the running total, growing it if necessary."""
    if frequencies.shape[0] > accumulated.shape[0]:
        grown = np.zeros(frequencies.shape[0], dtype=np.int64)
        grown[:accumulated.shape[0]] = accumulated
        accumulated = grown
    accumulated[:frequencies.shape[0]] += frequencies
    return accumulated


class DistanceDistribution:
    """
    Distance distributions (approximate radial distribution functions)
    of particles in a fully periodic simulation box.

    Pair distances are sorted into bins of width segment_length,
    bin i covering [i * segment, (i + 1) * segment). Distances larger
    than the smallest half box length are not binned at all.
    """

    def __init__(self, box):
        if not isinstance(box, SegmentedBoxGeometry):
            raise ValueError(f"box must be a SegmentedBoxGeometry, got {type(box).__name__}")
        self.box = box

    @classmethod
    def from_lengths(cls, segment_length, length_x, length_y, length_z):
        return cls(SegmentedBoxGeometry(segment_length, length_x, length_y, length_z))

    # ------------------------------------------------------------
    # Histogram of one source particle
    # ------------------------------------------------------------
    def _frequencies(self, origin, others, weight):
        r = self.box.distances(origin, others)
        r = r[r <= self.box.minimum_half_length]
        if r.shape[0] == 0:
            return np.zeros(0, dtype=np.int64)
        return weight * np.bincount(self.box.bin_indices(r)).astype(np.int64)

    # ------------------------------------------------------------
    # Same particle type
    # ------------------------------------------------------------
    def equal_particle_pair_bin_frequencies(self, positions):
        """
        Averaged bin frequencies of one particle type.

        positions : array-like (N, 3) or sequence of Point3D

        Every pair i < j is visited once and credited twice (i -> j and
        j -> i). The accumulated histogram is divided by N.

        Returns
        -------
        frequencies : array, shape (n_bins,) or None
            n_bins is the highest populated bin index + 1. None if
            positions is None or empty.
        """
        if is_empty(positions):
            LOGGER.debug("No particles, bin frequencies unavailable")
            return None
        pos = as_positions(positions)
        N = pos.shape[0]

        accumulated = np.zeros(0, dtype=np.int64)
        for i in range(N):
            accumulated = _accumulate(accumulated, self._frequencies(pos[i], pos[i + 1:], 2))

        return accumulated / float(N)

    # ------------------------------------------------------------
    # Different particle types
    # ------------------------------------------------------------
    def different_particle_pair_bin_frequencies(self, positions_a, positions_b):
        """
        Averaged bin frequencies of particles B around particles A.

        Every (a, b) pair is credited once, the histogram is divided by |A|.
        None if either set is None or empty.
        """
        if is_empty(positions_a) or is_empty(positions_b):
            LOGGER.debug("No particles, bin frequencies unavailable")
            return None
        pos_a = as_positions(positions_a)
        pos_b = as_positions(positions_b)

        accumulated = np.zeros(0, dtype=np.int64)
        for i in range(pos_a.shape[0]):
            accumulated = _accumulate(accumulated, self._frequencies(pos_a[i], pos_b, 1))

        return accumulated / float(pos_a.shape[0])

    def bin_frequencies(self, positions_a, positions_b=_SAME_TYPE):
        # an explicit None as second set gives None, not the same-type result
        if positions_b is _SAME_TYPE:
            return self.equal_particle_pair_bin_frequencies(positions_a)
        return self.different_particle_pair_bin_frequencies(positions_a, positions_b)

    # ------------------------------------------------------------
    # All particle types
    # ------------------------------------------------------------
    def particle_type_bin_frequencies(self, position_sets):
        """
        Bin frequencies for every pair of particle types.

        position_sets : sequence of position sets (index = particle type)
            or a mapping type key -> position set, types taken in
            ascending key order

        Returns a lower triangular list of lists, result[i][j] for j <= i.
        Diagonal entries use the same-type rule, result[i][j] with j < i
        has type i as source and type j as target. Entries of empty
        types are None.
        """
        sets = _ordered_sets(position_sets)
        if sets is None:
            return None

        result = []
        for i in range(len(sets)):
            row = []
            for j in range(i):
                row.append(self.different_particle_pair_bin_frequencies(sets[i], sets[j]))
            row.append(self.equal_particle_pair_bin_frequencies(sets[i]))
            result.append(row)
        return result

    # ------------------------------------------------------------
    # Per particle distance distribution
    # ------------------------------------------------------------
    def particle_distance_distribution(self, position_sets):
        """
        Number of particles of every other type in distance shells around
        each single particle.

        Shell 0 covers [0, segment], shell n covers
        (n * segment, (n + 1) * segment]. Distances are periodic but
        not truncated at half the box length.

        Returns result[i][p][k]: integer array of shell counts of type k
        around particle p of type i, None for k == i. None for fewer than
        two types or if a type has no particles.
        """
        sets = _ordered_sets(position_sets)
        if sets is None or len(sets) < 2:
            return None
        if any(s.shape[0] == 0 for s in sets):
            LOGGER.debug("Particle type without particles, distance distribution unavailable")
            return None

        n_types = len(sets)
        # distances[(i, k)] has shape (N_i, N_k), computed for i < k only
        distances = {}
        for i in range(n_types - 1):
            for k in range(i + 1, n_types):
                distances[(i, k)] = np.array(
                    [self.box.distances(p, sets[k]) for p in sets[i]]
                )

        result = []
        for i in range(n_types):
            per_particle = []
            for p in range(sets[i].shape[0]):
                per_type = []
                for k in range(n_types):
                    if k == i:
                        per_type.append(None)
                        continue
                    if i < k:
                        r = distances[(i, k)][p]
                    else:
                        r = distances[(k, i)][:, p]
                    per_type.append(self._shell_counts(r))
                per_particle.append(per_type)
            result.append(per_particle)
        return result

    def _shell_counts(self, r):
        shells = np.ceil(r / self.box.segment_length).astype(np.int64) - 1
        shells = np.maximum(shells, 0)
        return np.bincount(shells)


def _ordered_sets(position_sets):
    if position_sets is None or len(position_sets) < 1:
        return None
    if isinstance(position_sets, dict):
        # types in ascending key order, e.g. {1: A, 2: B} -> [A, B]
        position_sets = [position_sets[key] for key in sorted(position_sets)]
    return [as_positions(s) if s is not None else np.empty((0, 3)) for s in position_sets]


# ------------------------------------------------------------
# Normalization to g(r)
# ------------------------------------------------------------
def normalize_bin_frequencies(frequencies, box, number_of_targets):
    """
    Convert averaged bin frequencies into a radial distribution function.

        g(r) = n(r) / (rho * 4/3 pi (r_hi^3 - r_lo^3)),   rho = N_target / V

    frequencies : array, shape (n_bins,)
        Averaged bin frequencies (per source particle).
    box : SegmentedBoxGeometry
    number_of_targets : int
        Number of target particles (N for one type, |B| for A-B).

    Returns
    -------
    r : array, shape (n_bins,)
        Bin centers.
    g_r : array, shape (n_bins,)
    """
    if frequencies is None:
        return None
    freq = np.asarray(frequencies, dtype=float)
    n_bins = freq.shape[0]

    rho = number_of_targets / box.volume()
    edges = box.bin_edges(n_bins)
    shell_vol = 4.0 / 3.0 * np.pi * (edges[1:] ** 3 - edges[:-1] ** 3)
    g_r = freq / (rho * shell_vol)

    return box.bin_centers(n_bins), g_r
