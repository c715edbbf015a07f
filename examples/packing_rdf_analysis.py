import logging
import os
import sys

import numpy as np
import matplotlib.pyplot as plt

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(SCRIPT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from dpdgeom.geometry import BoxGeometry, SegmentedBoxGeometry
from dpdgeom.packing import particle_coordinates
from dpdgeom.distance import DistanceCalculator
from dpdgeom.distribution import DistanceDistribution, normalize_bin_frequencies
from dpdgeom.viz import visualize_packing_3d, plot_bin_frequencies


# -----------------------------
# Inputs
# -----------------------------
lattice = "fcc"     # Choose sc/hcp/fcc
r_particle = 0.5    # Particle radius (DPD units)
box_length = 10.0   # Cubic box edge
segment = 0.1       # Bin width of the distance distribution
jitter = 0.05       # Random displacement after packing
seed = 123

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


# -----------------------------
# Starting geometry
# -----------------------------
pos = particle_coordinates(lattice, "cuboid", r_particle,
                           box_length - 2 * r_particle,
                           box_length - 2 * r_particle,
                           box_length - 2 * r_particle,
                           start_vector=(r_particle, r_particle, r_particle))

rng = np.random.default_rng(seed)
pos += rng.normal(0.0, jitter, size=pos.shape)
pos %= box_length

# Two particle types: A = lower half in z, B = upper half
species = {
    "A": pos[pos[:, 2] < 0.5 * box_length],
    "B": pos[pos[:, 2] >= 0.5 * box_length],
}
print(f"{lattice.upper()} packing: {pos.shape[0]} particles "
      f"({species['A'].shape[0]} A, {species['B'].shape[0]} B)")


# -----------------------------
# Average distances
# -----------------------------
calculator = DistanceCalculator(BoxGeometry(box_length, box_length, box_length))
for pair in calculator.particle_pair_average_distances(species):
    print(f"{pair.underscore_concatenated_pair:>5s}: {pair.average_distance:.5f}")


# -----------------------------
# Distance distributions
# -----------------------------
box = SegmentedBoxGeometry(segment, box_length, box_length, box_length)
distribution = DistanceDistribution(box)

frequencies = distribution.bin_frequencies(pos)
r, g_r = normalize_bin_frequencies(frequencies, box, pos.shape[0])
print(f"First g(r) maximum at r = {r[np.argmax(g_r)]:.3f} (contact at {2 * r_particle:.3f})")

matrix = distribution.particle_type_bin_frequencies([species["A"], species["B"]])
print(f"A-A bins: {len(matrix[0][0])}, B-A bins: {len(matrix[1][0])}, B-B bins: {len(matrix[1][1])}")


# -----------------------------
# Plots
# -----------------------------
plot_bin_frequencies(frequencies, segment, filename="distance_distribution.png",
                     title=f"{lattice.upper()} distance distribution")

plt.figure(figsize=(7, 5))
plt.plot(r, g_r)
plt.xlabel("r")
plt.ylabel("g(r)")
plt.title("RDF")
plt.tight_layout()
plt.savefig("rdf.png", dpi=300)

visualize_packing_3d(pos, radius=r_particle, box=box, name=lattice.upper()).write_html("packing.html")
print("Saved distance_distribution.png, rdf.png, packing.html")
