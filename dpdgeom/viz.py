# ------------------------------------------------------------
# Packing viewer (Plotly) and distance distribution chart (matplotlib)
# ------------------------------------------------------------
import numpy as np
import plotly.graph_objects as go
from matplotlib.figure import Figure

from dpdgeom.geometry import BoxGeometry, as_positions


def _box_lengths(box):
    if isinstance(box, BoxGeometry):
        return box.lengths
    return np.asarray(box, dtype=float)


def visualize_packing_3d(positions, radius=None, box=None, name="particles"):
    """
    3D scatter of sphere centers.

    radius : float or None
        Particle radius, only used in the title.
    box : BoxGeometry, (Lx, Ly, Lz) or None
        Draws the box wireframe from the origin corner if given.
    """
    pos = as_positions(positions)
    x, y, z = pos.T

    fig = go.Figure()

    # Particles
    fig.add_trace(
        go.Scatter3d(
            x=x,
            y=y,
            z=z,
            mode="markers",
            marker=dict(size=4, opacity=0.9),
            name=name,
        )
    )

    scene = dict(aspectmode="data")

    # Simulation box wireframe
    if box is not None:
        Lx, Ly, Lz = _box_lengths(box)
        corners = np.array([
            [0, 0, 0],
            [Lx, 0, 0],
            [Lx, Ly, 0],
            [0, Ly, 0],
            [0, 0, Lz],
            [Lx, 0, Lz],
            [Lx, Ly, Lz],
            [0, Ly, Lz],
        ])

        edges = [
            (0, 1), (1, 2), (2, 3), (3, 0),
            (4, 5), (5, 6), (6, 7), (7, 4),
            (0, 4), (1, 5), (2, 6), (3, 7),
        ]

        for i, j in edges:
            fig.add_trace(
                go.Scatter3d(
                    x=[corners[i, 0], corners[j, 0]],
                    y=[corners[i, 1], corners[j, 1]],
                    z=[corners[i, 2], corners[j, 2]],
                    mode="lines",
                    line=dict(width=2),
                    showlegend=False,
                )
            )

        scene.update(
            xaxis=dict(range=[0, Lx]),
            yaxis=dict(range=[0, Ly]),
            zaxis=dict(range=[0, Lz]),
        )

    title = f"{name}: {pos.shape[0]} spheres"
    if radius is not None:
        title += f" (r = {radius:g})"

    fig.update_layout(
        title=title,
        scene=scene,
        margin=dict(l=0, r=0, t=30, b=0),
    )
    return fig


def plot_bin_frequencies(frequencies, segment_length, filename=None,
                         title="Distance Distribution"):
    """
    Bar chart of averaged bin frequencies, bin i drawn at [i, i+1) * segment.
    Saved to filename (png, pdf, ...) if given. The figure is not
    registered with pyplot, so repeated calls leave no open figures.
    """
    freq = np.asarray(frequencies, dtype=float)
    left_edges = segment_length * np.arange(freq.shape[0])

    fig = Figure(figsize=(6, 4))
    ax = fig.subplots()
    ax.bar(left_edges, freq, width=segment_length, align="edge")
    ax.set_xlabel("r")
    ax.set_ylabel("average frequency")
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()

    if filename is not None:
        fig.savefig(filename, dpi=300)
    return fig
