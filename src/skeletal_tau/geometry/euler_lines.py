"""Per-triangle centroid, circumcenter, and Euler line extraction."""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from skeletal_tau.core import config
from skeletal_tau.core.exceptions import DegenerateGeometryError
from skeletal_tau.geometry.circumcenter import triangle_circumcenter_3d
from skeletal_tau.geometry.vectors import normalize

logger = logging.getLogger(__name__)


@dataclass
class EulerLineSample:
    """Euler line geometry of one triangle in one frame.

    Attributes:
        centroid: mean of the three vertices.
        circumcenter: point equidistant from the three vertices.
        euler_line: centroid - circumcenter.
        radius: circumcenter - first vertex (the circumradius vector).
    """

    centroid: np.ndarray
    circumcenter: np.ndarray
    euler_line: np.ndarray
    radius: np.ndarray


@dataclass
class BisectorDebug:
    """Visualization aids for one triangle. None of these feed the tau signal."""

    ab: np.ndarray
    bc: np.ndarray
    ca: np.ndarray
    ab_mid: np.ndarray
    bc_mid: np.ndarray
    ca_mid: np.ndarray
    normal: np.ndarray
    d1: np.ndarray
    d2: np.ndarray
    d3: np.ndarray
    alternate_circumcenter: Optional[np.ndarray]


def extract_euler_line(a, b, c, epsilon: float = config.GEOMETRY_EPSILON) -> EulerLineSample:
    """This function computes the Euler line of a single triangle.

    Args:
        a: 3d position of the first vertex.
        b: 3d position of the second vertex.
        c: 3d position of the third vertex.
        epsilon: relative degeneracy threshold passed to the circumcenter kernel.

    Returns:
        EulerLineSample for the triangle.

    Raises:
        DegenerateGeometryError: if the vertices are collinear.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    c = np.asarray(c, dtype=float)

    centroid = (a + b + c) / 3
    circumcenter = triangle_circumcenter_3d(a, b, c, epsilon)
    return EulerLineSample(
        centroid=centroid,
        circumcenter=circumcenter,
        euler_line=centroid - circumcenter,
        radius=circumcenter - a,
    )


def extract_euler_lines(
    triangles, epsilon: float = config.GEOMETRY_EPSILON
) -> List[Optional[EulerLineSample]]:
    """This function computes the Euler line of every triangle in a frame.

    A degenerate triangle does not stop the pass: its entry is None and the
    remaining triangles are still processed.

    Args:
        triangles: TriangleSet for the current frame.
        epsilon: relative degeneracy threshold.

    Returns:
        one entry per triangle, in triangle order.
    """
    samples = []
    for triangle in triangles:
        try:
            samples.append(extract_euler_line(*triangle.positions, epsilon=epsilon))
        except DegenerateGeometryError as err:
            logger.debug("Skipping triangle %d (%s): %s", triangle.index, triangle.name, err)
            samples.append(None)
    return samples


def _line_intersection_xy(p, d, q, e) -> Optional[np.ndarray]:
    """Intersect p + t*d with q + s*e by solving the x and y components."""
    denominator = d[1] * e[0] - e[1] * d[0]
    if abs(denominator) <= 1e-9 * np.linalg.norm(d) * np.linalg.norm(e):
        return None
    t = ((q[1] - p[1]) * e[0] + e[1] * p[0] - e[1] * q[0]) / denominator
    return p + d * t


def compute_bisector_debug(
    a,
    b,
    c,
    normal_length: float = config.DEBUG_NORMAL_LENGTH,
    bisector_length: float = config.DEBUG_BISECTOR_LENGTH,
) -> BisectorDebug:
    """This function computes side, normal, and perpendicular bisector vectors.

    The perpendicular bisectors of AB and BC are intersected to give a second,
    independent circumcenter estimate for cross-checking the kernel.

    Args:
        a: 3d position of the first vertex.
        b: 3d position of the second vertex.
        c: 3d position of the third vertex.
        normal_length: length the triangle normal is scaled to.
        bisector_length: length the bisector directions are scaled to.

    Returns:
        BisectorDebug for the triangle. alternate_circumcenter is None when
        the bisector lines cannot be intersected.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    c = np.asarray(c, dtype=float)

    ab = a - b
    bc = b - c
    ca = c - a
    ab_mid = (a + b) / 2
    bc_mid = (b + c) / 2
    ca_mid = (c + a) / 2

    normal = np.cross(ab, bc)
    d1 = np.cross(normal, ab)
    d2 = np.cross(normal, bc)
    d3 = np.cross(normal, ca)

    d1 = normalize(d1) * bisector_length
    d2 = normalize(d2) * bisector_length
    d3 = normalize(d3) * bisector_length

    return BisectorDebug(
        ab=ab,
        bc=bc,
        ca=ca,
        ab_mid=ab_mid,
        bc_mid=bc_mid,
        ca_mid=ca_mid,
        normal=normalize(normal) * normal_length,
        d1=d1,
        d2=d2,
        d3=d3,
        alternate_circumcenter=_line_intersection_xy(ab_mid, d1, bc_mid, d2),
    )
