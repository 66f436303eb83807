"""Closed-form circumcenters of triangles (2D, 3D) and tetrahedra.

Every function works in coordinates relative to the first point `a`, which
keeps the result accurate no matter how far the points sit from the origin.
The returned centers are absolute (`a` is added back). The xi/eta/zeta values
are the circumcenter's coordinates in the frame spanned by the edges leaving
`a`: the edge ab is one unit along xi, ac one unit along eta and ad one unit
along zeta. They are useful for linear interpolation at the circumcenter.

No function returns inf or NaN: when the points are (nearly) collinear or
coplanar a DegenerateGeometryError is raised instead.
"""

from typing import Tuple

import numpy as np

from skeletal_tau.core import config
from skeletal_tau.core.exceptions import DegenerateGeometryError


def _as_point(p, dims: int) -> np.ndarray:
    point = np.asarray(p, dtype=float)
    if point.shape != (dims,):
        raise ValueError(f"expected a {dims}D point, got shape {point.shape}")
    return point


def triangle_circumcenter_2d(
    a, b, c, epsilon: float = config.GEOMETRY_EPSILON
) -> Tuple[np.ndarray, float, float]:
    """Find the circumcenter of a triangle in the plane.

    Args:
        a: first vertex, origin of the xi/eta frame.
        b: second vertex.
        c: third vertex.
        epsilon: relative threshold on the orientation determinant.

    Returns:
        center: absolute 2D circumcenter.
        xi: circumcenter coordinate along ab.
        eta: circumcenter coordinate along ac.

    Raises:
        DegenerateGeometryError: if the three points are collinear.
    """
    a = _as_point(a, 2)
    ba = _as_point(b, 2) - a
    ca = _as_point(c, 2) - a

    balength = ba @ ba
    calength = ca @ ca
    determinant = ba[0] * ca[1] - ba[1] * ca[0]
    if abs(determinant) <= epsilon * np.sqrt(balength * calength):
        raise DegenerateGeometryError(
            f"collinear triangle {a.tolist()}, {(a + ba).tolist()}, {(a + ca).tolist()}"
        )
    denominator = 0.5 / determinant

    offset = np.array([
        (ca[1] * balength - ba[1] * calength) * denominator,
        (ba[0] * calength - ca[0] * balength) * denominator,
    ])
    # Cramer's rule in the (ab, ac) frame
    xi = (offset[0] * ca[1] - offset[1] * ca[0]) * (2.0 * denominator)
    eta = (offset[1] * ba[0] - offset[0] * ba[1]) * (2.0 * denominator)

    return a + offset, float(xi), float(eta)


def _circumcenter_offset_3d(a, b, c, epsilon):
    a = _as_point(a, 3)
    ba = _as_point(b, 3) - a
    ca = _as_point(c, 3) - a

    balength = ba @ ba
    calength = ca @ ca
    cross = np.cross(ba, ca)
    cross_length = cross @ cross
    if cross_length <= (epsilon**2) * balength * calength:
        raise DegenerateGeometryError(
            f"collinear triangle {a.tolist()}, {(a + ba).tolist()}, {(a + ca).tolist()}"
        )

    offset = np.cross(balength * ca - calength * ba, cross) * (0.5 / cross_length)
    return a, ba, ca, cross, offset


def triangle_circumcenter_3d(a, b, c, epsilon: float = config.GEOMETRY_EPSILON) -> np.ndarray:
    """Find the circumcenter of a triangle in space.

    The result always lies in the plane of the triangle.

    Raises:
        DegenerateGeometryError: if the three points are collinear.
    """
    a, _, _, _, offset = _circumcenter_offset_3d(a, b, c, epsilon)
    return a + offset


def triangle_circumcenter_3d_with_params(
    a, b, c, epsilon: float = config.GEOMETRY_EPSILON
) -> Tuple[np.ndarray, float, float]:
    """Find the circumcenter of a triangle in space with its xi/eta coordinates.

    Three algebraically equivalent formulas give xi and eta, one per component
    of the normal ab x ac. The one dividing by the largest component is used.

    Args:
        a: first vertex, origin of the xi/eta frame.
        b: second vertex.
        c: third vertex.
        epsilon: relative threshold on the normal's length.

    Returns:
        center: absolute 3D circumcenter.
        xi: circumcenter coordinate along ab.
        eta: circumcenter coordinate along ac.

    Raises:
        DegenerateGeometryError: if the three points are collinear.
    """
    a, ba, ca, cross, offset = _circumcenter_offset_3d(a, b, c, epsilon)
    x, y, z = offset
    magnitude = np.abs(cross)

    if magnitude[0] >= magnitude[1] and magnitude[0] >= magnitude[2]:
        xi = (y * ca[2] - z * ca[1]) / cross[0]
        eta = (z * ba[1] - y * ba[2]) / cross[0]
    elif magnitude[1] >= magnitude[2]:
        xi = (z * ca[0] - x * ca[2]) / cross[1]
        eta = (x * ba[2] - z * ba[0]) / cross[1]
    else:
        xi = (x * ca[1] - y * ca[0]) / cross[2]
        eta = (y * ba[0] - x * ba[1]) / cross[2]

    return a + offset, float(xi), float(eta)


def tetrahedron_circumcenter(
    a, b, c, d, epsilon: float = config.GEOMETRY_EPSILON
) -> Tuple[np.ndarray, float, float, float]:
    """Find the circumcenter of a tetrahedron.

    Args:
        a: first vertex, origin of the xi/eta/zeta frame.
        b: second vertex.
        c: third vertex.
        d: fourth vertex.
        epsilon: relative threshold on the orientation determinant.

    Returns:
        center: absolute circumcenter (center of the circumsphere).
        xi: circumcenter coordinate along ab.
        eta: circumcenter coordinate along ac.
        zeta: circumcenter coordinate along ad.

    Raises:
        DegenerateGeometryError: if the four points are coplanar.
    """
    a = _as_point(a, 3)
    ba = _as_point(b, 3) - a
    ca = _as_point(c, 3) - a
    da = _as_point(d, 3) - a

    balength = ba @ ba
    calength = ca @ ca
    dalength = da @ da
    cross_cd = np.cross(ca, da)
    cross_db = np.cross(da, ba)
    cross_bc = np.cross(ba, ca)

    determinant = ba @ cross_cd
    scale = np.sqrt(balength * calength * dalength)
    if abs(determinant) <= epsilon * scale:
        raise DegenerateGeometryError(
            f"coplanar tetrahedron with origin {a.tolist()}"
        )
    denominator = 0.5 / determinant

    offset = (balength * cross_cd + calength * cross_db + dalength * cross_bc) * denominator
    xi = (offset @ cross_cd) * (2.0 * denominator)
    eta = (offset @ cross_db) * (2.0 * denominator)
    zeta = (offset @ cross_bc) * (2.0 * denominator)

    return a + offset, float(xi), float(eta), float(zeta)
