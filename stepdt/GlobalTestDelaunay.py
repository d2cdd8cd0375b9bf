import logging

import numpy as np
from scipy.spatial import Delaunay

from stepdt.Geometry.geometry import circumcircle, distance

logger = logging.getLogger(__name__)


def find_violations(triangles, points, rel_tol=1e-9):
    """
    (triangle, point) pairs where `point` lies strictly inside the
    circumcircle of `triangle` by more than `rel_tol` of the radius.
    Vertices of a triangle are never tested against its own circle.
    """
    violations = []
    for triangle in triangles:
        circle = circumcircle(triangle)
        for point in points:
            if triangle.has_vertex(point):
                continue
            if distance(circle.center, point) < circle.radius * (1.0 - rel_tol):
                violations.append((triangle, point))
    return violations


def GlobalTestDelaunay(triangles, points, rel_tol=1e-9):
    """True if no point lies inside the circumcircle of any triangle."""
    violations = find_violations(triangles, points, rel_tol)
    for triangle, point in violations:
        logger.warning("%r INCLUDES point %r", triangle, point)
    return not violations


def reference_triangles(points):
    """
    Delaunay triangles of `points` from scipy (Qhull), as frozensets of
    indices into `points`. Used to cross-check the step engine.
    """
    pts = np.asarray(points, dtype=np.float64)
    if len(pts) < 3:
        return set()
    tri = Delaunay(pts)
    return {frozenset(int(i) for i in simplex) for simplex in tri.simplices}
