from typing import Sequence

from stepdt.Geometry.geometry import orientation
from stepdt.Geometry.primitives import Point, Triangle


class SuperTriangle:
    """
    Triangle that encloses every input point, seeded into the mesh before the
    first insertion and stripped (together with everything touching its
    vertices) once the last point is in.

    The construction assumes non-negative coordinates (screen space): the
    lower-left corner is fixed at (-1, -1) and the other two corners are
    pushed out to twice the largest x and y plus a margin.
    """

    def __init__(self, points: Sequence[Point] = ()):
        max_x, max_y = 0.0, 0.0
        for p in points:
            if p.x > max_x:
                max_x = p.x
            if p.y > max_y:
                max_y = p.y
        max_x *= 2.0
        max_y *= 2.0

        self.triangle = Triangle(Point(-1.0, -1.0),
                                 Point(max_x + 3.0, -1.0),
                                 Point(-1.0, max_y + 3.0))

    def touches(self, triangle: Triangle) -> bool:
        """True if `triangle` shares at least one vertex with the super-triangle."""
        return any(triangle.has_vertex(v) for v in self.triangle)

    def contains(self, p: Point) -> bool:
        """Inside test, boundary included. The corners are counter-clockwise."""
        A, B, C = self.triangle
        return (orientation(A, B, p) >= 0 and orientation(B, C, p) >= 0
                and orientation(C, A, p) >= 0)

    def __repr__(self):
        return f"SuperTriangle{tuple(self.triangle)}"
