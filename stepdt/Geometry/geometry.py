import math
import numpy as np

from stepdt.Geometry.primitives import Point, Triangle, Edge, Circle


def distance(p: Point, q: Point) -> float:
    """Euclidean norm of p - q."""
    return math.hypot(p.x - q.x, p.y - q.y)


def orientation(p, q, r):
    """
    Cross product of (q - p) and (r - p):

          ToLeft(p, q, r) = | p.x p.y 1 |
                            | q.x q.y 1 | = (q.x - p.x)*(r.y - p.y) - (q.y - p.y)*(r.x - p.x)
                            | r.x r.y 1 |

    > 0  r lies to the left of the directed line p->q (p, q, r counter-clockwise)
    = 0  collinear
    < 0  r lies to the right
    """
    return (q.x - p.x) * (r.y - p.y) - (q.y - p.y) * (r.x - p.x)


def angle_from_sides(a, b, c):
    """
    Law of cosines solved for the angle opposite side a:

        a^2 = b^2 + c^2 - 2bc cos(A)  =>  A = arccos((b^2 + c^2 - a^2) / (2bc))

    The cosine is clipped to [-1, 1] so rounding in nearly flat triangles does
    not leave the domain of arccos. Zero-length sides give NaN.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        cos_a = (b * b + c * c - a * a) / (2.0 * np.float64(b) * c)
        return float(np.arccos(np.clip(cos_a, -1.0, 1.0)))


def triangle_angles(triangle: Triangle):
    """Interior angles (A, B, C) at vertices (a, b, c) respectively."""
    a, b, c = triangle
    side_a = distance(b, c)
    side_b = distance(c, a)
    side_c = distance(a, b)
    return (angle_from_sides(side_a, side_b, side_c),
            angle_from_sides(side_b, side_c, side_a),
            angle_from_sides(side_c, side_a, side_b))


def circumcenter(triangle: Triangle) -> Point:
    """
    Circumcenter as the vertex average weighted by sin(2 * angle):

        x = (x1 sin 2A + x2 sin 2B + x3 sin 2C) / (sin 2A + sin 2B + sin 2C)

    and likewise for y. A degenerate triangle (collinear or coincident
    vertices) yields NaN coordinates; no error is raised.
    """
    weights = np.sin(2.0 * np.array(triangle_angles(triangle)))
    coords = np.array(triangle, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        center = weights @ coords / weights.sum()
    return Point(float(center[0]), float(center[1]))


def circumradius(triangle: Triangle) -> float:
    """
    r = abc / sqrt((a+b+c)(-a+b+c)(a-b+c)(a+b-c)), the Heron form.
    Degenerate triangles give inf or NaN.
    """
    a, b, c = triangle
    side_a = np.float64(distance(a, b))
    side_b = np.float64(distance(b, c))
    side_c = np.float64(distance(c, a))
    with np.errstate(divide="ignore", invalid="ignore"):
        denominator = np.sqrt((side_a + side_b + side_c) *
                              (-side_a + side_b + side_c) *
                              (side_a - side_b + side_c) *
                              (side_a + side_b - side_c))
        return float(side_a * side_b * side_c / denominator)


def circumcircle(triangle: Triangle) -> Circle:
    return Circle(circumcenter(triangle), circumradius(triangle))


def point_in_circle(circle: Circle, point: Point) -> bool:
    """Strictly inside: a point on the circle is not inside."""
    return distance(circle.center, point) < circle.radius


def edges_of_triangle(triangle: Triangle):
    a, b, c = triangle
    return (Edge(a, b), Edge(b, c), Edge(c, a))


def edges_equal(e1: Edge, e2: Edge) -> bool:
    p1, q1 = e1
    p2, q2 = e2
    return (p1 == p2 and q1 == q2) or (p1 == q2 and q1 == p2)
