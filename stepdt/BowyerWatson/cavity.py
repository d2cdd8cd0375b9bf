from typing import List, Sequence

from stepdt.Geometry.geometry import edges_of_triangle, edges_equal
from stepdt.Geometry.primitives import Edge, Triangle


def cavity_boundary(bad_triangles: Sequence[Triangle]) -> List[Edge]:
    """
    Boundary of the polygonal hole left by removing `bad_triangles`.

    An edge of a bad triangle is on the boundary iff no other bad triangle
    has a matching edge (in either direction). Edges keep the direction they
    have in their own triangle, and are returned in triangle order, then edge
    order within the triangle.

    Quadratic in len(bad_triangles); a cavity only spans the neighbourhood of
    one inserted point.
    """
    edges_per_triangle = [edges_of_triangle(t) for t in bad_triangles]
    polygon = []
    for idx, edges in enumerate(edges_per_triangle):
        shared = [False, False, False]
        for idx_c, other_edges in enumerate(edges_per_triangle):
            if idx == idx_c:
                continue
            for other in other_edges:
                for k in range(3):
                    shared[k] = shared[k] or edges_equal(edges[k], other)

        polygon.extend(edge for edge, is_shared in zip(edges, shared) if not is_shared)
    return polygon
