"""
Resumable Bowyer-Watson triangulation.

Pseudocode of the algorithm the engine steps through:

    function BowyerWatson (pointList)
        triangulation := empty triangle mesh data structure
        add super-triangle to triangulation
        for each point in pointList do
            badTriangles := empty set
            for each triangle in triangulation do
                if point is inside circumcircle of triangle
                    add triangle to badTriangles
            polygon := empty set
            for each triangle in badTriangles do
                for each edge in triangle do
                    if edge is not shared by any other triangles in badTriangles
                        add edge to polygon
            for each triangle in badTriangles do
                remove triangle from triangulation
            for each edge in polygon do
                newTri := form a triangle from edge to point
                add newTri to triangulation
        for each triangle in triangulation
            if triangle contains a vertex from original super-triangle
                remove triangle from triangulation
        return triangulation

`TriangulationEngine.step()` performs one slice of this per call: the
bootstrap, the classification of one triangle, the emptying of the cavity,
or the refilling of the cavity. Everything needed to resume lives on the
engine (phase, point index, bad-triangle set, cached boundary), so a driver
may stop calling `step()` at any time and pick up later.
"""
import logging
import math
from typing import Iterable, List, Optional, Sequence

from stepdt.BowyerWatson.cavity import cavity_boundary
from stepdt.BowyerWatson.phase import Phase, PhaseKind
from stepdt.BowyerWatson.super_triangle import SuperTriangle
from stepdt.Geometry.geometry import circumcircle, point_in_circle
from stepdt.Geometry.primitives import Circle, Edge, Point, Triangle
from stepdt.Mesh.mesh import Mesh

logger = logging.getLogger(__name__)


class StepReport:
    """
    What one `step()` call did, for highlighting by a renderer.

    Attributes:
        phase (Phase): phase after the step.
        point (Point): point whose insertion cycle the step belongs to, None
            for the bootstrap step and once the run is complete.
        scanned (Triangle): triangle classified during this step, if any.
        circle (Circle): circumcircle of `scanned`.
        is_bad (bool): whether `circle` strictly contains `point`.
        removed (list of Triangle): triangles taken out of the mesh.
        inserted (list of Triangle): triangles added to the mesh.
    """
    __slots__ = ["phase", "point", "scanned", "circle", "is_bad", "removed", "inserted"]

    def __init__(self, phase, point=None):
        self.phase: Phase = phase
        self.point: Optional[Point] = point
        self.scanned: Optional[Triangle] = None
        self.circle: Optional[Circle] = None
        self.is_bad: Optional[bool] = None
        self.removed: List[Triangle] = []
        self.inserted: List[Triangle] = []

    def __repr__(self):
        return (f"StepReport(phase={self.phase!r}, point={self.point!r}, "
                f"scanned={self.scanned!r}, is_bad={self.is_bad}, "
                f"removed={len(self.removed)}, inserted={len(self.inserted)})")


def as_point_list(points: Iterable) -> List[Point]:
    """Convert (x, y) pairs to Points, rejecting malformed or non-finite entries."""
    result = []
    for idx, p in enumerate(points):
        if isinstance(p, (str, bytes)):
            raise ValueError(f"point {idx} is not an (x, y) pair: {p!r}")
        try:
            x, y = p
            x, y = float(x), float(y)
        except (TypeError, ValueError):
            raise ValueError(f"point {idx} is not an (x, y) pair: {p!r}") from None
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"point {idx} has non-finite coordinates: {p!r}")
        result.append(Point(x, y))
    return result


class TriangulationEngine:
    """
    Step-wise Delaunay triangulation of a fixed point list.

    Usage:
        engine = TriangulationEngine([(0, 0), (10, 0), (5, 10)])
        while not engine.is_complete:
            report = engine.step()
        engine.current_triangles()

    Parameters:
        points (iterable of (x, y)): points for the next run.
        validate (bool): check the mesh for duplicate triangles after every
            step that changed it. Meant for tests; costs a pass over the mesh.
    """

    def __init__(self, points: Iterable = (), validate: bool = False):
        self.validate = validate
        self.mesh = Mesh()
        self._pending_points: List[Point] = as_point_list(points)
        self._reset_run_state()

    def _reset_run_state(self):
        self._phase = Phase.initial()
        self._points: List[Point] = []
        self._point_index = 0
        self._super: Optional[SuperTriangle] = None
        self._bad_handles: List[int] = []
        self._bad_triangles: List[Triangle] = []
        self._boundary: List[Edge] = []
        self._finalized = False

    # ---------- external interface ----------
    def set_point_list(self, points: Iterable):
        """Points for the next run. A run that is already seeded keeps its own copy."""
        self._pending_points = as_point_list(points)

    def reset(self):
        """Drop the mesh and all run state; the next step() bootstraps a new run."""
        self.mesh.clear()
        self._reset_run_state()
        logger.debug("engine reset")

    def current_triangles(self) -> List[Triangle]:
        return self.mesh.triangles()

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def points(self) -> Sequence[Point]:
        """Point list of the current run (empty before the bootstrap step)."""
        return tuple(self._points)

    @property
    def current_point_index(self) -> int:
        return self._point_index

    @property
    def current_point(self) -> Optional[Point]:
        if self._phase.kind is PhaseKind.INITIAL or self._point_index >= len(self._points):
            return None
        return self._points[self._point_index]

    @property
    def super_triangle(self) -> Optional[Triangle]:
        return self._super.triangle if self._super is not None else None

    @property
    def bad_triangles(self) -> Sequence[Triangle]:
        return tuple(self._bad_triangles)

    @property
    def boundary(self) -> Sequence[Edge]:
        return tuple(self._boundary)

    @property
    def is_complete(self) -> bool:
        """True once every point is inserted and the super-triangle is stripped."""
        return self._finalized

    # ---------- stepping ----------
    def step(self) -> StepReport:
        """Advance the triangulation by one unit of work."""
        if self._phase.kind is PhaseKind.INITIAL:
            self._bootstrap()
            self._phase = Phase.scanning(0)
            report = StepReport(self._phase)
            report.inserted.append(self._super.triangle)
            return self._checked(report)

        if self._point_index >= len(self._points):
            report = StepReport(self._phase)
            self._finalize(report)
            return self._checked(report)

        point = self._points[self._point_index]
        report = StepReport(self._phase, point)

        if self._phase.kind is PhaseKind.SCANNING_BAD_TRIANGLES:
            self._scan_next_triangle(point, report)
            if self._phase.kind < PhaseKind.HOLE_BOUNDARY_READY:
                report.phase = self._phase
                return report

        if self._phase.kind is PhaseKind.HOLE_BOUNDARY_READY:
            self._boundary = cavity_boundary(self._bad_triangles)
            self._phase = Phase.removing(has_removed_once=False)

        if self._phase.kind is PhaseKind.REMOVING_BAD_TRIANGLES:
            if not self._phase.has_removed_once:
                self._remove_bad_triangles(report)
                self._phase = Phase.removing(has_removed_once=True)
                report.phase = self._phase
                return self._checked(report)
            self._phase = Phase.inserting()

        if self._phase.kind is PhaseKind.INSERTING_NEW_TRIANGLES:
            self._fill_cavity(point, report)
            self._point_index += 1
            self._bad_handles = []
            self._bad_triangles = []
            self._boundary = []
            self._phase = Phase.scanning(0)

        report.phase = self._phase
        return self._checked(report)

    def run(self, max_steps: Optional[int] = None) -> List[Triangle]:
        """Step until the run is complete and return the final triangles."""
        steps = 0
        while not self._finalized:
            if max_steps is not None and steps >= max_steps:
                raise RuntimeError(f"triangulation not complete after {max_steps} steps")
            self.step()
            steps += 1
        return self.current_triangles()

    # ---------- phases ----------
    def _bootstrap(self):
        self._points = list(self._pending_points)
        self._super = SuperTriangle(self._points)
        self.mesh.insert(self._super.triangle)

        for idx, p in enumerate(self._points):
            if not self._super.contains(p):
                logger.warning("point %d %r lies outside the super-triangle %r; "
                               "the result near it may not be Delaunay",
                               idx, p, self._super.triangle)
        logger.info("run started: %d points, super-triangle %r",
                    len(self._points), self._super.triangle)

    def _scan_next_triangle(self, point: Point, report: StepReport):
        idx = self._phase.triangle_index
        if idx < len(self.mesh):
            handle, triangle = self.mesh.at(idx)
            circle = circumcircle(triangle)
            is_bad = point_in_circle(circle, point)
            if is_bad:
                self._bad_handles.append(handle)
                self._bad_triangles.append(triangle)
            report.scanned, report.circle, report.is_bad = triangle, circle, is_bad

        if idx + 1 < len(self.mesh):
            self._phase = Phase.scanning(idx + 1)
        elif self._phase.kind < PhaseKind.HOLE_BOUNDARY_READY:
            self._phase = Phase.hole_boundary_ready()
            logger.debug("point %d %r: %d bad triangles out of %d",
                         self._point_index, point, len(self._bad_handles), len(self.mesh))

    def _remove_bad_triangles(self, report: StepReport):
        for handle in self._bad_handles:
            report.removed.append(self.mesh.remove(handle))

    def _fill_cavity(self, point: Point, report: StepReport):
        for u, v in self._boundary:
            triangle = Triangle(point, u, v)
            self.mesh.insert(triangle)
            report.inserted.append(triangle)
        logger.debug("point %d %r: cavity of %d edges refilled",
                     self._point_index, point, len(self._boundary))

    def _finalize(self, report: StepReport):
        if self._super is not None:
            for handle, triangle in self.mesh.items():
                if self._super.touches(triangle):
                    report.removed.append(self.mesh.remove(handle))
        self._bad_handles = []
        self._bad_triangles = []
        self._boundary = []
        if not self._finalized:
            self._finalized = True
            logger.info("run complete: %d triangles", len(self.mesh))

    def _checked(self, report: StepReport) -> StepReport:
        if self.validate and (report.removed or report.inserted):
            self.mesh.validate()
        return report

    def __repr__(self):
        return (f"TriangulationEngine(phase={self._phase!r}, "
                f"point={self._point_index}/{len(self._points)}, mesh={self.mesh!r})")


def triangulate(points: Iterable) -> List[Triangle]:
    """Delaunay triangles of `points`, computed without pausing."""
    return TriangulationEngine(points).run()
