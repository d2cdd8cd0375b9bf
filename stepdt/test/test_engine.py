# tests/test_engine.py

import math
import unittest

import numpy as np

from stepdt.BowyerWatson.engine import TriangulationEngine, triangulate
from stepdt.BowyerWatson.phase import Phase, PhaseKind
from stepdt.Geometry.geometry import circumcircle, distance
from stepdt.Geometry.primitives import Point, Triangle, Edge
from stepdt.GlobalTestDelaunay import GlobalTestDelaunay, reference_triangles
from stepdt.Mesh.mesh import MeshConsistencyError


def drive(engine, max_steps=10000):
    """Step until complete; returns the list of reports."""
    reports = []
    while not engine.is_complete:
        reports.append(engine.step())
        if len(reports) > max_steps:
            raise AssertionError("engine did not complete")
    return reports


def jittered_grid(nx, ny, spacing=40.0, jitter=8.0, seed=7):
    rng = np.random.default_rng(seed)
    return [Point(float(spacing * i + 10.0 + rng.uniform(-jitter, jitter)),
                  float(spacing * j + 10.0 + rng.uniform(-jitter, jitter)))
            for i in range(nx) for j in range(ny)]


class TestScenarios(unittest.TestCase):

    def test_single_triangle(self):
        points = [(0, 0), (10, 0), (5, 10)]
        engine = TriangulationEngine(points, validate=True)
        reports = drive(engine)

        triangles = engine.current_triangles()
        self.assertEqual(len(triangles), 1)
        expected = Triangle(Point(0.0, 0.0), Point(10.0, 0.0), Point(5.0, 10.0))
        self.assertTrue(triangles[0].same_vertices(expected))
        for v in engine.super_triangle:
            self.assertFalse(any(t.has_vertex(v) for t in triangles))
        # bootstrap, 1+1, 3+1, 5+1 per point, final cleanup
        self.assertEqual(len(reports), 14)

    def test_square(self):
        corners = [Point(0.0, 0.0), Point(10.0, 0.0), Point(10.0, 10.0), Point(0.0, 10.0)]
        triangles = TriangulationEngine(corners, validate=True).run()
        self.assertEqual(len(triangles), 2)

        e1 = set(Edge(t[i], t[(i + 1) % 3]) for t in triangles[:1] for i in range(3))
        e2 = set(Edge(t[i], t[(i + 1) % 3]) for t in triangles[1:] for i in range(3))
        shared = e1 & e2
        self.assertEqual(len(shared), 1)
        self.assertIn(shared.pop(), (Edge(corners[0], corners[2]), Edge(corners[1], corners[3])))

        for t in triangles:
            fourth, = [p for p in corners if not t.has_vertex(p)]
            circle = circumcircle(t)
            self.assertGreaterEqual(distance(circle.center, fourth), circle.radius * (1 - 1e-9))

    def test_empty_point_set(self):
        engine = TriangulationEngine([])
        reports = drive(engine)
        self.assertEqual(engine.current_triangles(), [])
        self.assertEqual(len(reports), 2)
        self.assertEqual(reports[1].removed, [engine.super_triangle])

    def test_single_point(self):
        self.assertEqual(triangulate([(3.0, 4.0)]), [])

    def test_delaunay_property_on_jittered_grid(self):
        points = jittered_grid(6, 5)
        engine = TriangulationEngine(points, validate=True)
        triangles = engine.run()

        self.assertGreater(len(triangles), 0)
        self.assertTrue(GlobalTestDelaunay(triangles, points))
        for t in triangles:
            for v in engine.super_triangle:
                self.assertFalse(t.has_vertex(v))

    def test_triangles_belong_to_reference_triangulation(self):
        points = jittered_grid(5, 5, seed=11)
        reference = reference_triangles(points)
        index = {p: i for i, p in enumerate(points)}
        triangles = triangulate(points)
        self.assertGreater(len(triangles), 0)
        for t in triangles:
            self.assertIn(frozenset(index[v] for v in t), reference)

    def test_run_step_budget(self):
        engine = TriangulationEngine(jittered_grid(3, 3))
        with self.assertRaises(RuntimeError):
            engine.run(max_steps=5)
        # the interrupted run resumes where it stopped
        self.assertEqual(engine.run(), triangulate(jittered_grid(3, 3)))


class TestStateMachine(unittest.TestCase):

    def setUp(self):
        self.P1, self.P2, self.P3 = Point(0.0, 0.0), Point(10.0, 0.0), Point(5.0, 10.0)
        self.engine = TriangulationEngine([self.P1, self.P2, self.P3])

    def test_bootstrap_step(self):
        self.assertEqual(self.engine.phase, Phase.initial())
        self.assertIsNone(self.engine.current_point)

        report = self.engine.step()
        self.assertEqual(report.phase, Phase.scanning(0))
        self.assertEqual(self.engine.current_triangles(), [self.engine.super_triangle])
        self.assertEqual(report.inserted, [self.engine.super_triangle])
        self.assertIsNone(report.point)
        self.assertEqual(self.engine.current_point, self.P1)

    def test_first_point_cycle(self):
        self.engine.step()
        super_triangle = self.engine.super_triangle

        # only one triangle to scan: classification, boundary and removal in one call
        report = self.engine.step()
        self.assertEqual(report.point, self.P1)
        self.assertEqual(report.scanned, super_triangle)
        self.assertTrue(report.is_bad)
        self.assertEqual(report.removed, [super_triangle])
        self.assertEqual(report.phase, Phase.removing(has_removed_once=True))
        self.assertEqual(self.engine.current_triangles(), [])
        self.assertEqual(self.engine.bad_triangles, (super_triangle,))
        self.assertEqual(len(self.engine.boundary), 3)

        # next call refills the cavity without removing anything else
        report = self.engine.step()
        self.assertEqual(report.removed, [])
        self.assertEqual(len(report.inserted), 3)
        for t in report.inserted:
            self.assertEqual(t.a, self.P1)
        self.assertEqual(report.phase, Phase.scanning(0))
        self.assertEqual(self.engine.current_point_index, 1)
        self.assertEqual(self.engine.bad_triangles, ())
        self.assertEqual(self.engine.boundary, ())

    def test_scan_advances_one_triangle_per_step(self):
        for _ in range(3):
            self.engine.step()
        A, B, C = self.engine.super_triangle
        before = self.engine.current_triangles()
        self.assertEqual(before, [Triangle(self.P1, A, B),
                                  Triangle(self.P1, B, C),
                                  Triangle(self.P1, C, A)])

        report = self.engine.step()
        self.assertEqual(report.scanned, before[0])
        self.assertTrue(report.is_bad)
        self.assertEqual(report.phase, Phase.scanning(1))
        self.assertEqual(self.engine.current_triangles(), before)

        report = self.engine.step()
        self.assertEqual(report.scanned, before[1])
        self.assertTrue(report.is_bad)
        self.assertEqual(report.phase, Phase.scanning(2))
        self.assertEqual(self.engine.bad_triangles, (before[0], before[1]))

        report = self.engine.step()
        self.assertEqual(report.scanned, before[2])
        self.assertFalse(report.is_bad)
        self.assertEqual(report.removed, [before[0], before[1]])
        self.assertEqual(self.engine.current_triangles(), [before[2]])
        self.assertEqual(self.engine.phase.kind, PhaseKind.REMOVING_BAD_TRIANGLES)

        report = self.engine.step()
        self.assertEqual(len(report.inserted), 4)
        self.assertEqual(len(self.engine.current_triangles()), 5)

    def test_idempotent_after_completion(self):
        drive(self.engine)
        final = self.engine.current_triangles()
        for _ in range(5):
            report = self.engine.step()
            self.assertEqual(report.removed, [])
            self.assertEqual(report.inserted, [])
        self.assertEqual(self.engine.current_triangles(), final)
        self.assertTrue(self.engine.is_complete)

    def test_pausing_does_not_change_the_result(self):
        other = TriangulationEngine([self.P1, self.P2, self.P3])
        for _ in range(6):
            other.step()
        # a long pause is just the absence of calls
        self.assertEqual(other.run(), triangulate([self.P1, self.P2, self.P3]))

    def test_point_list_is_captured_at_bootstrap(self):
        self.engine.step()
        self.engine.step()
        self.engine.set_point_list([(0, 0), (10, 0), (10, 10), (0, 10)])
        self.assertEqual(len(self.engine.run()), 1)
        self.assertEqual(len(self.engine.points), 3)

        self.engine.reset()
        self.assertEqual(self.engine.phase, Phase.initial())
        self.assertEqual(self.engine.current_triangles(), [])
        self.assertEqual(len(self.engine.run()), 2)

    def test_reset_mid_run(self):
        for _ in range(7):
            self.engine.step()
        self.engine.reset()
        self.assertFalse(self.engine.is_complete)
        self.assertIsNone(self.engine.super_triangle)
        self.assertEqual(self.engine.run(), triangulate([self.P1, self.P2, self.P3]))

    def test_missing_bad_triangle_is_reported(self):
        for _ in range(4):
            self.engine.step()
        # first triangle of the second cycle was just classified bad
        handle, _ = self.engine.mesh.at(0)
        self.engine.mesh.remove(handle)
        with self.assertRaises(MeshConsistencyError):
            for _ in range(5):
                self.engine.step()


class TestPointInput(unittest.TestCase):

    def test_accepts_pairs_and_numpy_rows(self):
        engine = TriangulationEngine(np.array([[0, 0], [10, 0], [5, 10]]))
        engine.step()
        self.assertEqual(engine.points, (Point(0.0, 0.0), Point(10.0, 0.0), Point(5.0, 10.0)))
        self.assertIsInstance(engine.points[0].x, float)

    def test_rejects_malformed_points(self):
        engine = TriangulationEngine()
        for bad in ([(1.0,)], [(1.0, 2.0, 3.0)], [None], [("a", "b")],
                    [(math.nan, 0.0)], [(0.0, math.inf)], ["12", "34", "50"],
                    [b"12"]):
            with self.assertRaises(ValueError, msg=repr(bad)):
                engine.set_point_list(bad)

    def test_point_outside_super_triangle_is_logged(self):
        engine = TriangulationEngine([(5.0, 5.0), (-50.0, -50.0)])
        with self.assertLogs("stepdt.BowyerWatson.engine", level="WARNING"):
            engine.step()


if __name__ == "__main__":
    unittest.main()
