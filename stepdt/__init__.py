"""stepdt - resumable, animatable Bowyer-Watson Delaunay triangulation
"""

from stepdt.Geometry.primitives import Point, Triangle, Edge, Circle
from stepdt.Mesh.mesh import Mesh, MeshConsistencyError
from stepdt.BowyerWatson.phase import Phase, PhaseKind
from stepdt.BowyerWatson.engine import TriangulationEngine, StepReport, triangulate


__version__ = '0.1.0'
__license__ = 'MIT License'
__all__ = ("Point", "Triangle", "Edge", "Circle", "Mesh", "MeshConsistencyError",
           "Phase", "PhaseKind", "TriangulationEngine", "StepReport", "triangulate")
