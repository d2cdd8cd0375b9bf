from enum import IntEnum
from typing import NamedTuple


class PhaseKind(IntEnum):
    """Phases of one point's insertion cycle, in the order they occur."""
    INITIAL = 0
    SCANNING_BAD_TRIANGLES = 1
    HOLE_BOUNDARY_READY = 2
    REMOVING_BAD_TRIANGLES = 3
    INSERTING_NEW_TRIANGLES = 4


class Phase(NamedTuple):
    """
    State machine value of the step engine.

    Only SCANNING_BAD_TRIANGLES uses `triangle_index` (next mesh position to
    classify) and only REMOVING_BAD_TRIANGLES uses `has_removed_once`.
    Ordering questions ("has this call already moved past X?") are asked of
    `kind`, never of the whole tuple.
    """
    kind: PhaseKind
    triangle_index: int = 0
    has_removed_once: bool = False

    @classmethod
    def initial(cls):
        return cls(PhaseKind.INITIAL)

    @classmethod
    def scanning(cls, triangle_index=0):
        return cls(PhaseKind.SCANNING_BAD_TRIANGLES, triangle_index=triangle_index)

    @classmethod
    def hole_boundary_ready(cls):
        return cls(PhaseKind.HOLE_BOUNDARY_READY)

    @classmethod
    def removing(cls, has_removed_once=False):
        return cls(PhaseKind.REMOVING_BAD_TRIANGLES, has_removed_once=has_removed_once)

    @classmethod
    def inserting(cls):
        return cls(PhaseKind.INSERTING_NEW_TRIANGLES)

    def __repr__(self):
        if self.kind is PhaseKind.SCANNING_BAD_TRIANGLES:
            return f"ScanningBadTriangles({self.triangle_index})"
        if self.kind is PhaseKind.REMOVING_BAD_TRIANGLES:
            return f"RemovingBadTriangles({self.has_removed_once})"
        return {
            PhaseKind.INITIAL: "Initial",
            PhaseKind.HOLE_BOUNDARY_READY: "HoleBoundaryReady",
            PhaseKind.INSERTING_NEW_TRIANGLES: "InsertingNewTriangles",
        }[self.kind]
