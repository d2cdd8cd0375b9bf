from typing import Dict, Iterator, List, Tuple

from stepdt.Geometry.primitives import Triangle


class MeshConsistencyError(RuntimeError):
    """The mesh was asked to do something its contents cannot support."""


class Mesh:
    """
    Insertion-ordered working set of triangles.

    Every inserted triangle receives an integer handle that stays valid until
    the triangle is removed. Removing by handle does not depend on the order
    in which the vertices were written, so the engine never has to look a
    triangle up by value. `remove_exact` is kept for callers that only hold
    the triangle value.

    Storage order is the order of insertion with removed entries dropped;
    iteration, `at()` and `triangles()` all follow it.
    """

    def __init__(self):
        self._triangles: Dict[int, Triangle] = {}
        self._order: List[int] = []     # handles in storage order
        self._handle_counter = 0

    def insert(self, triangle: Triangle) -> int:
        self._handle_counter += 1
        handle = self._handle_counter
        self._triangles[handle] = Triangle(*triangle)
        self._order.append(handle)
        return handle

    def remove(self, handle: int) -> Triangle:
        try:
            triangle = self._triangles.pop(handle)
        except KeyError:
            raise MeshConsistencyError(f"no triangle with handle {handle} in mesh") from None
        self._order.remove(handle)
        return triangle

    def remove_exact(self, triangle: Triangle) -> int:
        """Remove the first stored triangle equal to `triangle` in vertex order."""
        for handle in self._order:
            if self._triangles[handle] == triangle:
                self.remove(handle)
                return handle
        raise MeshConsistencyError(f"{triangle!r} is not in the mesh")

    def at(self, position: int) -> Tuple[int, Triangle]:
        """(handle, triangle) at ordinal position `position`."""
        handle = self._order[position]
        return handle, self._triangles[handle]

    def items(self) -> Iterator[Tuple[int, Triangle]]:
        for handle in list(self._order):
            yield handle, self._triangles[handle]

    def triangles(self) -> List[Triangle]:
        return [self._triangles[h] for h in self._order]

    def clear(self):
        self._triangles.clear()
        self._order.clear()

    def validate(self):
        """Raise if the same triangle is stored twice, in any rotation."""
        seen = {}
        for handle in self._order:
            key = frozenset(self._triangles[handle])
            if key in seen:
                raise MeshConsistencyError(
                    f"duplicate triangle {self._triangles[handle]!r} "
                    f"(handles {seen[key]} and {handle})")
            seen[key] = handle

    def __iter__(self) -> Iterator[Triangle]:
        for handle in list(self._order):
            yield self._triangles[handle]

    def __len__(self):
        return len(self._order)

    def __contains__(self, triangle):
        return any(t == triangle for t in self._triangles.values())

    def __repr__(self):
        return f"Mesh({len(self)} triangles)"
