"""Cell connectivity tracking backed by a disjoint-set union structure."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Set, Tuple


class DisjointSetUnion:
    """Disjoint set union with path compression and canonical minimum roots."""

    def __init__(self) -> None:
        self._parent: Dict[int, int] = {}

    def add(self, item: int) -> None:
        if item not in self._parent:
            self._parent[item] = item

    def find(self, item: int) -> int:
        self.add(item)
        parent = self._parent[item]
        if parent != item:
            parent = self.find(parent)
            self._parent[item] = parent
        return parent

    def union(self, a: int, b: int) -> int:
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return root_a
        # Always keep the smaller id as the canonical representative to retain determinism.
        if root_a < root_b:
            self._parent[root_b] = root_a
            return root_a
        self._parent[root_a] = root_b
        return root_b

    def items(self) -> Iterable[int]:
        return self._parent.keys()


class ComponentManager:
    """Groups graph cells into components joined by live corridors."""

    def __init__(self, cells: Iterable[int] = ()) -> None:
        self._dsu = DisjointSetUnion()
        for cell in cells:
            self._dsu.add(cell)

    @classmethod
    def from_edges(
        cls,
        cells: Iterable[int],
        edges: Iterable[Tuple[int, int]],
    ) -> "ComponentManager":
        manager = cls(cells)
        for cell_a, cell_b in edges:
            manager.link(cell_a, cell_b)
        return manager

    def add_cell(self, cell: int) -> None:
        self._dsu.add(cell)

    def link(self, cell_a: int, cell_b: int) -> int:
        return self._dsu.union(cell_a, cell_b)

    def component_of(self, cell: int) -> int:
        return self._dsu.find(cell)

    def same_component(self, cell_a: int, cell_b: int) -> bool:
        return self._dsu.find(cell_a) == self._dsu.find(cell_b)

    def component_summary(self) -> Dict[int, List[int]]:
        summary: Dict[int, List[int]] = defaultdict(list)
        for cell in sorted(self._dsu.items()):
            summary[self._dsu.find(cell)].append(cell)
        return dict(summary)

    def component_sizes(self) -> Dict[int, int]:
        return {root: len(cells) for root, cells in self.component_summary().items()}

    def _roots(self) -> Set[int]:
        return {self._dsu.find(cell) for cell in list(self._dsu.items())}

    def has_single_component(self) -> bool:
        return len(self._roots()) <= 1

    def total_components(self) -> int:
        return len(self._roots())
