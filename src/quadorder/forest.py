"""Containers for the locally owned part of a forest.

quadorder does not build, refine, balance or partition forests. The classes
here only hold what those collaborators produce, in the shape the verifier
consumes:

- :class:`Tree`: one macro cell and its ordered leaf quadrants
- :class:`Forest`: the connectivity, all trees and the local tree range
- :class:`LocalVertexNumbering`: the output of a local vertex numbering
- :class:`NumberingProvider`: the callable protocol of such a numbering
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Protocol, Sequence

import numpy as np

from ._util import num_corners
from .connectivity import Connectivity
from .coordinates import Quadrant


@dataclass(frozen=True, slots=True)
class Tree:
    """A tree of the forest.

    Args:
        index: Tree index into the connectivity.
        quadrants: Leaf quadrants in forest order.
    """

    index: int
    quadrants: tuple[Quadrant, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, 'index', int(self.index))
        object.__setattr__(self, 'quadrants', tuple(self.quadrants))

    def __len__(self) -> int:
        return len(self.quadrants)


@dataclass(frozen=True)
class Forest:
    """The slice of a forest owned by the current process.

    Args:
        connectivity: Macro geometry of all trees.
        trees: Sequence of trees. Tree `k` must have `index == k`; trees
            outside the local range may be empty.
        first_local_tree: First locally owned tree.
        last_local_tree: Last locally owned tree (inclusive). A range with
            `first_local_tree > last_local_tree` means the process owns no
            quadrants.

    If the local range is omitted it covers every tree.
    """

    connectivity: Connectivity
    trees: tuple[Tree, ...]
    first_local_tree: int = 0
    last_local_tree: int | None = None

    def __post_init__(self) -> None:
        trees = tuple(self.trees)
        if len(trees) != self.connectivity.num_trees:
            raise ValueError('forest must contain one Tree per connectivity tree')
        for k, t in enumerate(trees):
            if t.index != k:
                raise ValueError(f'tree at position {k} has index {t.index}')
        object.__setattr__(self, 'trees', trees)

        last = len(trees) - 1 if self.last_local_tree is None else int(self.last_local_tree)
        first = int(self.first_local_tree)
        if first <= last and (first < 0 or last >= len(trees)):
            raise ValueError('local tree range outside the forest')
        object.__setattr__(self, 'first_local_tree', first)
        object.__setattr__(self, 'last_local_tree', last)

        dim = self.connectivity.dim
        for t in self.local_trees():
            for q in t.quadrants:
                if q.dim != dim:
                    raise ValueError(
                        f'tree {t.index} holds a dim={q.dim} quadrant in a '
                        f'dim={dim} forest'
                    )

    @classmethod
    def from_quadrants(
        cls,
        connectivity: Connectivity,
        quadrants: dict[int, Sequence[Quadrant]],
        *,
        first_local_tree: int = 0,
        last_local_tree: int | None = None,
    ) -> 'Forest':
        """Build a forest from a `{tree index: quadrants}` mapping.

        Trees missing from the mapping are empty. Keys that do not name a
        connectivity tree raise ValueError.
        """
        unknown = sorted(
            k for k in quadrants if not 0 <= int(k) < connectivity.num_trees
        )
        if unknown:
            raise ValueError(
                f'unknown tree indices {unknown} for a connectivity with '
                f'{connectivity.num_trees} trees'
            )
        trees = tuple(
            Tree(index=k, quadrants=tuple(quadrants.get(k, ())))
            for k in range(connectivity.num_trees)
        )
        return cls(
            connectivity=connectivity,
            trees=trees,
            first_local_tree=first_local_tree,
            last_local_tree=last_local_tree,
        )

    @property
    def dim(self) -> int:
        return self.connectivity.dim

    def local_trees(self) -> Iterator[Tree]:
        """Yield the locally owned trees in order."""
        for k in range(self.first_local_tree, self.last_local_tree + 1):
            yield self.trees[k]

    @property
    def local_num_quadrants(self) -> int:
        return sum(len(t) for t in self.local_trees())


@dataclass(frozen=True, eq=False)
class LocalVertexNumbering:
    """Local vertex identifiers of every locally owned quadrant corner.

    Attributes:
        num_vertices: Number of distinct local vertex identifiers. Valid
            identifiers are `0 .. num_vertices - 1`.
        quadrant_to_vertex: Integer array of shape
            (local_num_quadrants, 2**dim). Row `i` belongs to the i-th local
            quadrant, counting tree by tree; columns are corners in pixel
            order.
    """

    num_vertices: int
    quadrant_to_vertex: Any = field(default_factory=lambda: np.zeros((0, 4), np.int64))

    def __post_init__(self) -> None:
        n = int(self.num_vertices)
        if n < 0:
            raise ValueError('num_vertices must be >= 0')
        q2v = np.array(self.quadrant_to_vertex, dtype=np.int64)
        if q2v.ndim != 2 or q2v.shape[1] not in (num_corners(2), num_corners(3)):
            raise ValueError('quadrant_to_vertex must have shape (n, 4) or (n, 8)')
        q2v.setflags(write=False)
        object.__setattr__(self, 'num_vertices', n)
        object.__setattr__(self, 'quadrant_to_vertex', q2v)

    @property
    def num_quadrants(self) -> int:
        return int(self.quadrant_to_vertex.shape[0])


class NumberingProvider(Protocol):
    """Callable that numbers the local vertices of a forest.

    Identifiers must be shared by corners that are geometrically and
    topologically the same point; with `identify_periodic=True` this includes
    corners identified through periodic boundaries.
    """

    def __call__(
        self, forest: Forest, identify_periodic: bool
    ) -> LocalVertexNumbering: ...
