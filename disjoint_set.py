"""
Disjoint Set (Union-Find) over integer cell indices, used to check wirings.
"""
from typing import Dict, List, Set


class DisjointSet:
    """
    Union-Find data structure with path compression and union by rank.
    Elements are the integers 0..size-1 (flat cell indices).
    """

    def __init__(self, size: int):
        self.parent: List[int] = list(range(size))
        self.rank: List[int] = [0] * size

    def find(self, x: int) -> int:
        """Find the representative of x's set with path compression."""
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x: int, y: int) -> bool:
        """
        Merge the sets containing x and y.
        Returns True if they were in different sets, False if already same set
        (i.e. the link x-y would close a cycle).
        """
        root_x = self.find(x)
        root_y = self.find(y)

        if root_x == root_y:
            return False

        # Union by rank
        if self.rank[root_x] < self.rank[root_y]:
            self.parent[root_x] = root_y
        elif self.rank[root_x] > self.rank[root_y]:
            self.parent[root_y] = root_x
        else:
            self.parent[root_y] = root_x
            self.rank[root_x] += 1

        return True

    def connected(self, x: int, y: int) -> bool:
        """Check if x and y are in the same set."""
        return self.find(x) == self.find(y)

    def get_sets(self) -> Dict[int, Set[int]]:
        """Return all sets as a dict mapping representative -> members."""
        sets: Dict[int, Set[int]] = {}
        for x in range(len(self.parent)):
            sets.setdefault(self.find(x), set()).add(x)
        return sets

    def num_sets(self) -> int:
        """Return the number of disjoint sets."""
        return sum(1 for x in range(len(self.parent)) if self.find(x) == x)
