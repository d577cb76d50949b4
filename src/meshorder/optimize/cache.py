"""
Simulated post-transform vertex cache.

Models a strict FIFO: a vertex that is already resident keeps its slot
when it is reused, and a new vertex enters at position 0, pushing every
resident back by one. The oldest entry falls out once the cache is full.
"""

from __future__ import annotations

from typing import Optional

NOT_CACHED = -1


class SimulatedCache:
    """
    Fixed-capacity FIFO cache over vertex ids.

    Entries live in a ring buffer; inserting at the front moves the head
    back one slot, so existing entries shift position without being
    copied. A reverse index (vertex id -> slot) gives O(1) membership and
    position queries.
    """

    def __init__(self, capacity: int, vertex_count: int):
        self.capacity = capacity
        self._slots = [NOT_CACHED] * capacity
        self._slot_of = [NOT_CACHED] * vertex_count
        self._head = 0
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __contains__(self, vertex: int) -> bool:
        return self._slot_of[vertex] != NOT_CACHED

    def position_of(self, vertex: int) -> int:
        """Cache position of vertex (0 = newest), or NOT_CACHED."""
        slot = self._slot_of[vertex]
        if slot == NOT_CACHED:
            return NOT_CACHED
        return (slot - self._head) % self.capacity

    def touch(self, vertex: int) -> tuple[bool, Optional[int]]:
        """
        Reference a vertex.

        Returns:
            Tuple of (hit, evicted_vertex). evicted_vertex is None unless
            the insertion pushed the oldest entry out.
        """
        if self._slot_of[vertex] != NOT_CACHED:
            return True, None

        self._head = (self._head - 1) % self.capacity

        # When full, the slot before the old head holds the oldest entry
        evicted = None
        if self._size == self.capacity:
            evicted = self._slots[self._head]
            self._slot_of[evicted] = NOT_CACHED
        else:
            self._size += 1

        self._slots[self._head] = vertex
        self._slot_of[vertex] = self._head
        return False, evicted

    def contents(self) -> list[int]:
        """Resident vertex ids, newest first."""
        return [
            self._slots[(self._head + i) % self.capacity]
            for i in range(self._size)
        ]

    def __repr__(self) -> str:
        return f"SimulatedCache({self._size}/{self.capacity})"
