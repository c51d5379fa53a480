from __future__ import annotations

import heapq
import logging
from collections import Counter
from typing import Dict, List, Sequence

from core.exceptions import CycleDetectedError, DanglingReferenceError, ValidationError
from core.models import Task, TaskDependency

logger = logging.getLogger(__name__)

# visitation states for the cycle search
_UNVISITED = 0
_IN_PROGRESS = 1
_DONE = 2


class DependencyGraph:
    """
    Directed graph over the tasks of one schedule computation.

    Tasks live in an arena indexed by their position in the input; edges are
    stored as dependency records per arena slot so every pass can read the
    dependency type and lag without another lookup.
    """

    def __init__(self, tasks: Sequence[Task], deps: Sequence[TaskDependency]):
        self._ids: List[str] = [task.id for task in tasks]
        self._index: Dict[str, int] = {task_id: i for i, task_id in enumerate(self._ids)}
        self._deps: List[TaskDependency] = list(deps)
        self._incoming: List[List[TaskDependency]] = [[] for _ in self._ids]
        self._outgoing: List[List[TaskDependency]] = [[] for _ in self._ids]
        self._topo_order: List[str] | None = None
        self._topo_index: Dict[str, int] = {}
        self._validated = False

    def __len__(self) -> int:
        return len(self._ids)

    def validate(self) -> "DependencyGraph":
        """
        Check referential integrity, then acyclicity.

        Raises DanglingReferenceError or CycleDetectedError; nothing is built
        on failure.
        """
        if self._validated:
            return self

        if len(self._index) != len(self._ids):
            dupes = sorted(tid for tid, n in Counter(self._ids).items() if n > 1)
            raise ValidationError(
                f"Duplicate task ids in schedule input: {', '.join(dupes)}.",
                code="DUPLICATE_TASK_ID",
            )

        for dep in self._deps:
            for task_id in (dep.predecessor_task_id, dep.successor_task_id):
                if task_id not in self._index:
                    raise DanglingReferenceError(task_id, dependency_id=dep.id)

        succ_slots: List[List[int]] = [[] for _ in self._ids]
        for dep in self._deps:
            succ_slots[self._index[dep.predecessor_task_id]].append(
                self._index[dep.successor_task_id]
            )

        cycle = self._find_cycle(succ_slots)
        if cycle is not None:
            ids = [self._ids[slot] for slot in cycle]
            logger.warning("Dependency cycle detected: %s", " -> ".join(ids))
            raise CycleDetectedError(ids)

        for dep in self._deps:
            self._incoming[self._index[dep.successor_task_id]].append(dep)
            self._outgoing[self._index[dep.predecessor_task_id]].append(dep)
        self._validated = True
        return self

    def _find_cycle(self, succ_slots: List[List[int]]) -> List[int] | None:
        state = [_UNVISITED] * len(self._ids)
        for root in range(len(self._ids)):
            if state[root] != _UNVISITED:
                continue
            path: List[int] = [root]
            stack = [(root, iter(succ_slots[root]))]
            state[root] = _IN_PROGRESS
            while stack:
                node, children = stack[-1]
                advanced = False
                for child in children:
                    if state[child] == _IN_PROGRESS:
                        return path[path.index(child):]
                    if state[child] == _UNVISITED:
                        state[child] = _IN_PROGRESS
                        path.append(child)
                        stack.append((child, iter(succ_slots[child])))
                        advanced = True
                        break
                if not advanced:
                    state[node] = _DONE
                    path.pop()
                    stack.pop()
        return None

    def topological_order(self) -> List[str]:
        """Kahn's algorithm; among ready tasks the earliest input position goes first."""
        self.validate()
        if self._topo_order is not None:
            return list(self._topo_order)

        indegree = [len(edges) for edges in self._incoming]
        heap = [slot for slot, degree in enumerate(indegree) if degree == 0]
        heapq.heapify(heap)

        order: List[str] = []
        while heap:
            slot = heapq.heappop(heap)
            order.append(self._ids[slot])
            for dep in self._outgoing[slot]:
                succ = self._index[dep.successor_task_id]
                indegree[succ] -= 1
                if indegree[succ] == 0:
                    heapq.heappush(heap, succ)

        self._topo_order = order
        self._topo_index = {task_id: i for i, task_id in enumerate(order)}
        return list(order)

    def topo_index(self, task_id: str) -> int:
        if self._topo_order is None:
            self.topological_order()
        return self._topo_index[task_id]

    def incoming(self, task_id: str) -> List[TaskDependency]:
        self.validate()
        return self._incoming[self._index[task_id]]

    def outgoing(self, task_id: str) -> List[TaskDependency]:
        self.validate()
        return self._outgoing[self._index[task_id]]


def build_project_dependency_graph(
    tasks: Sequence[Task],
    deps: Sequence[TaskDependency],
) -> DependencyGraph:
    return DependencyGraph(tasks, deps).validate()
