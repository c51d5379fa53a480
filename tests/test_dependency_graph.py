import pytest

from core.exceptions import BusinessRuleError, CycleDetectedError, DanglingReferenceError, ValidationError
from core.models import DependencyType, Task, TaskDependency
from core.services.scheduling.graph import DependencyGraph, build_project_dependency_graph


def _tasks(*ids):
    return [Task.create(f"Task {tid}", task_id=tid, duration=1) for tid in ids]


def _fs(pred, succ):
    return TaskDependency.create(pred, succ, DependencyType.FINISH_TO_START)


def test_topological_order_respects_edges_and_input_order():
    tasks = _tasks("A", "B", "C", "D")
    deps = [_fs("C", "B"), _fs("A", "D")]
    graph = build_project_dependency_graph(tasks, deps)

    order = graph.topological_order()
    assert order == ["A", "C", "B", "D"]
    assert graph.topo_index("B") > graph.topo_index("C")
    assert [d.successor_task_id for d in graph.outgoing("A")] == ["D"]
    assert [d.predecessor_task_id for d in graph.incoming("B")] == ["C"]
    assert len(graph) == 4


def test_cycle_reports_members_in_edge_order():
    tasks = _tasks("A", "B", "C")
    deps = [_fs("A", "B"), _fs("B", "C"), _fs("C", "A")]

    with pytest.raises(CycleDetectedError) as exc:
        build_project_dependency_graph(tasks, deps)

    assert exc.value.cycle == ["A", "B", "C"]
    assert exc.value.code == "SCHEDULE_CYCLE"
    assert isinstance(exc.value, BusinessRuleError)


def test_cycle_not_involving_first_task_is_found():
    tasks = _tasks("A", "B", "C", "D")
    deps = [_fs("A", "B"), _fs("B", "C"), _fs("C", "D"), _fs("D", "B")]

    with pytest.raises(CycleDetectedError) as exc:
        DependencyGraph(tasks, deps).validate()

    assert exc.value.cycle == ["B", "C", "D"]


def test_self_dependency_is_a_cycle():
    tasks = _tasks("A")
    with pytest.raises(CycleDetectedError) as exc:
        build_project_dependency_graph(tasks, [_fs("A", "A")])
    assert exc.value.cycle == ["A"]


def test_dangling_reference_is_rejected_before_cycle_search():
    tasks = _tasks("A", "B")
    dep = _fs("A", "Z")

    with pytest.raises(DanglingReferenceError) as exc:
        build_project_dependency_graph(tasks, [dep, _fs("B", "A"), _fs("A", "B")])

    assert exc.value.task_id == "Z"
    assert exc.value.dependency_id == dep.id


def test_duplicate_task_ids_rejected():
    tasks = _tasks("A", "A")
    with pytest.raises(ValidationError) as exc:
        build_project_dependency_graph(tasks, [])
    assert exc.value.code == "DUPLICATE_TASK_ID"
