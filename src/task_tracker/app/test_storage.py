from concurrent.futures import ThreadPoolExecutor
from dataclasses import FrozenInstanceError

import pytest

from task_tracker.app.models import Task
from task_tracker.app.storage import InMemoryTaskStorage


@pytest.fixture()
def storage() -> InMemoryTaskStorage:
    return InMemoryTaskStorage()


def test_create_and_list_all(storage):
    task = storage.create("Test task")

    tasks = storage.list_all()
    assert len(tasks) == 1
    assert tasks[0].id == task.id
    assert tasks[0].title == "Test task"
    assert tasks[0].done is False


def test_ids_are_unique_and_start_at_one(storage):
    ids = [storage.create(f"task {i}").id for i in range(10)]

    assert ids == list(range(1, 11))
    assert storage.next_id == 11


def test_ids_are_not_reused_after_delete(storage):
    first = storage.create("a")
    second = storage.create("b")
    assert storage.delete(second.id)
    assert storage.delete(first.id)

    third = storage.create("c")

    assert third.id == 3
    assert third.id > max(first.id, second.id)


def test_update_sets_done_and_keeps_others(storage):
    milk = storage.create("buy milk")
    dog = storage.create("walk dog")

    task, found = storage.update(milk.id, True)

    assert found is True
    assert task == Task(id=milk.id, title="buy milk", done=True)
    assert storage.list_all() == [task, dog]


def test_update_can_reset_done(storage):
    task = storage.create("x")
    storage.update(task.id, True)

    updated, found = storage.update(task.id, False)

    assert found
    assert updated.done is False


def test_missing_id_leaves_store_unchanged(storage):
    storage.create("only")
    before = storage.list_all()

    assert storage.update(42, True) == (None, False)
    assert storage.delete(42) is False
    assert storage.list_all() == before
    assert storage.next_id == 2


def test_delete_is_final(storage):
    task = storage.create("gone soon")

    assert storage.delete(task.id) is True
    assert storage.list_all() == []
    assert storage.update(task.id, True) == (None, False)
    assert storage.delete(task.id) is False


def test_returned_tasks_cannot_mutate_store(storage):
    task = storage.create("frozen")

    with pytest.raises(FrozenInstanceError):
        task.done = True

    snapshot = storage.list_all()
    snapshot.clear()
    assert len(storage) == 1
    assert storage.list_all()[0].done is False


def test_empty_title_is_accepted_by_storage(storage):
    # пустой заголовок отсекает HTTP-слой, хранилище его принимает
    task = storage.create("")

    assert task.id == 1
    assert task.title == ""


def test_concurrent_creates_get_distinct_ids(storage):
    n = 200

    with ThreadPoolExecutor(max_workers=16) as pool:
        created = list(pool.map(lambda i: storage.create(f"task {i}"), range(n)))

    assert sorted(t.id for t in created) == list(range(1, n + 1))
    assert len(storage) == n
    assert storage.next_id == n + 1


def test_concurrent_mixed_operations_keep_keys_consistent(storage):
    seed = [storage.create(f"seed {i}") for i in range(50)]

    def work(i: int) -> None:
        storage.create(f"new {i}")
        storage.update(seed[i].id, True)
        if i % 2 == 0:
            storage.delete(seed[i].id)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(work, range(50)))

    tasks = storage.list_all()
    assert len(tasks) == 75
    assert len({t.id for t in tasks}) == 75
    assert storage.next_id == 101
    assert all(t.done for t in tasks if t.title.startswith("seed"))


def test_end_to_end_example(storage):
    assert storage.create("buy milk") == Task(id=1, title="buy milk", done=False)
    assert storage.create("walk dog").id == 2

    assert storage.update(1, True) == (Task(id=1, title="buy milk", done=True), True)
    assert storage.delete(2) is True
    assert storage.list_all() == [Task(id=1, title="buy milk", done=True)]
    assert storage.update(2, True) == (None, False)


def test_task_to_dict():
    assert Task(id=7, title="t").to_dict() == {"id": 7, "title": "t", "done": False}
