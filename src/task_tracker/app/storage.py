from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional, Tuple
from threading import RLock

from .models import Task


class InMemoryTaskStorage:
    """
    Хранилище задач в памяти процесса.

    Все операции идут под одной блокировкой, поэтому для конкурентных
    вызывающих они атомарны. Task неизменяемый, наружу отдаём сами значения.
    id выдаются по счётчику и не переиспользуются даже после удаления.
    """

    def __init__(self) -> None:
        self._tasks: Dict[int, Task] = {}
        self._next_id = 1
        self._lock = RLock()

    def create(self, title: str) -> Task:
        # заголовок здесь не проверяем, это делает HTTP-слой
        with self._lock:
            task = Task(id=self._next_id, title=title)
            self._tasks[task.id] = task
            self._next_id += 1
            return task

    def list_all(self) -> List[Task]:
        with self._lock:
            return list(self._tasks.values())

    def update(self, task_id: int, done: bool) -> Tuple[Optional[Task], bool]:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return None, False
            task = replace(task, done=done)
            self._tasks[task_id] = task
            return task, True

    def delete(self, task_id: int) -> bool:
        with self._lock:
            return self._tasks.pop(task_id, None) is not None

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)
