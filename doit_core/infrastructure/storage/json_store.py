import json
import os
from pathlib import Path
from typing import Any, List
from uuid import uuid4

from doit_core.config.settings import settings
from doit_core.domain.exceptions import BusinessError, TaskNotFoundError, ValidationError
from doit_core.domain.models import Task
from doit_core.infrastructure.logging.logger import logger


class JsonTaskStore:
    """把任务列表保存为单个 JSON 文件（默认 tasks.json）。"""

    def __init__(self, path: str | Path | None = None):
        self._path = Path(path or settings.tasks_file)

    @property
    def path(self) -> Path:
        return self._path

    def load_tasks(self) -> List[Task]:
        """读取任务列表；文件不存在、无法解析或结构不符时返回空列表。"""

        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable tasks file", extra={"extra": {"path": str(self._path)}})
            return []
        if not isinstance(data, list):
            return []
        tasks: List[Task] = []
        for item in data:
            task = self._to_task(item)
            if task is None:
                return []
            tasks.append(task)
        return tasks

    def save_tasks(self, tasks: List[Task]) -> None:
        tmp_path = self._path.with_name(f"{self._path.name}.{uuid4().hex}.tmp")
        body = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, indent=2)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(body, encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise BusinessError(code="STORE_WRITE_ERROR", message=str(e))

    def load_tasks_as_serialized_text(self) -> str:
        """返回任务列表的 JSON 数组文本，用作模型上下文；无任务时为 "[]"。"""

        tasks = self.load_tasks()
        if not tasks:
            return "[]"
        return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, indent=2)

    @staticmethod
    def next_id(tasks: List[Task]) -> int:
        return max((t.id for t in tasks), default=0) + 1

    def add_task(self, description: str) -> Task:
        text = (description or "").strip()
        if not text:
            raise ValidationError(code="EMPTY_TASK", message="task description must not be empty")
        tasks = self.load_tasks()
        task = Task(id=self.next_id(tasks), description=text, completed=False)
        tasks.append(task)
        self.save_tasks(tasks)
        logger.info("Added task", extra={"extra": {"task_id": task.id}})
        return task

    def complete_task(self, task_id: int) -> Task:
        tasks = self.load_tasks()
        for task in tasks:
            if task.id == task_id:
                task.completed = True
                self.save_tasks(tasks)
                logger.info("Completed task", extra={"extra": {"task_id": task_id}})
                return task
        raise TaskNotFoundError(code="TASK_NOT_FOUND", message=f"Task #{task_id} not found", task_id=task_id)

    def remove_task(self, task_id: int) -> Task:
        tasks = self.load_tasks()
        kept = [t for t in tasks if t.id != task_id]
        if len(kept) == len(tasks):
            raise TaskNotFoundError(code="TASK_NOT_FOUND", message=f"Task #{task_id} not found", task_id=task_id)
        self.save_tasks(kept)
        logger.info("Removed task", extra={"extra": {"task_id": task_id}})
        return next(t for t in tasks if t.id == task_id)

    @staticmethod
    def _to_task(item: Any) -> Task | None:
        if not isinstance(item, dict):
            return None
        task_id = item.get("id")
        description = item.get("description")
        completed = item.get("completed", False)
        if isinstance(task_id, bool) or not isinstance(task_id, int):
            return None
        if not isinstance(description, str) or not isinstance(completed, bool):
            return None
        return Task(id=task_id, description=description, completed=completed)
