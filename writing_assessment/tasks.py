"""
Writing Task Catalog
====================
Read-only catalog of writing prompts, loaded once from JSON and shared by
every evaluation.

The bundled catalog holds two pools: ``task1`` (120-word letter, e-mail and
memo tasks) and ``task2`` (200-word reports).
"""

import json
import random
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .config_logging import ValidationError, get_config, get_logger
from .models import TASK_CATEGORIES, TaskPoint, WritingTask

__version__ = "1.2.0"

logger = get_logger('writing_assessment.tasks')

DEFAULT_CATALOG_FILE = Path(__file__).parent / 'data' / 'tasks.json'


def task_from_dict(data: Mapping[str, Any]) -> WritingTask:
    """Build a WritingTask from a catalog record, validating every field."""
    if not isinstance(data, Mapping):
        raise ValidationError("Task record must be an object")

    task_id = data.get('id')
    if not isinstance(task_id, str) or not task_id.strip():
        raise ValidationError("Task record needs a non-empty 'id'", field='id')

    category = data.get('category')
    if category not in TASK_CATEGORIES:
        raise ValidationError(
            f"Task {task_id}: category must be one of {', '.join(TASK_CATEGORIES)}",
            field='category', task_id=task_id
        )

    min_words = data.get('min_words')
    if not isinstance(min_words, int) or isinstance(min_words, bool) or min_words <= 0:
        raise ValidationError(f"Task {task_id}: 'min_words' must be a positive integer",
                              field='min_words', task_id=task_id)

    points = []
    for index, point in enumerate(data.get('points') or []):
        if not isinstance(point, Mapping) or not point.get('text'):
            raise ValidationError(f"Task {task_id}: point {index} needs 'text'",
                                  field='points', task_id=task_id)
        points.append(TaskPoint(id=str(point.get('id') or f"p{index + 1}"), text=str(point['text'])))

    return WritingTask(
        id=task_id,
        label=str(data.get('label') or task_id),
        category=category,
        instruction=str(data.get('instruction') or ''),
        min_words=min_words,
        points=tuple(points),
        hints=tuple(str(h) for h in data.get('hints') or ()),
    )


class TaskCatalog:
    """Immutable collection of writing tasks indexed by id, category and pool."""

    def __init__(self, tasks: Iterable[WritingTask],
                 pools: Optional[Mapping[str, Iterable[str]]] = None):
        by_id: Dict[str, WritingTask] = {}
        for task in tasks:
            if task.id in by_id:
                raise ValidationError(f"Duplicate task id: {task.id}", field='id')
            by_id[task.id] = task
        self._tasks = MappingProxyType(by_id)

        pool_map = {}
        for name, ids in (pools or {}).items():
            ids = tuple(ids)
            unknown = [i for i in ids if i not in by_id]
            if unknown:
                raise ValidationError(f"Pool {name} references unknown tasks: {unknown}",
                                      field='pools')
            pool_map[name] = ids
        self._pools = MappingProxyType(pool_map)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TaskCatalog':
        if not isinstance(data, Mapping) or not isinstance(data.get('tasks'), list):
            raise ValidationError("Catalog must be an object with a 'tasks' array")
        return cls((task_from_dict(t) for t in data['tasks']), data.get('pools'))

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> 'TaskCatalog':
        """Load a catalog file (configured path, else the bundled catalog)."""
        path = Path(path or get_config().task_catalog_path or DEFAULT_CATALOG_FILE)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ValidationError(f"Could not load task catalog: {e}", field='path',
                                  path=str(path))
        catalog = cls.from_dict(data)
        logger.debug("Task catalog loaded", path=str(path), tasks=len(catalog))
        return catalog

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self):
        return iter(self._tasks.values())

    def __contains__(self, task_id: str) -> bool:
        return task_id in self._tasks

    def get(self, task_id: str) -> WritingTask:
        task = self._tasks.get(task_id)
        if task is None:
            raise ValidationError(f"Unknown task: {task_id}", field='task_id')
        return task

    def categories(self) -> Tuple[str, ...]:
        return tuple(c for c in TASK_CATEGORIES if self.by_category(c))

    def by_category(self, category: str) -> List[WritingTask]:
        return [t for t in self._tasks.values() if t.category == category]

    def pools(self) -> Tuple[str, ...]:
        return tuple(self._pools)

    def pool(self, name: str) -> List[WritingTask]:
        if name not in self._pools:
            raise ValidationError(f"Unknown task pool: {name}", field='pool')
        return [self._tasks[i] for i in self._pools[name]]

    def pick(self, pool: str, rng: Optional[random.Random] = None) -> WritingTask:
        """Pick one task at random from a pool."""
        candidates = self.pool(pool)
        if not candidates:
            raise ValidationError(f"Task pool {pool} is empty", field='pool')
        return (rng or random).choice(candidates)

    def to_list(self) -> List[Dict[str, Any]]:
        return [t.to_dict() for t in self._tasks.values()]


_catalog: Optional[TaskCatalog] = None


def get_catalog() -> TaskCatalog:
    """Get the process-wide catalog (loaded on first use)."""
    global _catalog
    if _catalog is None:
        _catalog = TaskCatalog.load()
    return _catalog


def reset_catalog():
    """Forget the cached catalog (for testing)."""
    global _catalog
    _catalog = None
