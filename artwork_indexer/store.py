"""
Entity store abstraction.

The reconciler never touches a database session directly. It receives an
``EntityStore`` and performs load/save calls inside ``transaction()``;
everything saved during one transaction becomes visible together or not
at all.

v0: SQL (``db.services.SqlEntityStore``) and in-memory implementations.
"""
from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type, TypeVar

from sqlalchemy import inspect

ModelT = TypeVar("ModelT")


class EntityStore(ABC):
    """Abstract base class for entity persistence."""

    @abstractmethod
    def load(self, model: Type[ModelT], entity_id: str) -> Optional[ModelT]:
        """Load an entity by id, or None if it does not exist."""
        pass

    @abstractmethod
    def save(self, entity: Any) -> None:
        """Stage an entity for persistence in the current transaction."""
        pass

    @abstractmethod
    def all(self, model: Type[ModelT]) -> List[ModelT]:
        """Return every persisted entity of a model, ordered by id."""
        pass

    @abstractmethod
    def transaction(self):
        """Context manager that applies every save atomically."""
        pass


def _copy_entity(entity: ModelT) -> ModelT:
    mapper = inspect(type(entity))
    values = {
        attr.key: copy.deepcopy(getattr(entity, attr.key))
        for attr in mapper.column_attrs
    }
    return type(entity)(**values)


class InMemoryEntityStore(EntityStore):
    """Dictionary-backed store.

    Loads hand out copies, so an entity mutated inside a transaction that
    later fails never leaks into committed state. Within one transaction
    the same id always yields the same instance.
    """

    def __init__(self) -> None:
        self._committed: Dict[Tuple[type, str], Any] = {}
        self._identity: Optional[Dict[Tuple[type, str], Any]] = None
        self._pending: Optional[Dict[Tuple[type, str], Any]] = None

    @property
    def in_transaction(self) -> bool:
        return self._pending is not None

    def load(self, model: Type[ModelT], entity_id: str) -> Optional[ModelT]:
        key = (model, entity_id)
        if self._identity is not None and key in self._identity:
            return self._identity[key]

        entity = self._committed.get(key)
        if entity is None:
            return None

        loaded = _copy_entity(entity)
        if self._identity is not None:
            self._identity[key] = loaded
        return loaded

    def save(self, entity: Any) -> None:
        key = (type(entity), entity.id)
        if self._pending is None:
            self._committed[key] = _copy_entity(entity)
            return
        self._identity[key] = entity
        self._pending[key] = entity

    def all(self, model: Type[ModelT]) -> List[ModelT]:
        entities = [
            _copy_entity(entity)
            for (kind, _), entity in self._committed.items()
            if kind is model
        ]
        return sorted(entities, key=lambda entity: entity.id)

    @contextmanager
    def transaction(self) -> Iterator["InMemoryEntityStore"]:
        if self._pending is not None:
            raise RuntimeError("InMemoryEntityStore does not support nested transactions")

        self._identity = {}
        self._pending = {}
        try:
            yield self
            for key, entity in self._pending.items():
                self._committed[key] = _copy_entity(entity)
        finally:
            self._identity = None
            self._pending = None
