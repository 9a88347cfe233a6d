"""Owner-keyed registry of ValidationEngine instances.

Hosts that attach one engine to each of their own objects (a form, a view
model, a request handler) use this to get the same engine back for the same
owner. Owners are matched by identity, never by equality: two equal dicts
are two different owners.

Example:
    engine = register(form)
    assert register(form) is engine
    unregister(form)                  # True
    assert register(form) is not engine
"""

import logging
from collections.abc import Callable
from typing import Any

from ruleforge.engine import ValidationEngine

logger = logging.getLogger(__name__)

EngineFactory = Callable[[], ValidationEngine]


class InstanceRegistry:
    """Maps owner objects to their ValidationEngine.

    Entries are keyed by `id(owner)`. The registry keeps a strong reference
    to each owner, so an id can't be recycled while its entry exists. After
    `unregister`, the next `register` for the same owner builds a new engine.
    """

    def __init__(self, factory: EngineFactory = ValidationEngine.create):
        self.factory = factory
        self._entries: dict[int, tuple[Any, ValidationEngine]] = {}

    def register(self, owner: Any) -> ValidationEngine:
        """Return the owner's engine, creating it on first use."""
        entry = self._entries.get(id(owner))
        if entry is not None:
            return entry[1]

        engine = self.factory()
        self._entries[id(owner)] = (owner, engine)
        logger.debug("Created engine for owner %s", type(owner).__name__)
        return engine

    def unregister(self, owner: Any) -> bool:
        """Drop the owner's engine. Returns whether there was one."""
        return self._entries.pop(id(owner), None) is not None

    def get(self, owner: Any) -> ValidationEngine | None:
        entry = self._entries.get(id(owner))
        return entry[1] if entry else None

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, owner: Any) -> bool:
        return id(owner) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


default_registry = InstanceRegistry()


def register(owner: Any) -> ValidationEngine:
    """Get or create the engine of `owner` in the default registry."""
    return default_registry.register(owner)


def unregister(owner: Any) -> bool:
    """Remove the engine of `owner` from the default registry."""
    return default_registry.unregister(owner)
