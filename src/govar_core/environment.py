"""Symbol table for declared names."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .values import FALSE, TRUE, Empty, Result

logger = logging.getLogger(__name__)


PRELUDE: Mapping[str, Result] = MappingProxyType({
    "true": TRUE,
    "false": FALSE,
})


@dataclass
class Environment:
    """Flat name → value table shared by every evaluation in a session.

    Lookups consult the read-only ``prelude`` first, so names defined
    there can never be shadowed by a user binding.
    """

    prelude: Mapping[str, Result] = field(default_factory=lambda: PRELUDE)
    _bindings: dict[str, Result] = field(default_factory=dict, repr=False)

    # -- Bindings -------------------------------------------------------

    def set(self, name: str, value: Result) -> None:
        if name in self.prelude:
            logger.debug("ignoring rebind of builtin %r", name)
            return
        self._bindings[name] = value

    def get(self, name: str) -> Result:
        value, _ = self.lookup(name)
        return value

    def lookup(self, name: str) -> tuple[Result, bool]:
        if name in self.prelude:
            return self.prelude[name], True
        if name in self._bindings:
            return self._bindings[name], True
        return Empty, False

    def __contains__(self, name: object) -> bool:
        return name in self.prelude or name in self._bindings

    @property
    def bindings(self) -> Mapping[str, Result]:
        """User bindings only, without the prelude."""
        return MappingProxyType(self._bindings)

    def reset(self) -> None:
        self._bindings.clear()
