"""Registry of builtin modules that are defined only when imported."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

DefineModule = Callable[[Any], Any]


@dataclass(frozen=True)
class BuiltinModule:
    """A named module and the function that defines its symbols in a scope."""

    name: str
    define_module: DefineModule


class ModuleRegistry:
    """Builtin modules in registration order; the first of a name wins."""

    def __init__(self) -> None:
        self._modules: list[BuiltinModule] = []

    def register(self, name: str, define_module: DefineModule) -> BuiltinModule:
        """Add a module to the registry without defining it."""
        module = BuiltinModule(name, define_module)
        self._modules.append(module)
        return module

    def find(self, name: str) -> BuiltinModule | None:
        """Return the module registered under name, or None."""
        return next((m for m in self._modules if m.name == name), None)

    def import_module(self, scope: Any, name: str) -> Any:
        """Define the named module's symbols in scope."""
        module = self.find(name)
        if module is None:
            raise KeyError(f"no builtin module named {name!r}")
        return module.define_module(scope)

    def __iter__(self) -> Iterator[BuiltinModule]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)