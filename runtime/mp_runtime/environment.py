"""
Mp Environment - lexical scopes

A scope maps names to values and points at its enclosing scope. Closures
hold a reference to the scope they were created in, so that scope lives as
long as the longest-lived function or call frame using it.
"""

from typing import Any, Dict, Iterator, Optional, Set

from .errors import MpNameError, Span


class Environment:
    """One lexical scope"""

    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}
        self.constants: Set[str] = set()

    def child(self) -> 'Environment':
        """New scope nested in this one"""
        return Environment(self)

    def define(self, name: str, value: Any):
        """Declare name in this scope, shadowing any outer binding"""
        self.values[name] = value
        self.constants.discard(name)

    def define_constant(self, name: str, value: Any):
        """Declare a binding that assignment may not change"""
        self.values[name] = value
        self.constants.add(name)

    def assign(self, name: str, value: Any, span: Optional[Span] = None):
        """Rebind name in the nearest scope that declares it"""
        scope = self._resolve(name)
        if scope is None:
            raise MpNameError(f"Cannot assign to undeclared variable '{name}'", span)
        if name in scope.constants:
            raise MpNameError(f"Cannot assign to constant '{name}'", span)
        scope.values[name] = value

    def lookup(self, name: str, span: Optional[Span] = None) -> Any:
        """Value of name, searching outward"""
        scope = self._resolve(name)
        if scope is None:
            raise MpNameError(f"Undefined variable: {name}", span)
        return scope.values[name]

    def contains(self, name: str) -> bool:
        return self._resolve(name) is not None

    def bindings(self) -> Dict[str, Any]:
        """Copy of this scope's own bindings"""
        return self.values.copy()

    def chain(self) -> Iterator['Environment']:
        """This scope followed by each enclosing scope"""
        scope: Optional[Environment] = self
        while scope is not None:
            yield scope
            scope = scope.parent

    def _resolve(self, name: str) -> Optional['Environment']:
        for scope in self.chain():
            if name in scope.values:
                return scope
        return None

    def __repr__(self) -> str:
        depth = sum(1 for _ in self.chain())
        return f"Environment(depth={depth}, names={sorted(self.values)})"


__all__ = ['Environment']
