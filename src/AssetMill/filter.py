"""Named, restriction-guarded transformations bound to a single asset.

A `Filter` records *which* engine to run, with which arguments, and under
which conditions. Restrictions are stored as hashable predicates in a set
and all of them must pass for the filter to fire.
"""

import fnmatch
import inspect
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, Optional

from .config import AssetGroup
from .core import AssetSnapshot
from .engines import is_filter_engine

logger = logging.getLogger("asset_mill.filter")

_UNCLOSED_BRACKET_RE = re.compile(r"\[[^\]]*$")


class FilterResolutionError(LookupError):
    """Raised when a filter's engine cannot be resolved or instantiated."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Filter '{name}' cannot be resolved: {reason}")
        self.name = name
        self.reason = reason


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a filter name to an engine constructor."""

    name: str
    engine: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.engine is not None


@dataclass(frozen=True)
class OnlyForGroup:
    group: str

    def passes(self, snapshot: AssetSnapshot) -> bool:
        return snapshot.group == self.group


@dataclass(frozen=True)
class OnlyForEnvironment:
    environments: FrozenSet[str]

    def passes(self, snapshot: AssetSnapshot) -> bool:
        return snapshot.environment in self.environments


@dataclass(frozen=True)
class OnlyForPattern:
    """Glob over the relative path; bare patterns also match the basename."""

    pattern: str

    def passes(self, snapshot: AssetSnapshot) -> bool:
        return (fnmatch.fnmatchcase(snapshot.relative_path, self.pattern)
                or fnmatch.fnmatchcase(snapshot.basename, self.pattern))


@dataclass(frozen=True)
class OnlyForBuild:
    production: bool

    def passes(self, snapshot: AssetSnapshot) -> bool:
        return bool(snapshot.production) == self.production


@dataclass(frozen=True)
class Custom:
    predicate: Callable[[AssetSnapshot], bool]

    def passes(self, snapshot: AssetSnapshot) -> bool:
        return bool(self.predicate(snapshot))


class Filter:
    """A configured engine plus the conditions under which it runs."""

    def __init__(self, name: str, arguments=None, environment: str = "production",
                 engine: Any = None,
                 resolver: Optional[Callable[[str], Resolution]] = None):
        if not isinstance(name, str) or not name:
            raise ValueError("Filter name must be a non-empty string")
        self.name = name
        self.arguments = list(arguments or [])
        self.environment = environment
        self.engine = engine
        self.resolver = resolver
        self.resource = None
        self._restrictions = set()
        self._before_filtering = []

    def __repr__(self):
        return (f"Filter({self.name!r}, arguments={self.arguments!r}, "
                f"restrictions={len(self._restrictions)})")

    def set_resource(self, resource) -> "Filter":
        self.resource = resource
        return self

    def get_resource(self):
        return self.resource

    def get_filter(self) -> str:
        return self.name

    def get_environment(self) -> str:
        return self.environment

    def get_arguments(self) -> list:
        return list(self.arguments)

    def set_arguments(self, *arguments) -> "Filter":
        self.arguments = list(arguments)
        return self

    def get_restrictions(self) -> frozenset:
        return frozenset(self._restrictions)

    def _restrict(self, restriction) -> "Filter":
        self._restrictions.add(restriction)
        return self

    def when_asset_is_stylesheet(self) -> "Filter":
        return self._restrict(OnlyForGroup(AssetGroup.STYLESHEETS.value))

    def when_asset_is_javascript(self) -> "Filter":
        return self._restrict(OnlyForGroup(AssetGroup.JAVASCRIPTS.value))

    def when_asset_is(self, pattern: str) -> "Filter":
        """Fire only for assets whose relative path matches ``pattern``."""
        if not isinstance(pattern, str) or not pattern.strip():
            raise ValueError(f"Filter '{self.name}': pattern must be a non-empty string")
        if _UNCLOSED_BRACKET_RE.search(pattern):
            raise ValueError(f"Filter '{self.name}': malformed pattern {pattern!r}")
        return self._restrict(OnlyForPattern(pattern))

    def when_environment_is(self, *environments: str) -> "Filter":
        """Fire only when building under one of ``environments``."""
        if not environments:
            raise ValueError(f"Filter '{self.name}': at least one environment is required")
        for env in environments:
            if not isinstance(env, str) or not env:
                raise ValueError(
                    f"Filter '{self.name}': environment names must be non-empty strings"
                )
        return self._restrict(OnlyForEnvironment(frozenset(environments)))

    def when_production_build(self) -> "Filter":
        return self._restrict(OnlyForBuild(True))

    def when_development_build(self) -> "Filter":
        return self._restrict(OnlyForBuild(False))

    def when(self, predicate: Callable[[AssetSnapshot], bool]) -> "Filter":
        """Fire only when ``predicate(snapshot)`` is truthy."""
        if not callable(predicate):
            raise TypeError(f"Filter '{self.name}': predicate must be callable")
        return self._restrict(Custom(predicate))

    def before_filtering(self, callback: Callable[[Any], None]) -> "Filter":
        """Register ``callback(engine)`` to run once the engine is built."""
        if not callable(callback):
            raise TypeError(f"Filter '{self.name}': callback must be callable")
        self._before_filtering.append(callback)
        return self

    def passes(self, snapshot: AssetSnapshot) -> bool:
        return all(r.passes(snapshot) for r in self._restrictions)

    def get_class_name(self) -> Resolution:
        """Resolve the engine this filter runs; never raises."""
        if self.engine is not None:
            engine = self.engine
        elif self.resolver is not None:
            resolution = self.resolver(self.name)
            if not resolution.ok:
                return resolution
            engine = resolution.engine
        else:
            return Resolution(self.name, error="no engine registered for this name")

        if inspect.isclass(engine) or not callable(engine):
            if not is_filter_engine(engine):
                return Resolution(
                    self.name,
                    error=f"{engine!r} does not provide filter_load/filter_dump",
                )
        return Resolution(self.name, engine=engine)

    def is_resolvable(self) -> bool:
        return self.get_class_name().ok

    def get_instance(self):
        """Build the engine with this filter's arguments."""
        resolution = self.get_class_name()
        if not resolution.ok:
            raise FilterResolutionError(self.name, resolution.error)
        engine = resolution.engine
        if inspect.isclass(engine) or not is_filter_engine(engine):
            instance = engine(*self.arguments)
        else:
            instance = engine
        if not is_filter_engine(instance):
            raise FilterResolutionError(
                self.name, f"{engine!r} produced {type(instance).__name__}, not an engine"
            )
        for callback in self._before_filtering:
            callback(instance)
        return instance
