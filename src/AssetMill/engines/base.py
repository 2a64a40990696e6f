"""Transformation-engine capability shared by every filter engine."""

import inspect
from abc import ABC, abstractmethod
from typing import Callable, Optional

from ..core import BuildContext


class FilterEngine(ABC):
    """Base class for content transformations driven by a ``Filter``.

    ``filter_load`` runs for every active engine before any ``filter_dump``;
    it may record metadata on the context but should leave the content
    alone. ``filter_dump`` rewrites ``context.content``.
    """

    def filter_load(self, context: BuildContext) -> None:
        return None

    @abstractmethod
    def filter_dump(self, context: BuildContext) -> None:
        raise NotImplementedError


def is_filter_engine(candidate) -> bool:
    """Return True if ``candidate`` (class or instance) exposes both hooks."""
    if inspect.isclass(candidate) and issubclass(candidate, FilterEngine):
        return not inspect.isabstract(candidate)
    return all(
        callable(getattr(candidate, hook, None))
        for hook in ("filter_load", "filter_dump")
    )


class CallableFilter(FilterEngine):
    """Wrap plain functions as an engine.

    ``dump`` receives the current content and returns the new content;
    ``load`` receives the context and returns nothing.
    """

    def __init__(self, dump: Optional[Callable[[str], str]] = None,
                 load: Optional[Callable[[BuildContext], None]] = None):
        if dump is not None and not callable(dump):
            raise TypeError("dump must be callable")
        if load is not None and not callable(load):
            raise TypeError("load must be callable")
        self._dump = dump
        self._load = load

    def filter_load(self, context: BuildContext) -> None:
        if self._load is not None:
            self._load(context)

    def filter_dump(self, context: BuildContext) -> None:
        if self._dump is not None:
            context.set_content(self._dump(context.get_content()))
