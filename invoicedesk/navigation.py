# invoicedesk/navigation.py

"""
Control transfer and listing-view caching.

A successful mutation ends by revalidating the cached listing it changed and
then calling :func:`redirect`, which raises :class:`Redirect`. Callers never
get a value back from that path; the web layer turns the exception into a
``303 See Other``.
"""

import logging
import threading
from typing import Any, Callable, Dict, NoReturn

logger = logging.getLogger(__name__)


class Redirect(Exception):
    """Terminal transfer of control to ``path``."""

    def __init__(self, path: str):
        super().__init__(path)
        self.path = path


def redirect(path: str) -> NoReturn:
    raise Redirect(path)


class ViewCache:
    """
    Rendered listing views keyed by path.

    ``get_or_render`` serves the cached payload until ``revalidate`` drops it.
    A render that was overtaken by a ``revalidate`` is returned to its caller
    but not stored.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Any] = {}
        self._generations: Dict[str, int] = {}
        self._lock = threading.Lock()

    def get_or_render(self, path: str, render: Callable[[], Any]) -> Any:
        with self._lock:
            if path in self._entries:
                return self._entries[path]
            generation = self._generations.get(path, 0)

        payload = render()

        with self._lock:
            if self._generations.get(path, 0) == generation:
                self._entries[path] = payload
        return payload

    def revalidate(self, path: str) -> None:
        with self._lock:
            self._entries.pop(path, None)
            self._generations[path] = self._generations.get(path, 0) + 1
        logger.debug("Revalidated %s", path)

    def is_cached(self, path: str) -> bool:
        with self._lock:
            return path in self._entries

    def clear(self) -> None:
        with self._lock:
            for path in set(self._entries) | set(self._generations):
                self._generations[path] = self._generations.get(path, 0) + 1
            self._entries.clear()
