"""
Client-side query builder for the recipe list.

This module turns what the user picked on the browse page (search text, tags,
sort option) into the query parameters of GET /api/recipes, and keeps track
of the pages loaded so far for "Load more".

Pieces:
- RecipeQueryState: the current search/tags/sort selection
- RecipePager: accumulated pages and the offset of the next one
- Debouncer: runs a callable once input has been quiet for a while (threading.Timer)
- DebouncedValue: the same idea driven by a clock, for Streamlit reruns

It has no Streamlit dependency so it can be unit tested directly.

# NOTE: The route layer treats search, tags and sort as mutually exclusive
    (search wins over tags, tags over sort). to_params() still sends every
    selected value; the server decides which one applies.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from cookbook.models import DEFAULT_PAGE_SIZE, DEFAULT_SORT, SORT_OPTIONS

# Quiet period before a search is sent, in seconds
SEARCH_DEBOUNCE_SECONDS = 0.5

Fingerprint = Tuple[str, Tuple[str, ...], str]


@dataclass
class RecipeQueryState:
    """
    Search text, selected tags and sort option of the browse page.

    Every setter returns True when the selection actually changed, which is
    the caller's cue to restart pagination (see RecipePager.sync).
    """
    search: str = ""
    tags: List[str] = field(default_factory=list)
    sort: str = DEFAULT_SORT
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.sort not in SORT_OPTIONS:
            raise ValueError(f"Unknown sort option '{self.sort}'")
        if self.page_size < 1:
            raise ValueError("page_size must be at least 1")

    def set_search(self, text: str) -> bool:
        text = text or ""
        if text.strip() == self.search.strip():
            self.search = text
            return False
        self.search = text
        return True

    def toggle_tag(self, tag: str) -> bool:
        if tag in self.tags:
            self.tags.remove(tag)
        else:
            self.tags.append(tag)
        return True

    def set_tags(self, tags: List[str]) -> bool:
        new_tags = list(dict.fromkeys(tags))
        if new_tags == self.tags:
            return False
        self.tags = new_tags
        return True

    def clear_tags(self) -> bool:
        return self.set_tags([])

    def set_sort(self, sort: str) -> bool:
        if sort not in SORT_OPTIONS:
            raise ValueError(f"Unknown sort option '{sort}'")
        if sort == self.sort:
            return False
        self.sort = sort
        return True

    def fingerprint(self) -> Fingerprint:
        """Identity of the result list: (search, tags, sort)."""
        return self.search.strip(), tuple(self.tags), self.sort

    def to_params(self, offset: int = 0) -> Dict[str, Any]:
        """
        Query parameters for GET /api/recipes.

        Args:
            offset: Offset of the page to fetch

        Returns:
            Dictionary with limit, offset and sort, plus search when non-blank
            and tags (comma-joined) when any are selected
        """
        params: Dict[str, Any] = {"limit": self.page_size, "offset": offset}
        search = self.search.strip()
        if search:
            params["search"] = search
        if self.tags:
            params["tags"] = ",".join(self.tags)
        params["sort"] = self.sort
        return params


class RecipePager:
    """
    Accumulates pages of recipes for one query fingerprint.

    The next offset is (pages loaded) x page size while the last page came
    back full; a short page means there is nothing more to load. Offsets
    therefore increase strictly and never overlap.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = page_size
        self.pages: List[List[Dict[str, Any]]] = []
        self.fingerprint: Optional[Fingerprint] = None

    def reset(self) -> None:
        self.pages = []

    def sync(self, fingerprint: Fingerprint) -> bool:
        """
        Discard accumulated pages if the query changed.

        Returns:
            True if the pager was reset
        """
        if fingerprint == self.fingerprint:
            return False
        self.fingerprint = fingerprint
        self.reset()
        return True

    @property
    def next_offset(self) -> Optional[int]:
        """Offset of the next page, or None when everything has been loaded."""
        if not self.pages:
            return 0
        if len(self.pages[-1]) < self.page_size:
            return None
        return len(self.pages) * self.page_size

    @property
    def has_more(self) -> bool:
        return self.next_offset is not None

    @property
    def items(self) -> List[Dict[str, Any]]:
        return [item for page in self.pages for item in page]

    def add_page(self, offset: int, items: List[Dict[str, Any]]) -> None:
        """
        Append a fetched page.

        Raises:
            ValueError: If offset is not the expected next offset (stale or duplicate page)
        """
        expected = self.next_offset
        if offset != expected:
            raise ValueError(f"Unexpected page offset {offset}, expected {expected}")
        self.pages.append(list(items))

    def load_next(self, fetch: Callable[[int], Optional[List[Dict[str, Any]]]]) -> bool:
        """
        Fetch and append the next page.

        Args:
            fetch: Called with the offset; returns the page, or None on error

        Returns:
            True if a page was appended
        """
        offset = self.next_offset
        if offset is None:
            return False
        page = fetch(offset)
        if page is None:
            return False
        self.add_page(offset, page)
        return True


class Debouncer:
    """
    Delay calls to func until no new call arrived for `wait` seconds.

    Each call cancels the pending timer and schedules a new one, so only the
    last call of a burst runs.

    Example:
        >>> send = Debouncer(lambda text: print(text), wait=0.5)
        >>> send("p"); send("pa"); send("pasta")   # prints "pasta" once
    """

    def __init__(self, func: Callable[..., Any], wait: float = SEARCH_DEBOUNCE_SECONDS):
        self.func = func
        self.wait = wait
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.wait, self.func, args=args, kwargs=kwargs)
            self._timer.daemon = True
            self._timer.start()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None and self._timer.is_alive()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


class DebouncedValue:
    """
    A value that only settles after it stopped changing for `wait` seconds.

    Streamlit reruns the whole script on every interaction, so there is no
    long-lived callback to delay. Instead each rerun reports the raw input with
    update() and reads back the settled value.
    """

    def __init__(self, initial: str = "", wait: float = SEARCH_DEBOUNCE_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.wait = wait
        self._clock = clock
        self._settled = initial
        self._pending = initial
        self._changed_at = clock()

    def update(self, value: str) -> str:
        """Record the latest raw value and return the settled one."""
        now = self._clock()
        if value != self._pending:
            self._pending = value
            self._changed_at = now
        if self._pending != self._settled and now - self._changed_at >= self.wait:
            self._settled = self._pending
        return self._settled

    @property
    def value(self) -> str:
        return self._settled

    @property
    def is_pending(self) -> bool:
        return self._pending != self._settled

    def remaining(self) -> float:
        """Seconds until the pending value settles (0 when nothing is pending)."""
        if not self.is_pending:
            return 0.0
        return max(0.0, self.wait - (self._clock() - self._changed_at))
