"""Top-level passive tree view: snapshot retrieval, selection and rendering."""

import logging
import threading
from collections.abc import Iterable
from concurrent.futures import Future

from .cache import SnapshotCache
from .layout.derive import DEFAULT_PALETTE, EdgeAttributes, NodeAttributes, Palette, ViewModelCache
from .layout.render import render_loading, render_svg
from .snapshot import GraphSnapshot, selection_from_ids

logger = logging.getLogger(__name__)


class SkillTreeView:
    """Own the snapshot for one tree version and render it for a selection.

    Retrieval order on mount: in-memory snapshot, then the persisted cache,
    then a single background fetch. Completions that arrive after the version
    changed are dropped. Selection changes only re-run derivation.

    Args:
        fetcher: Object with ``fetch(version, league) -> Future[GraphSnapshot]``.
        cache: Persisted snapshot cache.
        version: Tree version to show.
        league: Context passed through to the fetcher.
        selected: Numeric ids of highlighted nodes.
        palette: Highlight colors.
    """

    def __init__(
        self,
        fetcher,
        cache: SnapshotCache,
        version: str,
        league: str | None = None,
        selected: Iterable[int] | None = None,
        palette: Palette = DEFAULT_PALETTE,
    ):
        self.fetcher = fetcher
        self.cache = cache
        self.league = league
        self._version = version
        self._snapshot: GraphSnapshot | None = None
        self._selected = selection_from_ids(selected)
        self._loading = False
        self._request = 0  # Bumped per fetch and per version change
        self._settled: threading.Event | None = None
        self._view_model = ViewModelCache(palette)
        self._lock = threading.Lock()

    @property
    def version(self) -> str:
        return self._version

    @property
    def snapshot(self) -> GraphSnapshot | None:
        return self._snapshot

    @property
    def selected(self) -> frozenset[str]:
        return self._selected

    @property
    def loading(self) -> bool:
        """True while a fetch for the current version is in flight."""
        return self._loading

    def mount(self) -> None:
        """Make the snapshot for the current version available.

        Does nothing if a snapshot is already held or a fetch is in flight.
        """
        with self._lock:
            if self._snapshot is not None or self._loading:
                return
            version = self._version

        cached = self.cache.load(version)

        with self._lock:
            if version != self._version or self._snapshot is not None or self._loading:
                return
            if cached is not None:
                logger.info("Using cached passive tree %s", version)
                self._snapshot = cached
                return
            self._request += 1
            request = self._request
            self._loading = True
            settled = threading.Event()
            self._settled = settled

        try:
            future = self.fetcher.fetch(version, self.league)
        except Exception as e:
            future = Future()
            future.set_exception(e)
        future.add_done_callback(lambda f: self._on_fetched(request, version, f, settled))

    def _on_fetched(self, request: int, version: str, future: Future, settled: threading.Event) -> None:
        try:
            self._apply_fetched(request, version, future)
        finally:
            settled.set()

    def _apply_fetched(self, request: int, version: str, future: Future) -> None:
        error = None
        snapshot = None
        try:
            snapshot = future.result()
        except Exception as e:
            error = e

        with self._lock:
            if request != self._request or version != self._version:
                logger.debug("Discarding stale fetch for %s", version)
                return
            self._loading = False
            if error is not None:
                logger.warning("Fetching passive tree %s failed: %s", version, error)
                return
            self._snapshot = snapshot

        self.cache.store(version, snapshot)

    def set_version(self, version: str) -> None:
        """Switch to another version, abandoning any in-flight fetch."""
        with self._lock:
            if version == self._version:
                return
            self._version = version
            self._snapshot = None
            self._loading = False
            self._request += 1
            self._settled = None
        self.mount()

    def set_selected(self, ids: Iterable[int] | None) -> None:
        """Replace the highlighted node ids."""
        selected = selection_from_ids(ids)
        with self._lock:
            self._selected = selected

    def view_model(self) -> tuple[list[NodeAttributes], list[EdgeAttributes]]:
        """Derived (node, edge) attributes for the current snapshot and selection."""
        with self._lock:
            return self._view_model.derive(self._snapshot, self._selected)

    def node_attributes(self) -> list[NodeAttributes]:
        return self.view_model()[0]

    def edge_attributes(self) -> list[EdgeAttributes]:
        return self.view_model()[1]

    def render(self) -> str:
        """Loading placeholder while fetching, otherwise the SVG document."""
        with self._lock:
            if self._loading:
                return render_loading()
            snapshot = self._snapshot
            nodes, edges = self._view_model.derive(snapshot, self._selected)
        return render_svg(snapshot.bounds if snapshot else None, nodes, edges)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the outstanding fetch, if any, has completed.

        Returns:
            True if a snapshot is available afterwards.
        """
        settled = self._settled
        if settled is not None:
            settled.wait(timeout)
        return self._snapshot is not None
