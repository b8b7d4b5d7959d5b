"""Fetch passive tree snapshots from a GraphQL endpoint or a local file."""

import json
import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from pathlib import Path

import httpx

from .snapshot import GraphSnapshot, TreeDataError

logger = logging.getLogger(__name__)

PASSIVE_TREE_QUERY = """
query PassiveTree($passiveTreeVersion: String!) {
  passiveTree(passiveTreeVersion: $passiveTreeVersion) {
    constants {
      minX
      minY
      maxX
      maxY
      skillsPerOrbit
      orbitRadii
    }
    nodeMap
    connectionMap
  }
}
"""


class FetchFailure(Exception):
    """Raised when a snapshot could not be fetched or decoded."""


def unwrap_payload(document: dict) -> dict:
    """Accept either a bare snapshot or a GraphQL response envelope.

    Raises:
        FetchFailure: If the envelope carries GraphQL errors or no tree.
    """
    if not isinstance(document, dict):
        raise FetchFailure(f"Expected a JSON object, got {type(document).__name__}")
    if "constants" in document:
        return document
    if document.get("errors"):
        messages = "; ".join(str(err.get("message", err) if isinstance(err, dict) else err) for err in document["errors"])
        raise FetchFailure(f"GraphQL errors: {messages}")
    tree = (document.get("data") or {}).get("passiveTree")
    if tree is None:
        raise FetchFailure("Response contains no passiveTree")
    return tree


def parse_document(document: dict) -> GraphSnapshot:
    """Decode a fetched document into a snapshot, raising FetchFailure on bad data."""
    try:
        return GraphSnapshot.from_dict(unwrap_payload(document))
    except TreeDataError as e:
        raise FetchFailure(str(e)) from e


class GraphQLFetcher:
    """Fetch snapshots over HTTP on a background thread."""

    def __init__(
        self,
        endpoint: str,
        timeout: float = 15.0,
        executor: Executor | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.transport = transport
        self.executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="passive-tree-fetch")

    def fetch(self, version: str, league: str | None = None) -> "Future[GraphSnapshot]":
        """Start fetching a version; the future fails with FetchFailure on error."""
        return self.executor.submit(self.fetch_sync, version, league)

    def fetch_sync(self, version: str, league: str | None = None) -> GraphSnapshot:
        """Fetch a version on the calling thread.

        Raises:
            FetchFailure: On transport, HTTP, GraphQL or format errors.
        """
        variables = {"passiveTreeVersion": version}
        if league:
            variables["league"] = league
        logger.info("Fetching passive tree %s from %s", version, self.endpoint)
        try:
            with httpx.Client(timeout=self.timeout, follow_redirects=True, transport=self.transport) as client:
                resp = client.post(self.endpoint, json={"query": PASSIVE_TREE_QUERY, "variables": variables})
                resp.raise_for_status()
                document = resp.json()
        except httpx.HTTPError as e:
            raise FetchFailure(f"Request for {version} failed: {e}") from e
        except json.JSONDecodeError as e:
            raise FetchFailure(f"Response for {version} is not JSON: {e}") from e
        return parse_document(document)


class FileFetcher:
    """Serve a snapshot from a local JSON document."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def fetch(self, version: str, league: str | None = None) -> "Future[GraphSnapshot]":
        """Read the file and return an already-completed future."""
        future: Future[GraphSnapshot] = Future()
        try:
            future.set_result(self.fetch_sync(version, league))
        except FetchFailure as e:
            future.set_exception(e)
        return future

    def fetch_sync(self, version: str, league: str | None = None) -> GraphSnapshot:
        logger.info("Loading passive tree %s from %s", version, self.path)
        try:
            with open(self.path) as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise FetchFailure(f"Could not read {self.path}: {e}") from e
        return parse_document(document)
