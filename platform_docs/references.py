r"""Fetch and clean the generated API reference document.

The docs site ships a JSON reference of the SDK's public API (a TypeDoc
project export) that the reference pages read at build time. The raw export
is large: it carries source locations, internal modules, and nested
declarations the site never displays. This module downloads the export and
reduces it to a flat, id-keyed mapping of the declarations reachable from the
configured API categories.

Example
-------
>>> from platform_docs.references import clean_references
>>> raw = {"children": [{"id": 1, "name": "auth", "kind": 2, "children": []}]}
>>> clean_references(raw, ["auth"])
{'1': {'id': 1, 'name': 'auth', 'kind': 2, 'children': []}, 'categories': [1]}
"""

from __future__ import annotations

import collections
import collections.abc as cabc
import json
import typing as typ

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

if typ.TYPE_CHECKING:
    from pathlib import Path

NODE_KEYS: frozenset[str] = frozenset(
    {
        "id",
        "name",
        "kind",
        "kindString",
        "flags",
        "comment",
        "signatures",
        "parameters",
        "type",
        "typeParameters",
        "declaration",
        "children",
        "extendedTypes",
        "defaultValue",
    }
)
_USER_AGENT = "platform-docs/0.1"


class ReferenceFetchError(RuntimeError):
    """Raised when the remote reference document cannot be downloaded."""


class ReferenceFetcher:
    """Download reference documents with retries on transient server errors."""

    def __init__(
        self, *, session: requests.Session | None = None, timeout: float = 30.0
    ) -> None:
        """Initialise the fetcher.

        Parameters
        ----------
        session : requests.Session, optional
            Preconfigured session (for example, one recorded by Betamax). When
            omitted, a session with a retrying adapter is created per fetch.
        timeout : float, optional
            Per-request timeout in seconds. Defaults to ``30.0``.
        """
        self._session = session
        self.timeout = timeout

    def fetch(self, url: str) -> str:
        """Return the body at ``url`` after checking it parses as JSON.

        Raises
        ------
        ReferenceFetchError
            On transport failures, HTTP error statuses, or a non-JSON body.
        """
        session = self._session or _build_retry_session()
        try:
            resp = session.get(
                url, headers={"User-Agent": _USER_AGENT}, timeout=self.timeout
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            msg = f"Failed to fetch reference document from '{url}': {exc}"
            raise ReferenceFetchError(msg) from exc
        finally:
            if self._session is None:
                session.close()

        text = resp.text
        try:
            json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f"Reference document at '{url}' is not valid JSON"
            raise ReferenceFetchError(msg) from exc
        return text


def _build_retry_session() -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=5,
        read=5,
        connect=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def clean_references(
    document: cabc.Mapping[str, typ.Any], categories: cabc.Sequence[str] = ()
) -> dict[str, typ.Any]:
    """Reduce a TypeDoc project export to the declarations the site displays.

    Parameters
    ----------
    document : Mapping
        Parsed project export whose ``children`` are the top-level modules.
    categories : Sequence[str], optional
        Names of the modules to keep. All modules are kept when empty.

    Returns
    -------
    dict[str, Any]
        Mapping of ``str(id)`` to a pruned declaration, where ``children``
        holds child ids, plus a ``categories`` list of the kept module ids.
        Declarations referenced by type (``{"type": "reference", "target":
        id}``) are included when the export defines them.
    """
    index = _index_declarations(document)
    wanted = set(categories)
    roots = [
        module["id"]
        for module in document.get("children") or []
        if _is_declaration(module) and (not wanted or module.get("name") in wanted)
    ]

    cleaned: dict[str, typ.Any] = {}
    queue: collections.deque[int] = collections.deque(roots)
    while queue:
        node_id = queue.popleft()
        key = str(node_id)
        if key in cleaned or node_id not in index:
            continue
        linked: list[int] = []
        cleaned[key] = _prune_declaration(index[node_id], linked)
        queue.extend(linked)

    cleaned["categories"] = roots
    return cleaned


def load_reference_document(text: str) -> dict[str, typ.Any]:
    """Parse a reference export, rejecting anything but a JSON object."""
    document = json.loads(text)
    if not isinstance(document, dict):
        msg = "Reference document must be a JSON object."
        raise TypeError(msg)
    return document


def write_clean_references(cleaned: cabc.Mapping[str, typ.Any], path: Path) -> Path:
    """Serialize ``cleaned`` deterministically to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(cleaned, sort_keys=True, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    return path


def _is_declaration(value: object) -> bool:
    return isinstance(value, dict) and isinstance(value.get("id"), int) and "kind" in value


def _index_declarations(document: cabc.Mapping[str, typ.Any]) -> dict[int, dict[str, typ.Any]]:
    """Map every declaration id in ``document`` to its node."""
    index: dict[int, dict[str, typ.Any]] = {}
    stack: list[typ.Any] = [document]
    while stack:
        value = stack.pop()
        if isinstance(value, dict):
            if _is_declaration(value):
                index.setdefault(value["id"], value)
            stack.extend(value.values())
        elif isinstance(value, list):
            stack.extend(value)
    return index


def _prune_declaration(node: cabc.Mapping[str, typ.Any], linked: list[int]) -> dict[str, typ.Any]:
    """Keep only ``NODE_KEYS``; collapse ``children`` to ids collected in ``linked``."""
    pruned: dict[str, typ.Any] = {}
    for key, value in node.items():
        if key not in NODE_KEYS:
            continue
        if key == "children":
            child_ids = [child["id"] for child in value or [] if _is_declaration(child)]
            linked.extend(child_ids)
            pruned[key] = child_ids
        else:
            pruned[key] = _prune_value(value, linked)
    return pruned


def _prune_value(value: typ.Any, linked: list[int]) -> typ.Any:
    """Recursively prune nested declarations and collect reference targets."""
    if isinstance(value, list):
        return [_prune_value(item, linked) for item in value]
    if not isinstance(value, dict):
        return value
    if _is_declaration(value):
        return _prune_declaration(value, linked)
    if value.get("type") == "reference" and isinstance(value.get("target"), int):
        linked.append(value["target"])
    return {key: _prune_value(item, linked) for key, item in value.items()}


__all__ = [
    "NODE_KEYS",
    "ReferenceFetchError",
    "ReferenceFetcher",
    "clean_references",
    "load_reference_document",
    "write_clean_references",
]
