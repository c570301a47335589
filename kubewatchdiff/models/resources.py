"""Resource identity and change-set data structures."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum

from kubewatchdiff.models.document import Document

# Top-level keys compared by the structural differ unless a caller widens scope.
DEFAULT_DIFF_SCOPE: tuple[str, ...] = ("spec", "status")

PathToken = str | int


@dataclass(frozen=True, order=True)
class ResourceIdentity:
    """Stable address of one resource across polling iterations.

    Two documents with equal identity are the same resource regardless of
    any other content.  ``namespace`` is empty for cluster-scoped kinds.
    """

    api_version: str
    kind: str
    namespace: str
    name: str

    @property
    def key(self) -> str:
        """Return the snapshot-store key for this identity."""
        return f"{self.api_version}/{self.kind}/{self.namespace}/{self.name}"

    @property
    def sort_key(self) -> tuple[str, str, str]:
        """Ordering used by the poll driver: namespace, kind, name."""
        return (self.namespace, self.kind, self.name)

    @classmethod
    def from_document(cls, document: Mapping[str, object]) -> ResourceIdentity:
        """Derive the identity from a resource body's apiVersion/kind/metadata."""
        metadata = document.get("metadata")
        if not isinstance(metadata, Mapping):
            metadata = {}
        return cls(
            api_version=str(document.get("apiVersion") or ""),
            kind=str(document.get("kind") or ""),
            namespace=str(metadata.get("namespace") or ""),
            name=str(metadata.get("name") or ""),
        )

    def skeleton(self) -> dict[str, Document]:
        """Return a document holding only the identity fields.

        Used in place of a snapshot when a resource has never been seen.
        """
        metadata: dict[str, Document] = {"name": self.name}
        if self.namespace:
            metadata["namespace"] = self.namespace
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": metadata,
        }


@dataclass(frozen=True)
class ListedResource:
    """One item returned by a resource lister."""

    identity: ResourceIdentity
    document: dict[str, Document]

    @classmethod
    def from_document(cls, document: dict[str, Document]) -> ListedResource:
        return cls(identity=ResourceIdentity.from_document(document), document=document)


class ChangeKind(StrEnum):
    """Direction of a change entry."""

    ADDED = "added"
    REMOVED = "removed"

    @property
    def sign(self) -> str:
        return "+" if self is ChangeKind.ADDED else "-"


@dataclass(frozen=True)
class ChangeEntry:
    """A path-qualified value that was added or removed."""

    path: tuple[PathToken, ...]
    kind: ChangeKind
    payload: Document

    @property
    def dotted_path(self) -> str:
        """Render the path as ``spec.containers[0].image``."""
        return format_path(self.path)


@dataclass(frozen=True)
class ChangeSet:
    """Ordered result of one structural diff.

    ``new_resource`` marks a first observation, where the scoped subtrees
    of the new document are reported as wholesale additions.
    ``deleted_resource`` marks a resource that disappeared from a listing.
    """

    entries: tuple[ChangeEntry, ...] = ()
    new_resource: bool = False
    deleted_resource: bool = False

    def __bool__(self) -> bool:
        return bool(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ChangeEntry]:
        return iter(self.entries)


@dataclass(frozen=True)
class FilterConfig:
    """Document transforms applied symmetrically before diffing."""

    ignore_status: bool = False
    ignore_meta: bool = False


@dataclass
class IterationResult:
    """Rendered per-resource reports produced by one poll iteration."""

    number: int
    reports: list[str] = field(default_factory=list)

    @property
    def header(self) -> str:
        return f"# iteration {self.number}\n"

    def render(self) -> str:
        """Return the header followed by every report, or "" when empty."""
        if not self.reports:
            return ""
        return "\n".join([self.header, *self.reports])


def format_path(path: tuple[PathToken, ...]) -> str:
    """Join path tokens: keys with ``.``, list indices as ``[i]``."""
    parts: list[str] = []
    for token in path:
        if isinstance(token, int):
            parts.append(f"[{token}]")
        elif parts:
            parts.append(f".{token}")
        else:
            parts.append(token)
    return "".join(parts)
