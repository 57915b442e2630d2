"""Object metadata: local identity, labels, owner references and finalizers."""

from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(frozen=True, slots=True, order=True)
class ObjectKey:
    """Stable local identity of an entity."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"

    @classmethod
    def parse(cls, value: str, *, default_namespace: str = "default") -> ObjectKey:
        parts = value.strip().split("/")
        if len(parts) == 1:
            parts.insert(0, default_namespace)
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"Invalid object key: {value!r}")
        namespace, name = parts
        return cls(namespace=namespace, name=name)


@dataclass(frozen=True, slots=True)
class OwnerReference:
    kind: str
    name: str
    uid: str
    controller: bool = False


@dataclass(slots=True, kw_only=True)
class ObjectMeta:
    name: str
    namespace: str = "default"
    generation: int = 1
    labels: dict[str, str] = field(default_factory=dict[str, str])
    finalizers: list[str] = field(default_factory=list[str])
    owner_references: list[OwnerReference] = field(default_factory=list[OwnerReference])
    deletion_requested: bool = False

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(namespace=self.namespace, name=self.name)


def ensure_finalizer(meta: ObjectMeta, finalizer: str) -> bool:
    """Append ``finalizer`` when missing. Returns whether ``meta`` changed."""

    if finalizer in meta.finalizers:
        return False
    meta.finalizers.append(finalizer)
    return True


def remove_finalizer(meta: ObjectMeta, finalizer: str) -> bool:
    """Drop every occurrence of ``finalizer``. Returns whether ``meta`` changed."""

    remaining = [f for f in meta.finalizers if f != finalizer]
    if len(remaining) == len(meta.finalizers):
        return False
    meta.finalizers = remaining
    return True


def ensure_metadata_updated(
    existing: ObjectMeta,
    generated: ObjectMeta,
) -> tuple[bool, ObjectMeta]:
    """Merge owner references and labels from ``generated`` into a copy of ``existing``.

    ``generated`` is the source of truth: its owner references replace the existing
    ones and its labels are layered over the existing labels. Neither input is
    mutated; the flag reports whether the returned metadata differs.
    """

    updated = replace(
        existing,
        labels={**existing.labels, **generated.labels},
        finalizers=list(existing.finalizers),
        owner_references=list(generated.owner_references),
    )
    changed = (
        updated.owner_references != existing.owner_references
        or updated.labels != existing.labels
    )
    return changed, updated
