from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urljoin

from schemagraph import events as ev
from schemagraph.errors import DocumentLoadError, MalformedDocumentError, UnresolvedReferenceError
from schemagraph.references.loaders import DocumentLoader
from schemagraph.references.pointer import (
    is_local_reference,
    join_pointer,
    pointer_segments,
    split_reference,
)
from schemagraph.schema.node import JsonSchema
from schemagraph.schema.parser import build_schema
from schemagraph.schema.traversal import walk

_MISSING = object()


@dataclass
class ResolutionResult:
    resolved: int = 0
    errors: list[UnresolvedReferenceError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class _Pending:
    root: JsonSchema
    location: str
    node: JsonSchema


@dataclass
class _Pass:
    local: list[_Pending] = field(default_factory=list)
    external: list[_Pending] = field(default_factory=list)
    queued: set[int] = field(default_factory=set)
    result: ResolutionResult = field(default_factory=ResolutionResult)

    def enqueue(self, root: JsonSchema, base: tuple[str, ...], node: JsonSchema) -> None:
        for segments, candidate in walk(node):
            if candidate.ref is None or candidate.reference is not None:
                continue
            if id(candidate) in self.queued:
                continue
            self.queued.add(id(candidate))
            pending = _Pending(root, join_pointer(list(base + segments)), candidate)
            if is_local_reference(candidate.ref):
                self.local.append(pending)
            else:
                self.external.append(pending)


class ReferenceResolver:
    """Bind ``$ref`` strings to the nodes they point at.

    Pointers are walked generically: any keyword, extension key or list index
    is a valid segment. Raw JSON objects reached inside extension data are
    promoted in place to :class:`JsonSchema` so the same pointer always
    yields the same node.
    """

    def __init__(
        self,
        *,
        loader: DocumentLoader | None = None,
        on_event: ev.EventHandler | None = None,
        cancel: threading.Event | None = None,
        documents: dict[str, JsonSchema] | None = None,
    ):
        self.loader = loader
        self.on_event = on_event
        self.cancel = cancel
        self.documents = documents if documents is not None else {}

    def resolve(self, ref: str, root: JsonSchema) -> JsonSchema:
        """Resolve a single pointer against ``root``.

        The returned node is not bound to anything, but references inside a
        node promoted on the way are bound before returning.
        """
        run = _Pass()
        target = self._locate(ref, root, location="", run=run)
        self._drain(run)
        return target

    def resolve_document(self, root: JsonSchema) -> ResolutionResult:
        run = _Pass()
        run.enqueue(root, (), root)
        self._drain(run)
        return run.result

    def _drain(self, run: _Pass) -> None:
        while run.local or run.external:
            if run.local:
                pending = run.local.pop(0)
            else:
                pending = run.external.pop(0)
            self._bind(pending, run)

    def _bind(self, pending: _Pending, run: _Pass) -> None:
        ref = pending.node.ref or ""
        try:
            target = self._locate(ref, pending.root, location=pending.location, run=run)
        except UnresolvedReferenceError as exc:
            exc.node = pending.node
            run.result.errors.append(exc)
            ev.emit(
                self.on_event,
                ev.ReferenceUnresolved(pointer=ref, location=pending.location, message=str(exc)),
            )
            return
        pending.node.reference = target
        run.result.resolved += 1
        ev.emit(self.on_event, ev.ReferenceResolved(pointer=ref, location=pending.location))

    def _locate(self, ref: str, root: JsonSchema, *, location: str, run: _Pass) -> JsonSchema:
        document, fragment = split_reference(ref)
        if document:
            root = self._external_document(ref, document, root, location=location, run=run)
        try:
            segments = pointer_segments(fragment)
        except ValueError as exc:
            raise UnresolvedReferenceError(ref, str(exc), location=location) from exc

        current: Any = root
        container: Any = None
        key: Any = None
        for segment in segments:
            if isinstance(current, JsonSchema):
                current, container, key = _schema_step(current, segment)
            elif isinstance(current, dict):
                container, key = current, segment
                current = current.get(segment, _MISSING)
            elif isinstance(current, list):
                if not (segment.isascii() and segment.isdigit()):
                    raise UnresolvedReferenceError(
                        ref, f"Expected list index at '{segment}'.", location=location
                    )
                container, key = current, int(segment)
                current = current[key] if key < len(current) else _MISSING
            else:
                raise UnresolvedReferenceError(
                    ref,
                    f"Cannot traverse into {type(current).__name__} at '{segment}'.",
                    location=location,
                )
            if current is _MISSING or current is None:
                raise UnresolvedReferenceError(ref, f"Key not found: {segment}", location=location)

        if isinstance(current, JsonSchema):
            return current
        if isinstance(current, dict) and container is not None:
            return self._promote(ref, current, container, key, root, segments, location=location, run=run)
        raise UnresolvedReferenceError(
            ref, f"Target is a {type(current).__name__}, not a schema object.", location=location
        )

    def _promote(
        self,
        ref: str,
        raw: dict[str, Any],
        container: Any,
        key: Any,
        root: JsonSchema,
        segments: list[str],
        *,
        location: str,
        run: _Pass,
    ) -> JsonSchema:
        try:
            promoted = build_schema(raw, location=join_pointer(segments))
        except MalformedDocumentError as exc:
            raise UnresolvedReferenceError(ref, str(exc), location=location) from exc
        container[key] = promoted
        run.enqueue(root, tuple(segments), promoted)
        return promoted

    def _external_document(
        self,
        ref: str,
        document: str,
        root: JsonSchema,
        *,
        location: str,
        run: _Pass,
    ) -> JsonSchema:
        uri = urljoin(root.base_uri, document) if root.base_uri else document
        cached = self.documents.get(uri)
        if cached is not None:
            return cached
        if self.cancel is not None and self.cancel.is_set():
            raise UnresolvedReferenceError(ref, "External resolution was cancelled.", location=location)
        if self.loader is None:
            raise UnresolvedReferenceError(
                ref, "External references need a document loader.", location=location
            )
        try:
            data = self.loader.load(uri)
            loaded = build_schema(data)
        except (DocumentLoadError, MalformedDocumentError) as exc:
            raise UnresolvedReferenceError(ref, str(exc), location=location) from exc
        loaded.base_uri = uri
        self.documents[uri] = loaded
        ev.emit(self.on_event, ev.ExternalDocumentLoaded(uri=uri))
        run.enqueue(loaded, (), loaded)
        return loaded


def _schema_step(node: JsonSchema, segment: str) -> tuple[Any, Any, Any]:
    if segment == "properties":
        return node.properties, None, None
    if segment == "definitions":
        return node.definitions, None, None
    if segment == "items":
        return _present(node.items), None, None
    if segment == "additionalProperties":
        return _present(node.additional_properties), None, None
    if segment == "allOf":
        return node.all_of, None, None
    if segment == "anyOf":
        return node.any_of, None, None
    if segment == "oneOf":
        return node.one_of, None, None
    if segment == "not":
        return _present(node.not_schema), None, None
    extension = node.extension_data or {}
    return extension.get(segment, _MISSING), extension, segment


def _present(value: Any) -> Any:
    return _MISSING if value is None else value
