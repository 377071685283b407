from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Callable


@dataclass(frozen=True)
class SchemagraphEvent:
    ts: float = field(default_factory=time.perf_counter)
    level: str = "INFO"
    type: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


EventHandler = Callable[[SchemagraphEvent], None]


@dataclass(frozen=True)
class DocumentParsed(SchemagraphEvent):
    type: str = "DocumentParsed"
    base_uri: str | None = None
    references: int = 0
    unresolved: int = 0


@dataclass(frozen=True)
class ReferenceResolved(SchemagraphEvent):
    level: str = "DEBUG"
    type: str = "ReferenceResolved"
    pointer: str = ""
    location: str = ""


@dataclass(frozen=True)
class ReferenceUnresolved(SchemagraphEvent):
    level: str = "ERROR"
    type: str = "ReferenceUnresolved"
    pointer: str = ""
    location: str = ""
    message: str = ""


@dataclass(frozen=True)
class ExternalDocumentLoaded(SchemagraphEvent):
    type: str = "ExternalDocumentLoaded"
    uri: str = ""


@dataclass(frozen=True)
class DefinitionRegistered(SchemagraphEvent):
    level: str = "DEBUG"
    type: str = "DefinitionRegistered"
    name: str = ""
    identity: str = ""


@dataclass(frozen=True)
class TypeShapeUnsupported(SchemagraphEvent):
    level: str = "WARNING"
    type: str = "TypeShapeUnsupported"
    type_name: str = ""
    member: str | None = None
    message: str = ""


@dataclass(frozen=True)
class Warning(SchemagraphEvent):
    level: str = "WARNING"
    type: str = "Warning"
    code: str = ""
    message: str = ""
    hint: str | None = None


def emit(handler: EventHandler | None, event: SchemagraphEvent) -> None:
    if handler is not None:
        handler(event)
