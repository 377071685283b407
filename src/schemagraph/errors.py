from __future__ import annotations

from typing import Any


class SchemagraphError(RuntimeError):
    pass


class MalformedDocumentError(SchemagraphError):
    def __init__(self, message: str, *, location: str | None = None):
        if location:
            message = f"{location}: {message}"
        super().__init__(message)
        self.location = location


class UnresolvedReferenceError(SchemagraphError):
    def __init__(
        self,
        pointer: str,
        message: str,
        *,
        location: str | None = None,
        node: Any = None,
    ):
        text = f"Cannot resolve reference {pointer!r}: {message}"
        if location:
            text = f"{text} (at {location})"
        super().__init__(text)
        self.pointer = pointer
        self.location = location
        self.node = node


class CyclicDefinitionError(SchemagraphError):
    def __init__(self, location: str):
        super().__init__(f"Schema node owns itself at {location}")
        self.location = location


class UnsupportedTypeShapeError(SchemagraphError):
    def __init__(self, type_name: str, message: str, *, member: str | None = None):
        subject = f"{type_name}.{member}" if member else type_name
        super().__init__(f"Unsupported type shape for {subject}: {message}")
        self.type_name = type_name
        self.member = member


class ExtensionDataCollisionError(SchemagraphError, ValueError):
    def __init__(self, key: str):
        super().__init__(f"Extension data key collides with a schema keyword: {key}")
        self.key = key


class InvalidDocumentError(SchemagraphError):
    pass


class DocumentLoadError(SchemagraphError):
    def __init__(self, uri: str, message: str):
        super().__init__(f"Failed to load {uri}: {message}")
        self.uri = uri


class ConfigError(SchemagraphError):
    pass
