from __future__ import annotations

from urllib.parse import unquote


def split_reference(ref: str) -> tuple[str, str]:
    """Split ``document#fragment`` into the document part and the decoded fragment."""
    document, _, fragment = ref.partition("#")
    return document, unquote(fragment)


def is_local_reference(ref: str) -> bool:
    return ref.startswith("#")


def pointer_segments(fragment: str) -> list[str]:
    if fragment in {"", "/"}:
        return []
    if not fragment.startswith("/"):
        raise ValueError("Pointer must start with '/'.")
    return [part.replace("~1", "/").replace("~0", "~") for part in fragment[1:].split("/")]


def escape_segment(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


def join_pointer(segments: list[str]) -> str:
    if not segments:
        return "#"
    return "#/" + "/".join(escape_segment(segment) for segment in segments)
