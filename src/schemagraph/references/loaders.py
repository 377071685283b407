from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import unquote, urlparse

import httpx
from ruamel.yaml import YAML

from schemagraph.errors import DocumentLoadError

_yaml = YAML(typ="safe")


class DocumentLoader(Protocol):
    def load(self, uri: str) -> Any: ...


class FileDocumentLoader:
    def __init__(self, base_dir: Path | None = None):
        self.base_dir = base_dir

    def load(self, uri: str) -> Any:
        path = self._path(uri)
        if not path.exists():
            raise DocumentLoadError(uri, f"Missing file: {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentLoadError(uri, f"Cannot read {path}: {exc}") from exc
        if path.suffix.lower() in {".yaml", ".yml"}:
            try:
                return _yaml.load(text)
            except Exception as exc:  # noqa: BLE001
                raise DocumentLoadError(uri, "Invalid YAML.") from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise DocumentLoadError(uri, f"Invalid JSON: {exc.msg}") from exc

    def _path(self, uri: str) -> Path:
        parsed = urlparse(uri)
        if parsed.scheme == "file":
            return Path(unquote(parsed.path))
        path = Path(uri)
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        return path


class HttpDocumentLoader:
    def __init__(
        self,
        *,
        headers: dict[str, str] | None = None,
        timeout_s: float | None = 10.0,
        client: httpx.Client | None = None,
    ):
        self.headers = headers or {}
        self.timeout = timeout_s
        self.client = client

    def load(self, uri: str) -> Any:
        try:
            if self.client is not None:
                response = self.client.get(uri, headers=self.headers, timeout=self.timeout)
            else:
                response = httpx.get(uri, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            raise DocumentLoadError(uri, str(exc)) from exc
        except ValueError as exc:
            raise DocumentLoadError(uri, "Response is not valid JSON.") from exc


class CompositeDocumentLoader:
    """Dispatch on the URI scheme: ``http``/``https`` go over the network, the rest to disk."""

    def __init__(
        self,
        *,
        files: FileDocumentLoader | None = None,
        http: HttpDocumentLoader | None = None,
    ):
        self.files = files or FileDocumentLoader()
        self.http = http or HttpDocumentLoader()

    def load(self, uri: str) -> Any:
        if urlparse(uri).scheme in {"http", "https"}:
            return self.http.load(uri)
        return self.files.load(uri)
