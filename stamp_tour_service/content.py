"""File-backed static content and template rendering."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, Union

from .tour.errors import NotFound

BINARY_EXTENSIONS = frozenset({"ico", "png", "webp", "ttf", "woff2", "woff"})


class ContentStore:
    """Serve files from ``<root>/<category>/<name>``.

    Text files come back as ``str``. Files with a binary extension, or text
    that is not valid UTF-8, come back as raw ``bytes``. Paths inside an
    ``excluded`` directory are reported as missing even when they sit under
    ``root``.
    """

    def __init__(self, root: Path, excluded: Iterable[Path] = ()) -> None:
        self.root = root.resolve()
        self.excluded = tuple(path.resolve() for path in excluded)

    def _resolve(self, category: str, name: str) -> Path:
        path = (self.root / category / name).resolve()
        if self.root not in path.parents:
            raise NotFound(f"{category}/{name}")
        if any(path == hidden or hidden in path.parents for hidden in self.excluded):
            raise NotFound(f"{category}/{name}")
        return path

    def read(self, category: str, name: str) -> Union[str, bytes]:
        path = self._resolve(category, name)
        try:
            data = path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise NotFound(f"{category}/{name}") from exc
        if path.suffix.lstrip(".").lower() in BINARY_EXTENSIONS:
            return data
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return data

    def read_text(self, category: str, name: str) -> str:
        content = self.read(category, name)
        if isinstance(content, bytes):
            raise NotFound(f"{category}/{name}")
        return content

    def render(self, name: str, replacements: Mapping[str, str]) -> str:
        """Fill ``%KEY%`` placeholders of an html template."""

        page = self.read_text("html", name)
        for key, value in replacements.items():
            page = page.replace(f"%{key}%", value)
        return page


__all__ = ["ContentStore", "BINARY_EXTENSIONS"]
