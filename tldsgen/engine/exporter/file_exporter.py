"""Render a TLD list into a generated source or text file."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from .base import BaseExporter

if TYPE_CHECKING:
    from ...orchestrator import TldList

FORMATS = ("py", "go", "txt")


def render_python(result: "TldList") -> str:
    lines = [
        "# Generated by tldsgen",
        '"""Sorted list of all public top-level domains.',
        "",
        "Sources:",
    ]
    lines.extend(f"  * {url}" for url in result.sources)
    lines.append('"""')
    lines.append("")
    lines.append("TLDS = [")
    lines.extend(f"    {tld!r}," for tld in result.tlds)
    lines.append("]")
    return "\n".join(lines) + "\n"


def render_go(result: "TldList") -> str:
    lines = [
        "// Generated by tldsgen",
        "",
        "package xurls",
        "",
        "// TLDs is a sorted list of all public top-level domains",
        "//",
        "// Sources:",
    ]
    lines.extend(f"//  * {url}" for url in result.sources)
    lines.append("var TLDs = []string{")
    lines.extend(f"\t`{tld}`," for tld in result.tlds)
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_text(result: "TldList") -> str:
    lines = [f"# {url}" for url in result.sources]
    lines.extend(result.tlds)
    return "\n".join(lines) + "\n"


_RENDERERS: dict[str, Callable[["TldList"], str]] = {
    "py": render_python,
    "go": render_go,
    "txt": render_text,
}


class FileExporter(BaseExporter):
    """Write the rendered list atomically to ``path``."""

    def __init__(self, path: Path, fmt: str = "py") -> None:
        if fmt not in _RENDERERS:
            raise ValueError(f"Unsupported output format: {fmt}")
        self.path = Path(path)
        self.format = fmt

    def render(self, result: "TldList") -> str:
        return _RENDERERS[self.format](result)

    def export(self, result: "TldList") -> None:
        content = self.render(result)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as stream:
                stream.write(content)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


__all__ = ["FORMATS", "FileExporter", "render_go", "render_python", "render_text"]
