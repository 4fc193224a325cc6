from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping

from resources.values import ResourceEntry, namespace_declarations
from utils.fileio import atomic_write_text


XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'
ROOT_TAG = "resources"
INDENT = "    "


def render_values_document(
    entries: Iterable[ResourceEntry],
    namespaces: Mapping[str | None, str] | None = None,
    *,
    indent: str = INDENT,
) -> str:
    declarations = "".join(" " + item for item in namespace_declarations(namespaces or {}))
    lines = [XML_DECLARATION, f"<{ROOT_TAG}{declarations}>"]
    for entry in entries:
        lines.append(f"{indent}{entry.raw_content}")
    lines.append(f"</{ROOT_TAG}>")
    return "\n".join(lines) + "\n"


def write_values_file(
    file_path: Path,
    entries: Iterable[ResourceEntry],
    namespaces: Mapping[str | None, str] | None = None,
) -> Path:
    content = render_values_document(entries, namespaces)
    return atomic_write_text(file_path, content)
