from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterator, List, Mapping, Sequence
import re

from loguru import logger
from lxml import etree

from errors import EmptyDocumentError, ParseError, TranslationFailure

if TYPE_CHECKING:
    from translator.languages import Lang


TRANSLATABLE_ATTRIBUTE = "translatable"
ITEM_CONTAINER_TAGS = {"string-array", "plurals"}
VALUES_FILE_PATTERN = re.compile(r".+\.xml$")
REFERENCE_PATTERN = re.compile(r"^[@?](?:[\w.]+:)?[\w-]+/[\w.]+$")
PROLOG_PATTERN = re.compile(r"<\?.*?\?>|<!--.*?-->|<!DOCTYPE[^>]*>", re.DOTALL)
ELEMENT_START = re.compile(r"<[A-Za-z_]")
FRAGMENT_TAG = "fragment-wrapper"


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        strip_cdata=False,
        remove_blank_text=False,
    )


def _has_root_element(text: str) -> bool:
    return ELEMENT_START.search(PROLOG_PATTERN.sub("", text)) is not None


def namespace_declarations(namespaces: Mapping[str | None, str]) -> List[str]:
    return [f'xmlns:{prefix}="{uri}"' if prefix else f'xmlns="{uri}"' for prefix, uri in namespaces.items()]


def _strip_declarations(markup: str, namespaces: Mapping[str | None, str]) -> str:
    # lxml repeats inherited declarations on serialized sub-elements.
    for declaration in namespace_declarations(namespaces):
        markup = markup.replace(" " + declaration, "")
    return markup


def _serialize(element: etree._Element, namespaces: Mapping[str | None, str]) -> str:
    markup = etree.tostring(element, encoding="unicode", with_tail=False)
    return _strip_declarations(markup, namespaces)


def _local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


def is_translatable(element: etree._Element) -> bool:
    return element.get(TRANSLATABLE_ATTRIBUTE, "true") != "false"


@dataclass(frozen=True, slots=True)
class ResourceEntry:
    key: str
    raw_content: str
    translatable: bool = True
    tag: str = "string"


class ValuesDocument:
    """A parsed Android values file (``strings.xml``, ``arrays.xml``...)."""

    def __init__(self, root: etree._Element, source_path: Path | None = None) -> None:
        self._root = root
        self.source_path = source_path

    @classmethod
    def from_string(cls, text: str | bytes, *, source_path: Path | None = None) -> "ValuesDocument":
        raw = text.encode("utf-8") if isinstance(text, str) else text
        if not _has_root_element(raw.decode("utf-8", errors="replace")):
            raise EmptyDocumentError(path=source_path)
        try:
            root = etree.fromstring(raw, parser=_make_parser())
        except etree.XMLSyntaxError as exc:
            where = f" {source_path}" if source_path else ""
            raise ParseError(f"Malformed values document{where}: {exc}", path=source_path) from exc
        return cls(root, source_path)

    @classmethod
    def from_file(cls, file_path: str | Path) -> "ValuesDocument":
        path = Path(file_path)
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise ParseError(f"Cannot read {path}: {exc}", path=path) from exc
        return cls.from_string(raw, source_path=path)

    @property
    def namespaces(self) -> Dict[str | None, str]:
        return dict(self._root.nsmap)

    def iter_entries(self, *, skip_non_translatable: bool = True) -> Iterator[ResourceEntry]:
        """Yield entries in document order.

        Every call walks the tree again, so the sequence can be restarted.
        Comments and processing instructions are not entries.
        """
        namespaces = self.namespaces
        seen: set[str] = set()
        for child in self._root:
            if not isinstance(child.tag, str):
                continue
            translatable = is_translatable(child)
            if skip_non_translatable and not translatable:
                continue
            tag = _local_name(child)
            key = child.get("name") or tag
            if key in seen:
                logger.warning(f"Duplicate resource key '{key}' in {self.source_path or 'document'}")
            seen.add(key)
            yield ResourceEntry(
                key=key,
                raw_content=_serialize(child, namespaces),
                translatable=translatable,
                tag=tag,
            )


def extract(document: ValuesDocument, *, skip_non_translatable: bool = True) -> List[ResourceEntry]:
    return list(document.iter_entries(skip_non_translatable=skip_non_translatable))


def load_existing(file_path: Path) -> ValuesDocument | None:
    """Load a destination document; missing or empty files have no entries."""
    if not file_path.exists():
        return None
    try:
        return ValuesDocument.from_file(file_path)
    except EmptyDocumentError:
        logger.info(f"{file_path} has no root element, treating it as empty")
        return None


# --- Segments ---


def _parse_fragment(markup: str, namespaces: Mapping[str | None, str]) -> etree._Element:
    declarations = "".join(" " + item for item in namespace_declarations(namespaces))
    source = f"<{FRAGMENT_TAG}{declarations}>{markup}</{FRAGMENT_TAG}>"
    return etree.fromstring(source.encode("utf-8"), parser=_make_parser())


def _entry_element(entry: ResourceEntry, namespaces: Mapping[str | None, str]) -> etree._Element:
    wrapper = _parse_fragment(entry.raw_content, namespaces)
    for child in wrapper:
        if isinstance(child.tag, str):
            return child
    raise ValueError(f"Entry '{entry.key}' has no element")


def _segment_elements(element: etree._Element) -> List[etree._Element]:
    tag = _local_name(element)
    if tag == "string":
        return [element]
    if tag in ITEM_CONTAINER_TAGS:
        return [item for item in element if isinstance(item.tag, str) and _local_name(item) == "item"]
    return []


def _inner_markup(element: etree._Element, namespaces: Mapping[str | None, str]) -> str:
    markup = _serialize(element, namespaces)
    if markup.endswith("/>") and len(element) == 0 and not element.text:
        return ""
    return markup[markup.index(">") + 1 : markup.rindex("</")]


def _set_inner_markup(element: etree._Element, markup: str) -> None:
    # element.nsmap also covers declarations made on the entry itself.
    try:
        wrapper = _parse_fragment(markup, element.nsmap)
    except etree.XMLSyntaxError as exc:
        raise TranslationFailure(f"Translated text is not well-formed markup: {exc}") from exc
    for child in list(element):
        element.remove(child)
    element.text = wrapper.text
    for child in list(wrapper):
        element.append(child)


def entry_segments(entry: ResourceEntry, namespaces: Mapping[str | None, str]) -> List[str]:
    """Inner markup of every translatable unit of an entry.

    ``<string>`` has one segment, ``<string-array>`` and ``<plurals>`` have one
    per ``<item>``, other resource types have none.
    """
    element = _entry_element(entry, namespaces)
    return [_inner_markup(target, namespaces) for target in _segment_elements(element)]


def apply_segments(
    entry: ResourceEntry,
    namespaces: Mapping[str | None, str],
    texts: Sequence[str],
) -> ResourceEntry:
    element = _entry_element(entry, namespaces)
    targets = _segment_elements(element)
    if len(targets) != len(texts):
        raise ValueError(f"Entry '{entry.key}' has {len(targets)} segments, got {len(texts)}")
    for target, text in zip(targets, texts):
        if text != _inner_markup(target, namespaces):
            _set_inner_markup(target, text)
    return replace(entry, raw_content=_serialize(element, namespaces))


def is_translatable_text(text: str) -> bool:
    stripped = text.strip()
    if not stripped:
        return False
    return REFERENCE_PATTERN.match(stripped) is None


# --- Locations ---


def values_directory_name(lang: Lang) -> str:
    if lang.region:
        return f"values-{lang.primary}-r{lang.region.upper()}"
    return f"values-{lang.code}"


def values_file_path(res_dir: Path, lang: Lang, file_name: str) -> Path:
    return Path(res_dir) / values_directory_name(lang) / file_name


def is_values_file(file_path: Path | None) -> bool:
    if file_path is None:
        return False
    path = Path(file_path)
    if not path.parent.name.startswith("values"):
        return False
    return VALUES_FILE_PATTERN.match(path.name) is not None
