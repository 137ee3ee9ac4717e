"""Description extraction from XML error bodies."""

from __future__ import annotations

import logging
from typing import Any

from lxml import etree

from upstream_errors.normalize.finder import find_property
from upstream_errors.normalize.keys import ERROR_MESSAGE_KEYS
from upstream_errors.normalize.keys import XML_TRAVERSAL_KEYS

logger = logging.getLogger(__name__)

ATTRIBUTES_KEY = "$"
TEXT_KEY = "_"


def extract_description_from_xml(xml_text: Any) -> str | None:
    """Return the first message-like value found in an XML error body, if any."""
    tree = parse_xml(xml_text)
    if not tree:
        return None

    top_level_key = next(iter(tree))
    return find_property(tree[top_level_key], ERROR_MESSAGE_KEYS, XML_TRAVERSAL_KEYS)


def parse_xml(xml_text: Any) -> dict[str, Any] | None:
    """Parse XML into a plain ``{root_tag: value}`` tree, or ``None`` on failure.

    Repeated sibling elements become lists while single children stay scalars
    or mappings. Attributes are collected under ``"$"``. Text of elements that
    also carry attributes or children is kept under ``"_"``. Text-only elements
    become strings and empty elements become ``""``.
    """
    if isinstance(xml_text, str):
        # Already decoded text; the declared encoding no longer applies.
        raw = xml_text.encode("utf-8")
        parser = etree.XMLParser(encoding="utf-8", resolve_entities=False, no_network=True)
    elif isinstance(xml_text, bytes):
        raw = xml_text
        parser = etree.XMLParser(resolve_entities=False, no_network=True)
    else:
        logger.debug("Skipping XML description lookup for %s body", type(xml_text).__name__)
        return None

    try:
        root = etree.fromstring(raw, parser=parser)
    except (etree.XMLSyntaxError, ValueError) as exc:
        logger.debug("Discarding unparseable XML error body: %s", exc)
        return None

    if root is None:
        return None
    return {_tag_name(root): _element_value(root)}


def _element_value(element: Any) -> Any:
    node: dict[str, Any] = {}
    if element.attrib:
        node[ATTRIBUTES_KEY] = {etree.QName(name).localname: value for name, value in element.attrib.items()}

    text_parts = [element.text or ""]
    for child in element:
        if isinstance(child.tag, str):
            _append_child(node, _tag_name(child), _element_value(child))
        text_parts.append(child.tail or "")

    text = "".join(text_parts)
    if text.strip():
        if not node:
            return text
        node[TEXT_KEY] = text

    return node or ""


def _append_child(node: dict[str, Any], name: str, value: Any) -> None:
    if name not in node:
        node[name] = value
        return

    existing = node[name]
    if isinstance(existing, list):
        existing.append(value)
    else:
        node[name] = [existing, value]


def _tag_name(element: Any) -> str:
    local_name = etree.QName(element).localname
    if element.prefix:
        return f"{element.prefix}:{local_name}"
    return local_name
