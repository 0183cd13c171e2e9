"""Convert an XML document into a plain dict/list/str tree.

The shape follows the common "attributes under ``$``, text under ``_``"
convention:

* the root element is kept as the single top-level key;
* attributes go into ``node["$"]``;
* text goes into ``node["_"]`` and is dropped when it is only whitespace
  and the element has attributes or children;
* an element that carries nothing but text collapses to that string
  (whitespace preserved), an empty element collapses to ``""``;
* a child tag seen once stays a bare value, a repeated one becomes a list
  in document order.

Callers that need a uniform list for a possibly repeated tag should run
the value through ``listify``.
"""

from typing import Any, Dict, List, Union

from lxml import etree

from app.core.errors import UpstreamError

ATTR_KEY = "$"
TEXT_KEY = "_"

Node = Union[str, Dict[str, Any]]

_parser = etree.XMLParser(resolve_entities=False, no_network=True)


def _local_name(el) -> str:
    return etree.QName(el).localname


def _element_to_node(el) -> Node:
    node: Dict[str, Any] = {}
    if el.attrib:
        node[ATTR_KEY] = {etree.QName(k).localname: v for k, v in el.attrib.items()}

    text_parts: List[str] = [el.text or ""]
    for child in el:
        # comments / processing instructions have a non-string tag
        if isinstance(child.tag, str):
            key = _local_name(child)
            value = _element_to_node(child)
            if key not in node:
                node[key] = value
            elif isinstance(node[key], list):
                node[key].append(value)
            else:
                node[key] = [node[key], value]
        text_parts.append(child.tail or "")

    text = "".join(text_parts)
    if not text.strip():
        return node if node else text
    if not node:
        return text
    node[TEXT_KEY] = text
    return node


def parse_xml(payload: Union[bytes, str]) -> Dict[str, Any]:
    """Parse an XML body into a tree. Malformed input raises ``UpstreamError``."""
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    if not payload or not payload.strip():
        raise UpstreamError("Empty XML body")
    try:
        root = etree.fromstring(payload, parser=_parser)
    except etree.XMLSyntaxError as exc:
        raise UpstreamError(f"Malformed XML: {exc}") from exc
    return {_local_name(root): _element_to_node(root)}


def listify(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]
