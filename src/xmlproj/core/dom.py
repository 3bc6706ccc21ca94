"""
Tree helpers

Structural operations on lxml trees used by writes and deletes. Documents are
etree._ElementTree instances, everything else is an etree._Element or an XPath smart
string pointing back at its parent.
"""

import copy
import logging
from typing import Any, Optional

from lxml import etree

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def owner_document(node: Any) -> etree._ElementTree:
    """The document a node belongs to; a document is its own owner"""
    if isinstance(node, etree._ElementTree):
        return node
    return node.getroottree()


def bound_element(node: Any) -> Optional[etree._Element]:
    """The element a node stands for: a document's root element or the node itself"""
    if isinstance(node, etree._ElementTree):
        return node.getroot()
    return node


def new_document() -> etree._ElementTree:
    return etree.ElementTree()


def ensure_element_exists(document: etree._ElementTree, path: str) -> Optional[etree._Element]:
    """
    Walk an absolute element path from the document element, creating what is missing

    For every segment the current element is kept when its own tag matches; otherwise
    the first descendant with that tag (document order) is entered, and only when
    there is none a new child is appended.

    Args:
        document: Document to extend
        path: Slash separated element names, e.g. "/root/items/item"

    Returns:
        The element at the end of the path, or None for an empty path on a document
        without root element
    """
    element = document.getroot()
    for segment in path.split("/"):
        if not segment:
            continue
        if element is None:
            element = etree.Element(segment)
            document._setroot(element)
            logger.debug("Created document element <%s>", segment)
            continue
        if element.tag == segment:
            continue
        match = next(element.iterdescendants(segment), None)
        if match is None:
            element = etree.SubElement(element, segment)
            logger.debug("Created element <%s> under <%s>", segment, element.getparent().tag)
        else:
            element = match
    return element


def set_document_element(document: etree._ElementTree, element: etree._Element) -> etree._Element:
    """
    Make a copy of element the document element

    An existing root element is rewritten in place so references to it, and to the
    document, keep seeing the new content.
    """
    replacement = copy.deepcopy(element)
    root = document.getroot()
    if root is None:
        document._setroot(replacement)
        return replacement

    root.clear()
    root.tag = replacement.tag
    for name, value in replacement.attrib.items():
        root.set(name, value)
    root.text = replacement.text
    root.extend(list(replacement))
    return root


def set_text_content(element: etree._Element, text: str) -> None:
    """Replace all children of element by a single text"""
    for child in list(element):
        element.remove(child)
    element.text = text


def remove_children_by_name(element: etree._Element, name: str) -> int:
    """Remove the direct children of element whose tag is name"""
    removed = 0
    for child in list(element):
        if child.tag == name:
            _detach(child, element)
            removed += 1
    return removed


def remove_node(node: Any) -> None:
    """
    Remove a selected node from its parent

    Elements are unlinked keeping their tail text in the tree, attribute selections
    delete the attribute and text selections clear the text.

    Raises:
        ConfigurationError: node is the document element or has no parent
    """
    if isinstance(node, etree._Element):
        parent = node.getparent()
        if parent is None:
            raise ConfigurationError(
                f"Cannot remove top level node <{node.tag}> from its document",
                {"node": str(node.tag)},
            )
        _detach(node, parent)
        return

    parent = node.getparent() if hasattr(node, "getparent") else None
    if parent is None:
        raise ConfigurationError(f"Cannot remove selection {node!r}, it has no parent")
    if node.is_attribute:
        del parent.attrib[node.attrname]
    elif node.is_tail:
        parent.tail = None
    else:
        parent.text = None


def _detach(child: etree._Element, parent: etree._Element) -> None:
    if child.tail:
        previous = child.getprevious()
        if previous is not None:
            previous.tail = (previous.tail or "") + child.tail
        else:
            parent.text = (parent.text or "") + child.tail
        child.tail = None
    parent.remove(child)
