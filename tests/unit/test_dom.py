"""
Tree Helper Unit Tests

Tests element materialization, root replacement and node removal
"""

import pytest
from lxml import etree

from xmlproj.core.dom import (
    bound_element,
    ensure_element_exists,
    owner_document,
    remove_children_by_name,
    remove_node,
    set_document_element,
    set_text_content,
)
from xmlproj.core.errors import ConfigurationError


def make_document(xml: str) -> etree._ElementTree:
    return etree.fromstring(xml).getroottree()


def to_xml(node) -> str:
    return etree.tostring(node, encoding="unicode")


class TestEnsureElementExists:
    """Test element path materialization"""

    def test_creates_root_on_empty_document(self):
        """An empty document gets the first segment as root"""
        doc = etree.ElementTree()
        element = ensure_element_exists(doc, "/root/child")

        assert doc.getroot().tag == "root"
        assert element.tag == "child"
        assert element.getparent() is doc.getroot()

    def test_existing_path_is_not_duplicated(self):
        """Walking an existing path creates nothing"""
        doc = make_document("<root><child>v</child></root>")
        element = ensure_element_exists(doc, "/root/child")

        assert element.text == "v"
        assert to_xml(doc) == "<root><child>v</child></root>"

    def test_first_descendant_in_document_order_wins(self):
        """Any descendant matches, the first one in document order is taken"""
        doc = make_document("<root><x><child>1</child></x><child>2</child></root>")
        element = ensure_element_exists(doc, "/root/child")
        assert element.text == "1"

    def test_current_element_satisfies_its_own_name(self):
        """A segment equal to the current tag does not descend"""
        doc = make_document("<root><root/></root>")
        element = ensure_element_exists(doc, "/root/root")
        assert element is doc.getroot()

    def test_missing_segments_are_appended(self):
        """Missing elements are appended as last children"""
        doc = make_document("<root><a/></root>")
        element = ensure_element_exists(doc, "/root/b/c")

        assert to_xml(doc) == "<root><a/><b><c/></b></root>"
        assert element.tag == "c"

    def test_foreign_root_gets_path_below_it(self):
        """A root with another name is kept and the path is created below it"""
        doc = make_document("<other/>")
        ensure_element_exists(doc, "/root/child")
        assert to_xml(doc) == "<other><root><child/></root></other>"

    def test_empty_path_on_empty_document(self):
        """Nothing to walk on an empty document yields None"""
        assert ensure_element_exists(etree.ElementTree(), "") is None


class TestSetDocumentElement:
    """Test root element replacement"""

    def test_replaces_content_in_place(self):
        """The existing root object takes over the new content"""
        doc = make_document("<old><a/></old>")
        old_root = doc.getroot()
        new = etree.fromstring('<new x="1"><b>t</b></new>')

        set_document_element(doc, new)

        assert to_xml(doc) == '<new x="1"><b>t</b></new>'
        assert old_root.tag == "new"
        assert to_xml(new) == '<new x="1"><b>t</b></new>'

    def test_empty_document_gets_copy(self):
        """An empty document gets a copy as its root"""
        doc = etree.ElementTree()
        new = etree.fromstring("<new/>")
        root = set_document_element(doc, new)

        assert doc.getroot() is root
        assert root is not new

    def test_replace_with_own_descendant(self):
        """A descendant of the current root can become the root"""
        doc = make_document("<r><c><d/></c></r>")
        set_document_element(doc, doc.getroot()[0])
        assert to_xml(doc) == "<c><d/></c>"


class TestRemoveNode:
    """Test node removal"""

    def test_remove_element_keeps_tail_text(self):
        """Surrounding text stays in the tree"""
        root = etree.fromstring("<r><a/>x<b/>y</r>")
        remove_node(root[0])
        assert to_xml(root) == "<r>x<b/>y</r>"

    def test_remove_element_appends_tail_to_previous_sibling(self):
        """The tail moves to the previous sibling"""
        root = etree.fromstring("<r><a/>1<b/>2</r>")
        remove_node(root[1])
        assert to_xml(root) == "<r><a/>12</r>"

    def test_remove_attribute(self):
        """Attribute selections remove the attribute"""
        root = etree.fromstring('<r k="v" o="p"/>')
        (attribute,) = root.xpath("/r/@k")
        remove_node(attribute)
        assert to_xml(root) == '<r o="p"/>'

    def test_remove_text(self):
        """Text selections clear the text"""
        root = etree.fromstring("<r>text</r>")
        (text,) = root.xpath("/r/text()")
        remove_node(text)
        assert root.text is None

    def test_remove_document_element_raises(self):
        """The document element cannot be removed"""
        root = etree.fromstring("<r/>")
        with pytest.raises(ConfigurationError):
            remove_node(root)


class TestChildren:
    """Test child helpers"""

    def test_remove_children_by_name(self):
        """Only direct children with that name are removed"""
        root = etree.fromstring("<r><i/><j><i/></j><i/></r>")
        assert remove_children_by_name(root, "i") == 2
        assert to_xml(root) == "<r><j><i/></j></r>"

    def test_set_text_content_replaces_children(self):
        """Setting text content drops existing children"""
        root = etree.fromstring("<r>a<b/>c</r>")
        set_text_content(root, "v")
        assert to_xml(root) == "<r>v</r>"


class TestOwnerDocument:
    """Test document and element resolution"""

    def test_document_is_its_own_owner(self):
        """Documents are returned unchanged"""
        doc = make_document("<r/>")
        assert owner_document(doc) is doc
        assert bound_element(doc) is doc.getroot()

    def test_element_owner(self):
        """Elements resolve to their tree"""
        doc = make_document("<r><c/></r>")
        child = doc.getroot()[0]
        assert owner_document(child).getroot() is doc.getroot()
        assert bound_element(child) is child
