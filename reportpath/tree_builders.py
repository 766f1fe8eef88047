#
# Copyright (c), 2018-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
import os
from typing import cast, Any, Dict, IO, Iterator, List, Optional, Tuple, Union
from xml.etree import ElementTree

from .exceptions import XPathTypeError
from .namespaces import XML_NAMESPACE, NamespacesType, split_expanded_name
from .etree import NamespaceTreeBuilder, defuse_xml, is_etree_document, \
    is_etree_element, is_lxml_etree_document, is_lxml_etree_element
from .xpath_nodes import XPathNodeTree, XPathNode, DocumentNode, ElementNode, \
    TextNode, CommentNode, ProcessingInstructionNode, ParentNodeType

__all__ = ['get_node_tree', 'build_node_tree', 'build_lxml_node_tree', 'parse_xml']

RootNodeType = Union[DocumentNode, ElementNode]
DeclarationsType = Dict[Any, Dict[str, str]]
XMLSourceType = Union[str, bytes, 'os.PathLike[str]', IO[Any]]


def get_node_tree(root: Any, namespaces: Optional[NamespacesType] = None,
                  uri: Optional[str] = None) -> RootNodeType:
    """
    Returns a tree of XPath nodes for the provided root, that can be an
    already built node, an ElementTree/lxml element or an ElementTree/lxml
    document.

    :param root: the root of the XML data.
    :param namespaces: an optional mapping from prefixes to namespace URIs, \
    ignored if root is a lxml tree.
    :param uri: an optional URI associated with the document.
    """
    if isinstance(root, (DocumentNode, ElementNode)):
        return root
    elif isinstance(root, XPathNode):
        msg = "invalid root {!r}, a document or an element node required"
        raise XPathTypeError(msg.format(root))
    elif is_lxml_etree_document(root) or is_lxml_etree_element(root):
        return build_lxml_node_tree(root, uri)
    elif is_etree_document(root) or is_etree_element(root) and not callable(root.tag):
        return build_node_tree(root, namespaces, uri)

    msg = "invalid root {!r}, an Element or an ElementTree or a node required"
    raise XPathTypeError(msg.format(root))


def _get_prefix(uri: str, nsmap: Dict[str, str], is_attribute: bool = False) -> Optional[str]:
    if uri == XML_NAMESPACE:
        return 'xml'
    for prefix, ns_uri in nsmap.items():
        if ns_uri == uri and (prefix or not is_attribute):
            return prefix or None
    return None


def _split_pi_text(text: Optional[str]) -> Tuple[str, str]:
    target, _, data = (text or '').partition(' ')
    return target, data.lstrip()


def build_node_tree(root: Any,
                    namespaces: Optional[NamespacesType] = None,
                    uri: Optional[str] = None,
                    declarations: Optional[DeclarationsType] = None) -> RootNodeType:
    """
    Returns a tree of XPath nodes that wrap the provided ElementTree root.
    The tree is built in document order without recursion.

    :param root: an Element or an ElementTree.
    :param namespaces: an optional mapping from prefixes to namespace URIs, \
    declared on the root element when the declarations are not available.
    :param uri: an optional URI associated with the document.
    :param declarations: an optional mapping from elements to their namespace \
    declarations, as collected by a `NamespaceTreeBuilder`.
    """
    tree = XPathNodeTree(uri=uri)
    parent: Optional[DocumentNode]
    if is_etree_document(root):
        parent = DocumentNode(uri, root)
        parent.tree = tree
        parent.position = tree.next_position()
        elem = root.getroot()
    else:
        parent = None
        elem = root

    if declarations is None:
        declarations = {}
    if namespaces and elem not in declarations:
        declarations = dict(declarations)
        declarations[elem] = {k: v for k, v in namespaces.items() if k != 'xml'}

    def build_element(e: Any, parent_node: Optional[ParentNodeType]) -> ElementNode:
        namespace_uri, local_name = split_expanded_name(e.tag)
        node = ElementNode(local_name, parent_node, declarations=declarations.get(e), obj=e)
        if parent_node is not None:
            parent_node.append(node)
        node.tree = tree
        node.position = tree.next_position()

        nsmap = node.nsmap
        if namespace_uri:
            node._namespace_uri = namespace_uri
            node._prefix = _get_prefix(namespace_uri, nsmap)

        for name, value in e.attrib.items():
            attr_uri, attr_name = split_expanded_name(name)
            attribute = node.set_attribute(
                attr_name, value, _get_prefix(attr_uri, nsmap, True), attr_uri
            )
            attribute.tree = tree
            attribute.position = tree.next_position()

        if e.text:
            add_child(TextNode(e.text), node)
        return node

    def add_child(child: Any, parent_node: ParentNodeType) -> None:
        parent_node.append(child)
        child.tree = tree
        child.position = tree.next_position()

    root_node = build_element(elem, parent)
    stack: List[Tuple[Iterator[Any], ElementNode]] = [(iter(elem), root_node)]
    while stack:
        children, parent_node = stack[-1]
        for child in children:
            if child.tag is ElementTree.Comment:
                add_child(CommentNode(child.text or ''), parent_node)
            elif child.tag is ElementTree.PI:
                add_child(ProcessingInstructionNode(*_split_pi_text(child.text)), parent_node)
            else:
                stack.append((iter(child), build_element(child, parent_node)))
                break

            if child.tail:
                add_child(TextNode(child.tail), parent_node)
        else:
            stack.pop()
            node = parent_node
            if stack and node.obj.tail:
                add_child(TextNode(node.obj.tail), stack[-1][1])

    if parent is not None:
        tree.root = parent
        return parent
    tree.root = root_node
    return root_node


def build_lxml_node_tree(root: Any, uri: Optional[str] = None) -> RootNodeType:
    """
    Returns a tree of XPath nodes that wrap the provided lxml root. Top level
    comments and processing instructions are included when a document is provided.

    :param root: a lxml element or a lxml document.
    :param uri: an optional URI associated with the document.
    """
    tree = XPathNodeTree(uri=uri or getattr(getattr(root, 'docinfo', None), 'URL', None))
    document: Optional[DocumentNode] = None
    if is_etree_document(root):
        document = DocumentNode(tree.uri, root)
        document.tree = tree
        document.position = tree.next_position()
        elem = root.getroot()
    else:
        elem = root

    def add_child(child: Any, parent_node: ParentNodeType) -> None:
        parent_node.append(child)
        child.tree = tree
        child.position = tree.next_position()

    def build_other(e: Any, parent_node: ParentNodeType) -> bool:
        if not callable(e.tag):
            return False
        elif hasattr(e, 'target'):
            add_child(ProcessingInstructionNode(e.target, e.text or ''), parent_node)
        elif e.tag.__name__ == 'Comment':
            add_child(CommentNode(e.text or ''), parent_node)
        # entities are skipped
        return True

    def build_element(e: Any, parent_node: Optional[ParentNodeType]) -> ElementNode:
        namespace_uri, local_name = split_expanded_name(e.tag)
        parent_nsmap = e.getparent().nsmap if e.getparent() is not None else {}
        declarations = {
            k or '': v for k, v in e.nsmap.items() if parent_nsmap.get(k) != v
        }
        node = ElementNode(local_name, parent_node, e.prefix, namespace_uri,
                           declarations, obj=e)
        if parent_node is not None:
            parent_node.append(node)
        node.tree = tree
        node.position = tree.next_position()

        nsmap = node.nsmap
        for name, value in e.attrib.items():
            attr_uri, attr_name = split_expanded_name(name)
            attribute = node.set_attribute(
                attr_name, value, _get_prefix(attr_uri, nsmap, True), attr_uri
            )
            attribute.tree = tree
            attribute.position = tree.next_position()

        if e.text:
            add_child(TextNode(e.text), node)
        return node

    if document is not None:
        for sibling in reversed(list(elem.itersiblings(preceding=True))):
            build_other(sibling, document)

    root_node = build_element(elem, document)
    stack: List[Tuple[Iterator[Any], ElementNode]] = [(iter(elem), root_node)]
    while stack:
        children, parent_node = stack[-1]
        for child in children:
            if not build_other(child, parent_node):
                stack.append((iter(child), build_element(child, parent_node)))
                break
            if child.tail:
                add_child(TextNode(child.tail), parent_node)
        else:
            stack.pop()
            node = parent_node
            if stack and node.obj.tail:
                add_child(TextNode(node.obj.tail), stack[-1][1])

    if document is not None:
        for sibling in elem.itersiblings():
            build_other(sibling, document)
        tree.root = document
        return document

    tree.root = root_node
    return root_node


def parse_xml(source: XMLSourceType, uri: Optional[str] = None) -> DocumentNode:
    """
    Parses an XML source into a document node. Comments, processing instructions
    and namespace prefixes are preserved. Entity declarations are forbidden.

    :param source: a string containing XML data, a bytes string, a file path \
    or a file-like object.
    :param uri: an optional URI associated with the document, defaults to \
    the file path when the source is a path.
    """
    data: Union[str, bytes]
    if isinstance(source, (str, bytes)) and source.lstrip()[:1] in ('<', b'<'):
        data = source
    elif isinstance(source, (str, bytes, os.PathLike)):
        path = os.fspath(source)
        with open(path, 'rb') as fp:
            data = fp.read()
        if uri is None:
            uri = path if isinstance(path, str) else path.decode()
    elif hasattr(source, 'read'):
        data = cast(IO[Any], source).read()
        if uri is None and isinstance(getattr(source, 'name', None), str):
            uri = source.name  # type: ignore[union-attr]
    else:
        raise XPathTypeError("invalid XML source {!r}".format(source))

    defuse_xml(data)
    target = NamespaceTreeBuilder()
    parser = ElementTree.XMLParser(target=target)
    parser.feed(data)
    root = parser.close()

    document = build_node_tree(ElementTree.ElementTree(root), uri=uri,
                               declarations=target.declarations)
    return cast(DocumentNode, document)
