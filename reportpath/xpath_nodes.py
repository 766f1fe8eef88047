#
# Copyright (c), 2018-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""
XPath 1.0 data model: a DOM-like tree of nodes with back references to parents.
"""
from typing import Any, Dict, Iterator, List, Optional, Union

from .namespaces import XML_NAMESPACE

XML_ID_NAME = 'xml:id'

__all__ = ['ELEMENT_NODE', 'ATTRIBUTE_NODE', 'TEXT_NODE', 'PROCESSING_INSTRUCTION_NODE',
           'COMMENT_NODE', 'DOCUMENT_NODE', 'NAMESPACE_NODE', 'XPathNodeTree',
           'XPathNode', 'NamespaceNode', 'AttributeNode', 'TextNode', 'CommentNode',
           'ProcessingInstructionNode', 'ElementNode', 'DocumentNode',
           'ParentNodeType', 'ChildNodeType', 'is_attribute_like']

# DOM node type codes, plus the XPath namespace node code
ELEMENT_NODE = 1
ATTRIBUTE_NODE = 2
TEXT_NODE = 3
CDATA_SECTION_NODE = 4
PROCESSING_INSTRUCTION_NODE = 7
COMMENT_NODE = 8
DOCUMENT_NODE = 9
NAMESPACE_NODE = 13

ParentNodeType = Union['DocumentNode', 'ElementNode']
ChildNodeType = Union['ElementNode', 'TextNode', 'CommentNode', 'ProcessingInstructionNode']


class XPathNodeTree:
    """
    Status of the node tree structure, shared between nodes.
    """
    __slots__ = ('root', 'uri', 'total')

    def __init__(self, root: Optional['XPathNode'] = None, uri: Optional[str] = None) -> None:
        self.root = root
        self.uri = uri
        self.total = 0

    def next_position(self) -> int:
        self.total += 1
        return self.total


###
# XPath 1.0 has seven kinds of nodes:
#
#  root (document), element, attribute, text, namespace, processing-instruction, comment
###
class XPathNode:
    """
    The base class of all XPath nodes.

    :ivar parent: the parent node, for attribute and namespace nodes is the owner element.
    :ivar position: the document order position assigned by a tree builder, \
    `None` if the node has been created outside a node tree.
    :ivar tree: the shared node tree status, `None` for detached nodes.
    """
    node_type: int = 0
    node_kind: str = ''

    __slots__ = ('parent', 'position', 'tree', 'index')

    parent: Optional[ParentNodeType]
    position: Optional[int]
    tree: Optional[XPathNodeTree]
    index: int

    def __init__(self, parent: Optional[ParentNodeType] = None) -> None:
        self.parent = parent
        self.position = None
        self.tree = None
        self.index = 0

    @property
    def name(self) -> str:
        """The prefixed name of the node, an empty string for unnamed nodes."""
        return ''

    @property
    def local_name(self) -> str:
        return ''

    @property
    def prefix(self) -> Optional[str]:
        return None

    @property
    def namespace_uri(self) -> str:
        return ''

    @property
    def string_value(self) -> str:
        raise NotImplementedError()

    @property
    def children(self) -> List[ChildNodeType]:
        return []

    @property
    def attributes(self) -> List['AttributeNode']:
        return []

    @property
    def namespace_nodes(self) -> List['NamespaceNode']:
        return []

    @property
    def owner_element(self) -> Optional['ElementNode']:
        return None

    @property
    def root_node(self) -> 'XPathNode':
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def owner_document(self) -> Optional['DocumentNode']:
        root = self.root_node
        return root if isinstance(root, DocumentNode) and root is not self else None

    @property
    def first_child(self) -> Optional[ChildNodeType]:
        children = self.children
        return children[0] if children else None

    @property
    def last_child(self) -> Optional[ChildNodeType]:
        children = self.children
        return children[-1] if children else None

    @property
    def next_sibling(self) -> Optional[ChildNodeType]:
        if self.parent is None or is_attribute_like(self):
            return None
        siblings = self.parent.children
        return siblings[self.index + 1] if self.index + 1 < len(siblings) else None

    @property
    def previous_sibling(self) -> Optional[ChildNodeType]:
        if self.parent is None or is_attribute_like(self) or not self.index:
            return None
        return self.parent.children[self.index - 1]

    def is_same_tree(self, other: 'XPathNode') -> bool:
        return self.tree is not None and self.tree is other.tree

    def iter_descendants(self, with_self: bool = True) -> Iterator['XPathNode']:
        """
        Iterates the subtree in document order (pre-order, attributes excluded),
        using an explicit stack.
        """
        if with_self:
            yield self

        stack = [iter(self.children)]
        while stack:
            for child in stack[-1]:
                yield child
                if child.children:
                    stack.append(iter(child.children))
                    break
            else:
                stack.pop()


class NamespaceNode(XPathNode):
    """
    A namespace node. The name of the node is the prefix, an empty string for
    the default namespace, and the string value is the namespace URI.
    """
    node_type = NAMESPACE_NODE
    node_kind = 'namespace'

    __slots__ = ('_prefix', 'uri')

    def __init__(self, prefix: str, uri: str, parent: Optional['ElementNode'] = None) -> None:
        super().__init__(parent)
        self._prefix = prefix
        self.uri = uri

    def __repr__(self) -> str:
        return '%s(prefix=%r, uri=%r)' % (self.__class__.__name__, self._prefix, self.uri)

    @property
    def name(self) -> str:
        return self._prefix

    @property
    def local_name(self) -> str:
        return self._prefix

    @property
    def owner_element(self) -> Optional['ElementNode']:
        return self.parent  # type: ignore[return-value]

    @property
    def string_value(self) -> str:
        return self.uri


class AttributeNode(XPathNode):
    """
    An attribute node.

    :param local_name: the local part of the attribute name.
    :param value: the attribute value.
    :param parent: the owner element.
    :param prefix: the prefix of the attribute name, if any.
    :param namespace_uri: the namespace of the attribute name, if any.
    """
    node_type = ATTRIBUTE_NODE
    node_kind = 'attribute'

    __slots__ = ('_local_name', '_prefix', '_namespace_uri', 'value')

    def __init__(self, local_name: str, value: str,
                 parent: Optional['ElementNode'] = None,
                 prefix: Optional[str] = None,
                 namespace_uri: str = '') -> None:
        super().__init__(parent)
        self._local_name = local_name
        self._prefix = prefix
        self._namespace_uri = namespace_uri
        self.value = value

    def __repr__(self) -> str:
        return '%s(name=%r, value=%r)' % (self.__class__.__name__, self.name, self.value)

    @property
    def name(self) -> str:
        return '%s:%s' % (self._prefix, self._local_name) if self._prefix else self._local_name

    @property
    def local_name(self) -> str:
        return self._local_name

    @property
    def prefix(self) -> Optional[str]:
        return self._prefix

    @property
    def namespace_uri(self) -> str:
        return self._namespace_uri

    @property
    def owner_element(self) -> Optional['ElementNode']:
        return self.parent  # type: ignore[return-value]

    @property
    def string_value(self) -> str:
        return self.value


class TextNode(XPathNode):
    """A text node. CDATA sections are represented by text nodes too."""
    node_type = TEXT_NODE
    node_kind = 'text'

    __slots__ = ('value',)

    def __init__(self, value: str, parent: Optional[ParentNodeType] = None) -> None:
        super().__init__(parent)
        self.value = value

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self.value)

    @property
    def string_value(self) -> str:
        return self.value


class CommentNode(XPathNode):
    node_type = COMMENT_NODE
    node_kind = 'comment'

    __slots__ = ('value',)

    def __init__(self, value: str, parent: Optional[ParentNodeType] = None) -> None:
        super().__init__(parent)
        self.value = value

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self.value)

    @property
    def string_value(self) -> str:
        return self.value


class ProcessingInstructionNode(XPathNode):
    node_type = PROCESSING_INSTRUCTION_NODE
    node_kind = 'processing-instruction'

    __slots__ = ('target', 'value')

    def __init__(self, target: str, value: str = '',
                 parent: Optional[ParentNodeType] = None) -> None:
        super().__init__(parent)
        self.target = target
        self.value = value

    def __repr__(self) -> str:
        return '%s(%r, %r)' % (self.__class__.__name__, self.target, self.value)

    @property
    def name(self) -> str:
        return self.target

    @property
    def local_name(self) -> str:
        return self.target

    @property
    def string_value(self) -> str:
        return self.value


class ParentNodeMixin:
    """Children management shared by element and document nodes."""
    __slots__ = ()

    _children: List[ChildNodeType]

    @property
    def children(self) -> List[ChildNodeType]:
        return self._children

    def append(self, child: ChildNodeType) -> ChildNodeType:
        child.parent = self  # type: ignore[assignment]
        child.index = len(self._children)
        self._children.append(child)
        return child

    def iter_text(self) -> Iterator[str]:
        for node in self.iter_descendants(with_self=False):  # type: ignore[attr-defined]
            if isinstance(node, TextNode):
                yield node.value

    @property
    def string_value(self) -> str:
        return ''.join(self.iter_text())


class ElementNode(ParentNodeMixin, XPathNode):
    """
    An element node.

    :param local_name: the local part of the element name.
    :param parent: the parent node.
    :param prefix: the prefix used for the element name, if any.
    :param namespace_uri: the namespace of the element name, if any.
    :param declarations: namespace declarations made on the element, \
    a map from prefixes to URIs, where the empty prefix is the default namespace.
    :param obj: an optional wrapped object, eg. an ElementTree or lxml element.
    """
    node_type = ELEMENT_NODE
    node_kind = 'element'

    __slots__ = ('_local_name', '_prefix', '_namespace_uri', '_children', '_attributes',
                 'declarations', 'obj', '_nsmap', '_namespace_nodes')

    def __init__(self, local_name: str,
                 parent: Optional[ParentNodeType] = None,
                 prefix: Optional[str] = None,
                 namespace_uri: str = '',
                 declarations: Optional[Dict[str, str]] = None,
                 obj: Any = None) -> None:
        super().__init__(parent)
        self._local_name = local_name
        self._prefix = prefix
        self._namespace_uri = namespace_uri
        self._children = []
        self._attributes: List[AttributeNode] = []
        self.declarations = dict(declarations) if declarations else {}
        self.obj = obj
        self._nsmap: Optional[Dict[str, str]] = None
        self._namespace_nodes: Optional[List[NamespaceNode]] = None

    def __repr__(self) -> str:
        return '%s(name=%r)' % (self.__class__.__name__, self.name)

    @property
    def name(self) -> str:
        return '%s:%s' % (self._prefix, self._local_name) if self._prefix else self._local_name

    @property
    def local_name(self) -> str:
        return self._local_name

    @property
    def prefix(self) -> Optional[str]:
        return self._prefix

    @property
    def namespace_uri(self) -> str:
        return self._namespace_uri

    @property
    def attributes(self) -> List[AttributeNode]:
        return self._attributes

    def set_attribute(self, local_name: str, value: str,
                      prefix: Optional[str] = None,
                      namespace_uri: str = '') -> AttributeNode:
        attribute = AttributeNode(local_name, value, self, prefix, namespace_uri)
        attribute.index = len(self._attributes)
        self._attributes.append(attribute)
        return attribute

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Returns the value of an attribute by its prefixed name."""
        for attribute in self._attributes:
            if attribute.name == name:
                return attribute.value
        return default

    def get_attribute_ns(self, namespace_uri: str, local_name: str,
                         default: Optional[str] = None) -> Optional[str]:
        for attribute in self._attributes:
            if attribute.local_name == local_name and \
                    attribute.namespace_uri == namespace_uri:
                return attribute.value
        return default

    @property
    def nsmap(self) -> Dict[str, str]:
        """The in-scope namespaces of the element, including inherited ones."""
        if self._nsmap is None:
            if isinstance(self.parent, ElementNode):
                nsmap = dict(self.parent.nsmap)
            else:
                nsmap = {}
            for prefix, uri in self.declarations.items():
                if uri:
                    nsmap[prefix] = uri
                else:
                    nsmap.pop(prefix, None)  # xmlns="" undeclares the default namespace
            self._nsmap = nsmap
        return self._nsmap

    def lookup_namespace(self, prefix: str) -> Optional[str]:
        if prefix == 'xml':
            return XML_NAMESPACE
        return self.nsmap.get(prefix)

    @property
    def namespace_nodes(self) -> List[NamespaceNode]:
        """The namespace nodes of the element, the implicit 'xml' namespace first."""
        if self._namespace_nodes is None:
            nodes = [NamespaceNode('xml', XML_NAMESPACE, self)]
            for prefix, uri in self.nsmap.items():
                if prefix != 'xml':
                    nodes.append(NamespaceNode(prefix, uri, self))
            for k, node in enumerate(nodes):
                node.index = k
                node.tree = self.tree
            self._namespace_nodes = nodes
        return self._namespace_nodes

    @property
    def xml_id(self) -> Optional[str]:
        return self.get_attribute(XML_ID_NAME)


class DocumentNode(ParentNodeMixin, XPathNode):
    """
    The document (root) node.

    :param uri: an optional URI associated with the document.
    :param obj: an optional wrapped object, eg. an ElementTree instance.
    """
    node_type = DOCUMENT_NODE
    node_kind = 'document'

    __slots__ = ('_children', 'uri', 'obj')

    def __init__(self, uri: Optional[str] = None, obj: Any = None) -> None:
        super().__init__(None)
        self._children = []
        self.uri = uri
        self.obj = obj

    def __repr__(self) -> str:
        return '%s(uri=%r)' % (self.__class__.__name__, self.uri)

    @property
    def document_element(self) -> Optional[ElementNode]:
        for child in self._children:
            if isinstance(child, ElementNode):
                return child
        return None

    def get_element_by_id(self, value: str) -> Optional[ElementNode]:
        for node in self.iter_descendants(with_self=False):
            if isinstance(node, ElementNode) and \
                    (node.get_attribute('id') == value or node.xml_id == value):
                return node
        return None


def is_attribute_like(node: XPathNode) -> bool:
    return node.node_type == ATTRIBUTE_NODE or node.node_type == NAMESPACE_NODE
