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
XPath 1.0 axes. Each axis is an iterator of the nodes reachable from a
node, not filtered by node tests and not necessarily in document order.
"""
from typing import TYPE_CHECKING, Callable, Dict, Iterator, Optional, Set

from .xpath_nodes import ATTRIBUTE_NODE, ELEMENT_NODE, NAMESPACE_NODE, \
    XPathNode, ElementNode, is_attribute_like

if TYPE_CHECKING:
    from .xpath_context import XPathContext

__all__ = ['AXES', 'REVERSE_AXES', 'AxisType', 'axis', 'principal_node_type']

AxisType = Callable[[XPathNode, 'XPathContext'], Iterator[XPathNode]]

AXES: Dict[str, AxisType] = {}
REVERSE_AXES = frozenset((
    'ancestor', 'ancestor-or-self', 'parent', 'preceding', 'preceding-sibling'
))


def axis(name: str) -> Callable[[AxisType], AxisType]:
    def axis_decorator(func: AxisType) -> AxisType:
        AXES[name] = func
        return func
    return axis_decorator


def principal_node_type(name: str) -> int:
    """Returns the node type matched by name tests on an axis."""
    if name == 'attribute':
        return ATTRIBUTE_NODE
    elif name == 'namespace':
        return NAMESPACE_NODE
    return ELEMENT_NODE


###
# Forward axes
@axis('self')
def iter_self(node: XPathNode, context: 'XPathContext') -> Iterator[XPathNode]:
    yield node


@axis('child')
def iter_children(node: XPathNode, context: 'XPathContext') -> Iterator[XPathNode]:
    yield from node.children


@axis('descendant')
def iter_descendants(node: XPathNode, context: 'XPathContext') -> Iterator[XPathNode]:
    return node.iter_descendants(with_self=False)


@axis('descendant-or-self')
def iter_descendants_or_self(node: XPathNode,
                             context: 'XPathContext') -> Iterator[XPathNode]:
    return node.iter_descendants()


@axis('attribute')
def iter_attributes(node: XPathNode, context: 'XPathContext') -> Iterator[XPathNode]:
    for attribute in node.attributes:
        # namespace declarations added to a hand-made tree are not attributes
        if attribute.name != 'xmlns' and attribute.prefix != 'xmlns':
            yield attribute


@axis('namespace')
def iter_namespaces(node: XPathNode, context: 'XPathContext') -> Iterator[XPathNode]:
    yield from node.namespace_nodes


@axis('following-sibling')
def iter_following_siblings(node: XPathNode,
                            context: 'XPathContext') -> Iterator[XPathNode]:
    sibling = node.next_sibling
    while sibling is not None:
        yield sibling
        sibling = sibling.next_sibling


@axis('following')
def iter_following(node: XPathNode, context: 'XPathContext') -> Iterator[XPathNode]:
    item: Optional[XPathNode] = node
    if is_attribute_like(node):
        if node.parent is None:
            return
        item = node.parent
        yield from item.iter_descendants(with_self=False)

    while item is not None and item is not context.virtual_root:
        sibling = item.next_sibling
        while sibling is not None:
            yield from sibling.iter_descendants()
            sibling = sibling.next_sibling
        item = item.parent


###
# Reverse axes
@axis('parent')
def iter_parent(node: XPathNode, context: 'XPathContext') -> Iterator[XPathNode]:
    if node is not context.virtual_root and node.parent is not None:
        yield node.parent


@axis('ancestor')
def iter_ancestors(node: XPathNode, context: 'XPathContext') -> Iterator[XPathNode]:
    if node is context.virtual_root:
        return

    parent = node.parent
    while parent is not None:
        yield parent
        if parent is context.virtual_root:
            break
        parent = parent.parent


@axis('ancestor-or-self')
def iter_ancestors_or_self(node: XPathNode,
                           context: 'XPathContext') -> Iterator[XPathNode]:
    yield node
    yield from iter_ancestors(node, context)


@axis('preceding-sibling')
def iter_preceding_siblings(node: XPathNode,
                            context: 'XPathContext') -> Iterator[XPathNode]:
    sibling = node.previous_sibling
    while sibling is not None:
        yield sibling
        sibling = sibling.previous_sibling


@axis('preceding')
def iter_preceding(node: XPathNode, context: 'XPathContext') -> Iterator[XPathNode]:
    if is_attribute_like(node):
        if not isinstance(node.parent, ElementNode):
            return
        node = node.parent

    ancestors: Set[XPathNode] = set()
    parent = node.parent
    while parent is not None:
        ancestors.add(parent)
        parent = parent.parent

    for item in context.get_root(node).iter_descendants():
        if item is node:
            break
        elif item not in ancestors:
            yield item
