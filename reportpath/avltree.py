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
Document order of XPath nodes and a self-balancing binary tree for keeping
collections of nodes sorted in document order.
"""
from typing import Iterator, List, Optional

from .xpath_nodes import NAMESPACE_NODE, XPathNode, is_attribute_like

__all__ = ['node_order', 'AVLTree']


def node_order(n1: XPathNode, n2: XPathNode) -> int:
    """
    Compares two nodes in document order. Returns -1 if the first node
    precedes the second, 1 if it follows it or if the two nodes belong
    to different trees, 0 if they are the same node.
    """
    if n1 is n2:
        return 0
    elif n1.position is not None and n2.position is not None and n1.is_same_tree(n2):
        return -1 if n1.position < n2.position else 1

    d1 = d2 = 0
    node: Optional[XPathNode] = n1
    while node is not None:
        d1 += 1
        node = node.parent

    node = n2
    while node is not None:
        d2 += 1
        node = node.parent

    # step up until both nodes are at the same depth
    if d1 > d2:
        while d1 > d2:
            n1 = n1.parent  # type: ignore[assignment]
            d1 -= 1
        if n1 is n2:
            return 1
    elif d2 > d1:
        while d2 > d1:
            n2 = n2.parent  # type: ignore[assignment]
            d2 -= 1
        if n1 is n2:
            return -1

    parent1, parent2 = n1.parent, n2.parent
    while parent1 is not parent2:
        n1, n2 = parent1, parent2  # type: ignore[assignment]
        parent1, parent2 = n1.parent, n2.parent

    if parent1 is None:
        return 1  # different documents

    is_attribute1 = is_attribute_like(n1)
    is_attribute2 = is_attribute_like(n2)
    if is_attribute1 and not is_attribute2:
        return -1
    elif not is_attribute1 and is_attribute2:
        return 1
    elif is_attribute1:
        # namespace nodes precede attribute nodes
        if n1.node_type == NAMESPACE_NODE and n2.node_type != NAMESPACE_NODE:
            return -1
        elif n1.node_type != NAMESPACE_NODE and n2.node_type == NAMESPACE_NODE:
            return 1
    return -1 if n1.index < n2.index else 1


class AVLTree:
    """
    A binary tree of XPath nodes ordered by document order and kept balanced
    with the AVL rotations. Rotations replace the contents of the subtrees
    so the root of the tree is always the same object.

    :param node: the node stored at the root of the tree.
    """
    __slots__ = ('node', 'left', 'right', 'depth')

    def __init__(self, node: XPathNode) -> None:
        self.node = node
        self.left: Optional['AVLTree'] = None
        self.right: Optional['AVLTree'] = None
        self.depth = 1

    def __repr__(self) -> str:
        return '%s(%r, depth=%d)' % (self.__class__.__name__, self.node, self.depth)

    def __iter__(self) -> Iterator[XPathNode]:
        """In-order traversal, yields the nodes in document order."""
        stack: List[AVLTree] = []
        tree: Optional[AVLTree] = self
        while stack or tree is not None:
            if tree is not None:
                stack.append(tree)
                tree = tree.left
            else:
                tree = stack.pop()
                yield tree.node
                tree = tree.right

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def update_depth(self) -> None:
        depth = 1
        if self.left is not None:
            depth = self.left.depth + 1
        if self.right is not None and depth <= self.right.depth:
            depth = self.right.depth + 1
        self.depth = depth

    def rotate_ll(self) -> None:
        # the left side is too deep: rotate from the left
        left = self.left
        assert left is not None
        node_before, right_before = self.node, self.right

        self.node = left.node
        self.right = left
        self.left = left.left
        left.left = left.right
        left.right = right_before
        left.node = node_before
        left.update_depth()
        self.update_depth()

    def rotate_rr(self) -> None:
        # the right side is too deep: rotate from the right
        right = self.right
        assert right is not None
        node_before, left_before = self.node, self.left

        self.node = right.node
        self.left = right
        self.right = right.right
        right.right = right.left
        right.left = left_before
        right.node = node_before
        right.update_depth()
        self.update_depth()

    def balance(self) -> None:
        left_depth = 0 if self.left is None else self.left.depth
        right_depth = 0 if self.right is None else self.right.depth

        if left_depth > right_depth + 1:
            left = self.left
            assert left is not None
            ll_depth = 0 if left.left is None else left.left.depth
            lr_depth = 0 if left.right is None else left.right.depth
            if ll_depth < lr_depth:
                left.rotate_rr()
            self.rotate_ll()
        elif left_depth + 1 < right_depth:
            right = self.right
            assert right is not None
            rr_depth = 0 if right.right is None else right.right.depth
            rl_depth = 0 if right.left is None else right.left.depth
            if rl_depth > rr_depth:
                right.rotate_ll()
            self.rotate_rr()

    def add(self, node: XPathNode) -> bool:
        """
        Adds a node to the tree, returns `False` if the node is already in the tree.
        """
        if node is self.node:
            return False

        order = node_order(node, self.node)
        if order == 0:
            return False
        elif order < 0:
            if self.left is None:
                self.left = AVLTree(node)
                added = True
            else:
                added = self.left.add(node)
                if added:
                    self.balance()
        elif self.right is None:
            self.right = AVLTree(node)
            added = True
        else:
            added = self.right.add(node)
            if added:
                self.balance()

        if added:
            self.update_depth()
        return added
