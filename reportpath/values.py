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
XPath 1.0 values: strings, numbers, booleans and node-sets, with their
conversions and the comparison rules of the language.
"""
import math
import operator
from typing import TYPE_CHECKING, Any, Callable, Iterable, Iterator, List, \
    Optional, Set, Union

from .exceptions import XPathTypeError
from .helpers import string_to_number, number_to_string
from .xpath_nodes import XPathNode
from .avltree import AVLTree

if TYPE_CHECKING:
    from .xpath_context import XPathContext

__all__ = ['XPathValue', 'XString', 'XNumber', 'XBoolean', 'XNodeSet',
           'compare_values', 'convert_value']

ComparisonType = Callable[[Any, Any], bool]


class XPathValue:
    """
    Base class of XPath values. Values are also expressions that evaluate
    to themselves, so they are used as literals in the syntax tree.
    """
    __slots__ = ()

    type_name = ''

    def evaluate(self, context: Optional['XPathContext'] = None) -> 'XPathValue':
        return self

    def string(self) -> 'XString':
        return XString(self.string_value())

    def number(self) -> 'XNumber':
        return XNumber(self.number_value())

    def boolean(self) -> 'XBoolean':
        return XBoolean(self.boolean_value())

    def nodeset(self) -> 'XNodeSet':
        raise XPathTypeError("Cannot convert %s to nodeset" % self.type_name)

    def string_value(self) -> str:
        raise NotImplementedError()

    def number_value(self) -> float:
        raise NotImplementedError()

    def boolean_value(self) -> bool:
        raise NotImplementedError()

    ###
    # Comparisons
    def equals(self, other: 'XPathValue') -> 'XBoolean':
        return XBoolean(compare_values(self, other, operator.eq))

    def not_equal(self, other: 'XPathValue') -> 'XBoolean':
        return XBoolean(compare_values(self, other, operator.ne))

    def less_than(self, other: 'XPathValue') -> 'XBoolean':
        return XBoolean(compare_values(self, other, operator.lt))

    def greater_than(self, other: 'XPathValue') -> 'XBoolean':
        return XBoolean(compare_values(self, other, operator.gt))

    def less_than_or_equal(self, other: 'XPathValue') -> 'XBoolean':
        return XBoolean(compare_values(self, other, operator.le))

    def greater_than_or_equal(self, other: 'XPathValue') -> 'XBoolean':
        return XBoolean(compare_values(self, other, operator.ge))


class XString(XPathValue):
    __slots__ = ('value',)

    type_name = 'string'

    def __init__(self, value: str = '') -> None:
        self.value = value

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self.value)

    def __str__(self) -> str:
        if '"' not in self.value:
            return '"%s"' % self.value
        return "'%s'" % self.value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, XString) and self.value == other.value

    def __hash__(self) -> int:
        return hash(self.value)

    def string(self) -> 'XString':
        return self

    def string_value(self) -> str:
        return self.value

    def number_value(self) -> float:
        return string_to_number(self.value)

    def boolean_value(self) -> bool:
        return len(self.value) > 0


class XNumber(XPathValue):
    __slots__ = ('value',)

    type_name = 'number'

    def __init__(self, value: Union[float, int, str] = 0.0) -> None:
        if isinstance(value, str):
            self.value = string_to_number(value)
        else:
            self.value = float(value)

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self.value)

    def __str__(self) -> str:
        return number_to_string(self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, XNumber):
            return False
        elif math.isnan(self.value):
            return math.isnan(other.value)
        return self.value == other.value

    def __hash__(self) -> int:
        return hash(self.value)

    def number(self) -> 'XNumber':
        return self

    def string_value(self) -> str:
        return number_to_string(self.value)

    def number_value(self) -> float:
        return self.value

    def boolean_value(self) -> bool:
        return not math.isnan(self.value) and self.value != 0


class XBoolean(XPathValue):
    __slots__ = ('value',)

    type_name = 'boolean'

    def __init__(self, value: bool = False) -> None:
        self.value = bool(value)

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self.value)

    def __str__(self) -> str:
        return 'true()' if self.value else 'false()'

    def __eq__(self, other: object) -> bool:
        return isinstance(other, XBoolean) and self.value is other.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __bool__(self) -> bool:
        return self.value

    def boolean(self) -> 'XBoolean':
        return self

    def string_value(self) -> str:
        return 'true' if self.value else 'false'

    def number_value(self) -> float:
        return 1.0 if self.value else 0.0

    def boolean_value(self) -> bool:
        return self.value


class XNodeSet(XPathValue):
    """
    An unordered collection of distinct nodes. Nodes are kept in insertion
    order, the document order is computed on demand with a balanced tree
    that is discarded when new nodes are added.

    :param nodes: an optional iterable of nodes.
    """
    __slots__ = ('nodes', 'tree', '_members')

    type_name = 'node-set'

    def __init__(self, nodes: Optional[Iterable[XPathNode]] = None) -> None:
        self.nodes: List[XPathNode] = []
        self.tree: Optional[AVLTree] = None
        self._members: Set[XPathNode] = set()
        if nodes is not None:
            self.add_array(nodes)

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self.to_list())

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[XPathNode]:
        return iter(self.to_list())

    def __contains__(self, node: object) -> bool:
        return node in self._members

    @property
    def size(self) -> int:
        return len(self.nodes)

    def add(self, node: XPathNode) -> None:
        if node not in self._members:
            self._members.add(node)
            self.nodes.append(node)
            self.tree = None

    def add_array(self, nodes: Iterable[XPathNode]) -> None:
        for node in nodes:
            self.add(node)

    def build_tree(self) -> Optional[AVLTree]:
        if self.tree is None and self.nodes:
            tree = AVLTree(self.nodes[0])
            for node in self.nodes[1:]:
                tree.add(node)
            self.tree = tree
        return self.tree

    def to_list(self) -> List[XPathNode]:
        """Returns the nodes in document order."""
        if len(self.nodes) < 2:
            return list(self.nodes)
        return list(self.build_tree())  # type: ignore[arg-type]

    def to_unsorted_list(self) -> List[XPathNode]:
        return list(self.nodes)

    def first(self) -> Optional[XPathNode]:
        """Returns the first node in document order, `None` if the node-set is empty."""
        if not self.nodes:
            return None
        elif len(self.nodes) == 1:
            return self.nodes[0]

        tree = self.build_tree()
        while tree.left is not None:  # type: ignore[union-attr]
            tree = tree.left  # type: ignore[union-attr]
        return tree.node  # type: ignore[union-attr]

    def union(self, other: 'XNodeSet') -> 'XNodeSet':
        result = XNodeSet(self.nodes)
        result.add_array(other.nodes)
        return result

    def nodeset(self) -> 'XNodeSet':
        return self

    def string_value(self) -> str:
        node = self.first()
        return '' if node is None else node.string_value

    def number_value(self) -> float:
        return string_to_number(self.string_value())

    def boolean_value(self) -> bool:
        return len(self.nodes) > 0

    def string_values(self) -> List[str]:
        return [node.string_value for node in self.nodes]


def _swap(op: ComparisonType) -> ComparisonType:
    return lambda x, y: op(y, x)


def compare_values(left: XPathValue, right: XPathValue, op: ComparisonType) -> bool:
    """
    Compares two XPath values with a comparison operator, applying the
    conversion rules for node-sets, booleans, numbers and strings.

    :param left: the left operand.
    :param right: the right operand.
    :param op: a comparison function from the `operator` module.
    """
    equality = op is operator.eq or op is operator.ne

    if isinstance(left, XNodeSet):
        if isinstance(right, XNodeSet):
            if equality:
                right_values = right.string_values()
                return any(op(x, y) for x in left.string_values() for y in right_values)
            right_numbers = [string_to_number(y) for y in right.string_values()]
            return any(op(string_to_number(x), y)
                       for x in left.string_values() for y in right_numbers)
        elif isinstance(right, XBoolean):
            return op(left.boolean_value(), right.value)
        elif isinstance(right, XNumber):
            return any(op(string_to_number(x), right.value) for x in left.string_values())
        elif equality:
            value = right.string_value()
            return any(op(x, value) for x in left.string_values())
        else:
            number = right.number_value()
            return any(op(string_to_number(x), number) for x in left.string_values())

    elif isinstance(right, XNodeSet):
        return compare_values(right, left, _swap(op) if not equality else op)

    elif not equality:
        return op(left.number_value(), right.number_value())
    elif isinstance(left, XBoolean) or isinstance(right, XBoolean):
        return op(left.boolean_value(), right.boolean_value())
    elif isinstance(left, XNumber) or isinstance(right, XNumber):
        return op(left.number_value(), right.number_value())
    return op(left.string_value(), right.string_value())


def convert_value(value: Any) -> XPathValue:
    """
    Converts a Python value to an XPath value: strings, booleans, numbers, nodes
    and sequences of nodes are accepted, `None` is converted to an empty node-set.
    """
    if isinstance(value, XPathValue):
        return value
    elif value is None:
        return XNodeSet()
    elif isinstance(value, str):
        return XString(value)
    elif isinstance(value, bool):
        return XBoolean(value)
    elif isinstance(value, (int, float)):
        return XNumber(value)
    elif isinstance(value, XPathNode):
        return XNodeSet([value])

    try:
        nodes = list(value)
    except TypeError:
        raise XPathTypeError("Cannot convert %r to an XPath value" % value) from None

    if any(not isinstance(node, XPathNode) for node in nodes):
        raise XPathTypeError("Cannot convert %r to an XPath value" % value)
    return XNodeSet(nodes)
