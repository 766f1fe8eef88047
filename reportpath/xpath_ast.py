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
Syntax tree of XPath 1.0 expressions. Every expression class implements
an `evaluate(context)` method that returns an XPath value, and `__str__`
that returns a source form of the expression.
"""
from typing import Any, List, Optional

from .exceptions import MissingContextError, XPathNameError, XPathTypeError
from .helpers import divide, modulo
from .namespaces import XHTML_NAMESPACE, split_qname
from .xpath_nodes import ELEMENT_NODE, ATTRIBUTE_NODE, NAMESPACE_NODE, TEXT_NODE, \
    CDATA_SECTION_NODE, COMMENT_NODE, PROCESSING_INSTRUCTION_NODE, XPathNode
from .values import XPathValue, XNumber, XNodeSet
from .axes import AXES, REVERSE_AXES, principal_node_type
from .xpath_context import XPathContext

__all__ = ['Expression', 'UnaryMinusOperation', 'BinaryOperation', 'OrOperation',
           'AndOperation', 'EqualsOperation', 'NotEqualOperation', 'LessThanOperation',
           'GreaterThanOperation', 'LessThanOrEqualOperation',
           'GreaterThanOrEqualOperation', 'PlusOperation', 'MinusOperation',
           'MultiplyOperation', 'DivOperation', 'ModOperation', 'UnionOperation',
           'NodeTest', 'NameTestAny', 'NameTestPrefixAny', 'NameTestQName',
           'CommentTest', 'TextTest', 'ProcessingInstructionTest', 'AnyNodeTest',
           'Step', 'LocationPath', 'PathExpr', 'FunctionCall', 'VariableReference',
           'XPath', 'apply_predicates', 'resolve_prefix']


def resolve_prefix(prefix: str, context: XPathContext) -> str:
    uri = context.namespace_resolver.get_namespace(prefix, context.context_node)
    if uri is None:
        raise XPathNameError("Cannot resolve QName prefix %r" % prefix)
    return uri


class Expression:
    """Base class of expressions."""

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, str(self))

    def evaluate(self, context: XPathContext) -> XPathValue:
        raise NotImplementedError()


###
# Operators
class UnaryMinusOperation(Expression):

    def __init__(self, rhs: Any) -> None:
        self.rhs = rhs

    def __str__(self) -> str:
        return '-%s' % self.rhs

    def evaluate(self, context: XPathContext) -> XPathValue:
        return XNumber(-self.rhs.evaluate(context).number_value())


class BinaryOperation(Expression):
    """Base class for binary operators, printed enclosed in parentheses."""
    symbol = ''

    def __init__(self, lhs: Any, rhs: Any) -> None:
        self.lhs = lhs
        self.rhs = rhs

    def __str__(self) -> str:
        return '(%s %s %s)' % (self.lhs, self.symbol, self.rhs)


class OrOperation(BinaryOperation):
    symbol = 'or'

    def evaluate(self, context: XPathContext) -> XPathValue:
        result = self.lhs.evaluate(context).boolean()
        if result.value:
            return result
        return self.rhs.evaluate(context).boolean()


class AndOperation(BinaryOperation):
    symbol = 'and'

    def evaluate(self, context: XPathContext) -> XPathValue:
        result = self.lhs.evaluate(context).boolean()
        if not result.value:
            return result
        return self.rhs.evaluate(context).boolean()


class EqualsOperation(BinaryOperation):
    symbol = '='

    def evaluate(self, context: XPathContext) -> XPathValue:
        return self.lhs.evaluate(context).equals(self.rhs.evaluate(context))


class NotEqualOperation(BinaryOperation):
    symbol = '!='

    def evaluate(self, context: XPathContext) -> XPathValue:
        return self.lhs.evaluate(context).not_equal(self.rhs.evaluate(context))


class LessThanOperation(BinaryOperation):
    symbol = '<'

    def evaluate(self, context: XPathContext) -> XPathValue:
        return self.lhs.evaluate(context).less_than(self.rhs.evaluate(context))


class GreaterThanOperation(BinaryOperation):
    symbol = '>'

    def evaluate(self, context: XPathContext) -> XPathValue:
        return self.lhs.evaluate(context).greater_than(self.rhs.evaluate(context))


class LessThanOrEqualOperation(BinaryOperation):
    symbol = '<='

    def evaluate(self, context: XPathContext) -> XPathValue:
        return self.lhs.evaluate(context).less_than_or_equal(self.rhs.evaluate(context))


class GreaterThanOrEqualOperation(BinaryOperation):
    symbol = '>='

    def evaluate(self, context: XPathContext) -> XPathValue:
        return self.lhs.evaluate(context).greater_than_or_equal(self.rhs.evaluate(context))


class PlusOperation(BinaryOperation):
    symbol = '+'

    def evaluate(self, context: XPathContext) -> XPathValue:
        return XNumber(self.lhs.evaluate(context).number_value() +
                       self.rhs.evaluate(context).number_value())


class MinusOperation(BinaryOperation):
    symbol = '-'

    def evaluate(self, context: XPathContext) -> XPathValue:
        return XNumber(self.lhs.evaluate(context).number_value() -
                       self.rhs.evaluate(context).number_value())


class MultiplyOperation(BinaryOperation):
    symbol = '*'

    def evaluate(self, context: XPathContext) -> XPathValue:
        return XNumber(self.lhs.evaluate(context).number_value() *
                       self.rhs.evaluate(context).number_value())


class DivOperation(BinaryOperation):
    symbol = 'div'

    def evaluate(self, context: XPathContext) -> XPathValue:
        return XNumber(divide(self.lhs.evaluate(context).number_value(),
                              self.rhs.evaluate(context).number_value()))


class ModOperation(BinaryOperation):
    symbol = 'mod'

    def evaluate(self, context: XPathContext) -> XPathValue:
        return XNumber(modulo(self.lhs.evaluate(context).number_value(),
                              self.rhs.evaluate(context).number_value()))


class UnionOperation(BinaryOperation):
    symbol = '|'

    def evaluate(self, context: XPathContext) -> XPathValue:
        return self.lhs.evaluate(context).nodeset().union(
            self.rhs.evaluate(context).nodeset()
        )


###
# Node tests
class NodeTest:
    """
    Base class of node tests. The `matches()` method receives also the
    principal node type of the axis, that is the type of the nodes
    selected by name tests.
    """
    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, str(self))

    def matches(self, node: XPathNode, context: XPathContext,
                node_type: int = ELEMENT_NODE) -> bool:
        raise NotImplementedError()


class NameTestAny(NodeTest):

    def __str__(self) -> str:
        return '*'

    def matches(self, node: XPathNode, context: XPathContext,
                node_type: int = ELEMENT_NODE) -> bool:
        return node.node_type == node_type


class NameTestPrefixAny(NodeTest):

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix

    def __str__(self) -> str:
        return '%s:*' % self.prefix

    def matches(self, node: XPathNode, context: XPathContext,
                node_type: int = ELEMENT_NODE) -> bool:
        if node.node_type != node_type or node_type == NAMESPACE_NODE:
            return False
        return node.namespace_uri == resolve_prefix(self.prefix, context)


class NameTestQName(NodeTest):

    def __init__(self, name: str) -> None:
        self.name = name
        self.prefix, self.local_name = split_qname(name)

    def __str__(self) -> str:
        return self.name

    def matches(self, node: XPathNode, context: XPathContext,
                node_type: int = ELEMENT_NODE) -> bool:
        if node.node_type != node_type:
            return False
        elif node_type == NAMESPACE_NODE:
            return self.prefix is None and node.local_name == self.local_name
        elif self.prefix is not None:
            if node.namespace_uri != resolve_prefix(self.prefix, context):
                return False
            elif context.case_insensitive:
                return node.local_name.lower() == self.local_name.lower()
            return node.local_name == self.local_name
        elif node_type == ATTRIBUTE_NODE:
            if node.namespace_uri:
                return False
            elif context.case_insensitive:
                return node.local_name.lower() == self.local_name.lower()
            return node.local_name == self.local_name

        namespace_uri = node.namespace_uri
        case_insensitive = context.case_insensitive
        if context.is_html and namespace_uri in ('', XHTML_NAMESPACE):
            case_insensitive = True
        elif namespace_uri and not context.allow_any_namespace_for_no_prefix:
            return False

        if case_insensitive:
            return node.local_name.lower() == self.local_name.lower()
        return node.local_name == self.local_name


class CommentTest(NodeTest):

    def __str__(self) -> str:
        return 'comment()'

    def matches(self, node: XPathNode, context: XPathContext,
                node_type: int = ELEMENT_NODE) -> bool:
        return node.node_type == COMMENT_NODE


class TextTest(NodeTest):

    def __str__(self) -> str:
        return 'text()'

    def matches(self, node: XPathNode, context: XPathContext,
                node_type: int = ELEMENT_NODE) -> bool:
        return node.node_type == TEXT_NODE or node.node_type == CDATA_SECTION_NODE


class ProcessingInstructionTest(NodeTest):

    def __init__(self, target: Optional[str] = None) -> None:
        self.target = target

    def __str__(self) -> str:
        if self.target is None:
            return 'processing-instruction()'
        return 'processing-instruction("%s")' % self.target

    def matches(self, node: XPathNode, context: XPathContext,
                node_type: int = ELEMENT_NODE) -> bool:
        if node.node_type != PROCESSING_INSTRUCTION_NODE:
            return False
        return self.target is None or node.name == self.target.strip()


class AnyNodeTest(NodeTest):

    def __str__(self) -> str:
        return 'node()'

    def matches(self, node: XPathNode, context: XPathContext,
                node_type: int = ELEMENT_NODE) -> bool:
        return True


###
# Location paths
class Step:
    """
    A location step.

    :param axis: the name of the axis.
    :param node_test: the node test.
    :param predicates: an optional list of predicate expressions.
    """
    def __init__(self, axis: str, node_test: NodeTest,
                 predicates: Optional[List[Any]] = None) -> None:
        self.axis = axis
        self.node_test = node_test
        self.predicates = predicates or []
        self.node_type = principal_node_type(axis)

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, str(self))

    def __str__(self) -> str:
        return '%s::%s%s' % (
            self.axis, self.node_test, ''.join('[%s]' % p for p in self.predicates)
        )

    def apply(self, context: XPathContext, node: Optional[XPathNode]) -> List[XPathNode]:
        """
        Applies the step to a node, returns the selected nodes in axis order.
        """
        if node is None:
            raise MissingContextError(
                "Context node not found when evaluating XPath step: %s" % self
            )

        step_context = context.extend(context_node=node)
        nodes = [
            n for n in AXES[self.axis](node, step_context)
            if self.node_test.matches(n, step_context, self.node_type)
        ]
        return apply_predicates(self.predicates, context, nodes,
                                reverse=self.axis in REVERSE_AXES)


class LocationPath:
    """
    A relative or absolute location path.

    :param absolute: `True` for absolute paths.
    :param steps: the location steps.
    """
    def __init__(self, absolute: bool = False, steps: Optional[List[Step]] = None) -> None:
        self.absolute = absolute
        self.steps = steps or []

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, str(self))

    def __str__(self) -> str:
        path = '/'.join(str(step) for step in self.steps)
        return '/' + path if self.absolute else path

    def apply(self, context: XPathContext, nodes: List[XPathNode]) -> List[XPathNode]:
        """Applies the location path to a list of nodes, returns the selected nodes."""
        if self.absolute:
            start = nodes[0] if nodes else None
            if start is None:
                start = context.get_context_node()
            nodes = [context.get_root(start)]

        for step in self.steps:
            result = XNodeSet()
            for node in nodes:
                result.add_array(step.apply(context, node))
            nodes = result.to_unsorted_list()
        return nodes


def predicate_matches(predicate: Any, context: XPathContext) -> bool:
    value = predicate.evaluate(context)
    if isinstance(value, XNumber):
        return context.context_position == value.value
    return value.boolean_value()


def apply_predicates(predicates: List[Any], context: XPathContext,
                     nodes: List[XPathNode], reverse: bool = False) -> List[XPathNode]:
    """
    Filters a list of nodes with predicates. Nodes are sorted in document
    order, or in reverse document order if the reverse flag is set, and the
    context positions are renumbered for each predicate.
    """
    if not predicates:
        return nodes

    nodes = XNodeSet(nodes).to_list()
    if reverse:
        nodes.reverse()

    predicate_context = context.extend()
    for predicate in predicates:
        predicate_context.context_size = len(nodes)
        selected = []
        for position, node in enumerate(nodes, start=1):
            predicate_context.context_node = node
            predicate_context.context_position = position
            if predicate_matches(predicate, predicate_context):
                selected.append(node)
        nodes = selected
    return nodes


class PathExpr(Expression):
    """
    A path expression: an optional filter expression with its predicates,
    followed by an optional location path. A path expression without filter
    applies the location path to the context node.

    :param filter: the filter expression, if any.
    :param filter_predicates: the predicates of the filter expression.
    :param location_path: the location path, if any.
    """
    def __init__(self, filter: Optional[Any] = None,
                 filter_predicates: Optional[List[Any]] = None,
                 location_path: Optional[LocationPath] = None) -> None:
        self.filter = filter
        self.filter_predicates = filter_predicates or []
        self.location_path = location_path

    def __str__(self) -> str:
        if self.filter is None:
            return str(self.location_path)

        result = str(self.filter)
        result += ''.join('[%s]' % p for p in self.filter_predicates)
        if self.location_path is not None:
            if self.location_path.absolute:
                result += str(self.location_path)
            else:
                result += '/' + str(self.location_path)
        return result

    def evaluate(self, context: XPathContext) -> XPathValue:
        if self.filter is None:
            nodes = [context.get_context_node()]
        else:
            value = self.filter.evaluate(context)
            if not isinstance(value, XNodeSet):
                if self.filter_predicates or self.location_path is not None:
                    raise XPathTypeError(
                        "Path expression filter must evaluate to a nodeset "
                        "if predicates or location path are used"
                    )
                return value

            nodes = value.to_list()
            nodes = apply_predicates(self.filter_predicates, context, nodes)

        if self.location_path is not None:
            nodes = self.location_path.apply(context, nodes)
        return XNodeSet(nodes)


###
# Primary expressions
class FunctionCall(Expression):
    """
    A function call. Arguments are passed to the function as expressions.

    :param name: the name of the function, possibly prefixed.
    :param arguments: the argument expressions.
    """
    def __init__(self, name: str, arguments: Optional[List[Any]] = None) -> None:
        self.name = name
        self.prefix, self.local_name = split_qname(name)
        self.arguments = arguments or []

    def __str__(self) -> str:
        return '%s(%s)' % (self.name, ', '.join(str(arg) for arg in self.arguments))

    def evaluate(self, context: XPathContext) -> XPathValue:
        namespace_uri = None
        if self.prefix is not None:
            namespace_uri = resolve_prefix(self.prefix, context)

        func = context.function_resolver.get_function(self.local_name, namespace_uri)
        if func is None:
            raise XPathNameError("Unknown function %s" % self.name)
        return func(context, *self.arguments)


class VariableReference(Expression):

    def __init__(self, name: str) -> None:
        self.name = name
        self.prefix, self.local_name = split_qname(name)

    def __str__(self) -> str:
        return '$%s' % self.name

    def evaluate(self, context: XPathContext) -> XPathValue:
        namespace_uri = None
        if self.prefix is not None:
            namespace_uri = resolve_prefix(self.prefix, context)

        value = context.variable_resolver.get_variable(self.local_name, namespace_uri)
        if value is None:
            raise XPathNameError("Undeclared variable: %s" % self.name)
        return value


class XPath:
    """
    A compiled XPath expression.

    :param expression: the root of the syntax tree.
    :param source: the source of the expression.
    """
    def __init__(self, expression: Any, source: Optional[str] = None) -> None:
        self.expression = expression
        self.source = source

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self.source or str(self))

    def __str__(self) -> str:
        return str(self.expression)

    def evaluate(self, context: XPathContext) -> XPathValue:
        return self.expression.evaluate(context)

