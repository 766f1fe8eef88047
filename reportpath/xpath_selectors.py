#
# Copyright (c), 2018-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .exceptions import XPathTypeError
from .namespaces import NamespacesType
from .xpath_nodes import XPathNode
from .tree_builders import get_node_tree
from .values import XPathValue, XString, XNumber, XBoolean, XNodeSet
from .resolvers import make_namespace_resolver, make_function_resolver, \
    make_variable_resolver
from .xpath_context import XPathContext
from .xpath_ast import XPath
from .xpath1_parser import XPath1Parser

__all__ = ['XPathEvaluator', 'parse', 'select', 'select1', 'use_namespaces', 'Selector']

OPTIONS = frozenset((
    'node', 'namespaces', 'functions', 'variables', 'case_insensitive',
    'allow_any_namespace_for_no_prefix', 'is_html', 'virtual_root'
))

ResultType = Union[List[XPathNode], XPathNode, str, float, bool, None]


def find_node(root: XPathNode, obj: Any) -> Optional[XPathNode]:
    """Returns the node of the tree that wraps the object, `None` if not found."""
    for node in root.iter_descendants():
        if getattr(node, 'obj', None) is obj:
            return node
    return None


def get_context(options: Mapping[str, Any]) -> XPathContext:
    """
    Builds an evaluation context from an options bag.

    :param options: a mapping with the evaluation options: *node* is the \
    context node, that can be also an ElementTree or a lxml element or document; \
    *namespaces*, *functions* and *variables* are mappings, callables or resolver \
    objects; *case_insensitive*, *allow_any_namespace_for_no_prefix* and *is_html* \
    are the flags for name tests; *virtual_root* is the node to consider the root \
    of the tree.
    """
    unknown = [k for k in options if k not in OPTIONS]
    if unknown:
        raise XPathTypeError("unknown evaluation options: %s" % ', '.join(sorted(unknown)))

    node = options.get('node')
    if node is not None and not isinstance(node, XPathNode):
        node = get_node_tree(node)

    virtual_root = options.get('virtual_root')
    if virtual_root is not None and not isinstance(virtual_root, XPathNode):
        if node is None:
            virtual_root = get_node_tree(virtual_root)
        else:
            root_node = find_node(node.root_node, virtual_root)
            if root_node is None:
                raise XPathTypeError("virtual root %r is not in the tree "
                                     "of the context node" % virtual_root)
            virtual_root = root_node

    return XPathContext(
        context_node=node,
        namespace_resolver=make_namespace_resolver(options.get('namespaces')),
        function_resolver=make_function_resolver(options.get('functions')),
        variable_resolver=make_variable_resolver(options.get('variables')),
        case_insensitive=bool(options.get('case_insensitive')),
        allow_any_namespace_for_no_prefix=bool(
            options.get('allow_any_namespace_for_no_prefix')
        ),
        is_html=bool(options.get('is_html')),
        virtual_root=virtual_root,
    )


def get_results(value: XPathValue, single: bool = False) -> ResultType:
    """Converts an XPath value to a Python result."""
    if isinstance(value, XNodeSet):
        if single:
            return value.first()
        return value.to_list()
    elif isinstance(value, XString):
        return value.value
    elif isinstance(value, XNumber):
        return value.value
    elif isinstance(value, XBoolean):
        return value.value
    raise XPathTypeError("unexpected result {!r}".format(value))


class XPathEvaluator:
    """
    An evaluator of a compiled XPath expression. Evaluation methods accept
    the options as a mapping or as keyword arguments.

    :param expression: the compiled expression.
    """
    def __init__(self, expression: XPath) -> None:
        self.expression = expression

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self.expression.source)

    def __str__(self) -> str:
        return str(self.expression)

    def evaluate(self, options: Optional[Mapping[str, Any]] = None,
                 **kwargs: Any) -> XPathValue:
        """
        Evaluates the expression, returning an XPath value.

        :param options: a mapping with the evaluation options.
        :param kwargs: evaluation options as keyword arguments.
        """
        if options:
            kwargs = {**options, **kwargs}
        return self.expression.evaluate(get_context(kwargs))

    def evaluate_string(self, options: Optional[Mapping[str, Any]] = None,
                        **kwargs: Any) -> str:
        return self.evaluate(options, **kwargs).string_value()

    def evaluate_number(self, options: Optional[Mapping[str, Any]] = None,
                        **kwargs: Any) -> float:
        return self.evaluate(options, **kwargs).number_value()

    def evaluate_boolean(self, options: Optional[Mapping[str, Any]] = None,
                         **kwargs: Any) -> bool:
        return self.evaluate(options, **kwargs).boolean_value()

    def evaluate_node_set(self, options: Optional[Mapping[str, Any]] = None,
                          **kwargs: Any) -> XNodeSet:
        return self.evaluate(options, **kwargs).nodeset()

    def evaluate_nodes(self, options: Optional[Mapping[str, Any]] = None,
                       **kwargs: Any) -> List[XPathNode]:
        """Evaluates the expression, returning the selected nodes in document order."""
        return self.evaluate_node_set(options, **kwargs).to_list()

    def evaluate_first_node(self, options: Optional[Mapping[str, Any]] = None,
                            **kwargs: Any) -> Optional[XPathNode]:
        return self.evaluate_node_set(options, **kwargs).first()


def parse(expression: str) -> XPathEvaluator:
    """
    Parses an XPath 1.0 expression.

    :param expression: the XPath expression.
    :return: an evaluator of the compiled expression.
    """
    return XPathEvaluator(XPath1Parser().parse(expression))


def select(expression: str, node: Any = None, single: bool = False, **kwargs: Any) -> Any:
    """
    XPath selector function that applies an expression to a node.

    :param expression: the XPath expression.
    :param node: the context node, an XPath node or an ElementTree or lxml \
    element or document.
    :param single: if `True` returns only the first selected node.
    :param kwargs: other evaluation options, eg. *namespaces* or *variables*.
    :return: a list of nodes in document order, or the first node if *single* \
    is `True`, for expressions that select nodes, a string, a number or a \
    boolean otherwise.
    """
    value = parse(expression).evaluate(node=node, **kwargs)
    return get_results(value, single)


def select1(expression: str, node: Any = None, **kwargs: Any) -> Any:
    """Like `select()` but returns only the first selected node or `None`."""
    return select(expression, node, True, **kwargs)


def use_namespaces(namespaces: NamespacesType) -> Callable[..., Any]:
    """
    Returns a selector function bound to a map of namespace prefixes.

    :param namespaces: a mapping from prefixes to namespace URIs.
    """
    def select_with_namespaces(expression: str, node: Any = None,
                               single: bool = False) -> Any:
        return select(expression, node, single, namespaces=namespaces)
    return select_with_namespaces


class Selector:
    """
    XPath selector class. Create an instance of this class if you want to apply
    an XPath expression to several nodes.

    :param path: the XPath expression.
    :param kwargs: evaluation options shared by all the selections.

    :ivar path: the XPath expression.
    :ivar evaluator: the evaluator of the compiled expression.
    """
    def __init__(self, path: str, **kwargs: Any) -> None:
        self.path = path
        self.options: Dict[str, Any] = kwargs
        self.evaluator = parse(path)

    def __repr__(self) -> str:
        return '%s(path=%r)' % (self.__class__.__name__, self.path)

    @property
    def namespaces(self) -> Optional[NamespacesType]:
        return self.options.get('namespaces')

    def select(self, node: Any, **kwargs: Any) -> Any:
        """
        Applies the expression to a node.

        :param node: the context node.
        :param kwargs: other evaluation options, overriding the instance's ones.
        """
        value = self.evaluator.evaluate(self.options, node=node, **kwargs)
        return get_results(value)

    def select1(self, node: Any, **kwargs: Any) -> Any:
        value = self.evaluator.evaluate(self.options, node=node, **kwargs)
        return get_results(value, single=True)
