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
Resolvers of namespace prefixes, function names and variable references,
plus the adapters that turn plain Python mappings and callables into resolvers.
"""
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Tuple

from .exceptions import XPathTypeError
from .namespaces import XML_NAMESPACE, XMLNS_NAMESPACE
from .xpath_nodes import XPathNode, ElementNode, DocumentNode
from .values import XPathValue, convert_value
from .functions import BUILTIN_FUNCTIONS, XPathFunctionType

if TYPE_CHECKING:
    from .xpath_context import XPathContext

__all__ = ['NamespaceResolver', 'CustomNamespaceResolver', 'FunctionResolver',
           'CustomFunctionResolver', 'VariableResolver', 'CustomVariableResolver',
           'lazy_arguments', 'make_evaluator', 'make_namespace_resolver',
           'make_function_resolver', 'make_variable_resolver']


def get_element(node: Optional[XPathNode]) -> Optional[ElementNode]:
    """Returns the element to use for resolving namespace prefixes from a node."""
    if isinstance(node, DocumentNode):
        return node.document_element
    while node is not None and not isinstance(node, ElementNode):
        node = node.parent
    return node


def get_key(local_name: str, namespace_uri: Optional[str]) -> str:
    return '{%s}%s' % (namespace_uri, local_name) if namespace_uri else local_name


###
# Namespace resolvers
class NamespaceResolver:
    """
    Resolves namespace prefixes using the in-scope namespaces of a node.
    The 'xml' and 'xmlns' prefixes are always bound.
    """
    def get_namespace(self, prefix: str, node: Optional[XPathNode] = None) -> Optional[str]:
        if prefix == 'xml':
            return XML_NAMESPACE
        elif prefix == 'xmlns':
            return XMLNS_NAMESPACE

        element = get_element(node)
        return None if element is None else element.lookup_namespace(prefix)


class CustomNamespaceResolver(NamespaceResolver):
    """
    Resolves namespace prefixes with a lookup callable, falling back to the
    in-scope namespaces of the node for prefixes that are not found.

    :param lookup: a callable that receives a prefix and returns the namespace \
    URI or `None`.
    """
    def __init__(self, lookup: Callable[[str], Optional[str]]) -> None:
        self.lookup = lookup

    def get_namespace(self, prefix: str, node: Optional[XPathNode] = None) -> Optional[str]:
        uri = self.lookup(prefix)
        if uri is not None:
            return uri
        return super().get_namespace(prefix, node)


###
# Function resolvers
class FunctionResolver:
    """
    Resolves function names to functions. The XPath 1.0 core functions are
    available without namespace. A function is called with the context
    followed by the argument expressions not evaluated.
    """
    def __init__(self) -> None:
        self.functions: Dict[Tuple[str, str], XPathFunctionType] = {}

    def add_function(self, namespace_uri: Optional[str], local_name: str,
                     func: XPathFunctionType) -> None:
        self.functions[(namespace_uri or '', local_name)] = func

    def get_function(self, local_name: str, namespace_uri: Optional[str] = None) \
            -> Optional[XPathFunctionType]:
        try:
            return self.functions[(namespace_uri or '', local_name)]
        except KeyError:
            if namespace_uri:
                return None
            return BUILTIN_FUNCTIONS.get(local_name)


def lazy_arguments(func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Marks a custom function as a function that receives its arguments as
    expressions, to evaluate with the context passed as first argument.
    """
    func.lazy_arguments = True  # type: ignore[attr-defined]
    return func


def make_evaluator(func: Callable[..., Any]) -> XPathFunctionType:
    """
    Adapts a plain Python callable to an XPath function. The callable receives
    the context and the evaluated arguments and its result is converted to an
    XPath value: strings, booleans, numbers, nodes and lists of nodes are
    accepted. Callables marked with `lazy_arguments` receive the argument
    expressions instead.
    """
    lazy = getattr(func, 'lazy_arguments', False)

    def evaluator(context: 'XPathContext', *args: Any) -> XPathValue:
        if lazy:
            result = func(context, *args)
        else:
            result = func(context, *(arg.evaluate(context) for arg in args))
        return convert_value(result)

    evaluator.__name__ = getattr(func, '__name__', evaluator.__name__)
    evaluator.__doc__ = getattr(func, '__doc__', None)
    return evaluator


class CustomFunctionResolver(FunctionResolver):
    """
    A function resolver that looks up custom functions with a lookup callable
    before falling back to the core functions.

    :param lookup: a callable that receives the local name and the namespace \
    URI of the function and returns a plain Python callable or `None`.
    """
    def __init__(self, lookup: Callable[[str, Optional[str]], Any]) -> None:
        super().__init__()
        self.lookup = lookup

    def get_function(self, local_name: str, namespace_uri: Optional[str] = None) \
            -> Optional[XPathFunctionType]:
        func = self.lookup(local_name, namespace_uri)
        if func is not None:
            return make_evaluator(func)
        return super().get_function(local_name, namespace_uri)


###
# Variable resolvers
class VariableResolver:
    """A variable resolver with no variables defined."""

    def get_variable(self, local_name: str, namespace_uri: Optional[str] = None) \
            -> Optional[XPathValue]:
        return None


class CustomVariableResolver(VariableResolver):
    """
    A variable resolver that looks up variable values with a lookup callable.
    The values are converted to XPath values.

    :param lookup: a callable that receives the local name and the namespace \
    URI of the variable and returns its value or `None` if it's not defined.
    """
    def __init__(self, lookup: Callable[[str, Optional[str]], Any]) -> None:
        self.lookup = lookup

    def get_variable(self, local_name: str, namespace_uri: Optional[str] = None) \
            -> Optional[XPathValue]:
        value = self.lookup(local_name, namespace_uri)
        return None if value is None else convert_value(value)


###
# Factories from user provided options
def make_namespace_resolver(namespaces: Any) -> NamespaceResolver:
    """
    Makes a namespace resolver from a mapping, from an object with a
    `get_namespace(prefix, node)` method or from a callable.
    """
    if namespaces is None:
        return NamespaceResolver()
    elif isinstance(namespaces, NamespaceResolver):
        return namespaces
    elif isinstance(namespaces, Mapping):
        return CustomNamespaceResolver(dict(namespaces).get)
    elif callable(getattr(namespaces, 'get_namespace', None)):
        return namespaces  # type: ignore[no-any-return]
    elif callable(namespaces):
        return CustomNamespaceResolver(namespaces)
    raise XPathTypeError("invalid namespaces option {!r}".format(namespaces))


def make_function_resolver(functions: Any) -> FunctionResolver:
    """
    Makes a function resolver from a mapping of names to callables, from an
    object with a `get_function(local_name, namespace_uri)` method or from a
    callable with the same arguments. Names of functions in a namespace are
    mapped in the form '{uri}local_name'.
    """
    if functions is None:
        return FunctionResolver()
    elif isinstance(functions, FunctionResolver):
        return functions
    elif isinstance(functions, Mapping):
        return CustomFunctionResolver(
            lambda name, uri: functions.get(get_key(name, uri))
        )
    elif callable(getattr(functions, 'get_function', None)):
        return CustomFunctionResolver(functions.get_function)
    elif callable(functions):
        return CustomFunctionResolver(functions)
    raise XPathTypeError("invalid functions option {!r}".format(functions))


def make_variable_resolver(variables: Any) -> VariableResolver:
    """
    Makes a variable resolver from a mapping of names to values, from an
    object with a `get_variable(local_name, namespace_uri)` method or from
    a callable with the same arguments.
    """
    if variables is None:
        return VariableResolver()
    elif isinstance(variables, VariableResolver):
        return variables
    elif isinstance(variables, Mapping):
        return CustomVariableResolver(
            lambda name, uri: variables.get(get_key(name, uri))
        )
    elif callable(getattr(variables, 'get_variable', None)):
        return CustomVariableResolver(variables.get_variable)
    elif callable(variables):
        return CustomVariableResolver(variables)
    raise XPathTypeError("invalid variables option {!r}".format(variables))
