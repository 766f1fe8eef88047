#
# Copyright (c), 2018-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from copy import copy
from typing import Any, Optional

from .exceptions import MissingContextError
from .xpath_nodes import XPathNode
from .resolvers import NamespaceResolver, FunctionResolver, VariableResolver

__all__ = ['XPathContext']


class XPathContext:
    """
    The XPath evaluation context.

    Contexts are created once for each evaluation and then derived with
    `extend()` for evaluating predicates and steps. Derived contexts share
    the resolvers and the flags of the context they have been derived from.

    :param context_node: the context node, can be `None` for expressions \
    that don't need a context node.
    :param context_position: the context position, starting from 1.
    :param context_size: the context size.
    :param namespace_resolver: the resolver of namespace prefixes, for default \
    the prefixes are resolved using the namespace declarations of the context node.
    :param function_resolver: the resolver of function names, for default only \
    the XPath 1.0 core functions are available.
    :param variable_resolver: the resolver of variable references, for default \
    no variable is defined.
    :param case_insensitive: if `True` element name tests are case insensitive.
    :param allow_any_namespace_for_no_prefix: if `True` unprefixed element name \
    tests match elements in any namespace.
    :param is_html: if `True` unprefixed element name tests match also elements \
    in the XHTML namespace, case insensitively.
    :param virtual_root: an optional node that is considered the root of the tree, \
    for absolute paths and for the reverse axes.
    """
    def __init__(self,
                 context_node: Optional[XPathNode] = None,
                 context_position: int = 1,
                 context_size: int = 1,
                 namespace_resolver: Optional[NamespaceResolver] = None,
                 function_resolver: Optional[FunctionResolver] = None,
                 variable_resolver: Optional[VariableResolver] = None,
                 case_insensitive: bool = False,
                 allow_any_namespace_for_no_prefix: bool = False,
                 is_html: bool = False,
                 virtual_root: Optional[XPathNode] = None) -> None:

        self.context_node = context_node
        self.context_position = context_position
        self.context_size = context_size
        self.namespace_resolver = namespace_resolver or NamespaceResolver()
        self.function_resolver = function_resolver or FunctionResolver()
        self.variable_resolver = variable_resolver or VariableResolver()
        self.case_insensitive = case_insensitive
        self.allow_any_namespace_for_no_prefix = allow_any_namespace_for_no_prefix
        self.is_html = is_html
        self.virtual_root = virtual_root

    def __repr__(self) -> str:
        return '%s(context_node=%r, context_position=%d, context_size=%d)' % (
            self.__class__.__name__, self.context_node,
            self.context_position, self.context_size
        )

    def extend(self, **kwargs: Any) -> 'XPathContext':
        """
        Returns a shallow copy of the context with some attributes overridden.
        """
        obj = copy(self)
        for name, value in kwargs.items():
            if name not in self.__dict__:
                raise TypeError("%r is not an attribute of %r" % (name, self))
            setattr(obj, name, value)
        return obj

    def get_context_node(self) -> XPathNode:
        if self.context_node is None:
            raise MissingContextError("Context node not found")
        return self.context_node

    def get_root(self, node: Optional[XPathNode] = None) -> XPathNode:
        """
        Returns the root of the tree of a node: the virtual root if it's
        defined, the document node or the topmost element otherwise.

        :param node: the node, for default is the context node.
        """
        if self.virtual_root is not None:
            return self.virtual_root
        elif node is None:
            node = self.get_context_node()

        return node.root_node
