#
# Copyright (c), 2018-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
__version__ = '1.0.0'
__author__ = "Davide Brunato"
__contact__ = "brunato@sissa.it"
__copyright__ = "Copyright 2018-2024, SISSA"
__license__ = "MIT"
__status__ = "Production/Stable"

# Imports here are considered as stable API, other internal calls may change.

from . import etree      # Safe parser and helper functions for ElementTree

from .exceptions import ReportPathError, MissingContextError, XPathSyntaxError, \
    XPathNameError, XPathTypeError, XPathValueError, GrammarError, \
    XMLResourceForbidden, ConfigurationError, MatcherError

from .xpath_nodes import XPathNode, DocumentNode, ElementNode, AttributeNode, \
    NamespaceNode, CommentNode, ProcessingInstructionNode, TextNode
from .tree_builders import get_node_tree, build_node_tree, build_lxml_node_tree, parse_xml
from .values import XPathValue, XString, XNumber, XBoolean, XNodeSet
from .resolvers import NamespaceResolver, FunctionResolver, VariableResolver, \
    lazy_arguments
from .xpath_context import XPathContext
from .xpath_ast import XPath
from .xpath1_parser import XPath1Parser
from .xpath_selectors import XPathEvaluator, parse, select, select1, \
    use_namespaces, Selector

__all__ = ['etree', 'ReportPathError', 'MissingContextError', 'XPathSyntaxError',
           'XPathNameError', 'XPathTypeError', 'XPathValueError', 'GrammarError',
           'XMLResourceForbidden', 'ConfigurationError', 'MatcherError',
           'XPathNode', 'DocumentNode', 'ElementNode', 'AttributeNode',
           'NamespaceNode', 'CommentNode', 'ProcessingInstructionNode', 'TextNode',
           'get_node_tree', 'build_node_tree', 'build_lxml_node_tree', 'parse_xml',
           'XPathValue', 'XString', 'XNumber', 'XBoolean', 'XNodeSet',
           'NamespaceResolver', 'FunctionResolver', 'VariableResolver',
           'lazy_arguments', 'XPathContext', 'XPath', 'XPath1Parser',
           'XPathEvaluator', 'parse', 'select', 'select1', 'use_namespaces', 'Selector']
