#
# Copyright (c), 2018-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from typing import Optional


class ReportPathError(Exception):
    """
    Base exception class for reportpath package.

    :param message: the message related to the error.
    :param expression: an optional XPath expression source related with the error.
    """
    def __init__(self, message: str, expression: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.expression = expression

    def __str__(self) -> str:
        return self.message


class MissingContextError(ReportPathError):
    """Raised when a context node is required for evaluating the XPath expression."""


class XPathSyntaxError(ReportPathError, SyntaxError):
    """Raised for lexical and syntactic errors of XPath expressions."""

    def __str__(self) -> str:
        return self.message


class XPathNameError(ReportPathError, NameError):
    """Raised for unresolvable function, variable or namespace prefix names."""


class XPathTypeError(ReportPathError, TypeError):
    """Raised for wrong arguments, conversions and expression misuses."""


class XPathValueError(ReportPathError, ValueError):
    pass


class GrammarError(ReportPathError):
    """Raised when a grammar cannot be turned into a LALR(1) parsing table."""


class XMLResourceForbidden(ReportPathError):
    """Raised when an XML resource contains forbidden entities or references."""


class ConfigurationError(ReportPathError, ValueError):
    """Raised for invalid report annotation settings."""


class MatcherError(ReportPathError):
    """Raised when a report matcher is missing or not usable."""
