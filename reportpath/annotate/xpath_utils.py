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
Extension functions for report matchers and the evaluator of matcher
expressions on report items.

Regular expressions of `replace()` and `match()` are written with the
JavaScript syntax used by report matchers: named groups `(?<name>...)`
and `$n`/`$&`/`$<name>` substitutions are translated to Python's `re`.
"""
import re
from functools import lru_cache, wraps
from typing import TYPE_CHECKING, Any, Callable, Dict, Match, Optional, Pattern

from ..exceptions import XPathSyntaxError, XPathValueError
from ..functions import wrong_arguments
from ..resolvers import lazy_arguments
from ..values import XPathValue
from ..xpath_nodes import XPathNode
from ..xpath_selectors import XPathEvaluator, parse

if TYPE_CHECKING:
    from ..xpath_context import XPathContext

__all__ = ['ANNOTATE_FUNCTIONS', 'translate_pattern', 'expand_replacement',
           'compile_expression', 'XPathSelect']

ANNOTATE_FUNCTIONS: Dict[str, Callable[..., Any]] = {}

NAMED_GROUP_PATTERN = re.compile(r'\\.|\(\?<(?![=!])')
REPLACEMENT_PATTERN = re.compile(r'\$(\$|&|`|\'|\d{1,2}|<[^>]*>)')
LINE_SPACES_PATTERN = re.compile(r'^[^\S\n]+|[^\S\n]+$', re.MULTILINE)


def annotate_function(name: str, nargs: int, signature: str) \
        -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Registers an extension function with a fixed number of arguments."""
    def function_decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def evaluate_function(context: 'XPathContext', *args: Any) -> Any:
            if len(args) != nargs:
                raise wrong_arguments(name, signature)
            return func(context, *args)

        ANNOTATE_FUNCTIONS[name] = evaluate_function
        return evaluate_function

    return function_decorator


@lru_cache(maxsize=None)
def translate_pattern(pattern: str) -> Pattern[str]:
    """Compiles a JavaScript regular expression with Python's `re` module."""
    python_pattern = NAMED_GROUP_PATTERN.sub(
        lambda m: m.group() if m.group().startswith('\\') else '(?P<', pattern
    )
    try:
        return re.compile(python_pattern)
    except re.error as err:
        raise XPathValueError("Invalid regular expression %r: %s" % (pattern, err)) from None


def expand_replacement(match: Match[str], replacement: str) -> str:
    """Expands the JavaScript substitution patterns of a replacement string."""
    def expand(m: Match[str]) -> str:
        token = m.group(1)
        if token == '$':
            return '$'
        elif token == '&':
            return match.group()
        elif token == '`':
            return match.string[:match.start()]
        elif token == "'":
            return match.string[match.end():]
        elif token.startswith('<'):
            try:
                return match.group(token[1:-1]) or ''
            except IndexError:
                return m.group()

        groups = match.re.groups
        if 0 < int(token) <= groups:
            return match.group(int(token)) or ''
        elif len(token) == 2 and 0 < int(token[0]) <= groups:
            return (match.group(int(token[0])) or '') + token[1]
        return m.group()

    return REPLACEMENT_PATTERN.sub(expand, replacement)


###
# Extension functions
@annotate_function('replace', nargs=3, signature='(string, string, string)')
def evaluate_replace_function(context: 'XPathContext', input_value: XPathValue,
                              pattern: XPathValue, replacement: XPathValue) -> str:
    """Replaces the first match of a regular expression."""
    text = input_value.string_value()
    regex = translate_pattern(pattern.string_value())
    template = replacement.string_value()
    return regex.sub(lambda m: expand_replacement(m, template), text, count=1)


@annotate_function('match', nargs=2, signature='(string, string)')
def evaluate_match_function(context: 'XPathContext', input_value: XPathValue,
                            pattern: XPathValue) -> str:
    """Returns the first group of the first match or an empty string."""
    match = translate_pattern(pattern.string_value()).search(input_value.string_value())
    if match is None or not match.re.groups:
        return ''
    return match.group(1) or ''


@annotate_function('if', nargs=3, signature='(boolean, object, object)')
@lazy_arguments
def evaluate_if_function(context: 'XPathContext', condition: Any,
                         then: Any, otherwise: Any) -> XPathValue:
    if condition.evaluate(context).boolean_value():
        return then.evaluate(context)  # type: ignore[no-any-return]
    return otherwise.evaluate(context)  # type: ignore[no-any-return]


@annotate_function('normalize', nargs=1, signature='(string)')
def evaluate_normalize_function(context: 'XPathContext', input_value: XPathValue) -> str:
    """
    Strips leading and trailing white spaces from each line, keeping the
    line breaks and the blank lines between text. Blank lines at the start
    and at the end of the string are removed.
    """
    return LINE_SPACES_PATTERN.sub('', input_value.string_value()).strip()


###
# Evaluation of matcher expressions
@lru_cache(maxsize=1024)
def compile_expression(expression: str) -> XPathEvaluator:
    try:
        return parse(expression)
    except XPathSyntaxError as err:
        raise XPathSyntaxError(
            'Error parsing xpath expression "%s": %s' % (expression, err.message),
            expression
        ) from err


class XPathSelect:
    """
    Evaluates matcher expressions on a report item, with the extension
    functions available.

    :param node: the report item, the context node of the evaluations.
    :param functions: optional additional functions, a mapping from names \
    to callables.
    """
    def __init__(self, node: XPathNode,
                 functions: Optional[Dict[str, Callable[..., Any]]] = None) -> None:
        self.node = node
        if functions:
            self.functions = {**ANNOTATE_FUNCTIONS, **functions}
        else:
            self.functions = ANNOTATE_FUNCTIONS

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self.node)

    def parse(self, expression: str) -> XPathEvaluator:
        return compile_expression(expression)

    def string(self, expression: str) -> str:
        return self.parse(expression).evaluate_string(node=self.node, functions=self.functions)

    def number(self, expression: str) -> float:
        return self.parse(expression).evaluate_number(node=self.node, functions=self.functions)

    def boolean(self, expression: str) -> bool:
        return self.parse(expression).evaluate_boolean(node=self.node,
                                                       functions=self.functions)
