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
XPath 1.0 lexical analysis. The lexical structure of XPath is contextual:
the same lexeme can be a name test or an operator depending on the preceding
token and a name can be a function name, an axis name or a node type
depending on what follows it.
"""
import re
from typing import List, Tuple

from .exceptions import XPathSyntaxError
from .helpers import NCNAME

__all__ = ['LITERAL', 'NUMBER', 'QNAME', 'ASTERISK_NAME_TEST', 'NCNAME_COLON_ASTERISK',
           'AXIS_NAME', 'FUNCTION_NAME', 'NODE_TYPE', 'PI_WITH_LITERAL', 'MULTIPLY',
           'EOF', 'OPERAND_ENDERS', 'tokenize']

# Types of the tokens with a variable lexeme, the others are identified by their symbol
LITERAL = 'LITERAL'
NUMBER = 'NUMBER'
QNAME = 'QNAME'
ASTERISK_NAME_TEST = 'ASTERISK_NAME_TEST'
NCNAME_COLON_ASTERISK = 'NCNAME_COLON_ASTERISK'
AXIS_NAME = 'AXIS_NAME'
FUNCTION_NAME = 'FUNCTION_NAME'
NODE_TYPE = 'NODE_TYPE'
PI_WITH_LITERAL = 'PI_WITH_LITERAL'
MULTIPLY = 'MULTIPLY'
EOF = 'EOF'

NODE_TYPES = frozenset(('comment', 'text', 'node', 'processing-instruction'))
OPERATOR_NAMES = frozenset(('and', 'or', 'mod', 'div'))

# After these tokens an operator is expected instead of an operand
OPERAND_ENDERS = frozenset((
    QNAME, ASTERISK_NAME_TEST, NCNAME_COLON_ASTERISK, NUMBER, LITERAL, ')', ']', '.', '..'
))

TOKEN_PATTERN = re.compile(r"""
    (?P<skip>[ \t\r\n]+) |
    (?P<literal>"[^"]*"|'[^']*') |
    (?P<unterminated>["']) |
    (?P<number>\d+(?:\.\d*)?|\.\d+) |
    (?P<symbol>\.\.|::|//|!=|<=|>=|[()\[\].@,/|+\-=<>*$]) |
    (?P<name>{0}(?::(?:{0}|\*))?)
""".format(NCNAME), re.VERBOSE)

SKIP_PATTERN = re.compile(r'[ \t\r\n]*')


def _next_char(source: str, pos: int) -> str:
    """Returns the next non-whitespace character, an empty string at the end."""
    pos = SKIP_PATTERN.match(source, pos).end()  # type: ignore[union-attr]
    return source[pos:pos + 1]


def _classify_name(source: str, pos: int, name: str, previous: str) -> str:
    if previous == '$':
        return QNAME
    elif name.endswith(':*'):
        return NCNAME_COLON_ASTERISK
    elif previous in OPERAND_ENDERS and name in OPERATOR_NAMES:
        return name

    next_pos = SKIP_PATTERN.match(source, pos).end()  # type: ignore[union-attr]
    if source.startswith('::', next_pos) and ':' not in name:
        return AXIS_NAME
    elif source[next_pos:next_pos + 1] != '(':
        return QNAME
    elif name not in NODE_TYPES:
        return FUNCTION_NAME
    elif name == 'processing-instruction' and \
            _next_char(source, next_pos + 1) in ('"', "'"):
        return PI_WITH_LITERAL
    return NODE_TYPE


def tokenize(source: str) -> Tuple[List[str], List[str]]:
    """
    Splits an XPath 1.0 expression into tokens.

    :param source: the XPath expression.
    :returns: a couple of parallel lists with the types and the values of \
    the tokens. The last token is always an `EOF` token.
    """
    types: List[str] = []
    values: List[str] = []
    previous = ''
    pos = 0

    while pos < len(source):
        match = TOKEN_PATTERN.match(source, pos)
        if match is None:
            raise XPathSyntaxError("Unexpected character %s" % source[pos], source)

        pos = match.end()
        kind = match.lastgroup
        value = match.group()

        if kind == 'skip':
            continue
        elif kind == 'literal':
            token_type = LITERAL
            value = value[1:-1]
        elif kind == 'unterminated':
            raise XPathSyntaxError("Unterminated string literal", source)
        elif kind == 'number':
            token_type = NUMBER
        elif kind == 'name':
            token_type = _classify_name(source, pos, value, previous)
        elif value != '*':
            token_type = value
        elif previous in OPERAND_ENDERS:
            token_type = MULTIPLY
        else:
            token_type = ASTERISK_NAME_TEST

        types.append(token_type)
        values.append(value)
        previous = token_type

    types.append(EOF)
    values.append('')
    return types, values
