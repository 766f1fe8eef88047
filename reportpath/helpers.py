#
# Copyright (c), 2018-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
import re
import math
from decimal import Decimal

###
# Data validation helpers

XPATH_WHITESPACES = ' \t\r\n'
WHITESPACES_PATTERN = re.compile(r'[ \t\r\n]+')
NCNAME_START_CHAR = r'[^\d\W]'
NAME_CHARS = r'[\w.\-\u00B7\u0300-\u036F\u203F\u2040]*'
NCNAME = NCNAME_START_CHAR + NAME_CHARS
NUMBER_PATTERN = re.compile(r'^[ \t\r\n]*-?(?:\d+(?:\.\d*)?|\.\d+)[ \t\r\n]*$')


def collapse_white_spaces(s: str) -> str:
    return WHITESPACES_PATTERN.sub(' ', s).strip(' ')


###
# Number helpers

def string_to_number(s: str) -> float:
    """
    Converts a string to a number following the XPath 1.0 rules: optional
    whitespace, an optional minus sign, a number and optional whitespace,
    anything else is NaN.
    """
    if NUMBER_PATTERN.match(s) is None:
        return math.nan
    return float(s.strip(XPATH_WHITESPACES))


def number_to_string(value: float) -> str:
    """
    Converts a number to its XPath 1.0 string representation. Exponents are
    expanded, integral values have no decimal part and zeros have no sign.
    """
    if math.isnan(value):
        return 'NaN'
    elif math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    elif value == 0:
        return '0'

    text = format(Decimal(repr(float(value))), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def round_number(value: float) -> float:
    """Rounds to the closest integer, halves toward positive infinity."""
    if math.isnan(value) or math.isinf(value):
        return value
    elif -0.5 <= value < 0 or value == 0 and math.copysign(1.0, value) < 0:
        return -0.0
    return float(math.floor(value + 0.5))


def divide(x: float, y: float) -> float:
    """Division with IEEE 754 semantics, divisions by zero don't raise."""
    if y == 0:
        if x == 0 or math.isnan(x):
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)
    return x / y


def modulo(x: float, y: float) -> float:
    """Remainder of a truncating division, the result has the sign of the dividend."""
    if math.isnan(x) or math.isnan(y) or math.isinf(x) or y == 0:
        return math.nan
    elif math.isinf(y):
        return x
    return math.fmod(x, y)
