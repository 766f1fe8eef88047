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
XPath 1.0 core function library.

Functions receive the evaluation context followed by the argument expressions,
not evaluated, so each function decides when and how to evaluate them.
"""
import math
from functools import wraps
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Tuple, Union

from .exceptions import XPathTypeError
from .helpers import collapse_white_spaces, round_number
from .namespaces import XML_NAMESPACE
from .xpath_nodes import XPathNode, ElementNode, DocumentNode, NamespaceNode, \
    ProcessingInstructionNode, is_attribute_like
from .values import XPathValue, XString, XNumber, XBoolean, XNodeSet

if TYPE_CHECKING:
    from .xpath_context import XPathContext

__all__ = ['BUILTIN_FUNCTIONS', 'XPathFunctionType', 'function']

XPathFunctionType = Callable[..., XPathValue]
NargsType = Union[int, Tuple[int, Optional[int]]]

BUILTIN_FUNCTIONS: Dict[str, XPathFunctionType] = {}


def function(name: str, nargs: NargsType = 0, signature: str = '()') \
        -> Callable[[XPathFunctionType], XPathFunctionType]:
    """
    Registers a core function, checking the number of arguments before calling it.

    :param name: the name of the function.
    :param nargs: the number of arguments, an integer or a couple with the \
    minimum and the maximum, where `None` means unbounded.
    :param signature: the signature of the function, used for error messages.
    """
    min_args: int
    max_args: Optional[int]
    if isinstance(nargs, int):
        min_args = max_args = nargs
    else:
        min_args, max_args = nargs

    def function_decorator(func: XPathFunctionType) -> XPathFunctionType:
        @wraps(func)
        def evaluate_function(context: 'XPathContext', *args: Any) -> XPathValue:
            if len(args) < min_args or max_args is not None and len(args) > max_args:
                raise wrong_arguments(name, signature)
            return func(context, *args)

        evaluate_function.signature = signature  # type: ignore[attr-defined]
        BUILTIN_FUNCTIONS[name] = evaluate_function
        return evaluate_function

    return function_decorator


def wrong_arguments(name: str, signature: str) -> XPathTypeError:
    return XPathTypeError("Function %s expects %s" % (name, signature))


def evaluate_nodeset(context: 'XPathContext', expr: Any,
                     name: str, signature: str) -> XNodeSet:
    value = expr.evaluate(context)
    if not isinstance(value, XNodeSet):
        raise wrong_arguments(name, signature)
    return value


def get_argument_node(context: 'XPathContext', args: Tuple[Any, ...],
                      name: str) -> Optional[XPathNode]:
    """Returns the context node or the first node of the optional node-set argument."""
    if not args:
        return context.get_context_node()
    return evaluate_nodeset(context, args[0], name, '(node-set?)').first()


###
# Node-set functions
@function('last')
def evaluate_last_function(context: 'XPathContext') -> XPathValue:
    return XNumber(context.context_size)


@function('position')
def evaluate_position_function(context: 'XPathContext') -> XPathValue:
    return XNumber(context.context_position)


@function('count', nargs=1, signature='(node-set)')
def evaluate_count_function(context: 'XPathContext', arg: Any) -> XPathValue:
    return XNumber(evaluate_nodeset(context, arg, 'count', '(node-set)').size)


@function('id', nargs=1, signature='(object)')
def evaluate_id_function(context: 'XPathContext', arg: Any) -> XPathValue:
    value = arg.evaluate(context)
    if isinstance(value, XNodeSet):
        ids = ' '.join(value.string_values()).split()
    else:
        ids = value.string_value().split()

    node = context.get_context_node()
    document = node if isinstance(node, DocumentNode) else node.owner_document
    result = XNodeSet()
    if document is not None:
        for value_id in ids:
            element = document.get_element_by_id(value_id)
            if element is not None:
                result.add(element)
    return result


@function('local-name', nargs=(0, 1), signature='(node-set?)')
def evaluate_local_name_function(context: 'XPathContext', *args: Any) -> XPathValue:
    node = get_argument_node(context, args, 'local-name')
    return XString('' if node is None else node.local_name)


@function('namespace-uri', nargs=(0, 1), signature='(node-set?)')
def evaluate_namespace_uri_function(context: 'XPathContext', *args: Any) -> XPathValue:
    node = get_argument_node(context, args, 'namespace-uri')
    if node is None or isinstance(node, (NamespaceNode, ProcessingInstructionNode)):
        return XString()
    return XString(node.namespace_uri)


@function('name', nargs=(0, 1), signature='(node-set?)')
def evaluate_name_function(context: 'XPathContext', *args: Any) -> XPathValue:
    node = get_argument_node(context, args, 'name')
    return XString('' if node is None else node.name)


###
# String functions
@function('string', nargs=(0, 1), signature='(object?)')
def evaluate_string_function(context: 'XPathContext', *args: Any) -> XPathValue:
    if not args:
        return XString(context.get_context_node().string_value)
    return args[0].evaluate(context).string()


@function('concat', nargs=(2, None), signature='(string, string[, string]*)')
def evaluate_concat_function(context: 'XPathContext', *args: Any) -> XPathValue:
    return XString(''.join(arg.evaluate(context).string_value() for arg in args))


@function('starts-with', nargs=2, signature='(string, string)')
def evaluate_starts_with_function(context: 'XPathContext', arg1: Any, arg2: Any) \
        -> XPathValue:
    value = arg1.evaluate(context).string_value()
    return XBoolean(value.startswith(arg2.evaluate(context).string_value()))


@function('contains', nargs=2, signature='(string, string)')
def evaluate_contains_function(context: 'XPathContext', arg1: Any, arg2: Any) -> XPathValue:
    value = arg1.evaluate(context).string_value()
    return XBoolean(arg2.evaluate(context).string_value() in value)


@function('substring-before', nargs=2, signature='(string, string)')
def evaluate_substring_before_function(context: 'XPathContext', arg1: Any, arg2: Any) \
        -> XPathValue:
    value = arg1.evaluate(context).string_value()
    index = value.find(arg2.evaluate(context).string_value())
    return XString('' if index < 0 else value[:index])


@function('substring-after', nargs=2, signature='(string, string)')
def evaluate_substring_after_function(context: 'XPathContext', arg1: Any, arg2: Any) \
        -> XPathValue:
    value = arg1.evaluate(context).string_value()
    search = arg2.evaluate(context).string_value()
    index = value.find(search)
    return XString('' if index < 0 else value[index + len(search):])


@function('substring', nargs=(2, 3), signature='(string, number, number?)')
def evaluate_substring_function(context: 'XPathContext', *args: Any) -> XPathValue:
    value = args[0].evaluate(context).string_value()
    start = round_number(args[1].evaluate(context).number_value())
    if len(args) > 2:
        end = start + round_number(args[2].evaluate(context).number_value())
    else:
        end = math.inf

    # characters at positions p, counted from 1, where start <= p < end
    return XString(''.join(
        c for p, c in enumerate(value, start=1) if start <= p < end
    ))


@function('string-length', nargs=(0, 1), signature='(string?)')
def evaluate_string_length_function(context: 'XPathContext', *args: Any) -> XPathValue:
    if not args:
        return XNumber(len(context.get_context_node().string_value))
    return XNumber(len(args[0].evaluate(context).string_value()))


@function('normalize-space', nargs=(0, 1), signature='(string?)')
def evaluate_normalize_space_function(context: 'XPathContext', *args: Any) -> XPathValue:
    if not args:
        value = context.get_context_node().string_value
    else:
        value = args[0].evaluate(context).string_value()
    return XString(collapse_white_spaces(value))


@function('translate', nargs=3, signature='(string, string, string)')
def evaluate_translate_function(context: 'XPathContext', *args: Any) -> XPathValue:
    value, map_string, trans_string = (arg.evaluate(context).string_value() for arg in args)

    mapping: Dict[str, Optional[str]] = {}
    for k, c in enumerate(map_string):
        if c not in mapping:
            mapping[c] = trans_string[k] if k < len(trans_string) else None

    return XString(''.join(
        c if c not in mapping else mapping[c] or '' for c in value
    ))


###
# Boolean functions
@function('boolean', nargs=1, signature='(object)')
def evaluate_boolean_function(context: 'XPathContext', arg: Any) -> XPathValue:
    return arg.evaluate(context).boolean()


@function('not', nargs=1, signature='(object)')
def evaluate_not_function(context: 'XPathContext', arg: Any) -> XPathValue:
    return XBoolean(not arg.evaluate(context).boolean_value())


@function('true')
def evaluate_true_function(context: 'XPathContext') -> XPathValue:
    return XBoolean(True)


@function('false')
def evaluate_false_function(context: 'XPathContext') -> XPathValue:
    return XBoolean(False)


@function('lang', nargs=1, signature='(string)')
def evaluate_lang_function(context: 'XPathContext', arg: Any) -> XPathValue:
    lang = arg.evaluate(context).string_value().lower()
    node: Optional[XPathNode] = context.get_context_node()
    if node is not None and is_attribute_like(node):
        node = node.parent

    while isinstance(node, ElementNode):
        value = node.get_attribute_ns(XML_NAMESPACE, 'lang')
        if value is not None:
            value = value.strip().lower()
            return XBoolean(value == lang or value.startswith(lang + '-'))
        node = node.parent  # type: ignore[assignment]
    return XBoolean(False)


###
# Number functions
@function('number', nargs=(0, 1), signature='(object?)')
def evaluate_number_function(context: 'XPathContext', *args: Any) -> XPathValue:
    if not args:
        return XString(context.get_context_node().string_value).number()
    return args[0].evaluate(context).number()


@function('sum', nargs=1, signature='(node-set)')
def evaluate_sum_function(context: 'XPathContext', arg: Any) -> XPathValue:
    nodes = evaluate_nodeset(context, arg, 'sum', '(node-set)')
    return XNumber(sum(XString(v).number_value() for v in nodes.string_values()))


@function('floor', nargs=1, signature='(number)')
def evaluate_floor_function(context: 'XPathContext', arg: Any) -> XPathValue:
    value = arg.evaluate(context).number_value()
    if math.isnan(value) or math.isinf(value):
        return XNumber(value)
    return XNumber(math.floor(value))


@function('ceiling', nargs=1, signature='(number)')
def evaluate_ceiling_function(context: 'XPathContext', arg: Any) -> XPathValue:
    value = arg.evaluate(context).number_value()
    if math.isnan(value) or math.isinf(value):
        return XNumber(value)
    elif -1 < value < 0:
        return XNumber(-0.0)
    return XNumber(math.ceil(value))


@function('round', nargs=1, signature='(number)')
def evaluate_round_function(context: 'XPathContext', arg: Any) -> XPathValue:
    return XNumber(round_number(arg.evaluate(context).number_value()))
