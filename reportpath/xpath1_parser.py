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
XPath 1.0 parser: the grammar of the language, written in BNF with
the lexical disambiguation rules applied by the tokenizer, and the
reduction actions that build the syntax tree.
"""
from typing import Any, List

from .exceptions import XPathSyntaxError
from .lalr_parser import Grammar, LALRParser
from .tokenizer import tokenize
from .values import XString, XNumber
from .axes import AXES
from .xpath_ast import OrOperation, AndOperation, EqualsOperation, NotEqualOperation, \
    LessThanOperation, GreaterThanOperation, LessThanOrEqualOperation, \
    GreaterThanOrEqualOperation, PlusOperation, MinusOperation, MultiplyOperation, \
    DivOperation, ModOperation, UnaryMinusOperation, UnionOperation, \
    NameTestAny, NameTestPrefixAny, NameTestQName, CommentTest, TextTest, \
    ProcessingInstructionTest, AnyNodeTest, NodeTest, Step, LocationPath, PathExpr, \
    FunctionCall, VariableReference, XPath

__all__ = ['XPath1Parser']


class XPath1Parser(LALRParser):
    """
    XPath 1.0 expression parser class. Parsing produces a compiled
    expression, an instance of `XPath`.
    """
    grammar = Grammar('Expr')
    table = None

    tokenize = staticmethod(tokenize)

    def parse(self, source: str) -> XPath:
        try:
            return XPath(super().parse(source), source)
        except XPathSyntaxError as err:
            if err.expression is None:
                err.expression = source
            raise


register = XPath1Parser.register
reduction = XPath1Parser.reduction


def descendant_or_self_step() -> Step:
    return Step('descendant-or-self', AnyNodeTest())


###
# Expressions
register('Expr : OrExpr')
register('OrExpr : AndExpr')
register('AndExpr : EqualityExpr')
register('EqualityExpr : RelationalExpr')
register('RelationalExpr : AdditiveExpr')
register('AdditiveExpr : MultiplicativeExpr')
register('MultiplicativeExpr : UnaryExpr')
register('UnaryExpr : UnionExpr')
register('UnionExpr : PathExpr')

register('OrExpr : OrExpr or AndExpr', lambda x, _, y: OrOperation(x, y))
register('AndExpr : AndExpr and EqualityExpr', lambda x, _, y: AndOperation(x, y))
register('EqualityExpr : EqualityExpr = RelationalExpr',
         lambda x, _, y: EqualsOperation(x, y))
register('EqualityExpr : EqualityExpr != RelationalExpr',
         lambda x, _, y: NotEqualOperation(x, y))
register('RelationalExpr : RelationalExpr < AdditiveExpr',
         lambda x, _, y: LessThanOperation(x, y))
register('RelationalExpr : RelationalExpr > AdditiveExpr',
         lambda x, _, y: GreaterThanOperation(x, y))
register('RelationalExpr : RelationalExpr <= AdditiveExpr',
         lambda x, _, y: LessThanOrEqualOperation(x, y))
register('RelationalExpr : RelationalExpr >= AdditiveExpr',
         lambda x, _, y: GreaterThanOrEqualOperation(x, y))
register('AdditiveExpr : AdditiveExpr + MultiplicativeExpr',
         lambda x, _, y: PlusOperation(x, y))
register('AdditiveExpr : AdditiveExpr - MultiplicativeExpr',
         lambda x, _, y: MinusOperation(x, y))
register('MultiplicativeExpr : MultiplicativeExpr MULTIPLY UnaryExpr',
         lambda x, _, y: MultiplyOperation(x, y))
register('MultiplicativeExpr : MultiplicativeExpr div UnaryExpr',
         lambda x, _, y: DivOperation(x, y))
register('MultiplicativeExpr : MultiplicativeExpr mod UnaryExpr',
         lambda x, _, y: ModOperation(x, y))
register('UnaryExpr : - UnaryExpr', lambda _, x: UnaryMinusOperation(x))
register('UnionExpr : UnionExpr | PathExpr', lambda x, _, y: UnionOperation(x, y))


###
# Path expressions
register('PathExpr : LocationPath', lambda path: PathExpr(location_path=path))
register('PathExpr : FilterExpr')


@reduction('PathExpr : FilterExpr / RelativeLocationPath',
           'PathExpr : FilterExpr // RelativeLocationPath')
def reduce_filtered_path(filter_expr: Any, separator: str, path: LocationPath) -> PathExpr:
    if separator == '//':
        path.steps.insert(0, descendant_or_self_step())

    if isinstance(filter_expr, PathExpr) and filter_expr.location_path is None:
        filter_expr.location_path = path
        return filter_expr
    return PathExpr(filter_expr, location_path=path)


register('FilterExpr : PrimaryExpr')


@reduction('FilterExpr : FilterExpr Predicate')
def reduce_filter_predicate(filter_expr: Any, predicate: Any) -> PathExpr:
    if isinstance(filter_expr, PathExpr) and filter_expr.location_path is None:
        filter_expr.filter_predicates.append(predicate)
        return filter_expr
    return PathExpr(filter_expr, [predicate])


register('LocationPath : RelativeLocationPath')
register('LocationPath : AbsoluteLocationPath')
register('AbsoluteLocationPath : /', lambda _: LocationPath(absolute=True))


@reduction('AbsoluteLocationPath : / RelativeLocationPath',
           'AbsoluteLocationPath : // RelativeLocationPath')
def reduce_absolute_path(separator: str, path: LocationPath) -> LocationPath:
    if separator == '//':
        path.steps.insert(0, descendant_or_self_step())
    path.absolute = True
    return path


register('RelativeLocationPath : Step', lambda step: LocationPath(steps=[step]))


@reduction('RelativeLocationPath : RelativeLocationPath / Step',
           'RelativeLocationPath : RelativeLocationPath // Step')
def reduce_relative_path(path: LocationPath, separator: str, step: Step) -> LocationPath:
    if separator == '//':
        path.steps.append(descendant_or_self_step())
    path.steps.append(step)
    return path


###
# Location steps
register('Step : AxisSpecifier NodeTest', lambda axis, test: Step(axis, test))
register('Step : AxisSpecifier NodeTest PredicateList',
         lambda axis, test, predicates: Step(axis, test, predicates))
register('Step : NodeTest', lambda test: Step('child', test))
register('Step : NodeTest PredicateList',
         lambda test, predicates: Step('child', test, predicates))
register('Step : .', lambda _: Step('self', AnyNodeTest()))
register('Step : ..', lambda _: Step('parent', AnyNodeTest()))


@reduction('AxisSpecifier : AXIS_NAME ::')
def reduce_axis_name(name: str, _: str) -> str:
    if name not in AXES:
        raise XPathSyntaxError("Unknown axis: %s" % name)
    return name


register('AxisSpecifier : @', lambda _: 'attribute')

register('NodeTest : NameTest')


@reduction('NodeTest : NODE_TYPE ( )')
def reduce_node_type_test(name: str, *_: str) -> NodeTest:
    if name == 'comment':
        return CommentTest()
    elif name == 'text':
        return TextTest()
    elif name == 'processing-instruction':
        return ProcessingInstructionTest()
    return AnyNodeTest()


register('NodeTest : PI_WITH_LITERAL ( LITERAL )',
         lambda _name, _lpar, target, _rpar: ProcessingInstructionTest(target))

register('NameTest : ASTERISK_NAME_TEST', lambda _: NameTestAny())
register('NameTest : NCNAME_COLON_ASTERISK', lambda name: NameTestPrefixAny(name[:-2]))
register('NameTest : QNAME', lambda name: NameTestQName(name))

register('PredicateList : Predicate', lambda predicate: [predicate])


@reduction('PredicateList : PredicateList Predicate')
def reduce_predicate_list(predicates: List[Any], predicate: Any) -> List[Any]:
    predicates.append(predicate)
    return predicates


register('Predicate : [ Expr ]', lambda _, expr, __: expr)


###
# Primary expressions
register('PrimaryExpr : VariableReference')
register('PrimaryExpr : ( Expr )', lambda _, expr, __: expr)
register('PrimaryExpr : LITERAL', lambda value: XString(value))
register('PrimaryExpr : NUMBER', lambda value: XNumber(float(value)))
register('PrimaryExpr : FunctionCall')

register('FunctionCall : FUNCTION_NAME ( )', lambda name, *_: FunctionCall(name))
register('FunctionCall : FUNCTION_NAME ( ArgumentList )',
         lambda name, _, arguments, __: FunctionCall(name, arguments))
register('ArgumentList : Expr', lambda expr: [expr])


@reduction('ArgumentList : ArgumentList , Expr')
def reduce_argument_list(arguments: List[Any], _: str, expr: Any) -> List[Any]:
    arguments.append(expr)
    return arguments


register('VariableReference : $ QNAME', lambda _, name: VariableReference(name))


XPath1Parser.build()
