#!/usr/bin/env python
#
# Copyright (c), 2018-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
import unittest

from reportpath import XPathSyntaxError
from reportpath.tokenizer import tokenize

try:
    from tests import xpath_test_class
except ImportError:
    import xpath_test_class


class TokenizerTest(xpath_test_class.XPathTestCase):

    def test_location_paths(self):
        # examples from the XPath 1.0 recommendation
        self.check_tokenizer("*", ['ASTERISK_NAME_TEST'])
        self.check_tokenizer("text()", ['NODE_TYPE', '(', ')'])
        self.check_tokenizer("@name", ['@', 'QNAME'])
        self.check_tokenizer("@*", ['@', 'ASTERISK_NAME_TEST'])
        self.check_tokenizer("para[1]", ['QNAME', '[', 'NUMBER', ']'])
        self.check_tokenizer("para[last()]", ['QNAME', '[', 'FUNCTION_NAME', '(', ')', ']'])
        self.check_tokenizer("*/para", ['ASTERISK_NAME_TEST', '/', 'QNAME'])
        self.check_tokenizer("chapter//para", ['QNAME', '//', 'QNAME'])
        self.check_tokenizer(".//para", ['.', '//', 'QNAME'])
        self.check_tokenizer("../@lang", ['..', '/', '@', 'QNAME'])
        self.check_tokenizer("child::text()", ['AXIS_NAME', '::', 'NODE_TYPE', '(', ')'])
        self.check_tokenizer("ancestor-or-self :: div",
                             ['AXIS_NAME', '::', 'QNAME'], ['ancestor-or-self', '::', 'div'])

    def test_literals_and_numbers(self):
        self.check_tokenizer("'alpha'", ['LITERAL'], ['alpha'])
        self.check_tokenizer('"it\'s"', ['LITERAL'], ["it's"])
        self.check_tokenizer("12.5 + .5 + 3.", ['NUMBER', '+', 'NUMBER', '+', 'NUMBER'],
                             ['12.5', '+', '.5', '+', '3.'])
        self.check_tokenizer("-1", ['-', 'NUMBER'])

    def test_operator_names(self):
        self.check_tokenizer("a and b", ['QNAME', 'and', 'QNAME'])
        self.check_tokenizer("and and and", ['QNAME', 'and', 'QNAME'])
        self.check_tokenizer("div div div", ['QNAME', 'div', 'QNAME'])
        self.check_tokenizer("1 mod 2", ['NUMBER', 'mod', 'NUMBER'])
        self.check_tokenizer("or(1)", ['FUNCTION_NAME', '(', 'NUMBER', ')'])
        self.check_tokenizer("(a) or [b]", ['(', 'QNAME', ')', 'or', '[', 'QNAME', ']'])

    def test_asterisk_disambiguation(self):
        self.check_tokenizer("* * *", ['ASTERISK_NAME_TEST', 'MULTIPLY', 'ASTERISK_NAME_TEST'])
        self.check_tokenizer("2*3", ['NUMBER', 'MULTIPLY', 'NUMBER'])
        self.check_tokenizer("a/*", ['QNAME', '/', 'ASTERISK_NAME_TEST'])
        self.check_tokenizer("tst:*", ['NCNAME_COLON_ASTERISK'], ['tst:*'])
        self.check_tokenizer("(1)*2", ['(', 'NUMBER', ')', 'MULTIPLY', 'NUMBER'])

    def test_names(self):
        self.check_tokenizer("tst:person", ['QNAME'], ['tst:person'])
        self.check_tokenizer("$var", ['$', 'QNAME'])
        self.check_tokenizer("$text", ['$', 'QNAME'])
        self.check_tokenizer("$div", ['$', 'QNAME'])
        self.check_tokenizer("text", ['QNAME'])
        self.check_tokenizer("node()", ['NODE_TYPE', '(', ')'])
        self.check_tokenizer("comment ()", ['NODE_TYPE', '(', ')'])
        self.check_tokenizer("spam.egg", ['QNAME'], ['spam.egg'])
        self.check_tokenizer("_last()", ['FUNCTION_NAME', '(', ')'])
        self.check_tokenizer("substring-after()", ['FUNCTION_NAME', '(', ')'])
        self.check_tokenizer("àccent", ['QNAME'])
        self.check_tokenizer("a\u00B7b:c\u203Fd", ['QNAME'], ['a\u00B7b:c\u203Fd'])

    def test_processing_instruction_tokens(self):
        self.check_tokenizer("processing-instruction()", ['NODE_TYPE', '(', ')'])
        self.check_tokenizer("processing-instruction('xml-stylesheet')",
                             ['PI_WITH_LITERAL', '(', 'LITERAL', ')'])
        self.check_tokenizer('processing-instruction( "x" )',
                             ['PI_WITH_LITERAL', '(', 'LITERAL', ')'])

    def test_symbols(self):
        self.check_tokenizer("a!=b", ['QNAME', '!=', 'QNAME'])
        self.check_tokenizer("1<=2>=3<4>5", ['NUMBER', '<=', 'NUMBER', '>=', 'NUMBER',
                                             '<', 'NUMBER', '>', 'NUMBER'])
        self.check_tokenizer("a|b", ['QNAME', '|', 'QNAME'])
        self.check_tokenizer("f(1, 2)", ['FUNCTION_NAME', '(', 'NUMBER', ',', 'NUMBER', ')'])
        self.check_tokenizer('./ /.', ['.', '/', '/', '.'])

    def test_eof_token(self):
        types, values = tokenize('')
        self.assertListEqual(types, ['EOF'])
        self.assertListEqual(values, [''])

        types, values = tokenize('  \n\t')
        self.assertListEqual(types, ['EOF'])

    def test_lexical_errors(self):
        with self.assertRaises(XPathSyntaxError) as ctx:
            tokenize('oopsie€daisy/#message')
        self.assertEqual(str(ctx.exception), 'Unexpected character €')
        self.assertEqual(ctx.exception.expression, 'oopsie€daisy/#message')

        with self.assertRaises(XPathSyntaxError) as ctx:
            tokenize('a/#b')
        self.assertEqual(str(ctx.exception), 'Unexpected character #')

        with self.assertRaises(XPathSyntaxError) as ctx:
            tokenize("concat('a, 'b')")
        self.assertEqual(str(ctx.exception), 'Unterminated string literal')

        self.assertRaises(XPathSyntaxError, tokenize, 'a!b')
        self.assertRaises(XPathSyntaxError, tokenize, '{http://spam}egg')


if __name__ == '__main__':
    unittest.main()
