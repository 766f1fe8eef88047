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
import math
import xml.etree.ElementTree as ElementTree

try:
    import lxml.etree as lxml_etree
except ImportError:
    lxml_etree = None

from reportpath import XPathTypeError, XPathSyntaxError, MissingContextError, \
    XPathEvaluator, XNodeSet, XString, ElementNode, TextNode, parse, select, \
    select1, use_namespaces, Selector, parse_xml


class XPathSelectorsTest(unittest.TestCase):
    etree = ElementTree

    @classmethod
    def setUpClass(cls):
        cls.root = cls.etree.XML('<author>Dickens</author>')
        cls.document = parse_xml('<books xmlns:ns="http://ns.test">'
                                 '<book id="b1"><ns:title>Hard Times</ns:title></book>'
                                 '<book id="b2"><ns:title>Bleak House</ns:title></book>'
                                 '</books>')

    def test_select_function(self):
        result = select('text()', self.root)
        self.assertEqual(len(result), 1)
        self.assertIsInstance(result[0], TextNode)
        self.assertEqual(result[0].value, 'Dickens')

        self.assertEqual(select('string(.)', self.root), 'Dickens')
        self.assertEqual(select('count(*)', self.root), 0.0)
        self.assertIs(select('. = "Dickens"', self.root), True)
        self.assertEqual(select('$a', variables={'a': 1}), 1.0)
        self.assertEqual(select('//book/@id', self.document)[1].value, 'b2')

        node = select('.', self.root, single=True)
        self.assertIsInstance(node, ElementNode)
        self.assertIs(node.obj, self.root)

    def test_select1_function(self):
        self.assertEqual(select1('//book', self.document).get_attribute('id'), 'b1')
        self.assertIsNone(select1('//missing', self.document))
        self.assertEqual(select1('1 + 1'), 2.0)

    def test_use_namespaces(self):
        selector = use_namespaces({'t': 'http://ns.test'})
        titles = selector('//t:title', self.document)
        self.assertListEqual([n.string_value for n in titles], ['Hard Times', 'Bleak House'])
        self.assertEqual(selector('//t:title', self.document, True).string_value,
                         'Hard Times')
        self.assertEqual(selector('string((//t:title)[2])', self.document), 'Bleak House')

    def test_parse_function(self):
        evaluator = parse('//book[@id = $id]/ns:title')
        self.assertIsInstance(evaluator, XPathEvaluator)
        self.assertEqual(repr(evaluator), "XPathEvaluator('//book[@id = $id]/ns:title')")
        self.assertEqual(str(evaluator), '/descendant-or-self::node()/child::book'
                                         '[(attribute::id = $id)]/child::ns:title')

        options = {'node': self.document, 'variables': {'id': 'b2'}}
        self.assertIsInstance(evaluator.evaluate(options), XNodeSet)
        self.assertEqual(evaluator.evaluate_string(options), 'Bleak House')
        self.assertTrue(math.isnan(evaluator.evaluate_number(options)))
        self.assertTrue(evaluator.evaluate_boolean(options))
        self.assertEqual(len(evaluator.evaluate_node_set(options)), 1)
        self.assertEqual(evaluator.evaluate_nodes(options)[0].string_value, 'Bleak House')
        self.assertEqual(evaluator.evaluate_first_node(options).name, 'ns:title')

        # keyword options override the mapping ones
        self.assertEqual(evaluator.evaluate_string(options, variables={'id': 'b1'}),
                         'Hard Times')
        self.assertEqual(evaluator.evaluate_string(node=self.document,
                                                   variables={'id': 'b3'}), '')

        self.assertRaises(XPathSyntaxError, parse, '//book[')

    def test_evaluation_options(self):
        evaluator = parse('/books/BOOK')
        self.assertEqual(len(evaluator.evaluate_nodes(node=self.document)), 0)
        self.assertEqual(len(evaluator.evaluate_nodes(node=self.document,
                                                      case_insensitive=True)), 2)

        with self.assertRaises(XPathTypeError) as ctx:
            evaluator.evaluate(node=self.document, namespace={})
        self.assertEqual(str(ctx.exception), 'unknown evaluation options: namespace')

        evaluator = parse('upper(string(.))')
        result = evaluator.evaluate_string(
            node=self.root, functions={'upper': lambda ctx, s: s.string_value().upper()}
        )
        self.assertEqual(result, 'DICKENS')

        self.assertRaises(MissingContextError, parse('.').evaluate)
        self.assertRaises(XPathTypeError, parse('1').evaluate_node_set)
        self.assertIsNone(parse('/*/missing').evaluate_first_node(node=self.document))

        book = select1('//book[2]', self.document)
        self.assertListEqual(parse('/').evaluate_nodes(node=book, virtual_root=book), [book])

    def test_virtual_root_of_etree_objects(self):
        root = self.etree.XML('<a><b><c/></b><d/></a>')
        child = root[0]

        result = select('/', root, virtual_root=child)
        self.assertEqual(len(result), 1)
        self.assertIsInstance(result[0], ElementNode)
        self.assertIs(result[0].obj, child)
        self.assertEqual(select('count(/descendant-or-self::*)', root,
                                virtual_root=child), 2.0)
        self.assertEqual(select('count(/descendant-or-self::*)', root), 4.0)

        node = select('name(/)', child, virtual_root=child)
        self.assertEqual(node, 'b')

        with self.assertRaises(XPathTypeError):
            select('/', root, virtual_root=self.etree.XML('<x/>'))

    def test_context_node_types(self):
        tree = self.etree.ElementTree(self.etree.XML('<a><b/></a>'))
        self.assertEqual(select('count(//b)', tree), 1.0)
        self.assertEqual(select('name(/*)', tree), 'a')
        self.assertRaises(XPathTypeError, select, '.', 'not a node')

    def test_selector_class(self):
        selector = Selector('./ns:title', namespaces={'ns': 'http://ns.test'})
        self.assertEqual(repr(selector), "Selector(path='./ns:title')")
        self.assertDictEqual(selector.namespaces, {'ns': 'http://ns.test'})
        self.assertIsInstance(selector.evaluator, XPathEvaluator)

        books = select('//book', self.document)
        self.assertListEqual([selector.select1(book).string_value for book in books],
                             ['Hard Times', 'Bleak House'])
        self.assertEqual(len(selector.select(books[0])), 1)

        selector = Selector('string(@id) = $id')
        self.assertIsNone(selector.namespaces)
        self.assertIs(selector.select(books[0], variables={'id': 'b1'}), True)
        self.assertIs(selector.select1(books[1], variables={'id': 'b1'}), False)

        selector = Selector('$value', variables={'value': XString('v')})
        self.assertEqual(selector.select(None), 'v')


@unittest.skipIf(lxml_etree is None, "lxml library is not installed")
class LxmlSelectorsTest(XPathSelectorsTest):
    etree = lxml_etree

    def test_lxml_prefixes(self):
        root = self.etree.XML('<p:a xmlns:p="http://p.test"><p:b/></p:a>')
        self.assertEqual(select('name(*)', root), 'p:b')
        self.assertEqual(select('count(p:b)', root), 1.0)


if __name__ == '__main__':
    unittest.main()
