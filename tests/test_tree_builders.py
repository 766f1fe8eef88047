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
import io
import os
import pathlib
from xml.etree import ElementTree

try:
    import lxml.etree as lxml_etree
except ImportError:
    lxml_etree = None

from reportpath import XPathTypeError, DocumentNode, ElementNode, TextNode, \
    CommentNode, ProcessingInstructionNode, get_node_tree, build_node_tree, \
    build_lxml_node_tree, parse_xml

try:
    from tests import xpath_test_class
except ImportError:
    import xpath_test_class

SAMPLE_XML = '<?xml version="1.0"?>\n' \
             '<!-- top comment -->\n' \
             '<root xmlns="http://a.test" xmlns:p="http://p.test" p:x="1">' \
             'text<p:child>inner</p:child><!--c--><?target some data?>tail' \
             '<empty xmlns=""/></root>'


class TreeBuildersTest(unittest.TestCase):

    def check_positions(self, root):
        positions = [n.position for n in root.iter_descendants()]
        self.assertListEqual(positions, sorted(positions))
        self.assertEqual(len(set(positions)), len(positions))

    def test_build_node_tree_with_element(self):
        elem = ElementTree.XML('<A><B1 a="1"/><B2>text<C1/>tail</B2></A>')
        root = build_node_tree(elem)
        self.assertIsInstance(root, ElementNode)
        self.assertIs(root.obj, elem)
        self.assertIsNone(root.parent)
        self.assertIs(root.tree.root, root)
        self.assertListEqual([n.name for n in root.children], ['B1', 'B2'])

        b1, b2 = root.children
        self.assertEqual(b1.get_attribute('a'), '1')
        self.assertIsInstance(b2.children[0], TextNode)
        self.assertListEqual([type(n) for n in b2.children], [TextNode, ElementNode, TextNode])
        self.assertEqual(b2.string_value, 'texttail')
        self.check_positions(root)

        # attributes come after their element and before its children
        self.assertLess(b1.position, b1.attributes[0].position)
        self.assertLess(b1.attributes[0].position, b2.position)

    def test_build_node_tree_with_element_tree(self):
        document = build_node_tree(ElementTree.ElementTree(ElementTree.XML('<A><B/></A>')),
                                   uri='file.xml')
        self.assertIsInstance(document, DocumentNode)
        self.assertEqual(document.uri, 'file.xml')
        self.assertEqual(document.position, 1)
        self.assertEqual(document.document_element.name, 'A')
        self.assertEqual(document.document_element.position, 2)

    def test_build_node_tree_with_namespaces(self):
        elem = ElementTree.XML('<p:A xmlns:p="http://p.test"><p:B/><C/></p:A>')

        # declarations are lost by the ElementTree parser, prefixes come from the map
        root = build_node_tree(elem, namespaces={'tst': 'http://p.test'})
        self.assertListEqual([n.name for n in root.iter_descendants()],
                             ['tst:A', 'tst:B', 'C'])
        self.assertDictEqual(root.nsmap, {'tst': 'http://p.test'})

        root = build_node_tree(elem)
        self.assertEqual(root.name, 'A')
        self.assertEqual(root.namespace_uri, 'http://p.test')

    def test_parse_xml(self):
        document = parse_xml(SAMPLE_XML)
        root = document.document_element
        self.assertEqual(root.name, 'root')
        self.assertEqual(root.namespace_uri, 'http://a.test')
        self.assertDictEqual(root.declarations, {'': 'http://a.test', 'p': 'http://p.test'})
        self.assertEqual(root.attributes[0].name, 'p:x')

        text, child, comment, pi, tail, empty = root.children
        self.assertEqual(text.value, 'text')
        self.assertEqual(child.name, 'p:child')
        self.assertIsInstance(comment, CommentNode)
        self.assertEqual(comment.value, 'c')
        self.assertIsInstance(pi, ProcessingInstructionNode)
        self.assertEqual((pi.target, pi.value), ('target', 'some data'))
        self.assertEqual(tail.value, 'tail')
        self.assertEqual(empty.name, 'empty')
        self.assertEqual(empty.namespace_uri, '')
        self.assertNotIn('', empty.nsmap)
        self.check_positions(document)

    def test_parse_xml_sources(self):
        path = xpath_test_class.casepath('collection.xml')
        document = parse_xml(path)
        self.assertEqual(document.uri, path)
        self.assertEqual(document.document_element.name, 'collection')

        document = parse_xml(pathlib.Path(path))
        self.assertEqual(document.uri, os.fspath(pathlib.Path(path)))

        with open(path, 'rb') as fp:
            document = parse_xml(fp)
        self.assertEqual(document.uri, path)

        document = parse_xml(io.StringIO('<a/>'), uri='memory.xml')
        self.assertEqual(document.uri, 'memory.xml')

        document = parse_xml(b'  <a>\xc3\xa0</a>')
        self.assertEqual(document.string_value, 'à')
        self.assertIsNone(document.uri)

        self.assertRaises(XPathTypeError, parse_xml, 10)
        self.assertRaises(ElementTree.ParseError, parse_xml, '<a><b></a>')
        self.assertRaises(OSError, parse_xml, xpath_test_class.casepath('missing.xml'))

    def test_get_node_tree(self):
        document = parse_xml('<a/>')
        self.assertIs(get_node_tree(document), document)
        self.assertIs(get_node_tree(document.document_element), document.document_element)

        root = get_node_tree(ElementTree.XML('<a><b/></a>'))
        self.assertIsInstance(root, ElementNode)
        document = get_node_tree(ElementTree.ElementTree(ElementTree.XML('<a/>')))
        self.assertIsInstance(document, DocumentNode)

        self.assertRaises(XPathTypeError, get_node_tree, TextNode('x'))
        self.assertRaises(XPathTypeError, get_node_tree, 'a')
        self.assertRaises(XPathTypeError, get_node_tree, ElementTree.Comment('x'))

    @unittest.skipIf(lxml_etree is None, "lxml library is not installed")
    def test_build_lxml_node_tree_with_element(self):
        elem = lxml_etree.XML('<p:A xmlns:p="http://p.test" a="1">text<p:B/>'
                              '<!--c--><?pi data?><C xmlns="http://c.test"/>tail</p:A>')
        root = build_lxml_node_tree(elem)
        self.assertIsInstance(root, ElementNode)
        self.assertEqual(root.name, 'p:A')
        self.assertDictEqual(root.declarations, {'p': 'http://p.test'})

        children = root.children
        self.assertListEqual([n.node_kind for n in children],
                             ['text', 'element', 'comment', 'processing-instruction',
                              'element', 'text'])
        self.assertEqual(children[1].name, 'p:B')
        self.assertEqual(children[3].name, 'pi')
        self.assertEqual(children[3].string_value, 'data')
        self.assertEqual(children[4].name, 'C')
        self.assertDictEqual(children[4].declarations, {'': 'http://c.test'})
        self.check_positions(root)

        self.assertIs(get_node_tree(elem).obj, elem)

    @unittest.skipIf(lxml_etree is None, "lxml library is not installed")
    def test_build_lxml_node_tree_with_element_tree(self):
        document = lxml_etree.parse(io.StringIO(
            '<!-- before --><?pi before?><A><B/></A><!-- after -->'
        ))
        root = build_lxml_node_tree(document)
        self.assertIsInstance(root, DocumentNode)
        self.assertListEqual([n.node_kind for n in root.children],
                             ['comment', 'processing-instruction', 'element', 'comment'])
        self.assertIs(root.document_element.obj, document.getroot())
        self.check_positions(root)


if __name__ == '__main__':
    unittest.main()
