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

from reportpath import DocumentNode, ElementNode, AttributeNode, TextNode, \
    NamespaceNode, CommentNode, ProcessingInstructionNode, parse_xml
from reportpath.namespaces import XML_NAMESPACE
from reportpath.xpath_nodes import ELEMENT_NODE, ATTRIBUTE_NODE, TEXT_NODE, \
    COMMENT_NODE, PROCESSING_INSTRUCTION_NODE, DOCUMENT_NODE, NAMESPACE_NODE, \
    is_attribute_like


class XPathNodesTest(unittest.TestCase):

    def test_node_kinds(self):
        element = ElementNode('a')
        nodes = [
            (DocumentNode(), DOCUMENT_NODE, 'document'),
            (element, ELEMENT_NODE, 'element'),
            (AttributeNode('b', '1', element), ATTRIBUTE_NODE, 'attribute'),
            (NamespaceNode('p', 'http://p.test', element), NAMESPACE_NODE, 'namespace'),
            (TextNode('t'), TEXT_NODE, 'text'),
            (CommentNode('c'), COMMENT_NODE, 'comment'),
            (ProcessingInstructionNode('pi', 'data'), PROCESSING_INSTRUCTION_NODE,
             'processing-instruction'),
        ]
        for node, node_type, node_kind in nodes:
            self.assertEqual(node.node_type, node_type)
            self.assertEqual(node.node_kind, node_kind)

        self.assertTrue(is_attribute_like(nodes[2][0]))
        self.assertTrue(is_attribute_like(nodes[3][0]))
        self.assertFalse(is_attribute_like(element))

    def test_names(self):
        element = ElementNode('item', prefix='tst', namespace_uri='http://example.test/ns')
        self.assertEqual(element.name, 'tst:item')
        self.assertEqual(element.local_name, 'item')
        self.assertEqual(element.prefix, 'tst')
        self.assertEqual(element.namespace_uri, 'http://example.test/ns')
        self.assertEqual(repr(element), "ElementNode(name='tst:item')")

        attribute = element.set_attribute('lang', 'en', 'xml', XML_NAMESPACE)
        self.assertEqual(attribute.name, 'xml:lang')
        self.assertEqual(attribute.local_name, 'lang')
        self.assertIs(attribute.owner_element, element)
        self.assertEqual(repr(attribute), "AttributeNode(name='xml:lang', value='en')")

        pi = ProcessingInstructionNode('target', 'value')
        self.assertEqual(pi.name, 'target')
        self.assertEqual(pi.local_name, 'target')
        self.assertEqual(pi.string_value, 'value')

        namespace = NamespaceNode('', 'http://default.test')
        self.assertEqual(namespace.name, '')
        self.assertEqual(namespace.string_value, 'http://default.test')
        self.assertEqual(namespace.namespace_uri, '')

        for node in (TextNode('x'), CommentNode('x'), DocumentNode()):
            self.assertEqual(node.name, '')
            self.assertEqual(node.local_name, '')
            self.assertIsNone(node.prefix)

    def test_string_values(self):
        document = parse_xml('<r>a<b>b<c>c</c></b><!--comment--><?pi data?>d</r>')
        self.assertEqual(document.string_value, 'abcd')
        root = document.document_element
        self.assertEqual(root.string_value, 'abcd')
        self.assertEqual(root.children[1].string_value, 'bc')
        self.assertEqual(root.children[2].string_value, 'comment')
        self.assertEqual(root.children[3].string_value, 'data')
        self.assertListEqual(list(root.iter_text()), ['a', 'b', 'c', 'd'])

    def test_tree_navigation(self):
        root = ElementNode('root')
        first = root.append(ElementNode('first'))
        text = root.append(TextNode('text'))
        last = root.append(ElementNode('last'))

        self.assertListEqual(root.children, [first, text, last])
        self.assertIs(root.first_child, first)
        self.assertIs(root.last_child, last)
        self.assertIsNone(first.first_child)
        self.assertIs(first.next_sibling, text)
        self.assertIs(last.previous_sibling, text)
        self.assertIsNone(first.previous_sibling)
        self.assertIsNone(last.next_sibling)
        self.assertEqual([first.index, text.index, last.index], [0, 1, 2])
        self.assertIs(text.parent, root)
        self.assertIs(text.root_node, root)
        self.assertIsNone(text.owner_document)
        self.assertIsNone(root.owner_document)

        attribute = root.set_attribute('a', '1')
        self.assertIsNone(attribute.next_sibling)
        self.assertIsNone(attribute.previous_sibling)

        document = DocumentNode()
        document.append(root)
        self.assertIs(text.owner_document, document)
        self.assertIsNone(document.owner_document)
        self.assertIs(document.document_element, root)
        self.assertIsNone(DocumentNode().document_element)

    def test_iter_descendants(self):
        document = parse_xml('<a><b><c/></b><d>e</d></a>')
        names = [n.name or n.node_kind for n in document.iter_descendants()]
        self.assertListEqual(names, ['document', 'a', 'b', 'c', 'd', 'text'])

        root = document.document_element
        names = [n.name for n in root.iter_descendants(with_self=False)]
        self.assertListEqual(names, ['b', 'c', 'd', ''])

        # deep trees are walked without recursion
        depth = 3000
        document = parse_xml('<x>' * depth + '</x>' * depth)
        self.assertEqual(sum(1 for _ in document.iter_descendants()), depth + 1)

    def test_attributes(self):
        element = ElementNode('e')
        element.set_attribute('a', '1')
        element.set_attribute('id', 'x', 'xml', XML_NAMESPACE)
        self.assertEqual(element.get_attribute('a'), '1')
        self.assertEqual(element.get_attribute('b', 'default'), 'default')
        self.assertEqual(element.get_attribute('xml:id'), 'x')
        self.assertEqual(element.get_attribute_ns(XML_NAMESPACE, 'id'), 'x')
        self.assertIsNone(element.get_attribute_ns('', 'id'))
        self.assertEqual(element.xml_id, 'x')
        self.assertEqual([a.index for a in element.attributes], [0, 1])

    def test_namespaces(self):
        root = ElementNode('root', declarations={'': 'http://a.test', 'p': 'http://p.test'})
        child = root.append(ElementNode('child', declarations={'': '', 'q': 'http://q.test'}))

        self.assertDictEqual(root.nsmap, {'': 'http://a.test', 'p': 'http://p.test'})
        self.assertDictEqual(child.nsmap, {'p': 'http://p.test', 'q': 'http://q.test'})
        self.assertEqual(child.lookup_namespace('q'), 'http://q.test')
        self.assertEqual(child.lookup_namespace('xml'), XML_NAMESPACE)
        self.assertIsNone(child.lookup_namespace(''))

        namespaces = root.namespace_nodes
        self.assertListEqual([(n.name, n.uri) for n in namespaces], [
            ('xml', XML_NAMESPACE), ('', 'http://a.test'), ('p', 'http://p.test')
        ])
        self.assertListEqual([n.index for n in namespaces], [0, 1, 2])
        self.assertIs(namespaces[1].parent, root)
        self.assertIs(namespaces[1].owner_element, root)
        self.assertIs(root.namespace_nodes, namespaces)

    def test_documents(self):
        document = parse_xml('<r><a id="one"/><b xml:id="two"/></r>', uri='mem://doc')
        self.assertEqual(document.uri, 'mem://doc')
        self.assertEqual(repr(document), "DocumentNode(uri='mem://doc')")
        self.assertEqual(document.get_element_by_id('one').name, 'a')
        self.assertEqual(document.get_element_by_id('two').name, 'b')
        self.assertIsNone(document.get_element_by_id('three'))
        self.assertIs(document.tree.root, document)
        self.assertEqual(document.position, 1)


if __name__ == '__main__':
    unittest.main()
