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
Safe XML loading with ElementTree and helper functions for ElementTree and lxml objects.
"""
from typing import Any, Dict, List, Optional, Tuple, Union
from xml.etree import ElementTree
from xml.parsers import expat

from .exceptions import XMLResourceForbidden

__all__ = ['defuse_xml', 'NamespaceTreeBuilder', 'is_etree_element',
           'is_lxml_etree_element', 'is_etree_document', 'is_lxml_etree_document']

LXML_MODULES = frozenset(('lxml.etree', 'lxml.html'))


class PrologChecked(Exception):
    """Stops the defusing scan at the start tag of the root element."""


def forbid_entity(entity_name: str, is_parameter_entity: bool, value: Optional[str],
                  base: Optional[str], system_id: Optional[str],
                  public_id: Optional[str], notation_name: Optional[str]) -> None:
    if notation_name is not None:
        raise XMLResourceForbidden(
            "Unparsed entities are forbidden (entity_name=%r)" % entity_name
        )
    raise XMLResourceForbidden("Entities are forbidden (entity_name=%r)" % entity_name)


def end_of_prolog(name: str, attrs: Any) -> None:
    raise PrologChecked()


def defuse_xml(xml_source: Union[str, bytes]) -> Union[str, bytes]:
    """
    Scans the prolog of an XML source and raises an `XMLResourceForbidden`
    error if it declares entities. Returns the source unchanged. Syntax
    errors are not reported, they are left to the XML parser.
    """
    scanner = expat.ParserCreate()
    scanner.EntityDeclHandler = forbid_entity
    scanner.StartElementHandler = end_of_prolog
    try:
        scanner.Parse(xml_source, True)
    except (PrologChecked, expat.ExpatError):
        pass
    return xml_source


class NamespaceTreeBuilder(ElementTree.TreeBuilder):
    """
    An ElementTree builder that keeps comments and processing instructions
    and records the namespace declarations made on each element.
    """
    def __init__(self) -> None:
        super().__init__(insert_comments=True, insert_pis=True)
        self._pending: List[Tuple[str, str]] = []
        self.declarations: Dict[ElementTree.Element, Dict[str, str]] = {}

    def start_ns(self, prefix: str, uri: str) -> None:
        self._pending.append((prefix or '', uri))

    def start(self, tag, attrs):  # type: ignore[no-untyped-def]
        elem = super().start(tag, attrs)
        if self._pending:
            self.declarations[elem] = dict(self._pending)
            self._pending.clear()
        return elem


def has_attributes(obj: Any, *names: str) -> bool:
    return all(hasattr(obj, name) for name in names)


def is_etree_element(obj: Any) -> bool:
    return has_attributes(obj, 'tag', 'attrib', 'text')


def is_lxml_etree_element(obj: Any) -> bool:
    return is_etree_element(obj) and has_attributes(obj, 'getparent', 'nsmap') \
        and type(obj).__module__ in LXML_MODULES


def is_etree_document(obj: Any) -> bool:
    return has_attributes(obj, 'getroot', 'parse', 'iter')


def is_lxml_etree_document(obj: Any) -> bool:
    return is_etree_document(obj) and has_attributes(obj, 'xpath', 'xslt') \
        and type(obj).__module__ in LXML_MODULES
