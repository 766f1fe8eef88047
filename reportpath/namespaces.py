#
# Copyright (c), 2018-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from typing import Dict, Optional, Tuple

# Namespaces
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"
XMLNS_NAMESPACE = "http://www.w3.org/2000/xmlns/"
XHTML_NAMESPACE = "http://www.w3.org/1999/xhtml"

# XML namespace attributes
XML_LANG = '{%s}lang' % XML_NAMESPACE
XML_ID = '{%s}id' % XML_NAMESPACE

NamespacesType = Dict[str, str]


def get_namespace(name: str) -> str:
    """Returns the namespace URI of an expanded name, an empty string if it has none."""
    try:
        return name[1:name.rindex('}')] if name and name[0] == '{' else ''
    except ValueError:
        return ''


def split_expanded_name(name: str) -> Tuple[str, str]:
    """Splits an expanded name '{uri}local' into a couple (uri, local)."""
    if not name or name[0] != '{':
        return '', name
    try:
        uri, local_name = name[1:].split('}')
    except ValueError:
        raise ValueError("{!r} is not an expanded name".format(name)) from None
    return uri, local_name


def split_qname(qname: str) -> Tuple[Optional[str], str]:
    """Splits a QName 'prefix:local' into a couple (prefix, local)."""
    if ':' not in qname:
        return None, qname
    prefix, local_name = qname.split(':', 1)
    return prefix, local_name


def get_expanded_name(qname: str, namespaces: NamespacesType) -> str:
    """
    Returns the expanded form of a prefixed name, using a namespace map.

    :param qname: a QName in prefixed or local form.
    :param namespaces: a map from prefixes to namespace URIs.
    """
    prefix, local_name = split_qname(qname)
    if prefix is None:
        uri = namespaces.get('', '')
    else:
        try:
            uri = namespaces[prefix]
        except KeyError:
            raise KeyError('prefix {!r} not found in namespace map'.format(prefix)) from None

    return '{%s}%s' % (uri, local_name) if uri else local_name
