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
Discovery of report files and extraction of annotations from XML reports.
"""
import glob
import logging
import math
import os
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import Any, Dict, Iterable, List, Optional, Union

from ..tree_builders import parse_xml
from ..values import XNodeSet
from .matchers import ReportMatcher
from .xpath_utils import ANNOTATE_FUNCTIONS, XPathSelect, compile_expression

__all__ = ['PRIORITY', 'PendingAnnotation', 'find_report_files', 'parse_xml_report']

logger = logging.getLogger(__name__)

PRIORITY = {'error': 0, 'warning': 1, 'notice': 2}

NUMBER_FIELDS = ('start_line', 'end_line', 'start_column', 'end_column')


@dataclass
class PendingAnnotation:
    """An annotation extracted from a report, not yet emitted."""
    level: str
    message: str
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def priority(self) -> int:
        return PRIORITY[self.level]


def normalize_path(path: str) -> str:
    return os.path.normpath(path).replace(os.sep, '/')


def is_ignored(path: str, ignore: Iterable[str]) -> bool:
    """
    Returns `True` if the path matches an ignore pattern. A leading '**/'
    matches also no directory, so '**/node_modules/**' excludes the files
    of a top-level 'node_modules' directory.
    """
    for pattern in ignore:
        pattern = normalize_path(pattern)
        if fnmatchcase(path, pattern):
            return True
        while pattern.startswith('**/'):
            pattern = pattern[3:]
            if fnmatchcase(path, pattern):
                return True
    return False


def find_report_files(patterns: Iterable[str], ignore: Iterable[str] = ()) -> List[str]:
    """
    Finds the files matching a list of glob patterns, '**' matches any
    number of nested directories. Files matching an ignore pattern are
    excluded. Returns the paths in the order of discovery, without repeats.

    :param patterns: glob patterns.
    :param ignore: glob patterns of the files to exclude, eg. 'dist/**'.
    """
    ignore = list(ignore)
    files: Dict[str, None] = {}
    for pattern in patterns:
        for path in sorted(glob.glob(pattern, recursive=True)):
            if not os.path.isfile(path):
                continue
            path = normalize_path(path)
            if not is_ignored(path, ignore):
                files[path] = None
    return list(files)


def get_number(xpath: XPathSelect, expression: str) -> Optional[Union[int, float]]:
    value = xpath.number(expression)
    if math.isnan(value):
        return None
    elif value.is_integer():
        return int(value)
    return value


def parse_xml_report(path: str, matcher: ReportMatcher) -> List[PendingAnnotation]:
    """
    Extracts the annotations from an XML report. Items whose level is
    'ignore' are skipped, line and column values that are not numbers
    are omitted.

    :param path: the path of the report file.
    :param matcher: the report matcher.
    """
    document = parse_xml(path)
    items = compile_expression(matcher.item).evaluate(
        node=document, functions=ANNOTATE_FUNCTIONS
    )
    if not isinstance(items, XNodeSet):
        logger.warning("No items found in %s", path)
        return []

    logger.debug("Found %d items in %s.", len(items), path)
    annotations = []
    for item in items.to_list():
        logger.debug("Processing item: %r.", item)
        xpath = XPathSelect(item)

        level = 'error'
        for key, expression in matcher.level.items():
            check = xpath.boolean(expression)
            logger.debug("Checking level %s with path %s: %s", key, expression, check)
            if check:
                level = key
                break

        if level == 'ignore':
            logger.debug("Ignoring item.")
            continue

        message = xpath.string(matcher.message)
        properties: Dict[str, Any] = {}
        if matcher.title:
            properties['title'] = xpath.string(matcher.title)
        if matcher.file:
            properties['file'] = xpath.string(matcher.file)
        for name in NUMBER_FIELDS:
            expression = getattr(matcher, name)
            if expression:
                value = get_number(xpath, expression)
                if value is not None:
                    properties[name] = value

        annotations.append(PendingAnnotation(level, message, properties))

    return annotations
