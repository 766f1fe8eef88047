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
Report matchers: the XPath expressions that extract annotations from the
items of a report, plus the built-in matchers for JUnit reports.
"""
from typing import Any, Dict, Mapping, Optional

from ..exceptions import MatcherError

__all__ = ['LEVELS', 'ReportMatcher', 'BUILTIN_MATCHERS', 'get_matchers']

LEVELS = ('error', 'warning', 'notice', 'ignore')

# Matcher fields with the alternative names used in YAML and JSON settings
FIELDS = {
    'format': 'format',
    'item': 'item',
    'level': 'level',
    'message': 'message',
    'title': 'title',
    'file': 'file',
    'start_line': 'start_line',
    'startLine': 'start_line',
    'end_line': 'end_line',
    'endLine': 'end_line',
    'start_column': 'start_column',
    'startColumn': 'start_column',
    'end_column': 'end_column',
    'endColumn': 'end_column',
}


class ReportMatcher:
    """
    A set of XPath expressions for extracting annotations from a report.

    :param format: the format of the report, only 'xml' is supported.
    :param item: the expression that selects the report items.
    :param message: the expression of the annotation message, relative to the item.
    :param level: an ordered mapping from levels to boolean expressions, \
    the first level whose expression is true is applied to the item. \
    If no expression is true the level is 'error'.
    :param title: the expression of the annotation title.
    :param file: the expression of the annotated file path.
    :param start_line: the expression of the first annotated line.
    :param end_line: the expression of the last annotated line.
    :param start_column: the expression of the first annotated column.
    :param end_column: the expression of the last annotated column.
    """
    def __init__(self, format: str = 'xml', item: str = '', message: str = '',
                 level: Optional[Mapping[str, str]] = None,
                 title: Optional[str] = None,
                 file: Optional[str] = None,
                 start_line: Optional[str] = None,
                 end_line: Optional[str] = None,
                 start_column: Optional[str] = None,
                 end_column: Optional[str] = None) -> None:
        self.format = format
        self.item = item
        self.message = message
        self.level: Dict[str, str] = dict(level) if level else {}
        self.title = title
        self.file = file
        self.start_line = start_line
        self.end_line = end_line
        self.start_column = start_column
        self.end_column = end_column

        for name in self.level:
            if name not in LEVELS:
                raise MatcherError("Unknown annotation level %r" % name)

    def __repr__(self) -> str:
        return '%s(format=%r, item=%r)' % (self.__class__.__name__, self.format, self.item)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ReportMatcher) and self.__dict__ == other.__dict__

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> 'ReportMatcher':
        """
        Builds a matcher from a mapping, as read from settings. Keys can be
        written in camelCase, eg. 'startLine' instead of 'start_line'.
        """
        if isinstance(mapping, ReportMatcher):
            return mapping
        elif not isinstance(mapping, Mapping):
            raise MatcherError("A report matcher must be a mapping, not %r" % mapping)

        kwargs = {}
        for key, value in mapping.items():
            try:
                field = FIELDS[key]
            except KeyError:
                raise MatcherError("Unknown report matcher field %r" % key) from None

            if field == 'level':
                if value is not None and (
                        not isinstance(value, Mapping) or
                        not all(isinstance(k, str) and isinstance(v, str)
                                for k, v in value.items())):
                    raise MatcherError("The 'level' field of a report matcher must be "
                                       "a mapping from levels to expressions, not %r" % value)
            elif value is not None and not isinstance(value, str):
                raise MatcherError("The %r field of a report matcher must be "
                                   "a string, not %r" % (key, value))
            kwargs[field] = value

        if not kwargs.get('item'):
            raise MatcherError("Missing 'item' expression in report matcher")
        return cls(**kwargs)


JUNIT_LEVELS = {
    # successful test cases are ignored
    'ignore': 'not(failure) and not(skipped) and not(error)',
    'notice': 'skipped',
}

BUILTIN_MATCHERS: Dict[str, ReportMatcher] = {
    'junit': ReportMatcher(
        format='xml',
        item='//testcase',
        level=JUNIT_LEVELS,
        message='''
            if(error, normalize(concat(error/@message, " \n ", error/text())),
                if(skipped, skipped/@message,
                    normalize(concat(failure/@message, " \n ", failure/text()))
                )
            )''',
        title='concat(@classname, " - ", @name)',
        file='@file',
        start_line='@line',
    ),
    'junit-eslint': ReportMatcher(
        format='xml',
        item='//testcase',
        level={'warning': 'contains(failure/text(), "Warning - ")'},
        message='failure/@message',
        title=r"replace(@name, 'org\.eslint\.', '')",
        file='parent::testsuite/@name',
        start_line=r"match(failure, 'line (\d+)')",
        start_column=r"match(failure, 'col (\d+)')",
    ),
    'junit-jest': ReportMatcher(
        format='xml',
        item='//testcase',
        level=JUNIT_LEVELS,
        message='''
            if(error, normalize(concat(error/@message, " \n ", error/text())),
                if(skipped, skipped/@message,
                    normalize(failure/text())
                )
            )''',
        title='@name',
        file='@file',
        # stack traces usually contain the position as xxx.spec.yy:line:column
        start_line=r"match(failure, '.*.spec.\w{2,3}:(\d+):.*')",
        start_column=r"match(failure, '.*.spec.\w{2,3}:\d+:(\d+).*')",
    ),
}


def get_matchers(custom_matchers: Optional[Mapping[str, Any]] = None) \
        -> Dict[str, ReportMatcher]:
    """Returns the built-in matchers updated with the custom ones."""
    matchers = dict(BUILTIN_MATCHERS)
    if custom_matchers:
        for name, matcher in custom_matchers.items():
            matchers[name] = ReportMatcher.from_mapping(matcher)
    return matchers
