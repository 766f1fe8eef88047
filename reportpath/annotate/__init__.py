#
# Copyright (c), 2018-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""Annotation of GitHub Actions runs from test and lint reports."""
from .matchers import ReportMatcher, BUILTIN_MATCHERS, get_matchers
from .xpath_utils import ANNOTATE_FUNCTIONS, XPathSelect
from .config import Config, load_config
from .reports import PendingAnnotation, find_report_files, parse_xml_report
from .runner import collect_annotations, emit_annotations, run

__all__ = ['ReportMatcher', 'BUILTIN_MATCHERS', 'get_matchers', 'ANNOTATE_FUNCTIONS',
           'XPathSelect', 'Config', 'load_config', 'PendingAnnotation',
           'find_report_files', 'parse_xml_report', 'collect_annotations',
           'emit_annotations', 'run']
