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
The report annotation run: finds the reports, extracts the annotations,
emits the most relevant ones and sets the step outputs.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, TextIO, Tuple

from ..exceptions import ConfigurationError, MatcherError
from . import commands
from .config import Config, load_config
from .matchers import get_matchers
from .reports import PendingAnnotation, find_report_files, parse_xml_report

__all__ = ['parse_report_spec', 'collect_annotations', 'emit_annotations', 'run']

logger = logging.getLogger(__name__)

EMITTERS = {
    'error': commands.error,
    'warning': commands.warning,
    'notice': commands.notice,
}


def parse_report_spec(spec: str) -> Tuple[str, List[str]]:
    """
    Splits a report spec, eg. 'junit|reports/*.xml,other/*.xml', into the
    matcher name and the list of glob patterns.
    """
    matcher, separator, patterns = spec.partition('|')
    if not separator or not matcher.strip():
        raise ConfigurationError(
            "Invalid report %r, the format is 'matcher|pattern[,pattern...]'" % spec
        )
    return matcher.strip(), [x.strip() for x in patterns.split(',') if x.strip()]


def collect_annotations(config: Config, stream: Optional[TextIO] = None) \
        -> List[PendingAnnotation]:
    """Finds the report files and extracts the annotations, sorted by priority."""
    matchers = get_matchers(config.custom_matchers)

    report_files: Dict[str, Dict[str, None]] = {}
    for spec in config.reports:
        name, patterns = parse_report_spec(spec)
        with commands.group('Finding %s reports' % name, stream):
            files = find_report_files(patterns, config.ignore)
            if not files:
                logger.warning("No reports found for %s using patterns %s",
                               name, ','.join(patterns))
                continue

            report_files.setdefault(name, {}).update((f, None) for f in files)
            logger.info("Found %d report(s) for %s", len(files), name)

    annotations: List[PendingAnnotation] = []
    for name, files in report_files.items():
        try:
            matcher = matchers[name]
        except KeyError:
            raise MatcherError("No matcher found for %s" % name) from None

        with commands.group('Parsing %s reports' % name, stream):
            for path in files:
                logger.debug("Parsing %s", path)
                if matcher.format != 'xml':
                    raise MatcherError(
                        "Unsupported matcher format in %s: %s" % (name, matcher.format)
                    )
                annotations.extend(parse_xml_report(path, matcher))

            logger.info("Parsed %d annotation(s) from %d report(s)",
                        len(annotations), len(files))

    annotations.sort(key=lambda x: x.priority)
    return annotations


def emit_annotations(annotations: List[PendingAnnotation], max_annotations: int,
                     stream: Optional[TextIO] = None) -> Dict[str, int]:
    """
    Emits the first *max_annotations* annotations and returns the tally
    of the emitted ones.
    """
    tally = {'errors': 0, 'warnings': 0, 'notices': 0, 'total': 0}
    for annotation in annotations[:max_annotations]:
        EMITTERS[annotation.level](annotation.message, stream, **annotation.properties)
        tally[annotation.level + 's'] += 1
        tally['total'] += 1

    if len(annotations) > max_annotations:
        logger.warning("Maximum number of annotations reached (%d). "
                       "%d annotations were not shown.",
                       max_annotations, len(annotations) - max_annotations)
    return tally


def run(overrides: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
        stream: Optional[TextIO] = None) -> Dict[str, int]:
    """
    Runs the report annotation.

    :param overrides: settings that take precedence over the action inputs.
    :param environ: the environment with the action inputs, defaults to `os.environ`.
    :param stream: the stream for workflow commands, defaults to `sys.stdout`.
    :return: the tally of the emitted annotations, also set as step outputs.
    """
    try:
        with commands.group('Configuration', stream):
            config = load_config(overrides, environ)

        annotations = collect_annotations(config, stream)
        tally = emit_annotations(annotations, config.max_annotations, stream)

        for name, value in tally.items():
            commands.set_output(name, value, stream, environ)
    except Exception as err:
        commands.set_failed(err, stream)
        raise
    else:
        return tally
