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
GitHub Actions workflow commands: annotations, step outputs, log groups
and a logging handler that writes records as workflow commands.
"""
import logging
import os
import sys
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional, TextIO

__all__ = ['escape_data', 'escape_property', 'format_command', 'issue_command',
           'error', 'warning', 'notice', 'set_output', 'set_failed', 'group',
           'WorkflowCommandHandler', 'setup_logging']

# Annotation property names as accepted by the runner
ANNOTATION_PROPERTIES = (
    ('title', 'title'),
    ('file', 'file'),
    ('start_line', 'line'),
    ('end_line', 'endLine'),
    ('start_column', 'col'),
    ('end_column', 'endColumn'),
)


def escape_data(value: Any) -> str:
    return str(value).replace('%', '%25').replace('\r', '%0D').replace('\n', '%0A')


def escape_property(value: Any) -> str:
    return escape_data(value).replace(':', '%3A').replace(',', '%2C')


def format_property(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_command(command: str, properties: Optional[Mapping[str, Any]] = None,
                   message: Any = '') -> str:
    """
    Returns a workflow command line, eg. '::error file=a.py,line=3::message'.
    Properties with a `None` value are omitted.
    """
    line = '::' + command
    if properties:
        items = ['%s=%s' % (k, escape_property(format_property(v)))
                 for k, v in properties.items() if v is not None]
        if items:
            line += ' ' + ','.join(items)
    return '%s::%s' % (line, escape_data(message))


def issue_command(command: str, properties: Optional[Mapping[str, Any]] = None,
                  message: Any = '', stream: Optional[TextIO] = None) -> None:
    if stream is None:
        stream = sys.stdout
    stream.write(format_command(command, properties, message) + os.linesep)
    stream.flush()


def annotation_properties(properties: Mapping[str, Any]) -> Mapping[str, Any]:
    """Maps annotation properties to the names used by workflow commands."""
    return {name: properties.get(key) for key, name in ANNOTATION_PROPERTIES
            if properties.get(key) is not None}


def error(message: str, stream: Optional[TextIO] = None, **properties: Any) -> None:
    issue_command('error', annotation_properties(properties), message, stream)


def warning(message: str, stream: Optional[TextIO] = None, **properties: Any) -> None:
    issue_command('warning', annotation_properties(properties), message, stream)


def notice(message: str, stream: Optional[TextIO] = None, **properties: Any) -> None:
    issue_command('notice', annotation_properties(properties), message, stream)


def set_output(name: str, value: Any, stream: Optional[TextIO] = None,
               environ: Optional[Mapping[str, str]] = None) -> None:
    """
    Sets a step output. The output is appended to the file referred by the
    environment variable GITHUB_OUTPUT, or written as a 'set-output'
    command when the variable is not set.
    """
    filepath = (os.environ if environ is None else environ).get('GITHUB_OUTPUT')
    if not filepath:
        issue_command('set-output', {'name': name}, format_property(value), stream)
        return

    delimiter = 'ghadelimiter_%s' % uuid.uuid4()
    value = format_property(value)
    if delimiter in name or delimiter in value:
        raise ValueError("unexpected delimiter in output %r" % name)

    with open(filepath, 'a', encoding='utf-8') as fp:
        fp.write('%s<<%s%s%s%s%s%s' % (name, delimiter, os.linesep, value,
                                       os.linesep, delimiter, os.linesep))


def set_failed(message: Any, stream: Optional[TextIO] = None) -> None:
    issue_command('error', None, message, stream)


@contextmanager
def group(name: str, stream: Optional[TextIO] = None) -> Iterator[None]:
    """Wraps the output of the block in a foldable log group."""
    issue_command('group', None, name, stream)
    try:
        yield
    finally:
        issue_command('endgroup', None, '', stream)


class WorkflowCommandHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """
    A logging handler that writes records as workflow commands: debug
    records as 'debug' commands, warnings as 'warning' commands, errors
    and criticals as 'error' commands. Other records are written as
    plain lines.
    """
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.ERROR:
            return format_command('error', None, message)
        elif record.levelno >= logging.WARNING:
            return format_command('warning', None, message)
        elif record.levelno >= logging.INFO:
            return message
        return format_command('debug', None, message)


def setup_logging(verbose: bool = False, stream: Optional[TextIO] = None) \
        -> logging.Logger:
    """
    Configures the logger of the package for running in a workflow step.
    Debug records are enabled when *verbose* is `True` or the runner has
    debug logging enabled.
    """
    logger = logging.getLogger('reportpath')
    for handler in list(logger.handlers):
        if isinstance(handler, WorkflowCommandHandler):
            logger.removeHandler(handler)

    handler = WorkflowCommandHandler(sys.stdout if stream is None else stream)
    handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(handler)

    if verbose or os.environ.get('RUNNER_DEBUG') == '1':
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)
    return logger
