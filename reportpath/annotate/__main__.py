#
# Copyright (c), 2018-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""Command line interface of the report annotator."""
import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .. import __version__
from .commands import setup_logging
from .runner import run

logger = logging.getLogger('reportpath.annotate')


def json_object(value: str) -> Dict[str, Any]:
    try:
        obj = json.loads(value)
    except json.JSONDecodeError as err:
        raise argparse.ArgumentTypeError("invalid JSON: %s" % err) from None
    if not isinstance(obj, dict):
        raise argparse.ArgumentTypeError("a JSON object is required")
    return obj


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("invalid integer %r" % value) from None
    if number < 0:
        raise argparse.ArgumentTypeError("a non-negative integer is required")
    return number


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='report-annotate',
        description="Annotates a GitHub Actions run with the issues found in "
                    "test and lint reports. Options override the action inputs."
    )
    parser.add_argument('--version', action='version',
                        version='%(prog)s {}'.format(__version__))
    parser.add_argument('-c', '--config', dest='config_path', metavar='PATH',
                        help="path of the YAML configuration file "
                             "(default: .github/report-annotate.yml)")
    parser.add_argument('-r', '--reports', dest='reports', action='append',
                        metavar='MATCHER|PATTERNS',
                        help="a report matcher and its comma separated glob "
                             "patterns, eg. 'junit|reports/*.xml'; can be repeated")
    parser.add_argument('-i', '--ignore', dest='ignore', action='append',
                        metavar='PATTERN', help="glob pattern of files to ignore; "
                                                "can be repeated")
    parser.add_argument('-m', '--max-annotations', dest='max_annotations',
                        type=non_negative_int, metavar='N',
                        help="maximum number of annotations to create")
    parser.add_argument('--custom-matchers', dest='custom_matchers', type=json_object,
                        metavar='JSON', help="custom matchers as a JSON object")
    parser.add_argument('-v', '--verbose', action='store_true', default=False,
                        help="write debug messages")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = get_parser().parse_args(argv)
    setup_logging(args.verbose)

    overrides = {k: v for k, v in vars(args).items() if k != 'verbose'}
    try:
        run(overrides)
    except Exception:
        # the failure is already reported as a workflow command
        logger.debug("Report annotation failed", exc_info=True)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
