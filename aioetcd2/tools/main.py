from typing import Optional, List
import sys
import logging
import asyncio
from argparse import ArgumentParser
from aioetcd2.exceptions import BaseError
from aioetcd2.handler import BaseHandler
from aioetcd2.log import config_log
from aioetcd2.sentry import setup_sentry
from aioetcd2.utils import import_module

logger = logging.getLogger(__name__)

sub_modules = [
    ('get', 'aioetcd2.tools.getkey'),
    ('set', 'aioetcd2.tools.setkey'),
    ('mkdir', 'aioetcd2.tools.mkdir'),
    ('rm', 'aioetcd2.tools.rmkey'),
    ('ls', 'aioetcd2.tools.lsdir'),
    ('version', 'aioetcd2.tools.version'),
    ('discover', 'aioetcd2.tools.discover'),
    ]

def make_parser() -> ArgumentParser:
    top_parser = ArgumentParser(
        prog='etcd2.py',
        description='etcd v2 keys API client')

    top_parser.add_argument(
        '--server',
        type=str,
        default=None,
        help='etcd server url, overrides the config file')

    top_parser.add_argument(
        '--root',
        type=str,
        default=None,
        help='sandbox root all keys are resolved under')

    sub_parsers = top_parser.add_subparsers(
        help='sub-command help')

    for sub_cmd, mod_name in sub_modules:
        mod = import_module(mod_name)

        assert issubclass(mod.Handler, BaseHandler)

        handler = mod.Handler()
        parser = sub_parsers.add_parser(sub_cmd, help=handler.help)
        handler.add_arguments(parser)
        parser.set_defaults(handler=handler)
    return top_parser

def run(top_parser: ArgumentParser, input_args: Optional[List[str]]=None) -> int:
    args = top_parser.parse_args(input_args)
    handler = getattr(args, 'handler', None)
    if handler is None:
        top_parser.print_help()
        return 1

    try:
        asyncio.run(handler.run(args))
    except BaseError as e:
        logger.debug('command failed', exc_info=True)
        print('{}: {}'.format(e.__class__.__name__, e), file=sys.stderr)
        return 1
    return 0

def main() -> None:
    config_log()
    setup_sentry()
    sys.exit(run(make_parser()))
