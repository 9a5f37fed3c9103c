from argparse import Namespace, ArgumentParser
from aioetcd2.handler import BaseHandler
from aioetcd2.utils import json_pp

class Handler(BaseHandler):
    help = 'list a directory'

    def add_arguments(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            'key',
            type=str,
            nargs='?',
            default='/',
            help='directory key')

        parser.add_argument(
            '--recursive',
            action='store_true',
            help='list sub directories')

        parser.add_argument(
            '--values',
            action='store_true',
            help='print a key value map of the leaves')

    async def run(self, args: Namespace) -> None:
        async with self.get_client(args) as client:
            if args.values:
                r = await client.get_key_value_map(
                    args.key, recursive=args.recursive)
                print(json_pp(r))
            else:
                for key in await client.list_dirs(
                        args.key, recursive=args.recursive):
                    print(key)
