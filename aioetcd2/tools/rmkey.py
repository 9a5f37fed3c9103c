from argparse import Namespace, ArgumentParser
from aioetcd2.handler import BaseHandler
from aioetcd2.utils import json_pp

class Handler(BaseHandler):
    help = 'remove a key or a directory'

    def add_arguments(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            'key',
            type=str,
            help='key')

        parser.add_argument(
            '--dir',
            action='store_true',
            help='remove a directory')

        parser.add_argument(
            '--recursive',
            action='store_true',
            help='remove a directory with its content')

    async def run(self, args: Namespace) -> None:
        async with self.get_client(args) as client:
            if args.dir or args.recursive:
                r = await client.remove_dir(args.key, args.recursive)
            else:
                r = await client.remove(args.key)
            print(json_pp(r.as_json()))
