from argparse import Namespace, ArgumentParser
from aioetcd2.handler import BaseHandler
from aioetcd2.utils import json_pp

class Handler(BaseHandler):
    help = 'create a directory or refresh its ttl'

    def add_arguments(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            'key',
            type=str,
            help='directory key')

        parser.add_argument(
            '--ttl',
            type=int,
            default=0,
            help='time to live in seconds')

        parser.add_argument(
            '--update',
            action='store_true',
            help='update the ttl of an existing directory')

    async def run(self, args: Namespace) -> None:
        async with self.get_client(args) as client:
            if args.update:
                r = await client.update_dir(args.key, args.ttl)
            else:
                r = await client.create_dir(args.key, args.ttl)
            print(json_pp(r.as_json()))
