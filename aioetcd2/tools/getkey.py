from argparse import Namespace, ArgumentParser
from aioetcd2.handler import BaseHandler
from aioetcd2.utils import json_pp, semanticbool

class Handler(BaseHandler):
    help = 'get the value of a key'

    def add_arguments(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            'key',
            type=str,
            help='key')

        parser.add_argument(
            '--node',
            type=semanticbool,
            default=False,
            help='print the whole node')

    async def run(self, args: Namespace) -> None:
        async with self.get_client(args) as client:
            if args.node:
                node = await client.get_node(args.key)
                print(json_pp(node.as_json()))
            else:
                print(await client.get(args.key))
