from argparse import Namespace, ArgumentParser
from aioetcd2.handler import BaseHandler
from aioetcd2.utils import json_pp

class Handler(BaseHandler):
    help = 'set the value of a key'

    def add_arguments(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            'key',
            type=str,
            help='key')

        parser.add_argument(
            'value',
            type=str,
            help='value')

        parser.add_argument(
            '--ttl',
            type=int,
            default=0,
            help='time to live in seconds')

        group = parser.add_mutually_exclusive_group()
        group.add_argument(
            '--create',
            action='store_true',
            help='fail if the key exists')

        group.add_argument(
            '--update',
            action='store_true',
            help='fail if the key does not exist')

        parser.add_argument(
            '--prev-value',
            type=str,
            default=None,
            help='only update if the current value matches')

    async def run(self, args: Namespace) -> None:
        async with self.get_client(args) as client:
            if args.create:
                r = await client.create(args.key, args.value, args.ttl)
            elif args.update or args.prev_value is not None:
                condition = {}
                if args.prev_value is not None:
                    condition['prevValue'] = args.prev_value
                r = await client.update(args.key, args.value, args.ttl,
                                        condition)
            else:
                r = await client.set(args.key, args.value, args.ttl)
            print(json_pp(r.as_json()))
