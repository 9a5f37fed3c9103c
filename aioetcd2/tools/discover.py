from argparse import Namespace, ArgumentParser
from aioetcd2.discovery import SrvDiscoverer
from aioetcd2.handler import BaseHandler
from aioetcd2.utils import json_pp

class Handler(BaseHandler):
    help = 'discover etcd servers with DNS SRV records'

    def add_arguments(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            'domain',
            type=str,
            help='SRV domain, e.g. _etcd-client._tcp.example.com')

        parser.add_argument(
            '--scheme',
            type=str,
            default='http',
            help='scheme of the picked server url')

        parser.add_argument(
            '--all',
            action='store_true',
            help='print all records instead of picking one')

    async def run(self, args: Namespace) -> None:
        discoverer = SrvDiscoverer()
        servers = await discoverer.get_servers(args.domain)
        if args.all:
            print(json_pp([s.as_json() for s in servers]))
            return

        server = discoverer.pick_server(servers)
        if server is not None:
            print(server.url(args.scheme))
