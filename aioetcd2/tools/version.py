from argparse import Namespace
from aioetcd2.handler import BaseHandler
from aioetcd2.utils import json_pp

class Handler(BaseHandler):
    help = 'print the etcd server version'

    async def run(self, args: Namespace) -> None:
        async with self.get_client(args) as client:
            print(json_pp(await client.version()))
