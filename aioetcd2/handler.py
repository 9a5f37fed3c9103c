from typing import Any
from argparse import Namespace, ArgumentParser
from aioetcd2.client import EtcdClient
from aioetcd2.config import load_config

class BaseHandler:
    help: str = ''

    def add_arguments(self, parser: ArgumentParser) -> None:
        pass

    def get_client(self, args: Namespace) -> EtcdClient:
        config = load_config()
        server = getattr(args, 'server', None)
        if server:
            config.set_server(server)
        root = getattr(args, 'root', None)
        if root:
            config.set_root(root)
        return EtcdClient(config=config)

    async def run(self, args: Namespace) -> Any:
        raise NotImplementedError
