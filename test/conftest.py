from typing import Dict, Any, List, Optional
import os
from json import dumps as json_dumps
import pytest
import pytest_asyncio
from aiohttp.test_utils import TestServer
from aioetcd2.client import EtcdClient
from aioetcd2.exceptions import EtcdError
from aioetcd2.testing import make_app
from aioetcd2.transport import Transport

TEST_DIR = '/pytest_test'

@pytest.hookimpl
def pytest_collection_modifyitems(session, config, items):
    os.environ['ETCD2_TESTING'] = 'yes'

class RecordingTransport(Transport):
    '''
    Records the requests and replies with the queued bodies, an
    exception in the queue is raised instead.
    '''
    def __init__(self) -> None:
        self.requests: List[Dict[str, Any]] = []
        self.responses: List[Any] = []
        self.closed = False

    def reply(self, *bodies: Any) -> 'RecordingTransport':
        self.responses.extend(bodies)
        return self

    @property
    def last(self) -> Dict[str, Any]:
        return self.requests[-1]

    async def request(self, method: str, url: str,
                      params: Optional[Dict[str, str]]=None,
                      data: Optional[Dict[str, str]]=None,
                      json: Any=None) -> str:
        self.requests.append({
            'method': method,
            'url': url,
            'params': params,
            'data': data,
        })
        if self.responses:
            body = self.responses.pop(0)
        else:
            body = {'action': 'get', 'node': {'dir': True}}
        if isinstance(body, Exception):
            raise body
        if isinstance(body, str):
            return body
        return json_dumps(body)

    async def close(self) -> None:
        self.closed = True

@pytest.fixture
def recorder():
    return RecordingTransport()

@pytest.fixture
def rclient(recorder):
    return EtcdClient(transport=recorder)

@pytest_asyncio.fixture
async def etcd_server():
    server = TestServer(make_app())
    await server.start_server()
    yield server
    await server.close()

@pytest.fixture
def etcd_url(etcd_server):
    return 'http://{}:{}'.format(etcd_server.host, etcd_server.port)

@pytest_asyncio.fixture
async def etcd(etcd_url):
    ''' a client sandboxed in a fresh TEST_DIR '''
    client = EtcdClient(etcd_url)
    try:
        await client.remove_dir(TEST_DIR, recursive=True)
    except EtcdError:
        pass
    r = await client.create_dir(TEST_DIR)
    assert r.action == 'create'
    assert r.node.dir
    client.set_root(TEST_DIR)
    yield client
    client.set_root('/')
    try:
        await client.remove_dir(TEST_DIR, recursive=True)
    finally:
        await client.close()
