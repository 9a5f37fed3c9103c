from typing import Dict, Any, List, Union, Iterator, Optional
import json
import logging
from contextlib import contextmanager
from aioetcd2.config import ClientConfig, DEFAULT_SERVER, DEFAULT_API_VERSION
from aioetcd2.exceptions import (
    EtcdError, KeyNotFoundError,
    VALUE_OR_TTL_REQUIRED, error_from_response)
from aioetcd2.models import Node, OperationResult
from aioetcd2.transport import Transport, HttpTransport
from aioetcd2.utils import force_str

logger = logging.getLogger(__name__)

Conditions = Optional[Dict[str, Any]]

def _query_value(v: Any) -> str:
    if isinstance(v, bool):
        return 'true' if v else 'false'
    return force_str(v)

def _query(params: Conditions) -> Dict[str, str]:
    if not params:
        return {}
    return dict((k, _query_value(v))
                for k, v in params.items())

class EtcdClient:
    '''
    Client of the etcd v2 keys API.

    Every key is resolved under the sandbox root, i.e. with root set to
    /app, set('key', 'v') writes /app/key. Each coroutine issues exactly
    one HTTP request and raises the typed error the response maps to,
    nothing is retried.

    The configuration is not safe for concurrent mutation, clients used
    for different roots at the same time should be separate instances.

    When a config is given, server and api_version are not used, the
    config carries its own.
    '''
    config: ClientConfig
    transport: Transport

    def __init__(self,
                 server: str=DEFAULT_SERVER,
                 api_version: str=DEFAULT_API_VERSION,
                 config: Optional[ClientConfig]=None,
                 transport: Optional[Transport]=None) -> None:
        if config is None:
            config = ClientConfig(server=server, api_version=api_version)
        self.config = config
        if transport is None:
            transport = HttpTransport(config)
        self.transport = transport

    async def __aenter__(self) -> 'EtcdClient':
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    # settings
    @property
    def server(self) -> str:
        return self.config.server

    @property
    def is_https(self) -> bool:
        return self.config.is_https

    @property
    def api_version(self) -> str:
        return self.config.api_version

    @property
    def root(self) -> str:
        return self.config.root

    @property
    def verify_ssl_peer(self) -> bool:
        return self.config.verify_ssl_peer

    @property
    def custom_ca_file(self) -> Optional[str]:
        return self.config.custom_ca_file

    def set_server(self, server: str) -> 'EtcdClient':
        self.config.set_server(server)
        return self

    def set_api_version(self, version: str) -> 'EtcdClient':
        self.config.set_api_version(version)
        return self

    def set_root(self, root: str) -> 'EtcdClient':
        self.config.set_root(root)
        return self

    def set_verify_ssl_peer(self, verify_ssl_peer: bool=True,
                            custom_ca_file: Optional[str]=None) -> 'EtcdClient':
        self.config.set_verify_ssl_peer(verify_ssl_peer, custom_ca_file)
        return self

    def set_credentials(self, username: Optional[str],
                        password: Optional[str]=None) -> 'EtcdClient':
        self.config.set_credentials(username, password)
        return self

    @contextmanager
    def sandboxed(self, root: str) -> Iterator['EtcdClient']:
        '''
        Switch the root for the duration of the block, './sub' is
        relative to the current root.
        '''
        old_root = self.config.root
        self.config.set_root(self.config.resolve_root(root))
        try:
            yield self
        finally:
            self.config.root = old_root

    def key_path(self, key: str) -> str:
        return self.config.key_path(key)

    def key_url(self, key: str) -> str:
        return self.config.key_url(key)

    # requests
    async def _request(self, method: str, url: str,
                       params: Conditions=None,
                       data: Conditions=None,
                       decode_etcd_json: bool=True) -> Any:
        text = await self.transport.request(
            method, url,
            params=_query(params),
            data=_query(data) if data is not None else None)
        try:
            body = json.loads(text)
        except ValueError:
            raise EtcdError(
                'Invalid JSON response from {}'.format(url))

        if not decode_etcd_json:
            return body
        if not isinstance(body, dict):
            raise EtcdError(
                'Invalid response from {}'.format(url))
        if body.get('errorCode'):
            err = error_from_response(body)
            logger.debug('etcd error on %s %s, %s', method, url, err)
            raise err
        return body

    async def _get(self, key: str, params: Conditions=None) -> Dict[str, Any]:
        return await self._request('GET', self.key_url(key), params=params)

    async def _put(self, key: str, data: Dict[str, Any],
                   params: Conditions=None) -> OperationResult:
        body = await self._request('PUT', self.key_url(key),
                                   params=params, data=data)
        return OperationResult(body)

    async def _delete(self, key: str, params: Conditions=None) -> OperationResult:
        body = await self._request('DELETE', self.key_url(key),
                                   params=params)
        return OperationResult(body)

    async def version(self) -> Dict[str, Any]:
        return await self._request('GET', self.config.url('/version'),
                                   decode_etcd_json=False)

    async def set(self, key: str, value: Any,
                  ttl: Optional[int]=None,
                  condition: Conditions=None) -> OperationResult:
        data: Dict[str, Any] = {'value': value}
        if ttl and ttl > 0:
            data['ttl'] = int(ttl)
        return await self._put(key, data, condition)

    async def get_node(self, key: str, flags: Conditions=None) -> Node:
        body = await self._get(key, flags)
        if not isinstance(body, dict) or not body.get('node'):
            raise EtcdError('Node field expected in response')
        return Node(body['node'])

    async def get(self, key: str, flags: Conditions=None) -> Optional[str]:
        node = await self.get_node(key, flags)
        return node.value

    async def exists(self, key: str) -> bool:
        ''' true if key holds a value, directories do not count '''
        try:
            node = await self.get_node(key)
        except KeyNotFoundError:
            return False
        return not node.dir

    async def dir_exists(self, key: str) -> bool:
        try:
            node = await self.get_node(key)
        except KeyNotFoundError:
            return False
        return node.dir

    async def create(self, key: str, value: Any,
                     ttl: int=0) -> OperationResult:
        return await self.set(key, value, ttl,
                              {'prevExist': 'false'})

    async def create_dir(self, key: str, ttl: int=0) -> OperationResult:
        data: Dict[str, Any] = {'dir': 'true'}
        if ttl and ttl > 0:
            data['ttl'] = int(ttl)
        return await self._put(key, data, {'prevExist': 'false'})

    async def update(self, key: str, value: Any,
                     ttl: int=0,
                     condition: Conditions=None) -> OperationResult:
        extra: Dict[str, Any] = {'prevExist': 'true'}
        if condition:
            extra.update(condition)
        return await self.set(key, value, ttl, extra)

    async def update_dir(self, key: str, ttl: int) -> OperationResult:
        if not ttl:
            raise EtcdError('TTL is required',
                            error_code=VALUE_OR_TTL_REQUIRED)
        return await self._put(key, {'ttl': int(ttl)}, {
            'dir': 'true',
            'prevExist': 'true',
        })

    async def remove(self, key: str) -> OperationResult:
        return await self._delete(key)

    async def remove_dir(self, key: str,
                         recursive: bool=False) -> OperationResult:
        params = {'dir': 'true'}
        if recursive:
            params['recursive'] = 'true'
        return await self._delete(key, params)

    async def list_dir(self, key: str='/',
                       recursive: bool=False) -> OperationResult:
        params = {}
        if recursive:
            params['recursive'] = 'true'
        body = await self._get(key, params)
        return OperationResult(body)

    async def list_dirs(self, key: str='/',
                        recursive: bool=False) -> List[str]:
        ''' keys of the listed tree, depth first in document order '''
        r = await self.list_dir(key, recursive)
        return [node.key for node in r.walk()
                if node.key != '/']

    async def get_key_value_map(
            self, root: str='/',
            recursive: bool=True,
            key: Optional[str]=None) -> Union[Dict[str, Optional[str]], Optional[str]]:
        '''
        Map every leaf key under root to its value, directories are left
        out. If key is in the map only its value is returned.
        '''
        r = await self.list_dir(root, recursive)
        values: Dict[str, Optional[str]] = {}
        for node in r.walk():
            if node.key != '/' and node.is_leaf:
                values[node.key] = node.value

        if key is not None and key in values:
            return values[key]
        return values
