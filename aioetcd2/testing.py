'''
Test helpers: the test mode switch and an in-memory server speaking the
etcd v2 keys API, good enough to run the client against in unit tests.

    app = make_app()
    server = aiohttp.test_utils.TestServer(app)
'''
from typing import Dict, Any, List, Optional
import os
import math
import time
import logging
from datetime import datetime, timezone
from aiohttp import web

logger = logging.getLogger(__name__)

SERVER_VERSION = {
    'etcdserver': '2.3.8',
    'etcdcluster': '2.3.0',
}

def test_mode() -> bool:
    return os.getenv('ETCD2_TESTING', '').lower() in ('1', 'true', 'yes')

class ApiError(Exception):
    STATUS = {
        100: 404,
        101: 412,
        102: 403,
        104: 403,
        105: 412,
        107: 403,
        108: 403,
        202: 400,
    }

    def __init__(self, code: int, message: str, cause: str='') -> None:
        self.code = code
        self.message = message
        self.cause = cause
        super(ApiError, self).__init__(message)

    @property
    def status(self) -> int:
        return self.STATUS.get(self.code, 400)

def _parent(key: str) -> str:
    return key.rsplit('/', 1)[0] or '/'

def _is_true(v: Optional[str]) -> bool:
    return v == 'true'

class MemoryStore:
    '''
    The keys tree as a flat dict of full key to entry, the root '/' is
    always there. Expired entries are purged lazily before each request.
    '''
    def __init__(self) -> None:
        self.index = 0
        self.entries: Dict[str, Dict[str, Any]] = {}
        self.entries['/'] = self._entry('/', is_dir=True)

    def _entry(self, key: str, is_dir: bool=False,
               value: Optional[str]=None,
               expires: Optional[float]=None) -> Dict[str, Any]:
        return {
            'key': key,
            'dir': is_dir,
            'value': value,
            'expires': expires,
            'createdIndex': self.index,
            'modifiedIndex': self.index,
        }

    def purge_expired(self) -> None:
        now = time.time()
        expired = [k for k, e in self.entries.items()
                   if e['expires'] is not None and e['expires'] <= now]
        for key in expired:
            if key in self.entries:
                self._remove_tree(key)

    def _remove_tree(self, key: str) -> None:
        prefix = key.rstrip('/') + '/'
        for k in [k for k in self.entries if k.startswith(prefix)]:
            del self.entries[k]
        del self.entries[key]

    def children(self, key: str) -> List[str]:
        return [k for k in self.entries
                if k != '/' and _parent(k) == key]

    def node_json(self, key: str, recursive: bool=False,
                  with_children: bool=False) -> Dict[str, Any]:
        e = self.entries[key]
        d: Dict[str, Any] = {}
        if key != '/':
            d['key'] = key
        if e['dir']:
            d['dir'] = True
        else:
            d['value'] = e['value']
        if e['expires'] is not None:
            d['expiration'] = datetime.fromtimestamp(
                e['expires'], timezone.utc).isoformat()
            d['ttl'] = max(1, int(math.ceil(e['expires'] - time.time())))
        if key != '/':
            d['modifiedIndex'] = e['modifiedIndex']
            d['createdIndex'] = e['createdIndex']
        if e['dir'] and with_children:
            nodes = [self.node_json(c, recursive, with_children=recursive)
                     for c in self.children(key)]
            if nodes:
                d['nodes'] = nodes
        return d

    def get(self, key: str, recursive: bool=False) -> Dict[str, Any]:
        if key not in self.entries:
            raise ApiError(100, 'Key not found', key)
        return {
            'action': 'get',
            'node': self.node_json(key, recursive, with_children=True),
        }

    def _ensure_parents(self, key: str) -> None:
        parent = _parent(key)
        missing = []
        while parent not in self.entries:
            missing.append(parent)
            parent = _parent(parent)
        if not self.entries[parent]['dir']:
            raise ApiError(104, 'Not a directory', parent)
        for p in reversed(missing):
            self.entries[p] = self._entry(p, is_dir=True)

    def _parse_ttl(self, ttl: Optional[str]) -> Optional[float]:
        if not ttl:
            return None
        try:
            secs = int(ttl)
        except ValueError:
            raise ApiError(202, 'The given TTL in POST form is not a number')
        return time.time() + secs

    def put(self, key: str, params: Dict[str, str]) -> Dict[str, Any]:
        if key == '/':
            raise ApiError(107, 'The root is read only', '/')

        prev = self.entries.get(key)
        prev_exist = params.get('prevExist')
        prev_value = params.get('prevValue')
        is_dir = _is_true(params.get('dir'))
        expires = self._parse_ttl(params.get('ttl'))

        action = 'set'
        if prev_exist == 'false':
            action = 'create'
            if prev is not None:
                raise ApiError(105, 'Key already exists', key)
        elif prev_exist == 'true':
            action = 'update'
            if prev is None:
                raise ApiError(100, 'Key not found', key)
        if prev_value is not None:
            action = 'compareAndSwap'
            if prev is None:
                raise ApiError(100, 'Key not found', key)
            if prev['value'] != prev_value:
                raise ApiError(101, 'Compare failed', '[{} != {}]'.format(
                    prev_value, prev['value']))

        if prev is not None:
            if prev['dir'] and not (is_dir and prev_exist == 'true'):
                raise ApiError(102, 'Not a file', key)
            if is_dir and not prev['dir']:
                raise ApiError(104, 'Not a directory', key)

        prev_json = None
        if prev is not None:
            prev_json = self.node_json(key)

        if prev is None:
            self._ensure_parents(key)
        self.index += 1
        if prev is not None and prev['dir']:
            # a directory update only refreshes its ttl
            prev['expires'] = expires
            prev['modifiedIndex'] = self.index
        else:
            entry = self._entry(key, is_dir=is_dir,
                                value=None if is_dir else params.get('value', ''),
                                expires=expires)
            if prev is not None:
                entry['createdIndex'] = prev['createdIndex']
            self.entries[key] = entry

        body = {
            'action': action,
            'node': self.node_json(key),
        }
        if prev_json is not None:
            body['prevNode'] = prev_json
        return body

    def delete(self, key: str, params: Dict[str, str]) -> Dict[str, Any]:
        if key == '/':
            raise ApiError(107, 'The root is read only', '/')
        entry = self.entries.get(key)
        if entry is None:
            raise ApiError(100, 'Key not found', key)
        if entry['dir']:
            if not _is_true(params.get('dir')):
                raise ApiError(102, 'Not a file', key)
            if self.children(key) and not _is_true(params.get('recursive')):
                raise ApiError(108, 'Directory not empty', key)

        prev_json = self.node_json(key)
        self.index += 1
        self._remove_tree(key)
        node = {'key': key, 'modifiedIndex': self.index,
                'createdIndex': entry['createdIndex']}
        if entry['dir']:
            node['dir'] = True
        return {
            'action': 'delete',
            'node': node,
            'prevNode': prev_json,
        }

STORE_KEY = web.AppKey('store', MemoryStore)

def _request_key(request: web.Request) -> str:
    key = request.match_info['key']
    if not key.startswith('/'):
        key = '/' + key
    return key.rstrip('/') or '/'

async def _handle_keys(request: web.Request) -> web.Response:
    store = request.app[STORE_KEY]
    store.purge_expired()
    key = _request_key(request)
    params: Dict[str, str] = dict(request.query)
    try:
        if request.method == 'GET':
            body = store.get(key, _is_true(params.get('recursive')))
            status = 200
        elif request.method == 'PUT':
            form = await request.post()
            for k, v in form.items():
                params[k] = str(v)
            body = store.put(key, params)
            status = 201 if body['action'] == 'create' else 200
        elif request.method == 'DELETE':
            body = store.delete(key, params)
            status = 200
        else:
            raise web.HTTPMethodNotAllowed(
                request.method, ['GET', 'PUT', 'DELETE'])
    except ApiError as e:
        logger.debug('%s %s failed, %s %s', request.method, key,
                     e.code, e.message)
        body = {
            'errorCode': e.code,
            'message': e.message,
            'cause': e.cause,
            'index': store.index,
        }
        status = e.status
    return web.json_response(
        body, status=status,
        headers={'X-Etcd-Index': str(store.index)})

async def _handle_version(request: web.Request) -> web.Response:
    return web.json_response(SERVER_VERSION)

def make_app(api_version: str='v2') -> web.Application:
    app = web.Application()
    app[STORE_KEY] = MemoryStore()
    app.router.add_get('/version', _handle_version)
    app.router.add_route('*', '/{}/keys{{key:.*}}'.format(api_version),
                         _handle_keys)
    return app
