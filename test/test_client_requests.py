import pytest
from aioetcd2.exceptions import (
    EtcdError, KeyNotFoundError, KeyExistsError, TransportError)
from aioetcd2.models import Node, OperationResult

pytestmark = pytest.mark.asyncio

NODE = {'action': 'set', 'node': {'key': '/foo', 'value': 'bar',
                                  'modifiedIndex': 7, 'createdIndex': 7}}

TREE = {
    'action': 'get',
    'node': {
        'dir': True,
        'nodes': [
            {'key': '/a', 'dir': True, 'nodes': [
                {'key': '/a/aa', 'value': 'a_a'},
                {'key': '/a/b', 'dir': True, 'nodes': [
                    {'key': '/a/b/ab', 'value': 'aa_b'},
                ]},
                {'key': '/a/ab', 'value': 'a_b'},
            ]},
            {'key': '/c', 'value': 'c'},
            {'key': '/d', 'dir': True},
        ],
    },
}

async def test_set(rclient, recorder):
    recorder.reply(NODE)
    r = await rclient.set('foo', 'bar')
    assert isinstance(r, OperationResult)
    assert r.action == 'set'
    assert r.node.value == 'bar'
    assert recorder.last == {
        'method': 'PUT',
        'url': 'http://127.0.0.1:4001/v2/keys/foo',
        'params': {},
        'data': {'value': 'bar'},
    }

async def test_set_ttl_and_condition(rclient, recorder):
    await rclient.set('foo', 123, ttl=10, condition={'prevValue': 'x'})
    assert recorder.last['data'] == {'value': '123', 'ttl': '10'}
    assert recorder.last['params'] == {'prevValue': 'x'}

    await rclient.set('foo', 'bar', ttl=0)
    assert recorder.last['data'] == {'value': 'bar'}

async def test_create(rclient, recorder):
    await rclient.create('foo', 'bar', ttl=5)
    assert recorder.last['method'] == 'PUT'
    assert recorder.last['params'] == {'prevExist': 'false'}
    assert recorder.last['data'] == {'value': 'bar', 'ttl': '5'}

async def test_create_dir(rclient, recorder):
    await rclient.create_dir('dir')
    assert recorder.last['params'] == {'prevExist': 'false'}
    assert recorder.last['data'] == {'dir': 'true'}

    await rclient.create_dir('dir', ttl=30)
    assert recorder.last['data'] == {'dir': 'true', 'ttl': '30'}

async def test_update_merges_condition(rclient, recorder):
    await rclient.update('foo', 'bar')
    assert recorder.last['params'] == {'prevExist': 'true'}

    await rclient.update('foo', 'bar', condition={'prevIndex': 3})
    assert recorder.last['params'] == {'prevExist': 'true', 'prevIndex': '3'}

    await rclient.update('foo', 'bar', condition={'prevExist': False})
    assert recorder.last['params'] == {'prevExist': 'false'}

async def test_update_dir(rclient, recorder):
    await rclient.update_dir('dir', 10)
    assert recorder.last['data'] == {'ttl': '10'}
    assert recorder.last['params'] == {'dir': 'true', 'prevExist': 'true'}

async def test_update_dir_requires_ttl(rclient, recorder):
    for ttl in (0, None):
        with pytest.raises(EtcdError) as excinfo:
            await rclient.update_dir('dir', ttl)
        assert excinfo.type is EtcdError
        assert excinfo.value.error_code == 204
    assert recorder.requests == []

async def test_remove(rclient, recorder):
    await rclient.remove('foo')
    assert recorder.last['method'] == 'DELETE'
    assert recorder.last['params'] == {}

    await rclient.remove_dir('dir')
    assert recorder.last['params'] == {'dir': 'true'}

    await rclient.remove_dir('dir', recursive=True)
    assert recorder.last['params'] == {'dir': 'true', 'recursive': 'true'}

async def test_get_node(rclient, recorder):
    recorder.reply(NODE)
    node = await rclient.get_node('foo', {'quorum': True})
    assert isinstance(node, Node)
    assert node.key == '/foo'
    assert node.modified_index == 7
    assert recorder.last['method'] == 'GET'
    assert recorder.last['params'] == {'quorum': 'true'}

async def test_get_node_without_node(rclient, recorder):
    recorder.reply({'action': 'get'})
    with pytest.raises(EtcdError) as excinfo:
        await rclient.get_node('foo')
    assert 'Node field expected' in str(excinfo.value)

async def test_get(rclient, recorder):
    recorder.reply(NODE)
    assert await rclient.get('foo') == 'bar'

async def test_sandboxed_requests(rclient, recorder):
    rclient.set_root('/app')
    with rclient.sandboxed('./sub'):
        await rclient.get_node('key')
    assert recorder.last['url'] == 'http://127.0.0.1:4001/v2/keys/app/sub/key'

async def test_error_mapping(rclient, recorder):
    recorder.reply(
        {'errorCode': 100, 'message': 'Key not found', 'cause': '/foo', 'index': 3},
        {'errorCode': 105, 'message': 'Key already exists', 'cause': '/foo'},
        {'errorCode': 108, 'message': 'Directory not empty'},
    )
    with pytest.raises(KeyNotFoundError) as excinfo:
        await rclient.get('foo')
    assert str(excinfo.value) == 'Key not found. Cause: /foo'
    assert excinfo.value.error_code == 100
    assert excinfo.value.cause == '/foo'

    with pytest.raises(KeyExistsError) as excinfo:
        await rclient.create('foo', 'bar')
    assert excinfo.value.error_code == 105

    with pytest.raises(EtcdError) as excinfo:
        await rclient.remove_dir('dir')
    assert excinfo.type is EtcdError
    assert str(excinfo.value) == 'Directory not empty'
    assert excinfo.value.cause is None

async def test_zero_error_code_is_not_an_error(rclient, recorder):
    recorder.reply({'errorCode': 0, 'action': 'get', 'node': {'key': '/x', 'value': '1'}})
    assert await rclient.get('x') == '1'

async def test_invalid_json(rclient, recorder):
    recorder.reply('<html>bad gateway</html>')
    with pytest.raises(EtcdError):
        await rclient.get('foo')

async def test_non_object_body(rclient, recorder):
    recorder.reply('null', '[1, 2]', '"text"')
    with pytest.raises(EtcdError):
        await rclient.set('foo', 'bar')
    with pytest.raises(EtcdError):
        await rclient.list_dir()
    with pytest.raises(EtcdError):
        await rclient.get('foo')

async def test_transport_error_propagates(rclient, recorder):
    recorder.reply(TransportError('http://127.0.0.1:4001/v2/keys/foo', 'refused', 111))
    with pytest.raises(TransportError) as excinfo:
        await rclient.get('foo')
    assert excinfo.value.url.endswith('/v2/keys/foo')
    assert excinfo.value.code == 111
    assert len(recorder.requests) == 1

async def test_version_is_not_error_mapped(rclient, recorder):
    recorder.reply({'etcdserver': '2.3.8', 'etcdcluster': '2.3.0', 'errorCode': 1})
    r = await rclient.version()
    assert r['etcdserver'] == '2.3.8'
    assert recorder.last['url'] == 'http://127.0.0.1:4001/version'

async def test_list_dir(rclient, recorder):
    recorder.reply(TREE)
    r = await rclient.list_dir('/', recursive=True)
    assert recorder.last['params'] == {'recursive': 'true'}
    assert r.node.dir
    assert [n.key for n in r.node.children] == ['/a', '/c', '/d']

    await rclient.list_dir('/')
    assert recorder.last['params'] == {}

async def test_list_dirs_document_order(rclient, recorder):
    recorder.reply(TREE)
    keys = await rclient.list_dirs('/', recursive=True)
    assert keys == ['/a', '/a/aa', '/a/b', '/a/b/ab', '/a/ab', '/c', '/d']

async def test_list_dirs_is_call_scoped(rclient, recorder):
    recorder.reply(TREE, {'action': 'get', 'node': {'key': '/d', 'dir': True}})
    await rclient.list_dirs('/', recursive=True)
    assert await rclient.list_dirs('/d') == ['/d']

async def test_key_value_map(rclient, recorder):
    recorder.reply(TREE, TREE)
    values = await rclient.get_key_value_map()
    assert values == {
        '/a/aa': 'a_a',
        '/a/b/ab': 'aa_b',
        '/a/ab': 'a_b',
        '/c': 'c',
    }
    assert await rclient.get_key_value_map(key='/a/ab') == 'a_b'

async def test_key_value_map_unknown_key(rclient, recorder):
    recorder.reply(TREE)
    values = await rclient.get_key_value_map(key='/nope')
    assert '/c' in values

async def test_close(rclient, recorder):
    async with rclient as c:
        assert c is rclient
    assert recorder.closed
