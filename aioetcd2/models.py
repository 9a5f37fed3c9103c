from typing import Dict, Any, List, Iterator, Optional

class Node:
    '''
    One entry of the keys tree, either a leaf value or a directory.

    `nodes` is only set for directories listed with children; `value` is
    None for directories. `raw` keeps the decoded JSON object.
    '''
    key: str
    value: Optional[str]
    dir: bool
    ttl: Optional[int]
    expiration: Optional[str]
    modified_index: Optional[int]
    created_index: Optional[int]
    nodes: Optional[List['Node']]

    def __init__(self, body: Dict[str, Any]) -> None:
        self.raw = body
        self.key = body.get('key', '/')
        self.value = body.get('value')
        self.dir = bool(body.get('dir', False))
        self.ttl = body.get('ttl')
        self.expiration = body.get('expiration')
        self.modified_index = body.get('modifiedIndex')
        self.created_index = body.get('createdIndex')
        children = body.get('nodes')
        if children is None:
            self.nodes = None
        else:
            self.nodes = [Node(c) for c in children]

    @property
    def children(self) -> List['Node']:
        return self.nodes or []

    @property
    def is_leaf(self) -> bool:
        return not self.dir and 'value' in self.raw

    def walk(self) -> Iterator['Node']:
        ''' depth first, a node before its children '''
        yield self
        for c in self.children:
            if c.key == self.key:
                continue
            for cc in c.walk():
                yield cc

    def as_json(self) -> Dict[str, Any]:
        return self.raw

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.raw == other.raw

    def __repr__(self) -> str:
        if self.dir:
            return '<Node dir {}>'.format(self.key)
        return '<Node {}={!r}>'.format(self.key, self.value)

class OperationResult:
    action: str
    node: Optional[Node]
    prev_node: Optional[Node]

    def __init__(self, body: Dict[str, Any]) -> None:
        self.raw = body
        self.action = body.get('action', '')
        self.node = Node(body['node']) if body.get('node') else None
        self.prev_node = Node(body['prevNode']) if body.get('prevNode') else None

    def walk(self) -> Iterator[Node]:
        if self.node is not None:
            yield from self.node.walk()

    def as_json(self) -> Dict[str, Any]:
        return self.raw

    def __repr__(self) -> str:
        return '<OperationResult {} {!r}>'.format(self.action, self.node)
