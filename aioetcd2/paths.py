'''
Key path algebra.

A key is resolved against the sandbox root and the API version:

    /<api_version>/keys<root><key>

The root is kept normalized (leading slash, no trailing slash unless it is
the store root itself) so the composition never produces doubled slashes.
'''

def normalize_key(key: str) -> str:
    if not key.startswith('/'):
        key = '/' + key
    return key

def normalize_root(root: str) -> str:
    '''
    >>> normalize_root('root/')
    '/root'
    >>> normalize_root('/')
    '/'
    '''
    root = normalize_key(root).rstrip('/')
    return root or '/'

def join_root(root: str, subroot: str) -> str:
    ''' resolve a './' relative root against the current one '''
    if subroot.startswith('./'):
        return normalize_root(
            root.rstrip('/') + '/' + subroot[2:])
    return normalize_root(subroot)

def key_path(api_version: str, root: str, key: str) -> str:
    prefix = '/{}/keys{}'.format(api_version, root).rstrip('/')
    return prefix + normalize_key(key)
