from typing import Dict, Any, Optional
import os
import json
import logging
from urllib.parse import urlsplit
from aioetcd2.exceptions import InvalidConfigurationError
from aioetcd2.paths import normalize_root, join_root, key_path
from aioetcd2.utils import get_config_path

logger = logging.getLogger(__name__)

DEFAULT_SERVER = 'http://127.0.0.1:4001'
DEFAULT_API_VERSION = 'v2'

def is_valid_url(url: str) -> bool:
    if not isinstance(url, str) or not url:
        return False
    if any(c.isspace() for c in url):
        return False
    try:
        parts = urlsplit(url)
        # raises ValueError on a malformed port
        parts.port
    except ValueError:
        return False
    return bool(parts.scheme and parts.hostname)

class ClientConfig:
    server: str
    is_https: bool = False
    api_version: str
    root: str = '/'
    verify_ssl_peer: bool = True
    custom_ca_file: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def __init__(self,
                 server: str=DEFAULT_SERVER,
                 api_version: str=DEFAULT_API_VERSION,
                 root: str='/',
                 verify_ssl_peer: bool=True,
                 custom_ca_file: Optional[str]=None,
                 username: Optional[str]=None,
                 password: Optional[str]=None) -> None:
        self.set_server(server)
        self.set_api_version(api_version)
        self.set_root(root)
        self.set_verify_ssl_peer(verify_ssl_peer, custom_ca_file)
        self.set_credentials(username, password)

    def set_server(self, server: str) -> 'ClientConfig':
        if not is_valid_url(server):
            raise InvalidConfigurationError(
                "Value '{}' is not a valid server URL".format(server))
        self.server = server.rstrip('/')
        self.is_https = urlsplit(self.server).scheme.lower() == 'https'
        return self

    def set_api_version(self, version: str) -> 'ClientConfig':
        self.api_version = version
        return self

    def set_root(self, root: str) -> 'ClientConfig':
        self.root = normalize_root(root)
        return self

    def set_verify_ssl_peer(self, verify_ssl_peer: bool=True,
                            custom_ca_file: Optional[str]=None) -> 'ClientConfig':
        if custom_ca_file:
            if not os.path.isfile(custom_ca_file):
                raise InvalidConfigurationError(
                    'Custom CA file {} does not exist'.format(custom_ca_file))
            if not verify_ssl_peer:
                raise InvalidConfigurationError(
                    'Custom CA file should not be set if SSL peer is not verified')

        self.verify_ssl_peer = bool(verify_ssl_peer)
        self.custom_ca_file = custom_ca_file or None
        return self

    def set_credentials(self, username: Optional[str],
                        password: Optional[str]=None) -> 'ClientConfig':
        self.username = username or None
        if self.username is None:
            self.password = None
        else:
            self.password = password or ''
        return self

    def resolve_root(self, root: str) -> str:
        return join_root(self.root, root)

    def key_path(self, key: str) -> str:
        return key_path(self.api_version, self.root, key)

    def key_url(self, key: str) -> str:
        return self.server + self.key_path(key)

    def url(self, path: str) -> str:
        return self.server + path

    def copy(self) -> 'ClientConfig':
        return ClientConfig(
            server=self.server,
            api_version=self.api_version,
            root=self.root,
            verify_ssl_peer=self.verify_ssl_peer,
            custom_ca_file=self.custom_ca_file,
            username=self.username,
            password=self.password)

    @classmethod
    def from_dict(cls, kw: Dict[str, Any]) -> 'ClientConfig':
        return cls(
            server=kw.get('server', DEFAULT_SERVER),
            api_version=kw.get('api_version', DEFAULT_API_VERSION),
            root=kw.get('root', '/'),
            verify_ssl_peer=kw.get('verify_ssl_peer', True),
            custom_ca_file=kw.get('ca_file'),
            username=kw.get('username'),
            password=kw.get('password'))

def load_config(path: Optional[str]=None) -> ClientConfig:
    '''
    Load client.json from the first of ./.etcd2, ~/.etcd2 and /etc/etcd2,
    then apply the ETCD2_SERVER and ETCD2_ROOT environment overrides.
    '''
    path = path or get_config_path('client.json')
    kw: Dict[str, Any] = {}
    if path:
        logger.debug('load client config from %s', path)
        with open(path, 'r', encoding='utf-8') as f:
            kw = json.load(f)

    server = os.getenv('ETCD2_SERVER')
    if server:
        kw['server'] = server
    root = os.getenv('ETCD2_ROOT')
    if root:
        kw['root'] = root
    return ClientConfig.from_dict(kw)
