from .client import EtcdClient
from .config import ClientConfig, load_config
from .discovery import SrvDiscoverer, SrvRecord
from .exceptions import (
    BaseError,
    InvalidConfigurationError,
    TransportError,
    EtcdError,
    KeyNotFoundError,
    KeyExistsError,
)
from .models import Node, OperationResult
from .transport import Transport, HttpTransport

__all__ = [
    'EtcdClient', 'ClientConfig', 'load_config',
    'SrvDiscoverer', 'SrvRecord',
    'Node', 'OperationResult',
    'Transport', 'HttpTransport',
    'BaseError', 'InvalidConfigurationError', 'TransportError',
    'EtcdError', 'KeyNotFoundError', 'KeyExistsError',
]
