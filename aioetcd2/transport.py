from typing import Dict, Any, Optional, Union
import ssl
import asyncio
import logging
import aiohttp
from aioetcd2.config import ClientConfig
from aioetcd2.exceptions import TransportError

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT_SECS = 15

Params = Optional[Dict[str, str]]

class Transport:
    '''
    The HTTP capability the client issues its requests through.

    request() returns the response body whatever the status code is,
    etcd reports key errors as JSON documents in 4xx responses.
    '''
    async def request(self, method: str, url: str,
                      params: Params=None,
                      data: Params=None,
                      json: Any=None) -> str:
        raise NotImplementedError

    async def close(self) -> None:
        pass

class HttpTransport(Transport):
    session: Optional[aiohttp.ClientSession]

    def __init__(self, config: ClientConfig) -> None:
        self.config = config
        self.session = None
        self._ssl_contexts: Dict[Optional[str], ssl.SSLContext] = {}

    def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
        return self.session

    def get_ssl(self) -> Union[ssl.SSLContext, bool]:
        if not (self.config.is_https and self.config.verify_ssl_peer):
            return False
        cafile = self.config.custom_ca_file
        ctx = self._ssl_contexts.get(cafile)
        if ctx is None:
            ctx = ssl.create_default_context(cafile=cafile)
            self._ssl_contexts[cafile] = ctx
        return ctx

    def get_auth(self) -> Optional[aiohttp.BasicAuth]:
        if self.config.username:
            return aiohttp.BasicAuth(self.config.username,
                                     self.config.password or '')
        return None

    async def request(self, method: str, url: str,
                      params: Params=None,
                      data: Params=None,
                      json: Any=None) -> str:
        logger.debug('%s %s params %s', method, url, params)
        session = self._get_session()
        try:
            async with session.request(
                    method, url,
                    params=params or None,
                    data=data,
                    json=json,
                    auth=self.get_auth(),
                    ssl=self.get_ssl(),
                    allow_redirects=True,
                    timeout=aiohttp.ClientTimeout(
                        connect=CONNECT_TIMEOUT_SECS)) as resp:
                try:
                    return await resp.text()
                except UnicodeDecodeError:
                    logger.warning('undecodable body from %s %s', method, url)
                    raise TransportError(url, 'undecodable response body')
        except asyncio.TimeoutError:
            logger.warning('timeout on %s %s', method, url)
            raise TransportError(url, 'timeout')
        except (aiohttp.ClientError, ssl.SSLError) as e:
            logger.warning('http client error on %s %s',
                           method, url, exc_info=True)
            raise TransportError(url, str(e) or e.__class__.__name__,
                                 getattr(e, 'errno', None))

    async def close(self) -> None:
        if self.session is not None:
            await self.session.close()
        self.session = None
