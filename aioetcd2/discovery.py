from typing import Dict, Any, List, Iterable, Optional, Callable, Awaitable
import random
import logging
from collections import defaultdict
import dns.asyncresolver
import dns.exception
import dns.resolver
from aioetcd2.exceptions import TransportError

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Awaitable[Iterable[Any]]]

class SrvRecord:
    target: str
    port: int
    priority: int
    weight: int

    def __init__(self, target: str, port: int,
                 priority: int=0, weight: int=0) -> None:
        self.target = target
        self.port = int(port)
        self.priority = int(priority)
        self.weight = int(weight)

    def url(self, scheme: str='http') -> str:
        return '{}://{}:{}'.format(scheme, self.target, self.port)

    def as_json(self) -> Dict[str, Any]:
        return {
            'target': self.target,
            'port': self.port,
            'priority': self.priority,
            'weight': self.weight,
        }

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, SrvRecord):
            return NotImplemented
        return self.as_json() == other.as_json()

    def __repr__(self) -> str:
        return '<SrvRecord {}:{} pri={} weight={}>'.format(
            self.target, self.port, self.priority, self.weight)

async def dns_resolve_srv(domain: str) -> Iterable[Any]:
    try:
        return await dns.asyncresolver.resolve(domain, 'SRV')
    except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
        logger.debug('no SRV records for %s', domain)
        return []
    except dns.exception.DNSException as e:
        logger.warning('SRV lookup of %s failed, %s', domain, e)
        raise TransportError(domain, str(e) or e.__class__.__name__)

def _target_text(target: Any) -> str:
    if hasattr(target, 'to_text'):
        return target.to_text(omit_final_dot=True)
    return str(target).rstrip('.')

class SrvDiscoverer:
    def __init__(self, resolver: Optional[Resolver]=None) -> None:
        self.resolver = resolver or dns_resolve_srv

    async def get_servers(self, domain: str) -> List[SrvRecord]:
        answers = await self.resolver(domain)
        servers = [SrvRecord(_target_text(a.target),
                             a.port, a.priority, a.weight)
                   for a in answers]
        logger.debug('found servers %s for %s', servers, domain)
        return servers

    def pick_server(self, servers: List[SrvRecord]) -> Optional[SrvRecord]:
        '''
        Pick among the servers of the lowest priority value, randomly
        when there are several of them. The weight is ignored.
        '''
        if not servers:
            return None
        by_prio: Dict[int, List[SrvRecord]] = defaultdict(list)
        for server in servers:
            by_prio[server.priority].append(server)

        candidates = by_prio[min(by_prio.keys())]
        if len(candidates) == 1:
            return candidates[0]
        return random.choice(candidates)

    async def discover(self, domain: str, scheme: str='http') -> Optional[str]:
        server = self.pick_server(await self.get_servers(domain))
        if server is None:
            return None
        return server.url(scheme)
