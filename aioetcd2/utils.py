from typing import Any, Optional
import os
from json import (
    dumps as json_dumps,
)

def semanticbool(v: str) -> bool:
    if v.lower() in ('yes', 'true', 'ok', 'on', '1', 'y'):
        return True
    elif v.lower() in ('no', 'false', 'off', '0', 'n'):
        return False
    else:
        raise ValueError()

def json_pp(v: Any) -> str:
    return json_dumps(v, indent=2, sort_keys=True)

def json_to_str(v: Any) -> str:
    return json_dumps(v, sort_keys=True)

def force_str(v: Any, encoding: str='utf-8') -> str:
    if type(v) == bytes:
        return v.decode(encoding)
    else:
        return str(v)

def abs_path(path: str) -> str:
    return os.path.join(os.getcwd(), path)

def home_path(path: str) -> Optional[str]:
    home: Optional[str] = os.getenv('HOME')
    if home is None:
        return None
    return os.path.join(home, path)

def get_config_path(path: str) -> Optional[str]:
    rel_path = '.etcd2/{}'.format(path)
    for p in [
            abs_path(rel_path),
            home_path(rel_path),
            os.path.join('/etc/etcd2', path)]:
        if p and os.path.exists(p):
            return p
    return None

def import_module(spec: str) -> Any:
    mod = __import__(spec)
    for sec in spec.split('.')[1:]:
        mod = getattr(mod, sec)
    return mod
