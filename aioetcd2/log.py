from typing import Dict, Any, List
import sys
import os
import logging
import logging.config

'''
config logging from envs, nothing is output by default, once the env
ETCD2_LOG_CONSOLE is set logs are put to console
'''

LOGGING: Dict[str, Any] = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
            'stream': sys.stdout,
        },
        'null': {
            'class': 'logging.NullHandler',
        },
    },
    'formatters': {
        'simple': {
            'format': '[%(asctime)s] %(process)d %(name)s [%(levelname)s] %(message)s',
        },
    },
    'loggers': {
        'aiohttp': {
            'level': 'WARNING',
        },
    },
    'root': {
        'handlers': ['null'],
        'level': 'INFO'
    },
}

def config_log(mute_console: bool=False) -> None:
    from aioetcd2 import testing
    logging_config = dict(LOGGING)

    handlers: List[str] = []
    log_to_console = (
        os.getenv('ETCD2_LOG_CONSOLE', '').lower()
        in ('1', 'true', 'yes'))

    if log_to_console and not mute_console:
        handlers.append('console')
    else:
        handlers.append('null')

    log_level = os.getenv('ETCD2_LOG_LEVEL')
    if not log_level:
        if testing.test_mode():
            log_level = 'DEBUG'
        else:
            log_level = 'INFO'

    root_cfg = dict(logging_config['root'])
    root_cfg['level'] = log_level.upper()
    root_cfg['handlers'] = handlers
    logging_config['root'] = root_cfg
    logging.config.dictConfig(logging_config)
