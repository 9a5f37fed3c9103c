from typing import Optional

class BaseError(Exception):
    pass

class InvalidConfigurationError(BaseError, ValueError):
    pass

class TransportError(BaseError):
    def __init__(self, url: str, reason: str, code: Optional[int]=None) -> None:
        self.url = url
        self.reason = reason
        self.code = code
        super(TransportError, self).__init__(
            '{} request failed. Reason: {}'.format(url, reason))

class EtcdError(BaseError):
    def __init__(self, message: str,
                 error_code: Optional[int]=None,
                 cause: Optional[str]=None) -> None:
        self.message = message
        self.error_code = error_code
        self.cause = cause
        super(EtcdError, self).__init__(message)

class KeyNotFoundError(EtcdError):
    pass

class KeyExistsError(EtcdError):
    pass

# etcd v2 error codes the client maps to typed errors
KEY_NOT_FOUND = 100
NODE_EXIST = 105
VALUE_OR_TTL_REQUIRED = 204

def error_from_response(body: dict) -> EtcdError:
    code = body['errorCode']
    message = body.get('message') or ''
    cause = body.get('cause')
    if cause:
        message = '{}. Cause: {}'.format(message, cause)

    if code == KEY_NOT_FOUND:
        cls = KeyNotFoundError
    elif code == NODE_EXIST:
        cls = KeyExistsError
    else:
        cls = EtcdError
    return cls(message, error_code=code, cause=cause)
