"""
Zagent library exceptions.

This module defines all custom exceptions used throughout the library.
Transport failures (OSError, TimeoutError) are not wrapped and reach the
caller unchanged.
"""


class ZagentError(Exception):
    """Base exception for Zabbix agent protocol errors"""
    pass


class ZagentFramingError(ZagentError):
    """Raised when a response is not framed correctly"""
    pass


class ZagentHeaderError(ZagentFramingError):
    """Raised when the response header is short or does not carry the ZBXD magic"""
    pass


class DataLengthBufferTooSmall(ZagentFramingError):
    """Raised when the length field ends before the encoded value does"""

    def __init__(self, message: str = "DataLength buffer too small"):
        super().__init__(message)


class DataLengthOverflow(ZagentFramingError):
    """Raised when the length field encodes a value that is too large"""

    def __init__(self, message: str = "DataLength is too large"):
        super().__init__(message)


class ZagentNotSupportedError(ZagentError):
    """
    Raised when the agent answers a key with ZBX_NOTSUPPORTED.

    The exchange itself succeeded, so the complete response is kept on
    the exception for callers that still want to inspect it.
    """

    def __init__(self, key: str, response):
        super().__init__(f"{key} is not supported")
        self.key = key
        self.response = response


class ZagentConfigurationError(ZagentError):
    """Raised when configuration is invalid"""
    pass
