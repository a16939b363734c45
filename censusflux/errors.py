"""
Every failure of the write-then-read workflow is fatal. Each phase
wraps the exception it gets from the underlying client into one of the
classes below, with a short prefix naming the phase, so the cli can
report it as a single `error: ...` line.
"""

__all__ = [
    "CensusError",
    "ConfigError",
    "TLSError",
    "WriteError",
    "QueryError",
    "StreamError",
    "SerializationError",
]


class CensusError(Exception):
    pass


class ConfigError(CensusError):
    pass


class TLSError(CensusError):
    pass


class WriteError(CensusError):
    pass


class QueryError(CensusError):
    pass


class StreamError(CensusError):
    pass


class SerializationError(CensusError):
    pass
