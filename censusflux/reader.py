"""
The `Reader` class reads the census data back through Flight SQL. The
query is submitted, the first endpoint of the answer is streamed and
each record batch is yielded as soon as it is received:

``` python-console
>>> from censusflux import Config, Reader, dump_batch
>>> with Reader(Config.from_env()) as reader:
...     for batch in reader.query():
...         print(dump_batch(batch))
```

A reader goes through the following states:

    IDLE -> CONNECTED -> SUBMITTED -> STREAMING -> EXHAUSTED
                                                 `-> FAILED

Any error moves it to `FAILED` and is raised, nothing is retried.
"""
import json
from enum import Enum

from pyarrow import ArrowException, flight

from .errors import QueryError, SerializationError, StreamError, TLSError
from .flightsql import (
    CENSUS_QUERY,
    FlightSQLClient,
    request_headers,
    system_root_certs,
)
from .utils import logger, settings

__all__ = ["Reader", "State", "dump_batch"]

FLIGHT_ERRORS = (flight.FlightError, ArrowException, OSError)


class State(Enum):
    IDLE = "idle"
    CONNECTED = "connected"
    SUBMITTED = "submitted"
    STREAMING = "streaming"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


class Reader:
    def __init__(self, config, client=None):
        self.config = config
        self.client = client
        self.state = State.IDLE

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, type, value, traceback):
        self.close()

    def connect(self):
        if self.client is None:
            try:
                root_certs = system_root_certs()
            except TLSError:
                self.state = State.FAILED
                raise
            try:
                self.client = FlightSQLClient(
                    self.config.location,
                    tls_root_certs=root_certs,
                    headers=request_headers(self.config),
                    disable_server_verification=not settings.verify_ssl,
                )
            except FLIGHT_ERRORS as exc:
                self.state = State.FAILED
                raise QueryError(f"flightsql: {exc}") from exc
        self.state = State.CONNECTED
        return self

    def close(self):
        if self.client is not None:
            self.client.close()
            self.client = None

    def query(self, sql=CENSUS_QUERY):
        if self.client is None:
            self.connect()

        try:
            info = self.client.execute(sql)
        except FLIGHT_ERRORS as exc:
            self.state = State.FAILED
            raise QueryError(f"flightsql flight info: {exc}") from exc
        self.state = State.SUBMITTED

        endpoints = list(info.endpoints)
        if not endpoints:
            self.state = State.FAILED
            raise QueryError("flightsql flight info: no endpoint returned")
        if len(endpoints) > 1:
            # TODO read every endpoint if the server starts to split
            # census queries
            logger.warning("Only first endpoint read, %s ignored", len(endpoints) - 1)

        try:
            stream = self.client.do_get(endpoints[0].ticket)
        except FLIGHT_ERRORS as exc:
            self.state = State.FAILED
            raise QueryError(f"flightsql do get: {exc}") from exc
        self.state = State.STREAMING

        nb_batches = 0
        while True:
            try:
                chunk = stream.read_chunk()
            except StopIteration:
                break
            except FLIGHT_ERRORS as exc:
                self.state = State.FAILED
                raise StreamError(f"flightsql reader: {exc}") from exc
            if chunk.data is None:
                # Metadata-only message
                continue
            nb_batches += 1
            yield chunk.data

        self.state = State.EXHAUSTED
        logger.info("%s batches read from %s", nb_batches, self.config.bucket)


def json_default(value):
    # Timestamps (datetime, date or pandas Timestamp)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dump_batch(batch):
    """
    Return a JSON array with one object per row of `batch`
    """
    try:
        return json.dumps(batch.to_pylist(), default=json_default)
    except (TypeError, ValueError, ArrowException) as exc:
        raise SerializationError(f"json: {exc}") from exc
