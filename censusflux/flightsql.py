"""
Minimal Flight SQL client on top of `pyarrow.flight`.

A query is submitted with `execute`, which returns a `FlightInfo`
listing one or more endpoints. The rows are then streamed from an
endpoint ticket with `do_get`:

``` python-console
>>> client = FlightSQLClient("grpc+tls://host:443", headers=headers)
>>> info = client.execute("SELECT 1")
>>> reader = client.do_get(info.endpoints[0].ticket)
>>> reader.read_all()
```

The query is sent as a Flight SQL `CommandStatementQuery` message
wrapped in a protobuf `Any`.
"""
import ssl
from pathlib import Path

from google.protobuf import any_pb2, wrappers_pb2
from pyarrow import flight

from .errors import TLSError
from .utils import logger

__all__ = [
    "CENSUS_QUERY",
    "FlightSQLClient",
    "request_headers",
    "statement_command",
    "system_root_certs",
]

STATEMENT_QUERY_TYPE = (
    "type.googleapis.com/arrow.flight.protocol.sql.CommandStatementQuery"
)

# The null checks only match the two species of the seed data
CENSUS_QUERY = """SELECT *
FROM 'census'
WHERE time >= now() - interval '1 hour'
AND ('bees' IS NOT NULL OR 'ants' IS NOT NULL)"""


def statement_command(query):
    # CommandStatementQuery holds the query in field 1, which is
    # byte-for-byte the encoding of a StringValue
    message = wrappers_pb2.StringValue(value=query)
    packed = any_pb2.Any(
        type_url=STATEMENT_QUERY_TYPE, value=message.SerializeToString()
    )
    return packed.SerializeToString()


def request_headers(config):
    return [
        (b"authorization", b"Bearer " + config.token.encode()),
        (b"bucket-name", config.bucket.encode()),
    ]


def system_root_certs():
    """
    Return the PEM content of the certificate authorities trusted by
    the host (`SSL_CERT_FILE` is honoured).
    """
    paths = ssl.get_default_verify_paths()
    for candidate in (paths.cafile, paths.openssl_cafile):
        if not candidate:
            continue
        path = Path(candidate)
        if path.is_file():
            logger.debug("Load root certificates from %s", path)
            try:
                return path.read_bytes()
            except OSError as exc:
                raise TLSError(f"x509: {exc}") from exc
    raise TLSError("x509: system root certificates not found")


class FlightSQLClient:
    def __init__(
        self,
        location,
        tls_root_certs=None,
        headers=None,
        disable_server_verification=False,
        flight_client=None,
    ):
        self.location = location
        self.headers = list(headers or [])
        if flight_client is None:
            kw = {"tls_root_certs": tls_root_certs}
            if disable_server_verification:
                kw["disable_server_verification"] = True
            flight_client = flight.FlightClient(location, **kw)
        self.client = flight_client
        self.options = flight.FlightCallOptions(headers=self.headers)

    def execute(self, query):
        logger.debug("EXECUTE %s %s", self.location, query)
        descriptor = flight.FlightDescriptor.for_command(statement_command(query))
        return self.client.get_flight_info(descriptor, self.options)

    def do_get(self, ticket):
        logger.debug("DO_GET %s", self.location)
        return self.client.do_get(ticket, self.options)

    def close(self):
        self.client.close()
