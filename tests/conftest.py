from dataclasses import fields
from types import SimpleNamespace

import pyarrow as pa
import pytest
from influxdb_client.rest import ApiException

import censusflux.reader
import censusflux.writer
from censusflux import Config
from censusflux.utils import settings

ENV = {
    "ORGANISATION": "some-org",
    "BUCKET": "census-bucket",
    "INFLUXDB_TOKEN": "s3cr3t",
}


class FakeWriteApi:
    def __init__(self, fail_at=None):
        self.fail_at = fail_at
        self.lines = []
        self.calls = []
        self.closed = False

    def write(self, bucket, org, record):
        self.calls.append((bucket, org))
        if len(self.lines) == self.fail_at:
            raise ApiException(status=400, reason="bad point")
        self.lines.append(record.to_line_protocol())

    def close(self):
        self.closed = True


class FakeInfluxClient:
    def __init__(self, fail_at=None, **kw):
        self.kw = kw
        self.api = FakeWriteApi(fail_at=fail_at)
        self.write_options = None
        self.closed = False

    def write_api(self, write_options=None):
        self.write_options = write_options
        return self.api

    def close(self):
        self.closed = True


class FakeStream:
    def __init__(self, batches, error=None):
        self.batches = list(batches)
        self.error = error
        self.pulls = 0

    def read_chunk(self):
        self.pulls += 1
        if self.batches:
            return SimpleNamespace(data=self.batches.pop(0), app_metadata=None)
        if self.error is not None:
            raise self.error
        raise StopIteration


class FakeFlightSQL:
    """
    Stand-in for `censusflux.flightsql.FlightSQLClient`
    """

    def __init__(self, batches=(), nb_endpoints=1, error=None, **kw):
        self.kw = kw
        self.queries = []
        self.tickets = []
        self.stream = FakeStream(batches, error=error)
        self.nb_endpoints = nb_endpoints
        self.closed = False

    def execute(self, query):
        self.queries.append(query)
        endpoints = [
            SimpleNamespace(ticket=f"ticket-{i}".encode())
            for i in range(self.nb_endpoints)
        ]
        return SimpleNamespace(endpoints=endpoints)

    def do_get(self, ticket):
        self.tickets.append(ticket)
        return self.stream

    def close(self):
        self.closed = True


def make_batch(location, species, count):
    return pa.RecordBatch.from_pydict(
        {"location": [location], species: [float(count)]}
    )


@pytest.fixture
def batches():
    return [
        make_batch("Klamath", "bees", 23),
        make_batch("Portland", "ants", 30),
        make_batch("Klamath", "bees", 28),
    ]


@pytest.fixture
def config():
    return Config(org="some-org", bucket="census-bucket", token="s3cr3t")


@pytest.fixture
def env(monkeypatch):
    for key, value in ENV.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("INFLUXDB_URL", raising=False)
    return ENV


@pytest.fixture(autouse=True)
def reset_settings():
    saved = {f.name: getattr(settings, f.name) for f in fields(settings)}
    yield settings
    for key, value in saved.items():
        setattr(settings, key, value)


@pytest.fixture
def pauses(monkeypatch):
    pauses = []
    monkeypatch.setattr(censusflux.writer, "sleep", pauses.append)
    return pauses


@pytest.fixture
def influx(monkeypatch, pauses):
    """
    Patch the InfluxDB client used by the writer, `influx.fail_at`
    can be set to make the nth write fail
    """
    state = SimpleNamespace(fail_at=None, clients=[])

    def factory(**kw):
        client = FakeInfluxClient(fail_at=state.fail_at, **kw)
        state.clients.append(client)
        return client

    monkeypatch.setattr(censusflux.writer, "InfluxDBClient", factory)
    return state


@pytest.fixture
def flight_sql(monkeypatch, batches):
    """
    Patch the Flight SQL client used by the reader, the stream it
    returns can be tuned through `flight_sql.batches` and
    `flight_sql.error`
    """
    state = SimpleNamespace(batches=batches, error=None, clients=[])

    def factory(location, **kw):
        client = FakeFlightSQL(
            batches=state.batches, error=state.error, location=location, **kw
        )
        state.clients.append(client)
        return client

    monkeypatch.setattr(censusflux.reader, "FlightSQLClient", factory)
    monkeypatch.setattr(censusflux.reader, "system_root_certs", lambda: b"PEM")
    return state


@pytest.fixture
def fake_sql():
    return FakeFlightSQL
