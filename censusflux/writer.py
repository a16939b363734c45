"""
The `Writer` class pushes census records to InfluxDB, one point at a
time, through the blocking write API of `influxdb_client`:

``` python-console
>>> from censusflux import Config, SEED, Writer
>>> with Writer(Config.from_env()) as writer:
...     writer.submit(SEED.values())
6
```

Each write is confirmed by the server before the next one is sent, and
consecutive writes are spaced by `settings.write_pause` seconds so that
the timestamps assigned by the server are strictly increasing. The
first failure stops the loop, points already written are kept.
"""
from time import sleep

from influxdb_client import InfluxDBClient
from influxdb_client.client.exceptions import InfluxDBError
from influxdb_client.client.write_api import SYNCHRONOUS
from influxdb_client.rest import ApiException
from urllib3.exceptions import HTTPError

from .errors import WriteError
from .record import to_point
from .utils import logger, settings

__all__ = ["Writer"]


class Writer:
    def __init__(self, config, client=None):
        self.config = config
        self.client = client
        self.write_api = None

    def __enter__(self):
        if self.client is None:
            self.client = InfluxDBClient(
                url=self.config.url,
                token=self.config.token,
                org=self.config.org,
                verify_ssl=settings.verify_ssl,
            )
        self.write_api = self.client.write_api(write_options=SYNCHRONOUS)
        return self

    def __exit__(self, type, value, traceback):
        if self.write_api is not None:
            self.write_api.close()
            self.write_api = None
        self.client.close()

    def submit(self, records, pause=None):
        pause = settings.write_pause if pause is None else pause
        written = 0
        for record in records:
            point = to_point(record)
            logger.debug("WRITE %s %s", self.config.bucket, point.to_line_protocol())
            try:
                self.write_api.write(
                    bucket=self.config.bucket, org=self.config.org, record=point
                )
            except ApiException as exc:
                raise WriteError(
                    f"write API write point: ({exc.status}) {exc.reason}"
                ) from exc
            except (InfluxDBError, HTTPError, OSError) as exc:
                raise WriteError(f"write API write point: {exc}") from exc
            written += 1
            sleep(pause)

        logger.info("%s points written to %s", written, self.config.bucket)
        return written
