"""
Connection settings shared by the writer and the reader. They are read
once from the environment:

``` shell
$ export ORGANISATION=my-org
$ export BUCKET=my-bucket
$ export INFLUXDB_TOKEN=my-token
$ export INFLUXDB_URL=https://eu-central-1-1.aws.cloud2.influxdata.com  # optional
```

``` python-console
>>> from censusflux import Config
>>> cfg = Config.from_env()
>>> cfg.location
'grpc+tls://us-east-1-1.aws.cloud2.influxdata.com:443'
```
"""
import os
from dataclasses import dataclass
from urllib.parse import urlsplit

from .errors import ConfigError

__all__ = ["Config", "INFLUXDB_URL", "INFLUXDB_PORT"]

INFLUXDB_URL = "https://us-east-1-1.aws.cloud2.influxdata.com"
INFLUXDB_PORT = 443

REQUIRED = {
    "org": "ORGANISATION",
    "bucket": "BUCKET",
    "token": "INFLUXDB_TOKEN",
}


@dataclass(frozen=True)
class Config:
    org: str
    bucket: str
    token: str
    url: str = INFLUXDB_URL
    port: int = INFLUXDB_PORT

    @classmethod
    def from_env(cls, environ=None, url=None):
        environ = os.environ if environ is None else environ
        values = {key: environ.get(var, "") for key, var in REQUIRED.items()}
        missing = [REQUIRED[key] for key, value in values.items() if not value]
        if missing:
            raise ConfigError(
                "missing environment variable(s): " + ", ".join(missing)
            )
        # Explicit url (from the cli) wins over the env, fallback to
        # the hardcoded one
        values["url"] = url or environ.get("INFLUXDB_URL") or INFLUXDB_URL
        return cls(**values)

    @property
    def host(self):
        netloc = urlsplit(self.url).netloc
        if not netloc:
            # No scheme given
            netloc = self.url.split("/", 1)[0]
        return netloc.split(":", 1)[0]

    @property
    def location(self):
        return f"grpc+tls://{self.host}:{self.port}"

    def __repr__(self):
        return f"<Config {self.url} org={self.org} bucket={self.bucket}>"
