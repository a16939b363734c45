"""
# Censusflux

Censusflux writes a small census of insects into an InfluxDB bucket
and reads it back through Flight SQL.

Six points are written one by one with the blocking write API of
`influxdb_client`, one second apart. The census of the last hour is
then queried over Arrow Flight and every record batch received is
printed as a JSON line.


## Quickstart

Install with `pip install censusflux`, then:

``` python
from censusflux import Config, Reader, SEED, Writer, dump_batch

config = Config.from_env()  # ORGANISATION, BUCKET and INFLUXDB_TOKEN
with Writer(config) as writer:
    writer.submit(SEED.values())

with Reader(config) as reader:
    for batch in reader.query():
        print(dump_batch(batch))
```

Or from the command line: `censusflux run`.

See `censusflux.writer` and `censusflux.reader` for the two phases,
`censusflux.config` for the settings and `censusflux.cli` for the
command line.
"""

from .config import *
from .errors import *
from .flightsql import *
from .reader import *
from .record import *
from .writer import *

__version__ = "0.1.0"
