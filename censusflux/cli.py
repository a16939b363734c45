"""
# Example usage

Connection settings are taken from the environment:

```shell
$ export ORGANISATION=my-org BUCKET=my-bucket INFLUXDB_TOKEN=my-token
```

Write the six census points and read them back (this is also what a
bare `censusflux` does):

```shell
$ censusflux run
Write Successful...
[{"bees": 23.0, "ants": null, "location": "Klamath", "time": "2023-05-02T09:12:03.123456"}, ...]
Read Successful...
```

Each phase can be launched alone:

```shell
$ censusflux write
Write Successful...
$ censusflux -P read  # with pretty-print
  ants    bees  location    time
------  ------  ----------  --------------------------
            23  Klamath     2023-05-02T09:12:03.123456
    30          Portland    2023-05-02T09:12:04.234567
...
Read Successful...
```

Show the points that are written:

```shell
$ censusflux seed
key,location,species,count
point1,Klamath,bees,23
...
```

On failure an error message is printed on stderr and the exit code is 1:

```shell
$ censusflux run
error: write API write point: (401) Unauthorized
```
"""


import argparse
import csv
import sys

from tabulate import tabulate

from . import __version__
from .config import INFLUXDB_URL, Config
from .errors import CensusError
from .reader import Reader, dump_batch
from .record import SEED
from .utils import logger, settings, timeit
from .writer import Writer


def get_config(args):
    return Config.from_env(url=args.url)


def write(args):
    """
    Write the seed records, one point per second
    ```
    $ censusflux write
    ```
    """
    config = get_config(args)
    with Writer(config) as writer:
        writer.submit(SEED.values())
    print("Write Successful...")


def read(args):
    """
    Query the census points of the last hour, each record batch is
    printed as a JSON line (or as a table with --pretty)
    ```
    $ censusflux read
    $ censusflux -P read
    ```
    """
    config = get_config(args)
    with Reader(config) as reader:
        for batch in reader.query():
            if args.pretty:
                print(tabulate(batch.to_pylist(), headers="keys"))
            else:
                print(dump_batch(batch))
    print("Read Successful...")


def write_read(args):
    """
    Write the seed records and read them back
    ```
    $ censusflux run
    ```
    """
    write(args)
    read(args)


def seed(args):
    """
    List the records written by `censusflux write`
    ```
    $ censusflux seed
    ```
    """
    headers = ["key", "location", "species", "count"]
    rows = [[k, r.location, r.species, r.count] for k, r in SEED.items()]
    if args.pretty:
        print(tabulate(rows, headers=headers))
    else:
        writer = csv.writer(sys.stdout)
        writer.writerow(headers)
        writer.writerows(rows)


def print_help(parser, args):
    cmd = args.help_cmd and COMMANDS.get(args.help_cmd)
    if cmd and cmd.__doc__:
        print(cmd.__doc__)
    parser.parse_args([args.help_cmd or "-h", "-h"])


COMMANDS = {
    "run": write_read,
    "write": write,
    "read": read,
    "seed": seed,
}


def run(argv=None):

    # top-level parser
    parser = argparse.ArgumentParser(
        prog="censusflux",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--url",
        "-u",
        help=f"InfluxDB url (default: $INFLUXDB_URL or {INFLUXDB_URL})",
    )
    parser.add_argument("--timing", "-t", action="store_true", help="Enable timing")
    parser.add_argument("--pretty", "-P", action="store_true", help="Tabulate output")
    parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Do not verify server certificates",
    )
    parser.add_argument(
        "--verbose", "-v", action="count", help="Increase verbosity", default=0
    )
    subparsers = parser.add_subparsers(dest="command")

    for name, func in COMMANDS.items():
        sub = subparsers.add_parser(name)
        sub.set_defaults(func=func)

    # Add help command
    parser_help = subparsers.add_parser("help")
    parser_help.add_argument("help_cmd", nargs="?")
    parser_help.set_defaults(func=lambda args: print_help(parser, args))

    # Add version command
    parser_version = subparsers.add_parser("version")
    parser_version.set_defaults(func=lambda *a: print(__version__))

    # Parse args, no command means write then read
    args = parser.parse_args(argv)
    if not args.command:
        args.command = "run"
        args.func = write_read

    # Enable logging
    if args.verbose == 1:
        logger.setLevel("INFO")
    elif args.verbose > 1:
        logger.setLevel("DEBUG")
    if args.no_verify:
        settings.verify_ssl = False

    # Execute command
    try:
        if args.timing:
            with timeit(f"Timing ({args.command}):"):
                args.func(args)
        else:
            args.func(args)

    except CensusError as exc:
        # Single line report, server messages can span several lines
        message = str(exc).strip().splitlines()[0]
        sys.exit(f"error: {message}")
    except KeyboardInterrupt:
        sys.exit("error: interrupted")
    except BrokenPipeError:
        pass
