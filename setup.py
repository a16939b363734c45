#!/usr/bin/env python
from pathlib import Path

from setuptools import setup


def get_version():
    ini_path = Path(__file__).parent / "censusflux" / "__init__.py"
    for line in ini_path.open():
        if line.startswith("__version__"):
            return line.split("=")[1].strip("' \"\n")
    raise ValueError(f"__version__ line not found in {ini_path}")


long_description = """
Censusflux writes a small census dataset into an InfluxDB bucket,
point by point, and reads it back over Flight SQL.

Writes go through the blocking write API of influxdb-client, reads are
streamed as Arrow record batches and printed as JSON lines.
"""

description = "Write-then-verify census client for InfluxDB"

setup(
    name="censusflux",
    version=get_version(),
    description=description,
    long_description=long_description,
    license="MIT",
    packages=["censusflux"],
    python_requires=">=3.8",
    install_requires=[
        "influxdb-client",
        "protobuf",
        "pyarrow",
        "tabulate",
        "urllib3",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "censusflux = censusflux.cli:run",
        ],
    },
)
