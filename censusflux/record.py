from dataclasses import dataclass

from influxdb_client import Point

__all__ = ["Record", "SEED", "MEASUREMENT", "to_point"]

MEASUREMENT = "census"


@dataclass(frozen=True)
class Record:
    location: str
    species: str
    count: int


# Keys carry no ordering meaning
SEED = {
    "point1": Record("Klamath", "bees", 23),
    "point2": Record("Portland", "ants", 30),
    "point3": Record("Klamath", "bees", 28),
    "point4": Record("Portland", "ants", 32),
    "point5": Record("Klamath", "bees", 29),
    "point6": Record("Portland", "ants", 40),
}


def to_point(record):
    """
    Build the census point of `record`: the location is the only tag
    and the species is the name of the only field. No timestamp is
    set, the server assigns it on arrival.
    """
    return (
        Point(MEASUREMENT)
        .tag("location", record.location)
        .field(record.species, record.count)
    )
