"""Record file interchange."""

from src.features.records.io import (
    dump_records,
    load_records,
    parse_records,
    seed_directives,
    write_records,
)


__all__ = [
    "dump_records",
    "load_records",
    "parse_records",
    "seed_directives",
    "write_records",
]
