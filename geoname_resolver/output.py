"""Writers for resolved results."""

from __future__ import annotations

import json
from typing import Mapping, TextIO

from geoname_resolver.models import ResolvedLocation


def results_to_dict(results: Mapping[str, list[ResolvedLocation]]) -> dict[str, list[dict]]:
    return {
        name: [loc.model_dump(by_alias=True) for loc in locations]
        for name, locations in results.items()
    }


def write_result_json(results: Mapping[str, list[ResolvedLocation]], out: TextIO) -> None:
    out.write(json.dumps(results_to_dict(results), ensure_ascii=False) + "\n")


def write_result(results: Mapping[str, list[ResolvedLocation]], out: TextIO) -> None:
    """
    Plain listing, one quoted CSV record per line:

        [
        {"Paris" : [
        "Paris","2.3488","48.85341","FR","11","75"
        ]}
        ]
    """
    names = list(results)
    out.write("[\n")
    for j, name in enumerate(names):
        out.write(f'{{"{name}" : [\n')
        locations = results[name]
        for i, loc in enumerate(locations):
            sep = "," if i < len(locations) - 1 else ""
            out.write(loc.to_csv() + sep + "\n")
        out.write("]},\n" if j < len(names) - 1 else "]}\n")
    out.write("]\n")
