"""Write the calculator API's OpenAPI document to disk.

Usage: ``python scripts/export_openapi.py [--output PATH] [--server URL]``.
``--server`` defaults to ``$CALCULATOR_PUBLIC_URL`` when that is set.
"""

from __future__ import annotations

import argparse
import json
import os
from pathlib import Path
from typing import Any

from fastapi.encoders import jsonable_encoder

from betleague.api.server import app

DEFAULT_OUTPUT = Path("api_spec/calculator-openapi.json")


def build_schema(server_url: str | None = None) -> dict[str, Any]:
    schema = jsonable_encoder(app.openapi())
    if server_url:
        schema["servers"] = [{"url": server_url.rstrip("/")}]
    return schema


def export(output: Path, server_url: str | None = None) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(build_schema(server_url), indent=2, sort_keys=True))
    return output


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--output", type=Path, default=DEFAULT_OUTPUT)
    parser.add_argument("--server", default=os.getenv("CALCULATOR_PUBLIC_URL"))
    args = parser.parse_args(argv)
    path = export(args.output, args.server)
    print(f"Calculator OpenAPI document written to {path}")


if __name__ == "__main__":  # pragma: no cover
    main()
