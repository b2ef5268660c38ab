"""JSON manifest schema — the contract between CLI/API and engine."""

import json
from dataclasses import dataclass
from pathlib import Path


def default_output(input_path: Path) -> Path:
    """``clip.mp4`` -> ``clip_trim.mp4`` next to the input."""
    return input_path.with_stem(input_path.stem + "_trim")


def time_field(data: dict, key: str) -> str | None:
    """Read a start/finish expression; only a missing, null or empty value means absent."""
    value = data.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"Field '{key}' must be a string, e.g. \"1:30\" or \"-10\", got {value!r}")
    return value


@dataclass
class Manifest:
    """A single trim job.

    ``start``/``finish`` are raw time expressions, sign included; ``None``
    means start of media / end of media.
    """

    input: Path
    output: Path
    start: str | None = None
    finish: str | None = None
    copy_streams: bool = True
    overwrite: bool = False
    version: str = "1"


def load_manifest(path: str | Path) -> Manifest:
    """Load and validate a manifest from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text())

    if not isinstance(data, dict) or "input" not in data:
        raise ValueError("Manifest must contain an 'input' field")

    input_path = Path(data["input"])
    output = Path(data["output"]) if data.get("output") else default_output(input_path)

    return Manifest(
        version=data.get("version", "1"),
        input=input_path,
        output=output,
        start=time_field(data, "start"),
        finish=time_field(data, "finish"),
        copy_streams=bool(data.get("copy_streams", True)),
        overwrite=bool(data.get("overwrite", False)),
    )
