"""Serialize funds to the published JSON format and write it atomically."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import json
import os
from pathlib import Path
import tempfile

from models.schemas import Fund


def serialize_funds(funds: Iterable[Fund]) -> str:
    payload = [fund.to_dict() for fund in funds]
    return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"


def write_atomic(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def write_snapshot(funds: Sequence[Fund], paths: Sequence[Path]) -> list[Path]:
    content = serialize_funds(funds)
    written: list[Path] = []
    for path in paths:
        write_atomic(Path(path), content)
        written.append(Path(path))
    return written
