"""Checksum manifest decoding, building and writing.

A manifest is a flat JSON object mapping file paths to expected SHA-256
hex digests. Structural problems with the document are fatal
(``ManifestDecodeError``); a malformed digest value is not, because it
only concerns its own entry and is classified by the verifier.
"""

import json
import os
from collections.abc import Mapping
from functools import lru_cache
from importlib.resources import files
from pathlib import Path
from typing import Any

import jsonschema

from fileaudit.errors import ManifestDecodeError
from fileaudit.utils import CHUNK_SIZE, calculate_file_sha256

__all__ = [
    "load_manifest_schema",
    "parse_manifest",
    "load_manifest",
    "build_manifest",
    "write_manifest",
]


@lru_cache(maxsize=1)
def load_manifest_schema() -> dict[str, Any]:
    """Load the bundled manifest JSON schema."""
    schema_file = files("fileaudit").joinpath("schemas/manifest.schema.json")
    return json.loads(schema_file.read_text(encoding="utf-8"))


def _reject_duplicate_paths(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    """Object hook that refuses the same path listed twice."""
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise ManifestDecodeError(f"Duplicate path in manifest: {key}")
        result[key] = value
    return result


def parse_manifest(data: str | bytes, *, source: str | None = None) -> dict[str, str]:
    """Decode and validate a manifest document.

    Parameters
    ----------
    data : str | bytes
        JSON document.
    source : str | None, optional
        Name of the document for error messages.

    Returns
    -------
    dict[str, str]
        Path to expected digest hex, in document order.

    Raises
    ------
    ManifestDecodeError
        If the document is not JSON, not an object, lists a path twice,
        or has a non-string value.
    """
    where = f" in {source}" if source else ""
    try:
        document = json.loads(data, object_pairs_hook=_reject_duplicate_paths)
    except ManifestDecodeError as e:
        e.file = source
        raise
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ManifestDecodeError(f"Invalid JSON{where}: {e}", file=source) from e

    try:
        jsonschema.validate(instance=document, schema=load_manifest_schema())
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ManifestDecodeError(
            f"Invalid manifest{where} at {location}: {e.message}", file=source
        ) from e

    return document


def load_manifest(path: str | Path) -> dict[str, str]:
    """Read and decode a manifest file.

    Parameters
    ----------
    path : str | Path
        Manifest JSON file.

    Returns
    -------
    dict[str, str]
        Path to expected digest hex.

    Raises
    ------
    ManifestDecodeError
        If the file cannot be read or does not decode to a manifest.
    """
    manifest_path = Path(path)
    try:
        data = manifest_path.read_bytes()
    except OSError as e:
        raise ManifestDecodeError(
            f"Cannot read manifest {manifest_path}: {e}", file=str(manifest_path)
        ) from e

    return parse_manifest(data, source=str(manifest_path))


def build_manifest(
    root: str | Path,
    *,
    pattern: str = "*",
    recursive: bool = True,
    chunk_size: int = CHUNK_SIZE,
) -> dict[str, str]:
    """Hash every regular file under ``root`` into a manifest.

    Parameters
    ----------
    root : str | Path
        Directory to walk.
    pattern : str, optional
        Glob pattern for file names, by default "*".
    recursive : bool, optional
        Descend into subdirectories, by default True.
    chunk_size : int, optional
        Maximum bytes per read, by default CHUNK_SIZE.

    Returns
    -------
    dict[str, str]
        POSIX relative path to SHA-256 hex, sorted by path.

    Raises
    ------
    NotADirectoryError
        If ``root`` is not a directory.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {root}")

    candidates = root_path.rglob(pattern) if recursive else root_path.glob(pattern)
    files_found = sorted(p for p in candidates if p.is_file() and not p.is_symlink())

    return {
        p.relative_to(root_path).as_posix(): calculate_file_sha256(p, chunk_size)
        for p in files_found
    }


def write_manifest(manifest: Mapping[str, str], path: str | Path) -> None:
    """Write a manifest atomically: write to temp, fsync, rename.

    Parameters
    ----------
    manifest : Mapping[str, str]
        Path to expected digest hex.
    path : str | Path
        Destination file.
    """
    final_path = Path(path)
    temp_path = final_path.with_suffix(final_path.suffix + ".tmp")

    with temp_path.open("w", encoding="utf-8") as f:
        json.dump(dict(manifest), f, indent=2, ensure_ascii=False, sort_keys=True)
        f.write("\n")
        f.flush()
        os.fsync(f.fileno())

    temp_path.replace(final_path)
