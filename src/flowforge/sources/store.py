"""Topology file storage.

Resolution order when loading:
1. the working file (written back by 'generate --apply')
2. the default seed file shipped with the deployment
3. an empty internal topology
"""

from __future__ import annotations

import json
from pathlib import Path

from flowforge.models.topology import Topology
from flowforge.sources.normalize import normalize_config, topology_to_dict


class TopologyLoadError(ValueError):
    """A topology file exists but is not a JSON object."""


class TopologyStore:
    """Reads and writes the topology JSON document.

    Attributes:
        path: The working file. Always the save target.
        default_path: Seed file read when the working file is absent.
    """

    def __init__(self, path: Path, default_path: Path | None = None) -> None:
        self.path = path
        self.default_path = default_path

    def source(self) -> Path | None:
        """Return the file load() would read, or None for the empty default."""
        if self.path.exists():
            return self.path
        if self.default_path is not None and self.default_path.exists():
            return self.default_path
        return None

    def load(self) -> Topology:
        """Load and normalize the topology.

        Raises:
            TopologyLoadError: If the chosen file is not a JSON object.
        """
        path = self.source()
        if path is None:
            return normalize_config({})
        return read_topology_file(path)

    def save(self, topology: Topology) -> None:
        """Write the topology to the working file.

        Creates parent directories if they don't exist.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(dump_topology(topology), encoding="utf-8")


def read_topology_file(path: Path) -> Topology:
    """Read a single topology JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        TopologyLoadError: If it is not valid JSON or not an object.
    """
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise TopologyLoadError(f"{path}: invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise TopologyLoadError(f"{path}: top level must be an object")
    return normalize_config(data)


def dump_topology(topology: Topology) -> str:
    """Serialize a topology to indented JSON text."""
    return json.dumps(topology_to_dict(topology), indent=2, ensure_ascii=False) + "\n"
