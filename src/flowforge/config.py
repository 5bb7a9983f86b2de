"""Load tool configuration from flowforge.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from flowforge.derivations.artifacts import DEFAULT_METRIC


@dataclass
class TopologyConfig:
    """Where the topology JSON lives.

    'path' is the working file and the save target; 'default' is the
    seed read when the working file does not exist yet. Relative paths
    are resolved against the directory holding flowforge.toml.
    """

    path: Path = field(default_factory=lambda: Path("conf/flowforge.json"))
    default: Path | None = field(default_factory=lambda: Path("conf/flowforge.default.json"))


@dataclass
class GeneratorConfig:
    """Defaults for the generate command.

    Attributes:
        metric: Route metric used when --metric is not given
        bidirectional: Emit reverse firewall rules by default
        csv_output: Write the route CSV here unless --csv overrides it;
            empty means no CSV file
    """

    metric: int = DEFAULT_METRIC
    bidirectional: bool = False
    csv_output: str = ""


@dataclass
class FlowforgeConfig:
    """Full configuration loaded from flowforge.toml."""

    topology: TopologyConfig = field(default_factory=TopologyConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)


def _resolve(base: Path, value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else base / path


def _build_topology(data: dict, base: Path) -> TopologyConfig:
    """Build topology file config from parsed TOML data."""
    section = data.get("topology", {})
    default = section.get("default", "conf/flowforge.default.json")
    return TopologyConfig(
        path=_resolve(base, section.get("path", "conf/flowforge.json")),
        default=_resolve(base, default) if default else None,
    )


def _build_generator(data: dict) -> GeneratorConfig:
    """Build generator defaults from parsed TOML data."""
    section = data.get("generator", {})
    if not section:
        return GeneratorConfig()
    return GeneratorConfig(
        metric=int(section.get("metric", DEFAULT_METRIC)),
        bidirectional=bool(section.get("bidirectional", False)),
        csv_output=section.get("csv_output", ""),
    )


def load_config(config_path: Path | str | None = None) -> FlowforgeConfig:
    """Load configuration from a TOML file.

    If config_path is None, looks for flowforge.toml in the current
    directory.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    if config_path is None:
        config_path = Path("flowforge.toml")
    else:
        config_path = Path(config_path)

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    base = config_path.parent
    return FlowforgeConfig(
        topology=_build_topology(data, base),
        generator=_build_generator(data),
    )
