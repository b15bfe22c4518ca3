"""Command table loading and validation for YAML-based remote mappings."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from remotectl.core.errors import CommandTableLoadError, CommandTableValidationError
from remotectl.core.model import CommandEntry, IrCode

DEFAULT_TABLE = "default.yaml"
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

# Key names such as "On"/"Off"/"No" must stay strings.
for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise CommandTableValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class CommandTable:
    id: str
    name: str
    commands: Mapping[str, CommandEntry] = field(hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "commands", MappingProxyType(dict(self.commands)))

    def names(self) -> tuple[str, ...]:
        return tuple(self.commands)

    def lookup_ir(self, command: str) -> IrCode | None:
        entry = self.commands.get(command)
        return entry.ir if entry else None

    def lookup_network_key(self, command: str) -> str | None:
        entry = self.commands.get(command)
        return entry.network_key if entry else None


@lru_cache(maxsize=1)
def _load_schema_validator() -> Any:
    schema_text = resources.files("remotectl.schemas").joinpath("command_table.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CommandTableLoadError(f"Could not read command table {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise CommandTableValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise CommandTableValidationError(f"Command table {path} must contain a mapping at root")
    return loaded


def _build_table(doc: dict[str, Any], source: Path | Traversable) -> CommandTable:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise CommandTableValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    commands: dict[str, CommandEntry] = {}
    for command_name, spec in doc["commands"].items():
        ir_spec = spec.get("infrared")
        commands[command_name] = CommandEntry(
            ir=IrCode(device=int(ir_spec["device"]), command=int(ir_spec["command"])) if ir_spec else None,
            network_key=spec.get("network"),
        )

    unmapped_ir = [name for name, entry in commands.items() if entry.ir is None]
    if unmapped_ir:
        LOGGER.debug("Table '%s' has no infrared mapping for: %s", doc["id"], ", ".join(unmapped_ir))

    return CommandTable(id=doc["id"], name=doc["name"], commands=commands)


def _packaged_table_path() -> Traversable:
    return resources.files("remotectl.tables").joinpath(DEFAULT_TABLE)


def load_command_table(path: Path | None = None) -> CommandTable:
    source: Path | Traversable = path if path is not None else _packaged_table_path()
    doc = _read_yaml(source)
    return _build_table(doc, source)
