"""Configuration loading and validation for the YAML config file."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from telldus_bridge.core.binder import DEFAULT_SETTLE_DELAY_S
from telldus_bridge.core.errors import ConfigurationError
from telldus_bridge.core.model import DeviceOverride, HubMode

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10.0
_LOCAL_FIELDS = ("ip_address", "access_token")
_CLOUD_FIELDS = ("public_key", "private_key", "token", "token_secret")


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigurationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LocalCredentials:
    ip_address: str
    access_token: str


@dataclass(frozen=True)
class CloudCredentials:
    public_key: str
    private_key: str
    token: str
    token_secret: str


@dataclass(frozen=True)
class BridgeConfig:
    mode: HubMode
    local: LocalCredentials | None = None
    cloud: CloudCredentials | None = None
    overrides: tuple[DeviceOverride, ...] = ()
    settle_delay_s: float = DEFAULT_SETTLE_DELAY_S
    timeout_s: float = DEFAULT_TIMEOUT_S


def default_config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "telldus-bridge/config.yaml"


def _load_schema_validator() -> Any:
    schema_text = resources.files("telldus_bridge.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping at root")
    return loaded


def _require(section: dict[str, Any], fields: tuple[str, ...]) -> dict[str, str]:
    values: dict[str, str] = {}
    for name in fields:
        value = section.get(name)
        if not value:
            raise ConfigurationError(f"Please specify {name} in config")
        values[name] = value
    return values


def _build_override(entry: dict[str, Any], mode: HubMode, index: int) -> DeviceOverride:
    key = "local_id" if mode is HubMode.LOCAL else "id"
    if entry.get(key) is None:
        LOGGER.warning(
            "unknown_accessories[%d] has no '%s' and will not match any device on the %s API",
            index,
            key,
            mode.value,
        )
    return DeviceOverride(
        id=entry.get("id"),
        local_id=entry.get("local_id"),
        type=entry.get("type"),
        disabled=bool(entry.get("disabled", False)),
        model=entry.get("model"),
        manufacturer=entry.get("manufacturer"),
        name=entry.get("name"),
    )


def build_config(doc: dict[str, Any], source: str = "<config>") -> BridgeConfig:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigurationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    local_section = doc.get("local")
    local: LocalCredentials | None = None
    cloud: CloudCredentials | None = None
    if local_section is not None:
        mode = HubMode.LOCAL
        local = LocalCredentials(**_require(local_section, _LOCAL_FIELDS))
        ignored = [name for name in _CLOUD_FIELDS if doc.get(name)]
        if ignored:
            LOGGER.warning("Running against the local API; ignoring %s", ", ".join(ignored))
    else:
        mode = HubMode.CLOUD
        cloud = CloudCredentials(**_require(doc, _CLOUD_FIELDS))
    LOGGER.info("isLocal: %s", mode is HubMode.LOCAL)

    overrides = tuple(
        _build_override(entry, mode, index) for index, entry in enumerate(doc.get("unknown_accessories") or [])
    )

    return BridgeConfig(
        mode=mode,
        local=local,
        cloud=cloud,
        overrides=overrides,
        settle_delay_s=float(doc.get("settle_delay_s", DEFAULT_SETTLE_DELAY_S)),
        timeout_s=float(doc.get("timeout_s", DEFAULT_TIMEOUT_S)),
    )


def load_config(path: Path | None = None) -> BridgeConfig:
    config_path = path or default_config_path()
    doc = _read_yaml(config_path)
    return build_config(doc, str(config_path))
