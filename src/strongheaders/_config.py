"""Config types for declarative header mappings.

Config-driven construction path:
  dict / YAML → parse_mappings_config() → MappingsConfig → apply_config() → RegistryBuilder

Shape::

    mappings:
      - target: correlation
        header: X-Correlation-Id
        select: last
      - target: all_correlation
        headers: [X-External-Id, X-Internal-Ids]
        select: all

``target`` is a token looked up in the ``targets`` mapping handed to
apply_config(); config never imports code by name.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from strongheaders import transforms
from strongheaders._errors import ConfigParseError, UnknownTargetError

if TYPE_CHECKING:
    from strongheaders._registry import RegistryBuilder

logger = logging.getLogger("strongheaders.config")

# ═══════════════════════════════════════════════════════════════════════════════
# Config types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class MappingConfig:
    """One declared mapping.

    ``multi`` records whether the entry used ``headers`` (multi-value rule)
    or ``header`` (single-value rule), even when ``headers`` lists one name.
    """

    target: str
    headers: tuple[str, ...]
    multi: bool = False
    select: str = "last"


@dataclass(frozen=True, slots=True)
class MappingsConfig:
    """Top-level mappings document."""

    mappings: tuple[MappingConfig, ...] = ()


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → config types)
# ═══════════════════════════════════════════════════════════════════════════════

_MAPPING_KEYS = frozenset({"target", "header", "headers", "select"})


def parse_mappings_config(data: dict[str, Any]) -> MappingsConfig:
    """Parse a dict into a MappingsConfig.

    Raises:
        ConfigParseError: If the dict is malformed.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    raw_mappings = data.get("mappings")
    if raw_mappings is None:
        msg = "missing required field 'mappings'"
        raise ConfigParseError(msg)
    if not isinstance(raw_mappings, list):
        msg = f"'mappings' must be a list, got {type(raw_mappings).__name__}"
        raise ConfigParseError(msg)

    return MappingsConfig(mappings=tuple(_parse_mapping(m) for m in raw_mappings))


def load_mappings_config(path: str | Path) -> MappingsConfig:
    """Read a YAML file and parse it into a MappingsConfig.

    Raises:
        ConfigParseError: If the file is not valid YAML or is malformed.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            msg = f"invalid YAML in {path}: {e}"
            raise ConfigParseError(msg) from e
    config = parse_mappings_config(data)
    logger.debug("loaded %d mapping(s) from %s", len(config.mappings), path)
    return config


def _parse_mapping(data: dict[str, Any]) -> MappingConfig:
    """Parse a single mapping entry.

    Enforces oneof: exactly one of header or headers.
    """
    if not isinstance(data, dict):
        msg = f"mapping must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    unknown = set(data) - _MAPPING_KEYS
    if unknown:
        msg = f"mapping has unknown field(s): {sorted(unknown)}"
        raise ConfigParseError(msg)

    target = data.get("target")
    if target is None:
        msg = "mapping missing required field 'target'"
        raise ConfigParseError(msg)
    if not isinstance(target, str) or not target:
        msg = "'target' must be a non-empty string"
        raise ConfigParseError(msg)

    has_header = "header" in data
    has_headers = "headers" in data
    if has_header and has_headers:
        msg = "exactly one of 'header' or 'headers' must be set, got both"
        raise ConfigParseError(msg)
    if not has_header and not has_headers:
        msg = "one of 'header' or 'headers' is required"
        raise ConfigParseError(msg)

    if has_header:
        headers = (_parse_header_name(data["header"]),)
    else:
        raw_headers = data["headers"]
        if not isinstance(raw_headers, list) or not raw_headers:
            msg = "'headers' must be a non-empty list"
            raise ConfigParseError(msg)
        headers = tuple(_parse_header_name(h) for h in raw_headers)

    select = data.get("select", "last")
    if not isinstance(select, str) or select not in transforms.SELECTORS:
        msg = f"unknown select: {select!r} (expected one of {sorted(transforms.SELECTORS)})"
        raise ConfigParseError(msg)

    return MappingConfig(target=target, headers=headers, multi=has_headers, select=select)


def _parse_header_name(value: Any) -> str:
    if not isinstance(value, str) or not value:
        msg = f"header name must be a non-empty string, got {value!r}"
        raise ConfigParseError(msg)
    return value


# ═══════════════════════════════════════════════════════════════════════════════
# Applying config to a builder
# ═══════════════════════════════════════════════════════════════════════════════


def apply_config(
    builder: RegistryBuilder,
    config: MappingsConfig,
    targets: Mapping[str, type],
) -> RegistryBuilder:
    """Register every mapping in *config* on *builder*.

    Each target class is constructed with the selected value, or with no
    arguments when none of its headers are present.

    Raises:
        UnknownTargetError: a mapping names a token missing from *targets*
        DuplicateTargetTypeError: two mappings resolve to the same class
    """
    for mapping in config.mappings:
        target = targets.get(mapping.target)
        if target is None:
            raise UnknownTargetError(mapping.target, list(targets))
        if mapping.multi:
            builder.add_multi(
                target, mapping.headers, transforms.merged(target, mapping.select)
            )
        else:
            builder.add_single(
                target, mapping.headers[0], transforms.select(target, mapping.select)
            )
    return builder
