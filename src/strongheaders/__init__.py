"""strongheaders — typed HTTP request headers, declared once, resolved per request.

All public types are exported from this module for flat imports:

    from strongheaders import RegistryBuilder, HeaderValue, transforms
"""

__version__ = "0.1.0"

# Ready-made transforms
from strongheaders import transforms

# Accessor
from strongheaders._accessor import HeaderAccessor

# Config types — see strongheaders._config for details
from strongheaders._config import (
    MappingConfig,
    MappingsConfig,
    apply_config,
    load_mappings_config,
    parse_mappings_config,
)

# Request context
from strongheaders._context import accessor_var, current_accessor, request_scope

# Errors
from strongheaders._errors import (
    ConfigParseError,
    DuplicateTargetTypeError,
    HeaderMappingError,
    InvalidMappingError,
    NullArgumentError,
    RegistryFrozenError,
    ResolutionFailedError,
    UnknownTargetError,
)

# Registry — see strongheaders._registry for details
from strongheaders._registry import HeaderRegistry, RegistryBuilder

# Rules
from strongheaders._rules import (
    NOT_MAPPED,
    MappingRule,
    MultiHeaderRule,
    MultiValueTransform,
    SingleHeaderRule,
    SingleValueTransform,
)

# Header table
from strongheaders._table import EMPTY_TABLE, HeaderTable, RawHeaders, split_header_value
from strongheaders._values import HeaderValue

__all__ = [
    # Header table
    "HeaderTable",
    "RawHeaders",
    "EMPTY_TABLE",
    "split_header_value",
    # Rules
    "SingleHeaderRule",
    "MultiHeaderRule",
    "MappingRule",
    "SingleValueTransform",
    "MultiValueTransform",
    "NOT_MAPPED",
    # Registry
    "RegistryBuilder",
    "HeaderRegistry",
    # Accessor
    "HeaderAccessor",
    # Request context
    "accessor_var",
    "current_accessor",
    "request_scope",
    # Values and transforms
    "HeaderValue",
    "transforms",
    # Config types
    "MappingConfig",
    "MappingsConfig",
    "parse_mappings_config",
    "load_mappings_config",
    "apply_config",
    # Errors
    "HeaderMappingError",
    "NullArgumentError",
    "InvalidMappingError",
    "DuplicateTargetTypeError",
    "RegistryFrozenError",
    "ResolutionFailedError",
    "ConfigParseError",
    "UnknownTargetError",
]
