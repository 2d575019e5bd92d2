"""Configuration classes for incremental encoding conversion.

The incremental Decoder/Encoder protocol takes no configuration: buffers and
error policy are chosen per call. These objects configure the layers built on
top of it, the single-shot convenience functions and the streaming helpers.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

# Smallest output buffer that guarantees progress for every decoder: one
# astral character in UTF-8, or a surrogate pair / two BMP characters in UTF-16.
MIN_UTF8_OUTPUT_BUFFER = 4
MIN_UTF16_OUTPUT_BUFFER = 2

# Longest numeric character reference ("&#1114111;") plus an ISO-2022-JP
# return-to-ASCII escape, the largest output of a single encoder step.
MIN_ENCODER_OUTPUT_BUFFER = 13

DEFAULT_CHUNK_SIZE = 8192
DEFAULT_OUTPUT_BUFFER_SIZE = 8192


class BomHandling(Enum):
    """How a decoder created by the helpers treats a leading byte order mark."""

    SNIFF = "sniff"    # Morph into UTF-8/UTF-16LE/UTF-16BE on a BOM and remove it
    REMOVE = "remove"  # Remove only the BOM of the requested encoding
    NONE = "none"      # Treat BOM bytes as ordinary input


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class StreamConfig:
    """Configuration for the chunked streaming helpers."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    output_buffer_size: int = DEFAULT_OUTPUT_BUFFER_SIZE
    replacement: bool = True
    bom_handling: BomHandling = BomHandling.SNIFF

    def __post_init__(self) -> None:
        """Validate streaming configuration."""
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        if self.output_buffer_size < MIN_ENCODER_OUTPUT_BUFFER:
            raise ValueError(
                f"output_buffer_size must be >= {MIN_ENCODER_OUTPUT_BUFFER}"
            )
        if not isinstance(self.bom_handling, BomHandling):
            raise ValueError("bom_handling must be a BomHandling member")


@dataclass(frozen=True)
class ConversionConfig:
    """Top-level configuration shared by the convenience and streaming layers.

    Frozen so one instance can be shared between threads that each own their
    own decoders and encoders.
    """

    stream: StreamConfig = field(default_factory=StreamConfig)
    growth_factor: float = 2.0
    correlation_id: Optional[str] = None

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete conversion configuration."""
        try:
            self.stream.__post_init__()
            if self.growth_factor <= 1.0:
                raise ValueError("growth_factor must be > 1.0")
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "ConversionConfig":
        """Create a new configuration with specific overrides.

        Nested stream fields use the ``stream__`` prefix.

        Example:
            >>> config = ConversionConfig()
            >>> config.override(stream__replacement=False, growth_factor=1.5)
        """
        stream_overrides: Dict[str, Any] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if key.startswith("stream__"):
                stream_overrides[key[len("stream__"):]] = value
            else:
                top_level[key] = value

        try:
            if stream_overrides:
                top_level["stream"] = replace(self.stream, **stream_overrides)
            return replace(self, **top_level)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            "stream": {
                "chunk_size": self.stream.chunk_size,
                "output_buffer_size": self.stream.output_buffer_size,
                "replacement": self.stream.replacement,
                "bom_handling": self.stream.bom_handling.value,
            },
            "growth_factor": self.growth_factor,
            "correlation_id": self.correlation_id,
            "name": self.name,
            "description": self.description,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConversionConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos do not silently fall back to
        defaults.
        """
        data = dict(data)
        stream_data = dict(data.pop("stream", {}))
        known = {"growth_factor", "correlation_id", "name", "description"}
        unknown = set(data) - known
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {sorted(unknown)}",
                suggestions=[f"Valid keys: {sorted(known | {'stream'})}"],
            )

        try:
            if "bom_handling" in stream_data:
                stream_data["bom_handling"] = BomHandling(stream_data["bom_handling"])
            stream = StreamConfig(**stream_data)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e), field_name="stream") from e
        return cls(stream=stream, **data)

    @classmethod
    def from_json(cls, json_str: str) -> "ConversionConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def strict(cls) -> "ConversionConfig":
        """Preset that treats malformed input and unmappables as fatal."""
        return cls(
            stream=StreamConfig(replacement=False, bom_handling=BomHandling.REMOVE),
            name="strict",
            description="Fatal error handling; only the requested encoding's BOM "
                        "is removed",
        )

    @classmethod
    def lenient(cls) -> "ConversionConfig":
        """Preset matching the Encoding Standard's decode/encode algorithms."""
        return cls(
            stream=StreamConfig(replacement=True, bom_handling=BomHandling.SNIFF),
            name="lenient",
            description="Replacement error handling with BOM sniffing",
        )

    @classmethod
    def low_memory(cls) -> "ConversionConfig":
        """Preset with small buffers for constrained environments."""
        return cls(
            stream=StreamConfig(chunk_size=512, output_buffer_size=1024),
            growth_factor=1.5,
            name="low_memory",
            description="Small chunk and output buffers, slower buffer growth",
        )
