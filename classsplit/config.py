"""Configuration loading for classsplit (.classsplit.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".classsplit.yml"

SPLIT_MODES = ("visibility", "round_robin")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed or holds invalid values."""


@dataclass
class OutputConfig:
    """Where and how partial files are written."""

    directory: Path = Path("./Output")
    indent_size: int = 4
    use_spaces: bool = True
    file_pattern: str = "{type}_Part{part}{ext}"
    create_directories: bool = True

    @property
    def indent_unit(self) -> str:
        return " " * self.indent_size if self.use_spaces else "\t"


@dataclass
class InputConfig:
    """Guards applied to the source file before extraction."""

    supported_extensions: List[str] = field(default_factory=lambda: [".cs"])
    max_file_size_mb: float = 50


@dataclass
class SplitPolicyConfig:
    """Default grouping policy when the caller does not pass a split count."""

    mode: str = "visibility"
    count: Optional[int] = None

    @property
    def default_count(self) -> Optional[int]:
        return self.count if self.mode == "round_robin" else None


@dataclass
class ParsingConfig:
    """Knobs for the lexical extractor."""

    type_keywords: List[str] = field(default_factory=lambda: ["class", "struct"])
    include_properties: bool = True
    include_constructors: bool = True


@dataclass
class SplitConfig:
    """Represents the settings defined in .classsplit.yml."""

    root: Path
    output: OutputConfig = field(default_factory=OutputConfig)
    input: InputConfig = field(default_factory=InputConfig)
    split: SplitPolicyConfig = field(default_factory=SplitPolicyConfig)
    parsing: ParsingConfig = field(default_factory=ParsingConfig)


def default_config(root: Path | None = None) -> SplitConfig:
    return SplitConfig(root=(root or Path.cwd()).resolve())


def load_config(config_path: Path) -> SplitConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SplitConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = SplitConfig(root=root)

    output_data = _as_dict(data.get("output"))
    if output_data:
        directory = _as_str(output_data.get("directory"))
        if directory:
            config.output.directory = Path(directory)
        indent_size = _as_int(output_data.get("indent_size"))
        if indent_size is not None:
            if indent_size < 0:
                raise ConfigError("output.indent_size must not be negative")
            config.output.indent_size = indent_size
        use_spaces = _as_bool(output_data.get("use_spaces"))
        if use_spaces is not None:
            config.output.use_spaces = use_spaces
        pattern = _as_str(output_data.get("file_pattern"))
        if pattern:
            _validate_file_pattern(pattern)
            config.output.file_pattern = pattern
        create = _as_bool(output_data.get("create_directories"))
        if create is not None:
            config.output.create_directories = create

    input_data = _as_dict(data.get("input"))
    if input_data:
        extensions = _as_str_list(input_data.get("supported_extensions"))
        if extensions:
            config.input.supported_extensions = [_normalise_extension(ext) for ext in extensions]
        max_size = _as_float(input_data.get("max_file_size_mb"))
        if max_size is not None:
            if max_size <= 0:
                raise ConfigError("input.max_file_size_mb must be positive")
            config.input.max_file_size_mb = max_size

    split_data = _as_dict(data.get("split"))
    if split_data:
        mode = _as_str(split_data.get("mode"))
        if mode:
            mode = mode.strip().lower().replace("-", "_")
            if mode not in SPLIT_MODES:
                raise ConfigError(
                    f"split.mode must be one of {', '.join(SPLIT_MODES)} (got '{mode}')"
                )
            config.split.mode = mode
        count = _as_int(split_data.get("count"))
        if count is not None:
            if count < 1:
                raise ConfigError("split.count must be a positive integer")
            config.split.count = count
        if config.split.mode == "round_robin" and config.split.count is None:
            raise ConfigError("split.mode 'round_robin' requires split.count")

    parsing_data = _as_dict(data.get("parsing"))
    if parsing_data:
        keywords = _as_str_list(parsing_data.get("type_keywords"))
        if keywords:
            config.parsing.type_keywords = keywords
        include_properties = _as_bool(parsing_data.get("include_properties"))
        if include_properties is not None:
            config.parsing.include_properties = include_properties
        include_constructors = _as_bool(parsing_data.get("include_constructors"))
        if include_constructors is not None:
            config.parsing.include_constructors = include_constructors

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _validate_file_pattern(pattern: str) -> None:
    try:
        pattern.format(type="T", part=1, ext=".cs")
    except (KeyError, IndexError, ValueError) as exc:
        raise ConfigError(f"output.file_pattern is invalid: {pattern!r}") from exc
    if "{part}" not in pattern:
        raise ConfigError("output.file_pattern must contain {part}")


def _normalise_extension(value: str) -> str:
    value = value.strip().lower()
    return value if value.startswith(".") else f".{value}"


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "InputConfig",
    "OutputConfig",
    "ParsingConfig",
    "SplitConfig",
    "SplitPolicyConfig",
    "default_config",
    "load_config",
]
