"""
Configuration schema for EvoPool.

``configs/config_default.yaml`` lists every key with its type, default and
description. The same file drives the loader's defaults, the key validation
and the rendered reference (``describe-config`` / ``CONFIG.md``).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

SCHEMA_PATH = Path(__file__).resolve().parents[1] / "configs" / "config_default.yaml"


@dataclass(frozen=True)
class ConfigField:
    section: str
    name: str
    type: str
    default: Any
    description: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "section": self.section,
            "key": self.name,
            "type": self.type,
            "default": self.default,
            "description": self.description,
        }

    def default_text(self) -> str:
        return "None" if self.default is None else repr(self.default)


def _load_schema(path: Path = SCHEMA_PATH) -> Dict[str, Dict[str, ConfigField]]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    return {
        section: {
            key: ConfigField(
                section=section,
                name=key,
                type=str(meta.get("type", "Any")),
                default=meta.get("default"),
                description=str(meta.get("description", "")).strip(),
            )
            for key, meta in entries.items()
        }
        for section, entries in raw.items()
    }


CONFIG_SCHEMA: Dict[str, Dict[str, ConfigField]] = _load_schema()


def _sections(section: Optional[str] = None) -> Dict[str, Dict[str, ConfigField]]:
    if section is None:
        return CONFIG_SCHEMA
    if section not in CONFIG_SCHEMA:
        raise KeyError(f"Unknown config section '{section}'. Options: {list(CONFIG_SCHEMA)}")
    return {section: CONFIG_SCHEMA[section]}


def defaults() -> Dict[str, Dict[str, Any]]:
    """Default value of every key, grouped by section."""
    return {sec: {key: f.default for key, f in entries.items()} for sec, entries in CONFIG_SCHEMA.items()}


def validate_keys(config: Mapping[str, Any]) -> None:
    """Raise ``ValueError`` for any section or key the schema does not define."""

    for section, entries in config.items():
        if section not in CONFIG_SCHEMA:
            raise ValueError(f"Unknown configuration section '{section}'. Options: {list(CONFIG_SCHEMA)}")
        if not isinstance(entries, Mapping):
            raise ValueError(f"Configuration section '{section}' must be a mapping.")
        unknown = [key for key in entries if key not in CONFIG_SCHEMA[section]]
        if unknown:
            raise ValueError(f"Unknown configuration key '{section}.{unknown[0]}'.")


def as_dict(section: Optional[str] = None) -> Dict[str, Dict[str, Dict[str, Any]]]:
    return {
        sec: {key: f.as_dict() for key, f in entries.items()}
        for sec, entries in _sections(section).items()
    }


def to_markdown(section: Optional[str] = None) -> str:
    """Render the reference as one markdown table per section."""

    title = "# EvoPool Configuration Reference"
    if section:
        title += f" - {section.title()}"
    lines = [title, ""]
    for sec, entries in _sections(section).items():
        lines += [f"## {sec.title()}", "", "| Key | Type | Default | Description |", "| --- | --- | --- | --- |"]
        for f in entries.values():
            description = f.description.replace("|", "\\|")
            lines.append(f"| `{f.name}` | `{f.type}` | `{f.default_text()}` | {description} |")
        lines.append("")
    return "\n".join(lines)


def write_markdown(path: Path, section: Optional[str] = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_markdown(section=section), encoding="utf-8")
    return path


def to_console(section: Optional[str] = None) -> str:
    lines = []
    for sec, entries in _sections(section).items():
        lines.append(f"[{sec}]")
        width = max(len(key) for key in entries)
        for f in entries.values():
            lines.append(f"  {f.name:<{width}}  {f.type:<15} = {f.default_text():<14} {f.description}")
        lines.append("")
    return "\n".join(lines).rstrip()


__all__ = [
    "ConfigField",
    "CONFIG_SCHEMA",
    "defaults",
    "validate_keys",
    "as_dict",
    "to_markdown",
    "write_markdown",
    "to_console",
]
