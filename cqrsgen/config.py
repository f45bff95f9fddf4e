"""Generator options."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from cqrsgen.errors import SchemaFormatError

_TEMPLATES_DIR = Path(__file__).parent / "templates"
_OUTPUT_DIR = Path("generated-code")

# Option keys as spelled in additional-properties style config files
_KEY_ALIASES = {
    "packageName": "package_name",
    "generatedFolder": "generated_folder",
    "implementationFolder": "implementation_folder",
    "useValidators": "use_validators",
    "useRecords": "use_records",
    "includeAllModels": "include_all_models",
    "useNugetPackaging": "split_contract",
    "splitContract": "split_contract",
    "fileExtension": "file_extension",
    "templatesDir": "templates_dir",
    "outputDir": "output_dir",
}


@dataclass
class GeneratorOptions:
    package_name: str = "Api"
    output_dir: Path = _OUTPUT_DIR
    generated_folder: str = "Generated"
    implementation_folder: str = "Implementation"
    templates_dir: Path = _TEMPLATES_DIR
    file_extension: str = ".cs"
    use_validators: bool = False
    use_records: bool = False
    include_all_models: bool = False
    split_contract: bool = False  # handlers go to the implementation folder

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> GeneratorOptions:
        """Build options from a config mapping, accepting camelCase keys and string booleans."""
        known = {f.name: f for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for raw_key, value in data.items():
            key = _KEY_ALIASES.get(raw_key, raw_key)
            if key not in known:
                raise SchemaFormatError(f"unknown generator option {raw_key!r}")
            default = getattr(cls, key)
            if isinstance(default, bool):
                kwargs[key] = to_bool(raw_key, value)
            elif isinstance(default, Path):
                kwargs[key] = Path(value)
            else:
                kwargs[key] = str(value)
        return cls(**kwargs)


def to_bool(key: str, value: Any, where: str = "option") -> bool:
    """Coerce a JSON boolean or a string such as "true" or "off"."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off", ""):
            return False
    raise SchemaFormatError(f"{where} {key!r} expects a boolean, got {value!r}")
