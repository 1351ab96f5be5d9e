"""Survey and run configuration validation and loading.

This module provides schema validation for run configurations and survey
definition files, and builds SurveyParameters from validated YAML content.
"""

import re
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""
    pass


class UnknownSurvey(ConfigurationError):
    """Raised when a survey identifier is not registered."""

    def __init__(self, identifier: str, available: Optional[List[str]] = None):
        self.identifier = identifier
        self.available = sorted(available or [])
        message = f"Unknown survey '{identifier}'"
        if self.available:
            message += f". Available surveys: {', '.join(self.available)}"
        super().__init__(message)


@dataclass
class ValidationError:
    """Individual validation error details."""
    path: str
    message: str
    value: Any = None


INTERVAL_SCHEMA = {"type": "array", "minItems": 2, "maxItems": 2, "items": {"type": "number"}}

RUN_SCHEMA = {
    "selection": {
        "type": "object",
        "required_section": True,
        "required": ["survey"],
        "properties": {
            "survey": {"type": "string", "minLength": 1},
            "definitions": {"type": "array", "items": {"type": "string"}},
        },
    },
    "execution": {
        "type": "object",
        "properties": {
            "chunk_size": {"type": "integer", "minimum": 1},
        },
    },
}

SURVEY_SCHEMA = {
    "type": "object",
    "required": ["name", "field_of_view", "footprint", "min_mass", "mag_limit"],
    "properties": {
        "name": {"type": "string", "pattern": r"^[A-Za-z0-9][A-Za-z0-9_.\-]*$"},
        "description": {"type": "string"},
        "aliases": {"type": "array", "items": {"type": "string", "minLength": 1}},
        "field_of_view": {
            "type": "object",
            "required": ["dc", "ra", "dec"],
            "properties": {
                "dc": INTERVAL_SCHEMA,
                "ra": INTERVAL_SCHEMA,
                "dec": INTERVAL_SCHEMA,
            },
        },
        "footprint": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["ra", "dec"],
                "properties": {
                    "name": {"type": "string"},
                    "ra": INTERVAL_SCHEMA,
                    "dec": INTERVAL_SCHEMA,
                },
            },
        },
        "min_mass": {"type": "number", "minimum": 0},
        "mass_fields": {"type": "array", "minItems": 1, "items": {"type": "string", "minLength": 1}},
        "mag_limit": {"type": "number"},
        "proxy_margin": {"type": "number", "minimum": 0},
        "z_max": {"type": "number", "minimum": 0},
        "mass_to_light": {"type": "number", "minimum": 0},
    },
}

RUN_DEFAULTS = {
    "selection": {"definitions": []},
    "execution": {"chunk_size": 100000},
}


class SurveyConfigValidator:
    """Validates configuration dictionaries against a schema."""

    def __init__(self, schema: Optional[Dict[str, Any]] = None):
        """Initialize validator with a section schema.

        Args:
            schema: Mapping of section name to section schema. Defaults to
                the run configuration schema.
        """
        self.schema = RUN_SCHEMA if schema is None else schema

    def validate(self, config: Dict[str, Any]) -> List[ValidationError]:
        """Validate configuration against schema.

        Args:
            config: Configuration dictionary to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not isinstance(config, dict):
            return [ValidationError(
                path="<root>",
                message=f"Expected mapping, got {type(config).__name__}",
                value=config
            )]

        # Validate top-level sections
        for section_name, section_schema in self.schema.items():
            if section_name in config:
                errors.extend(self._validate_section(
                    config[section_name],
                    section_schema,
                    section_name
                ))
            elif section_schema.get("required_section", False):
                errors.append(ValidationError(
                    path=section_name,
                    message=f"Required section '{section_name}' is missing"
                ))

        return errors

    def validate_survey(self, definition: Any, path: str = "survey") -> List[ValidationError]:
        """Validate a single survey definition mapping."""
        return self._validate_section(definition, SURVEY_SCHEMA, path)

    def _validate_section(self, data: Any, schema: Dict[str, Any], path: str) -> List[ValidationError]:
        """Validate a configuration section."""
        errors = []

        if schema.get("type") == "object":
            if not isinstance(data, dict):
                errors.append(ValidationError(
                    path=path,
                    message=f"Expected object, got {type(data).__name__}",
                    value=data
                ))
                return errors

            # Check required properties
            for req_prop in schema.get("required", []):
                if req_prop not in data:
                    errors.append(ValidationError(
                        path=f"{path}.{req_prop}",
                        message=f"Required property '{req_prop}' is missing"
                    ))

            properties = schema.get("properties", {})
            for prop_name, prop_value in data.items():
                if prop_name in properties:
                    errors.extend(self._validate_property(
                        prop_value,
                        properties[prop_name],
                        f"{path}.{prop_name}"
                    ))

        return errors

    def _validate_property(self, value: Any, prop_schema: Dict[str, Any], path: str) -> List[ValidationError]:
        """Validate individual property."""
        errors = []

        prop_type = prop_schema.get("type")

        if prop_type == "string":
            if not isinstance(value, str):
                errors.append(ValidationError(
                    path=path,
                    message=f"Expected string, got {type(value).__name__}",
                    value=value
                ))
                return errors

            if "pattern" in prop_schema and not re.match(prop_schema["pattern"], value):
                errors.append(ValidationError(
                    path=path,
                    message=f"Value '{value}' does not match pattern '{prop_schema['pattern']}'",
                    value=value
                ))

            if "minLength" in prop_schema and len(value) < prop_schema["minLength"]:
                errors.append(ValidationError(
                    path=path,
                    message=f"String too short (min {prop_schema['minLength']})",
                    value=value
                ))

        elif prop_type in ("integer", "number"):
            # bool is an int subclass but never a valid numeric setting
            expected = int if prop_type == "integer" else (int, float)
            if isinstance(value, bool) or not isinstance(value, expected):
                errors.append(ValidationError(
                    path=path,
                    message=f"Expected {prop_type}, got {type(value).__name__}",
                    value=value
                ))
                return errors

            if "minimum" in prop_schema and value < prop_schema["minimum"]:
                errors.append(ValidationError(
                    path=path,
                    message=f"Value {value} below minimum {prop_schema['minimum']}",
                    value=value
                ))

            if "maximum" in prop_schema and value > prop_schema["maximum"]:
                errors.append(ValidationError(
                    path=path,
                    message=f"Value {value} above maximum {prop_schema['maximum']}",
                    value=value
                ))

        elif prop_type == "array":
            if not isinstance(value, list):
                errors.append(ValidationError(
                    path=path,
                    message=f"Expected array, got {type(value).__name__}",
                    value=value
                ))
                return errors

            if "minItems" in prop_schema and len(value) < prop_schema["minItems"]:
                errors.append(ValidationError(
                    path=path,
                    message=f"Array too short (min {prop_schema['minItems']} items)",
                    value=value
                ))

            if "maxItems" in prop_schema and len(value) > prop_schema["maxItems"]:
                errors.append(ValidationError(
                    path=path,
                    message=f"Array too long (max {prop_schema['maxItems']} items)",
                    value=value
                ))

            if "items" in prop_schema:
                for i, item in enumerate(value):
                    errors.extend(self._validate_property(
                        item,
                        prop_schema["items"],
                        f"{path}[{i}]"
                    ))

        elif prop_type == "object":
            errors.extend(self._validate_section(value, prop_schema, path))

        return errors


def _raise_on_errors(errors: List[ValidationError], what: str):
    if errors:
        error_msg = f"{what} validation failed:\n" + "\n".join(
            f"  {error.path}: {error.message}" for error in errors
        )
        raise ConfigurationError(error_msg)


class SurveyConfigLoader:
    """Loads run configurations and survey definition files."""

    def __init__(self, defaults: Optional[Dict[str, Any]] = None):
        """Initialize loader.

        Args:
            defaults: Run configuration defaults. If None, uses RUN_DEFAULTS.
        """
        self.defaults = RUN_DEFAULTS if defaults is None else defaults
        self.validator = SurveyConfigValidator()

    def load_run_config(self, config: Union[str, Path, Dict[str, Any]]) -> Dict[str, Any]:
        """Load and validate a run configuration.

        Args:
            config: Path to a YAML run configuration, or an already parsed
                configuration dictionary

        Returns:
            Merged and validated configuration dictionary

        Raises:
            ConfigurationError: If the file cannot be read or validation fails
        """
        base_dir = None
        if isinstance(config, dict):
            run_config = config
        else:
            run_config = self._load_yaml_file(config)
            base_dir = Path(config).parent

        errors = self.validator.validate(run_config)
        _raise_on_errors(errors, "Run configuration")

        merged_config = self._merge_configs(self.defaults, run_config)

        # Definition files are resolved relative to the run configuration
        if base_dir is not None:
            merged_config["selection"]["definitions"] = [
                str(p if Path(p).is_absolute() else base_dir / p)
                for p in merged_config["selection"]["definitions"]
            ]

        return merged_config

    def load_survey_definitions(self, file_path: Union[str, Path]) -> List[Dict[str, Any]]:
        """Load and validate a survey definition file.

        Args:
            file_path: Path to a YAML file with a top-level ``surveys`` list

        Returns:
            List of validated survey definition dictionaries

        Raises:
            ConfigurationError: If the file is malformed or fails validation
        """
        content = self._load_yaml_file(file_path)
        if not isinstance(content, dict) or not isinstance(content.get("surveys"), list):
            raise ConfigurationError(
                f"Survey definition file {file_path} must contain a 'surveys' list"
            )

        errors = []
        for i, definition in enumerate(content["surveys"]):
            errors.extend(self.validator.validate_survey(definition, f"surveys[{i}]"))
        _raise_on_errors(errors, f"Survey definitions in {file_path}")

        return content["surveys"]

    def _load_yaml_file(self, file_path: Union[str, Path]) -> Any:
        """Load YAML file with error handling."""
        try:
            with open(file_path) as f:
                return yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load YAML file {file_path}: {e}")

    def _merge_configs(self, defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries."""
        result = {
            key: (value.copy() if isinstance(value, (dict, list)) else value)
            for key, value in defaults.items()
        }

        for key, value in overrides.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result


def parameters_from_definition(definition: Dict[str, Any]):
    """Build SurveyParameters from a validated survey definition mapping.

    Parameters
    ----------
    definition : dict
        Survey definition as returned by
        :meth:`SurveyConfigLoader.load_survey_definitions`.

    Returns
    -------
    SurveyParameters
        Parameter set for :class:`~survey_selection.strategy.SurveyStrategy`.

    Raises
    ------
    ConfigurationError
        If the geometry or limits are inconsistent.
    """
    from .geometry import FieldOfViewRange, Footprint, SkyRectangle
    from .strategy import SurveyParameters

    fov = definition["field_of_view"]
    field_of_view = FieldOfViewRange(
        dc=tuple(fov["dc"]), ra=tuple(fov["ra"]), dec=tuple(fov["dec"])
    )
    footprint = Footprint(tuple(
        SkyRectangle(
            ra_min=rect["ra"][0], ra_max=rect["ra"][1],
            dec_min=rect["dec"][0], dec_max=rect["dec"][1],
            name=rect.get("name"),
        )
        for rect in definition["footprint"]
    ))

    optional = {
        key: definition[key]
        for key in ("description", "proxy_margin", "z_max", "mass_to_light")
        if key in definition
    }
    if "mass_fields" in definition:
        optional["mass_fields"] = tuple(definition["mass_fields"])

    return SurveyParameters(
        name=definition["name"],
        field_of_view=field_of_view,
        footprint=footprint,
        min_mass=float(definition["min_mass"]),
        mag_limit=float(definition["mag_limit"]),
        **optional,
    )
