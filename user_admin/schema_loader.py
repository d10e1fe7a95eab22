"""
Schema loader for the user administration console.
Handles loading and validation of YAML/JSON form schema definitions.
"""

import json
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List
import logging

from pydantic import ValidationError

from .exceptions import SchemaLoadError
from .field_schema import FormSchema

# Configure logging
logger = logging.getLogger(__name__)

SCHEMAS_DIR = Path("schemas")


def parse_schema(data: Any, source: Path) -> FormSchema:
    """
    Build a FormSchema from parsed YAML/JSON data.

    Args:
        data: Parsed document
        source: File the data came from (for error reporting)

    Returns:
        Validated FormSchema

    Raises:
        SchemaLoadError: If the document is not a valid schema
    """
    if not isinstance(data, dict):
        raise SchemaLoadError(source, TypeError("schema must be a mapping"))

    if 'fields' not in data:
        raise SchemaLoadError(source, KeyError("schema must contain 'fields'"))

    try:
        return FormSchema.model_validate(data)
    except ValidationError as e:
        raise SchemaLoadError(source, e) from e


def load_schema(schema_path: str, schemas_dir: Optional[Path] = None) -> Optional[FormSchema]:
    """
    Load a schema from a YAML or JSON file.

    Args:
        schema_path: Path to schema file (relative to the schemas directory)
        schemas_dir: Schemas directory (defaults to ./schemas)

    Returns:
        FormSchema or None if loading fails
    """
    full_path = (schemas_dir or SCHEMAS_DIR) / schema_path

    if not full_path.exists():
        logger.error(f"Schema file not found: {full_path}")
        return None

    suffix = full_path.suffix.lower()
    if suffix not in ('.yaml', '.yml', '.json'):
        logger.error(f"Unsupported schema file format: {full_path.suffix}")
        return None

    try:
        with open(full_path, 'r', encoding='utf-8') as f:
            if suffix == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"YAML parsing error in {schema_path}: {e}")
        return None
    except json.JSONDecodeError as e:
        logger.error(f"JSON parsing error in {schema_path}: {e}")
        return None
    except OSError as e:
        logger.error(f"Error reading schema {schema_path}: {e}")
        return None

    try:
        schema = parse_schema(data, full_path)
    except SchemaLoadError as e:
        logger.error(f"Invalid schema structure in {schema_path}: {e.context.get('original_error_message')}")
        return None

    logger.info(f"Successfully loaded schema: {schema_path} ({len(schema.fields)} fields)")
    return schema


def create_default_user_schema() -> FormSchema:
    """
    Built-in user schema used when no schema file can be loaded.

    Returns:
        Schema with first name, last name, email address and phone number
    """
    return FormSchema.model_validate({
        "title": "User",
        "description": "Default user schema",
        "record_label": "User",
        "display_fields": ["firstName", "lastName"],
        "unique_field": "phoneNumber",
        "fields": {
            "firstName": {
                "type": "text",
                "label": "First Name",
                "required": True,
                "placeholder": "Enter first name",
                "validation": {"min_length": 2, "max_length": 50, "pattern": "alpha"}
            },
            "lastName": {
                "type": "text",
                "label": "Last Name",
                "required": True,
                "placeholder": "Enter last name",
                "validation": {"min_length": 2, "max_length": 50, "pattern": "alpha"}
            },
            "email": {
                "type": "email",
                "label": "Email Address",
                "required": True,
                "placeholder": "Enter email address",
                "validation": {"pattern": "email"}
            },
            "phoneNumber": {
                "type": "tel",
                "label": "Phone Number",
                "required": True,
                "placeholder": "Enter phone number (10 digits)",
                "validation": {"pattern": "phone"}
            }
        }
    })


def get_configured_schema(config: Dict[str, Any], schemas_dir: Optional[Path] = None) -> FormSchema:
    """
    Get the schema specified in the configuration.

    Args:
        config: Application configuration
        schemas_dir: Schemas directory (defaults to ./schemas)

    Returns:
        Primary schema, else fallback schema, else the built-in user schema
    """
    schema_config = config.get("schema", {})
    primary_schema = schema_config.get("primary_schema", "user_schema.yaml")
    fallback_schema = schema_config.get("fallback_schema")

    schema = load_schema(primary_schema, schemas_dir)
    if schema:
        logger.info(f"Using primary schema: {primary_schema}")
        return schema

    if fallback_schema and fallback_schema != primary_schema:
        logger.warning(f"Primary schema {primary_schema} not found, trying fallback: {fallback_schema}")
        schema = load_schema(fallback_schema, schemas_dir)
        if schema:
            logger.info(f"Using fallback schema: {fallback_schema}")
            return schema

    logger.error("No valid schemas found, using built-in user schema")
    return create_default_user_schema()


def list_available_schemas(schemas_dir: Optional[Path] = None) -> List[str]:
    """
    List all available schema files in the schemas directory.

    Returns:
        Sorted list of schema filenames
    """
    directory = schemas_dir or SCHEMAS_DIR
    if not directory.exists():
        return []

    schema_files = []
    for pattern in ['*.yaml', '*.yml', '*.json']:
        schema_files.extend([f.name for f in directory.glob(pattern)])

    return sorted(schema_files)


def get_schema_info(schema: FormSchema) -> Dict[str, Any]:
    """
    Get metadata information about a schema.

    Args:
        schema: Loaded schema

    Returns:
        Dictionary with schema metadata
    """
    return {
        "title": schema.title,
        "description": schema.description,
        "field_count": len(schema.fields),
        "required_fields": [f.name for f in schema.fields if f.required],
        "field_types": {f.name: f.kind.value for f in schema.fields},
        "unique_field": schema.unique_field
    }
