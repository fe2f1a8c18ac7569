"""Utility functions for file I/O and payload parsing."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('colegas.utils')


def load_json(
    path: Path | str,
    schema: type[T] | None = None,
) -> Any | T:
    """
    Load JSON file with optional schema validation.

    Args:
        path: Path to JSON file (str or Path object)
        schema: Optional Pydantic model to validate against

    Returns:
        Parsed JSON (validated if schema provided)

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If JSON is malformed
        ValueError: If schema validation fails

    Example:
        from colegas.schemas import LeagueDatabase
        db = load_json('data/league_db.json', schema=LeagueDatabase)
    """
    path = Path(path)

    logger.debug(f'Loading JSON from: {path}')

    if not path.exists():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
        raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e

    if schema:
        try:
            validated = schema.model_validate(data)
            logger.debug(f'Schema validation passed for: {path}')
            return validated
        except PydanticValidationError as e:
            logger.error(f'Schema validation failed for {path}: {e}')
            raise ValueError(f'Schema validation failed for {path}:\n{e}') from e

    return data


def save_json(
    path: Path | str,
    data: Any,
    indent: int = 2,
    create_dirs: bool = True,
) -> None:
    """
    Save data as JSON file.

    The file is written to a temporary sibling first and moved into place,
    so readers never observe a half-written file.

    Args:
        path: Path to write to (str or Path object)
        data: Data to serialize (must be JSON-serializable or Pydantic model)
        indent: Indentation level (default: 2 spaces)
        create_dirs: Create parent directories if they don't exist (default: True)

    Raises:
        TypeError: If data is not JSON-serializable
        OSError: If file cannot be written
    """
    path = Path(path)

    logger.debug(f'Saving JSON to: {path}')

    if create_dirs:
        path.parent.mkdir(parents=True, exist_ok=True)

    # Handle Pydantic models
    json_data = data.model_dump(mode='json') if isinstance(data, BaseModel) else data

    fd, tmp_name = tempfile.mkstemp(prefix=f'.{path.name}.', dir=path.parent)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(json_data, f, indent=indent, ensure_ascii=False)
        os.replace(tmp_name, path)
        logger.debug(f'Successfully saved JSON to: {path}')
    except TypeError as e:
        os.unlink(tmp_name)
        logger.error(f'Data is not JSON-serializable: {e}')
        raise TypeError(f'Data is not JSON-serializable: {e}') from e
    except OSError as e:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        logger.error(f'Failed to write file {path}: {e}')
        raise


def parse_payload(schema: type[T], data: Any) -> T:
    """
    Validate a request payload against a schema.

    Models are passed through untouched; anything else is validated.

    Raises:
        ValidationError: With every field problem joined into one message
    """
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data if data is not None else {})
    except PydanticValidationError as e:
        problems = '; '.join(
            f"{'.'.join(str(loc) for loc in err['loc']) or 'payload'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValidationError(f'Invalid {schema.__name__}: {problems}') from e
