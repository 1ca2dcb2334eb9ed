import os
import json
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from cyberbot.config import DEFAULT_RESPONSES

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


# -----------------------------
# Errors
# -----------------------------
class ContentError(Exception):
    """Base class for content loading failures."""


class ResponsesNotFoundError(ContentError):
    pass


class ResponsesFormatError(ContentError):
    pass


class ContentInitError(ContentError):
    """Raised when the default responses file cannot be written."""


# -----------------------------
# Reading
# -----------------------------
def read_json(file_path: PathLike) -> Any:
    with open(file_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def optional_source(file_path: PathLike) -> Optional[Path]:
    """Returns the path if the file exists, otherwise None."""
    path = Path(file_path)
    return path if path.is_file() else None


def load_responses(file_path: PathLike) -> Dict[str, str]:
    """Reads the required responses file as a mapping of question -> answer."""
    path = Path(file_path)
    if not path.is_file():
        raise ResponsesNotFoundError(f"Response file not found: {path}")

    try:
        data = read_json(path)
    except json.JSONDecodeError as e:
        raise ResponsesFormatError(str(e)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ResponsesFormatError(f"Could not read {path}: {e}") from e

    if not isinstance(data, dict):
        raise ResponsesFormatError(f"{path.name} must contain a JSON object of question/answer pairs")
    for key, value in data.items():
        if not isinstance(value, str):
            raise ResponsesFormatError(f"Response for '{key}' must be a string")
    return data


def parse_tips(data: Any) -> Dict[str, List[str]]:
    if not isinstance(data, dict):
        raise ValueError("tips must be a JSON object of topic -> list of tips")
    tips = {}
    for topic, items in data.items():
        if not isinstance(items, list) or not all(isinstance(i, str) for i in items):
            raise ValueError(f"tips for '{topic}' must be a list of strings")
        tips[topic] = list(items)
    return tips


def parse_string_list(data: Any) -> List[str]:
    if not isinstance(data, list) or not all(isinstance(i, str) for i in data):
        raise ValueError("expected a JSON array of strings")
    return list(data)


def load_optional(source: Optional[PathLike], parser, label: str) -> Optional[Any]:
    """Loads an optional override file.

    Returns the parsed content, or None when there is no source or it could not
    be read. Failures are logged and never raised.
    """
    if source is None:
        return None
    try:
        return parser(read_json(source))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValueError) as e:
        logger.warning("Failed to load custom %s from %s: %s", label, source, e)
        return None


# -----------------------------
# Writing
# -----------------------------
def write_json_atomic(file_path: PathLike, data: Any, backup: bool = True):
    """Writes JSON through a temp file and an atomic rename.

    With `backup`, an existing file is moved to `<name>.bak` first.
    """
    path = Path(file_path)
    bak_file = path.with_name(path.name + ".bak")
    temp_dir = str(path.resolve().parent)
    tmp_file_path = None

    try:
        with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=temp_dir, delete=False) as tmp_file:
            json.dump(data, tmp_file, indent=2, ensure_ascii=False)
            tmp_file_path = tmp_file.name

        if backup and path.exists():
            os.replace(path, bak_file)

        os.replace(tmp_file_path, path)
        tmp_file_path = None
    finally:
        # Clean up the temp file if the rename never happened.
        if tmp_file_path and os.path.exists(tmp_file_path):
            os.remove(tmp_file_path)


def create_default_responses_file(file_path: PathLike) -> Dict[str, str]:
    """Persists the seeded question/answer pairs and returns them."""
    data = dict(DEFAULT_RESPONSES)
    try:
        write_json_atomic(file_path, data)
    except OSError as e:
        raise ContentInitError(f"Could not create {file_path}: {e}") from e
    logger.info("Wrote default responses to %s", file_path)
    return data
