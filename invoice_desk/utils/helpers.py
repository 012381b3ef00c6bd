"""
Helper Utilities Module.

Small, generic functions shared by the CLI and the output handler.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - generate_timestamp: Generate formatted timestamps
    - read_text_file: Read OCR text from disk
    - list_text_files: Collect OCR text files from a path
"""

from datetime import datetime
from pathlib import Path
from typing import List, Union

from .exceptions import InputFileNotFoundError


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("outputs/ledgers")
        PosixPath('outputs/ledgers')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def generate_timestamp(format_str: str = "%Y%m%d_%H%M%S") -> str:
    """
    Generate a formatted timestamp string.

    Args:
        format_str: strftime format string.

    Returns:
        Formatted timestamp string.

    Example:
        >>> generate_timestamp("%Y-%m-%d")
        "2026-01-21"
    """
    return datetime.now().strftime(format_str)


def read_text_file(filepath: Union[str, Path], encoding: str = "utf-8") -> str:
    """
    Read the OCR text of one invoice.

    Args:
        filepath: Path to a plain-text file.
        encoding: File encoding.

    Returns:
        File contents with Windows line endings normalized to ``\\n``.

    Raises:
        InputFileNotFoundError: If the file does not exist.
    """
    path = Path(filepath)
    if not path.is_file():
        raise InputFileNotFoundError(str(path))
    text = path.read_text(encoding=encoding)
    return text.replace('\r\n', '\n').replace('\r', '\n')


def list_text_files(path: Union[str, Path], extensions=('.txt',)) -> List[Path]:
    """
    Collect text files to process from a file or directory path.

    Args:
        path: A single file or a directory.
        extensions: Accepted suffixes (lowercase).

    Returns:
        Sorted list of file paths.

    Raises:
        InputFileNotFoundError: If the path does not exist.
    """
    input_path = Path(path)
    if not input_path.exists():
        raise InputFileNotFoundError(str(input_path))

    if input_path.is_file():
        return [input_path]

    return sorted(
        p for p in input_path.iterdir()
        if p.is_file() and p.suffix.lower() in extensions
    )
