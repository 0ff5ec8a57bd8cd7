import os
from pathlib import Path
from typing import Union

from jobmatch.models.schemas import FileType
from jobmatch.utils.exceptions import ExtractionFailure, UnsupportedFileType
from jobmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

# Binary formats are not decoded yet; every type goes through the same text path.
SUPPORTED_EXTENSIONS = {ft.value: ft for ft in FileType}


def resolve_file_type(name_or_ext: str) -> FileType:
    """Map a file name or extension (".PDF", "docx", "cv.doc") to a FileType."""
    raw = (name_or_ext or "").strip().lower()
    ext = raw.rsplit(".", 1)[-1] if "." in raw else raw
    file_type = SUPPORTED_EXTENSIONS.get(ext)
    if file_type is None:
        raise UnsupportedFileType(file_type=ext or None)
    return file_type


def clean_lines(text: str) -> str:
    lines = (line.strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


def normalize_text(data: bytes, file_type: FileType, encoding: str = "utf-8") -> str:
    """
    Turn raw upload bytes into line-oriented text: every line trimmed,
    blank lines dropped, joined by a single newline.
    """
    try:
        text = data.decode(encoding, errors="replace")
    except (LookupError, UnicodeError) as e:
        raise ExtractionFailure(
            f"Failed to extract text from {file_type.value.upper()}",
            file_type=file_type.value,
            cause=e,
        ) from e
    return clean_lines(text)


def read_and_normalize(stored_path: Union[str, Path], file_type: FileType) -> str:
    p = Path(stored_path)
    try:
        data = p.read_bytes()
    except OSError as e:
        raise ExtractionFailure(
            f"Failed to extract text from {file_type.value.upper()}",
            file_type=file_type.value,
            cause=e,
        ) from e
    text = normalize_text(data, file_type)
    logger.debug(f"Normalized {p.name}: {len(data)} bytes -> {len(text)} chars")
    return text


def cleanup_file(stored_path: Union[str, Path]) -> None:
    if os.path.exists(stored_path):
        os.remove(stored_path)
        logger.debug(f"Removed temporary upload {stored_path}")
