"""Filename and object-path helpers shared by the upload workflow."""
import posixpath
import re
import uuid
from typing import Callable, Optional, Tuple

ALLOWED_EXTENSIONS = (".pdf", ".epub")
MAX_FILE_NAME_LENGTH = 255

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")


def sanitize_file_name(file_name: str) -> str:
    """
    Replace unsafe characters with `_`, collapse runs of `_` and cap the length.

    Long names lose characters from the stem, never from the extension.
    """
    safe_name = _UNSAFE_CHARS.sub("_", file_name)
    safe_name = _REPEATED_UNDERSCORES.sub("_", safe_name)
    if len(safe_name) <= MAX_FILE_NAME_LENGTH:
        return safe_name
    stem, extension = posixpath.splitext(safe_name)
    if len(extension) >= MAX_FILE_NAME_LENGTH:
        return safe_name[:MAX_FILE_NAME_LENGTH]
    return stem[:MAX_FILE_NAME_LENGTH - len(extension)] + extension


def get_extension(file_name: str) -> str:
    """Extension including the dot, as written. Dotfiles like `.pdf` have none."""
    return posixpath.splitext(file_name)[1]


def is_allowed_extension(file_name: str) -> bool:
    return get_extension(file_name).lower() in ALLOWED_EXTENSIONS


def new_file_id() -> str:
    return str(uuid.uuid4())


def build_object_path(owner_id: str, file_name: str, id_factory: Optional[Callable[[], str]] = None) -> Tuple[str, str]:
    """
    Mint a fresh storage key for an upload.

    :param owner_id: identity of the uploader; becomes the first path segment.
    :param file_name: filename whose extension is kept, as validated by `is_allowed_extension`.
    :param id_factory: generator for the file id, uuid4 by default.
    :return: `(file_id, object_path)` with `object_path = {owner_id}/{file_id}{extension}`.
    """
    file_id = (id_factory or new_file_id)()
    return file_id, f"{owner_id}/{file_id}{get_extension(file_name)}"
