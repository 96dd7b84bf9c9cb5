# Copyright Red Hat
#
# treediff/filetypes.py - Directory tree differ file types
#
# This file is part of the treediff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
File type information support.
"""
from typing import ClassVar, Dict, Optional, Tuple
from pathlib import Path
from enum import Enum
import logging
import stat
import os

import magic

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error

# Format: ".ext": ("mime/type", "description starting with lowercase")
EXTENSION_MAP = {
    ".txt": ("text/plain", "plain text document"),
    ".md": ("text/markdown", "markdown documentation"),
    ".rst": ("text/x-rst", "reStructuredText document"),
    ".json": ("application/json", "json data file"),
    ".xml": ("application/xml", "xml document"),
    ".yaml": ("application/yaml", "yaml configuration file"),
    ".yml": ("application/yaml", "yaml configuration file"),
    ".toml": ("application/toml", "toml configuration file"),
    ".ini": ("text/x-ini", "ini configuration file"),
    ".cfg": ("text/x-config", "configuration file"),
    ".conf": ("text/x-config", "configuration file"),
    ".csv": ("text/csv", "comma-separated values"),
    ".log": ("text/x-log", "log file"),
    ".html": ("text/html", "html document"),
    ".css": ("text/css", "cascading style sheet"),
    ".js": ("text/javascript", "javascript source code"),
    ".sh": ("application/x-sh", "shell script"),
    ".py": ("text/x-python", "python source code"),
    ".c": ("text/x-c", "c source code"),
    ".h": ("text/x-c", "c header file"),
    ".rs": ("text/x-rust", "rust source code"),
    ".png": ("image/png", "png image"),
    ".jpg": ("image/jpeg", "jpeg image"),
    ".jpeg": ("image/jpeg", "jpeg image"),
    ".gif": ("image/gif", "gif image"),
    ".pdf": ("application/pdf", "pdf document"),
    ".zip": ("application/zip", "zip archive"),
    ".gz": ("application/gzip", "gzip compressed data"),
    ".tar": ("application/x-tar", "tar archive"),
    ".so": ("application/x-sharedlib", "shared library"),
    ".o": ("application/x-object", "object file"),
}


class FileTypeCategory(Enum):
    """
    Enum for file type categories.
    """

    TEXT = "text"
    BINARY = "binary"
    IMAGE = "image"
    ARCHIVE = "archive"
    EXECUTABLE = "executable"
    CONFIG = "config"
    DOCUMENT = "document"
    SOURCE_CODE = "source_code"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    UNKNOWN = "unknown"


class FileTypeInfo:
    """
    Class representing file type information and encoding.
    """

    def __init__(
        self,
        mime_type: str,
        description: str,
        category: FileTypeCategory,
        encoding: Optional[str] = None,
    ):
        """
        Initialise a new ``FileTypeInfo`` object.

        :param mime_type: The detected MIME type.
        :type mime_type: ``str``
        :param description: Type description returned by magic.
        :type description: ``str``
        :param category: File type category.
        :type category: ``FileTypeCategory``
        :param encoding: Optional file encoding.
        :type encoding: ``Optional[str]``
        """
        self.mime_type = mime_type
        self.description = description
        self.category = category
        self.encoding = encoding

    def __str__(self):
        return (
            f"MIME type: {self.mime_type}, "
            f"Category: {self.category.value}, "
            f"Encoding: {self.encoding if self.encoding else 'unknown'}, "
            f"Description: {self.description}"
        )

    def to_dict(self):
        """
        Convert this ``FileTypeInfo`` into a dictionary suitable for
        encoding as JSON.
        """
        return {
            "mime_type": self.mime_type,
            "description": self.description,
            "category": self.category.value,
            "encoding": self.encoding,
        }


class FileTypeDetector:
    """
    Detect file types using ``magic`` from file-magic.
    """

    # fmt: off
    category_rules: ClassVar[Dict[str, FileTypeCategory]] = {
        "application/zip": FileTypeCategory.ARCHIVE,
        "application/x-tar": FileTypeCategory.ARCHIVE,
        "application/gzip": FileTypeCategory.ARCHIVE,
        "application/x-gzip": FileTypeCategory.ARCHIVE,
        "application/x-xz": FileTypeCategory.ARCHIVE,
        "application/x-executable": FileTypeCategory.EXECUTABLE,
        "application/x-sharedlib": FileTypeCategory.EXECUTABLE,
        "application/x-pie-executable": FileTypeCategory.EXECUTABLE,
        "application/x-object": FileTypeCategory.EXECUTABLE,
        "application/pdf": FileTypeCategory.DOCUMENT,
        "text/markdown": FileTypeCategory.DOCUMENT,
        "text/x-rst": FileTypeCategory.DOCUMENT,
        "application/json": FileTypeCategory.CONFIG,
        "application/xml": FileTypeCategory.CONFIG,
        "application/yaml": FileTypeCategory.CONFIG,
        "application/toml": FileTypeCategory.CONFIG,
        "text/x-ini": FileTypeCategory.CONFIG,
        "text/x-config": FileTypeCategory.CONFIG,
        "application/x-sh": FileTypeCategory.SOURCE_CODE,
        "text/x-shellscript": FileTypeCategory.SOURCE_CODE,
        "text/x-python": FileTypeCategory.SOURCE_CODE,
        "text/x-script.python": FileTypeCategory.SOURCE_CODE,
        "text/x-c": FileTypeCategory.SOURCE_CODE,
        "text/x-rust": FileTypeCategory.SOURCE_CODE,
        "text/javascript": FileTypeCategory.SOURCE_CODE,
        "text/html": FileTypeCategory.SOURCE_CODE,
        "text/css": FileTypeCategory.SOURCE_CODE,
        "inode/directory": FileTypeCategory.DIRECTORY,
        "inode/symlink": FileTypeCategory.SYMLINK,
        "text/": FileTypeCategory.TEXT,
        "image/": FileTypeCategory.IMAGE,
    }
    # fmt: on

    def detect_file_type(self, file_path: Path, use_magic=True) -> FileTypeInfo:
        """
        Detect file type information, optionally using libmagic for MIME
        type detection.

        Falls back to a guess based on the file name if libmagic cannot
        identify the file.

        :param file_path: The path to the file to inspect.
        :type file_path: ``Path``.
        :param use_magic: Use libmagic for detection.
        :type use_magic: ``bool``
        :returns: File type information for ``file_path``.
        :rtype: ``FileTypeInfo``
        """
        try:
            mode = os.lstat(file_path).st_mode
        except OSError as err:
            _log_warn("Error detecting file type for %s: %s", str(file_path), err)
            return FileTypeInfo(
                "application/octet-stream", "unknown", FileTypeCategory.UNKNOWN
            )

        if stat.S_ISDIR(mode):
            return FileTypeInfo(
                "inode/directory", "directory", FileTypeCategory.DIRECTORY
            )
        if stat.S_ISLNK(mode):
            return FileTypeInfo(
                "inode/symlink", "symbolic link", FileTypeCategory.SYMLINK
            )

        if use_magic:
            # Some libmagic bindings do not provide magic.error
            if hasattr(magic, "error"):
                magic_errors = (magic.error, OSError, ValueError)
            else:
                magic_errors = (OSError, ValueError)

            try:
                fm = magic.detect_from_filename(str(file_path))
                category = self._categorize_file(fm.mime_type)
                return FileTypeInfo(fm.mime_type, fm.name, category, fm.encoding)
            except magic_errors as err:
                _log_warn("Error detecting file type for %s: %s", str(file_path), err)

        return self._guess_file_type(file_path)

    def _categorize_file(self, mime_type: str) -> FileTypeCategory:
        """
        Categorize file based on MIME type.

        :param mime_type: Detected file MIME type.
        :type mime_type: ``str``
        :returns: File type categorization.
        :rtype: ``FileTypeCategory``
        """
        mime_type = mime_type.lower()
        for pattern, category in self.category_rules.items():
            if mime_type.startswith(pattern):
                return category
        return FileTypeCategory.BINARY

    def _guess_file_type(self, file_path: Path) -> FileTypeInfo:
        """
        Guess file type from the file extension without using libmagic.

        :param file_path: The path to guess file type for.
        :type file_path: ``Path``
        :returns: A best-effort ``FileTypeInfo``.
        :rtype: ``FileTypeInfo``
        """
        guess: Tuple[str, str] = EXTENSION_MAP.get(
            Path(file_path).suffix.lower(),
            ("application/octet-stream", "unknown file type"),
        )
        mime_type, description = guess
        category = self._categorize_file(mime_type)
        if mime_type == "application/octet-stream":
            category = FileTypeCategory.UNKNOWN
        return FileTypeInfo(mime_type, description, category)
