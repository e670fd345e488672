"""File-type classification by extension."""

from __future__ import annotations

from pathlib import PurePath

from fzf_nav.core.events import FileCategory

MEDIA_EXTENSIONS: frozenset[str] = frozenset(
    {
        # audio
        ".mp3", ".flac", ".wav", ".ogg", ".oga", ".opus", ".m4a", ".aac", ".wma",
        ".aiff", ".alac", ".mid", ".midi",
        # video
        ".mp4", ".mkv", ".avi", ".mov", ".webm", ".wmv", ".flv", ".m4v", ".mpg",
        ".mpeg", ".3gp",
    }
)  # fmt: skip

IMAGE_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".tif", ".tiff",
        ".svg", ".ico", ".heic", ".heif", ".avif", ".raw", ".cr2", ".nef", ".psd",
    }
)  # fmt: skip

DOCUMENT_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".pdf", ".epub", ".mobi", ".djvu", ".doc", ".docx", ".odt", ".rtf",
        ".xls", ".xlsx", ".ods", ".csv", ".ppt", ".pptx", ".odp",
        ".txt", ".md", ".rst", ".org", ".tex",
    }
)  # fmt: skip

_CATEGORY_BY_EXTENSION: dict[str, FileCategory] = {
    **{ext: FileCategory.MEDIA for ext in MEDIA_EXTENSIONS},
    **{ext: FileCategory.IMAGE for ext in IMAGE_EXTENSIONS},
    **{ext: FileCategory.DOCUMENT for ext in DOCUMENT_EXTENSIONS},
}


def classify(path: str) -> FileCategory:
    """Map a file path to its category by lowercase extension.

    Only the final suffix counts, so ``notes.tar.gz`` is classified by
    ``.gz``. Paths without an extension, dotfiles such as ``.bashrc``
    and unknown extensions all map to ``FileCategory.OTHER``.
    """
    suffix = PurePath(path).suffix.lower()
    return _CATEGORY_BY_EXTENSION.get(suffix, FileCategory.OTHER)
