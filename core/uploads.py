"""
Upload checks for the file inputs on create forms.

A selected file is accepted only if its declared MIME type is allowed and
its size is within the cap. Accepted images get a preview backed by a
temporary file, which is released whenever it is superseded or the owning
form closes.
"""

import logging
import tempfile
import weakref
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)

UNSUPPORTED_TYPE = "unsupported type"
TOO_LARGE = "too large"

_EXTENSIONS = {
    'image/jpeg': '.jpg',
    'image/png': '.png',
    'image/webp': '.webp',
}


class UploadConfig:
    """Allowed MIME types and size cap for one file input."""

    def __init__(self, allowed_types: Iterable[str], max_bytes: int):
        self.allowed_types = frozenset(allowed_types)
        self.max_bytes = int(max_bytes)

    @classmethod
    def from_config(cls, section: Dict[str, Any]) -> "UploadConfig":
        return cls(section['allowed_types'], section['max_bytes'])

    def describe(self) -> str:
        kinds = sorted(t.split('/')[-1].upper() for t in self.allowed_types)
        return f"{', '.join(kinds)} up to {self.max_bytes // (1024 * 1024)}MB"

    def __repr__(self) -> str:
        return f"UploadConfig(allowed_types={sorted(self.allowed_types)}, max_bytes={self.max_bytes})"


def _file_size(uploaded: Any) -> int:
    size = getattr(uploaded, 'size', None)
    if size is None:
        size = len(uploaded.getvalue())
    return int(size)


def check_upload(uploaded: Any, config: UploadConfig) -> Dict[str, Any]:
    """
    Check a selected file against an upload configuration.
    Pure function - the file is never read unless it exposes no size.

    Args:
        uploaded: Selected file exposing `type` and `size`
        config: Allowed types and size cap

    Returns:
        Dictionary with 'accepted', 'file' and 'reason'
        ('unsupported type' or 'too large' on rejection).
    """
    if getattr(uploaded, 'type', None) not in config.allowed_types:
        return {'accepted': False, 'file': None, 'reason': UNSUPPORTED_TYPE}

    if _file_size(uploaded) > config.max_bytes:
        return {'accepted': False, 'file': None, 'reason': TOO_LARGE}

    return {'accepted': True, 'file': uploaded, 'reason': None}


def rejection_message(reason: str, config: UploadConfig) -> str:
    """User-facing message for a rejection reason."""
    if reason == UNSUPPORTED_TYPE:
        kinds = ', '.join(sorted(t.split('/')[-1].upper() for t in config.allowed_types))
        return f"Unsupported file type. Allowed: {kinds}"
    if reason == TOO_LARGE:
        return f"File too large. Maximum size is {config.max_bytes // (1024 * 1024)}MB"
    return f"File rejected: {reason}"


def is_image(uploaded: Any) -> bool:
    return str(getattr(uploaded, 'type', '') or '').startswith('image/')


def _remove_file(path: Path) -> None:
    path.unlink(missing_ok=True)


class PreviewHandle:
    """
    Displayable preview of an accepted image.

    The image bytes live in a temporary file until release() is called;
    release is idempotent and also runs on context-manager exit. A handle
    that is dropped without being released (an abandoned session) removes
    its file when it is garbage collected, or at interpreter exit.
    """

    def __init__(self, data: bytes, mime_type: str = ""):
        suffix = _EXTENSIONS.get(mime_type, "")
        with tempfile.NamedTemporaryFile(prefix="onexhib-preview-", suffix=suffix, delete=False) as f:
            f.write(data)
            self.path = Path(f.name)
        self.mime_type = mime_type
        self._released = False
        self._finalizer = weakref.finalize(self, _remove_file, self.path)

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._finalizer()
        self._released = True

    def __enter__(self) -> "PreviewHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"PreviewHandle(path={str(self.path)!r}, released={self._released})"


class UploadSlot:
    """
    Form state for one file input.

    A rejected file never replaces the accepted one. Accepting a new image
    releases the previous preview; clear() and close() release it too.
    """

    def __init__(self, name: str, config: UploadConfig, preview_images: bool = True):
        self.name = name
        self.config = config
        self.preview_images = preview_images
        self.file: Any = None
        self.preview: Optional[PreviewHandle] = None
        self.error: Optional[str] = None

    def offer(self, uploaded: Any) -> Dict[str, Any]:
        """
        Offer a newly selected file to the slot.

        Args:
            uploaded: Selected file, or None when the selection was removed

        Returns:
            The check_upload result
        """
        if uploaded is None:
            self.clear()
            return {'accepted': False, 'file': None, 'reason': None}

        if self._same_file(uploaded):
            return {'accepted': True, 'file': uploaded, 'reason': None}

        result = check_upload(uploaded, self.config)
        if not result['accepted']:
            self.error = rejection_message(result['reason'], self.config)
            logger.info(
                f"Rejected upload for {self.name}: {getattr(uploaded, 'name', '?')} ({result['reason']})"
            )
            return result

        self._release_preview()
        self.file = uploaded
        self.error = None
        if self.preview_images and is_image(uploaded):
            self.preview = PreviewHandle(uploaded.getvalue(), uploaded.type)
        return result

    def _same_file(self, uploaded: Any) -> bool:
        if uploaded is self.file:
            return True
        file_id = getattr(uploaded, 'file_id', None)
        return file_id is not None and file_id == getattr(self.file, 'file_id', None)

    def clear(self) -> None:
        self._release_preview()
        self.file = None
        self.error = None

    def close(self) -> None:
        self._release_preview()

    def _release_preview(self) -> None:
        if self.preview is not None:
            self.preview.release()
            self.preview = None

    def as_multipart(self) -> Optional[tuple]:
        """(filename, bytes, mime type) tuple for requests' files=, or None."""
        if self.file is None:
            return None
        return (getattr(self.file, 'name', self.name), self.file.getvalue(), self.file.type)

    def __enter__(self) -> "UploadSlot":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
