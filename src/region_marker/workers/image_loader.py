"""Background source image loading."""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from typing import Union
from urllib.parse import unquote_to_bytes

from PyQt6.QtCore import QThread, QUrl, pyqtSignal
from PyQt6.QtGui import QImage

from ..core.errors import ImageLoadFailure

logger = logging.getLogger(__name__)


ImageSource = Union[str, Path, bytes]


def _describe(source: ImageSource) -> str:
    if isinstance(source, bytes):
        return f"<{len(source)} bytes>"
    text = str(source)
    return text if len(text) <= 64 else text[:61] + "..."


def _decode_data_url(url: str) -> bytes:
    header, sep, payload = url.partition(",")
    if not sep:
        raise ImageLoadFailure(_describe(url), "malformed data URL")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageLoadFailure(_describe(url), f"invalid base64 payload: {e}") from e
    return unquote_to_bytes(payload)


def load_image(source: ImageSource) -> QImage:
    """
    Resolve and decode a source image.

    Accepts a filesystem path, a ``file://`` URL, a ``data:`` URL or
    raw encoded bytes.

    Args:
        source: Reference to the image

    Returns:
        Decoded image

    Raises:
        ImageLoadFailure: If the source cannot be read or decoded
    """
    if isinstance(source, bytes):
        data = source
    else:
        text = str(source)
        if text.startswith("data:"):
            data = _decode_data_url(text)
        else:
            if text.startswith("file:"):
                text = QUrl(text).toLocalFile()
            path = Path(text)
            if not path.is_file():
                raise ImageLoadFailure(_describe(source), "file not found")
            try:
                data = path.read_bytes()
            except OSError as e:
                raise ImageLoadFailure(_describe(source), str(e)) from e

    image = QImage.fromData(data)
    if image.isNull():
        raise ImageLoadFailure(_describe(source), "unsupported or corrupt image data")

    logger.info(f"Loaded image {_describe(source)} ({image.width()}x{image.height()})")
    return image


class ImageLoader(QThread):
    """
    Background thread that decodes one source image.

    Emits ``loaded`` with the decoded image or ``failed`` with an error
    message. Signals are delivered to the receiver's thread.
    """

    # Signal emitted when the image is decoded
    loaded = pyqtSignal(QImage)

    # Signal emitted when loading fails (message)
    failed = pyqtSignal(str)

    def __init__(self, source: ImageSource) -> None:
        """
        Initialize the image loader.

        Args:
            source: Path, URL or encoded bytes to load
        """
        super().__init__()
        self.source = source
        self._is_running = True

    def run(self) -> None:
        """Decode the image in the background thread."""
        try:
            image = load_image(self.source)
        except ImageLoadFailure as e:
            logger.error(str(e))
            if self._is_running:
                self.failed.emit(str(e))
            return

        if not self._is_running:
            logger.info("Image loading cancelled")
            return
        self.loaded.emit(image)

    def stop(self) -> None:
        """Request the loader to drop its result."""
        self._is_running = False
