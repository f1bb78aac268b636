"""Application bootstrap for Region Marker."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PyQt6.QtCore import QUrl
from PyQt6.QtGui import QImage
from PyQt6.QtWidgets import QApplication

from . import __version__
from .core.config import ConfigManager, DEFAULT_CONFIG_PATH
from .core.errors import ExportFailure
from .core.exporter import encode_png
from .ui.main_window import EditorWindow, increase_image_allocation_limit

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="region-marker",
        description="Mark regions of an image for masked editing."
    )
    parser.add_argument("image", help="Path, file:// URL or data: URL of the image to mark")
    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Where to write the marked PNG (default: <image>_marked.png)"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to the YAML configuration file"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def default_output_path(image: str) -> Path:
    """Derive an output path next to a local image, or in the working directory."""
    if image.startswith("data:"):
        return Path("marked.png")
    if image.startswith("file:"):
        image = QUrl(image).toLocalFile()
    source = Path(image)
    return source.with_name(f"{source.stem}_marked.png")


def write_output(image: QImage, output: Path) -> None:
    """
    Write the exported image as PNG.

    Raises:
        ExportFailure: If the image cannot be encoded or written
    """
    data = encode_png(image)
    try:
        output.write_bytes(data)
    except OSError as e:
        raise ExportFailure(f"Could not write {output}: {e}") from e
    logger.info(f"Wrote marked image to {output}")


def create_application() -> QApplication:
    """
    Create and configure the Qt application.

    Returns:
        Configured QApplication instance
    """
    app = QApplication(sys.argv)
    app.setApplicationName("Region Marker")
    app.setApplicationVersion(__version__)
    app.setOrganizationName("Region Marker")
    return app


def run(argv: Optional[List[str]] = None) -> int:
    """
    Run the Region Marker editor.

    Returns:
        Exit code: 0 after Apply, 1 on error, 2 when cancelled
    """
    args = parse_args(argv)
    output = args.output or default_output_path(args.image)
    logger.info("Starting Region Marker")

    try:
        app = create_application()
        increase_image_allocation_limit()
        config = ConfigManager(args.config).config

        window = EditorWindow(config)
        result = {"code": 2}

        def on_marked(image: QImage) -> None:
            try:
                write_output(image, output)
                result["code"] = 0
            except ExportFailure as e:
                logger.error(str(e))
                result["code"] = 1

        def on_load_failed(message: str) -> None:
            result["code"] = 1

        window.marked.connect(on_marked)
        window.session.load_failed.connect(on_load_failed)
        window.show()
        window.open_image(args.image)

        app.exec()
        return result["code"]

    except Exception as e:
        logger.error(f"Application error: {e}", exc_info=True)
        return 1


def main() -> None:
    """Main entry point for the application."""
    sys.exit(run())


if __name__ == "__main__":
    main()
