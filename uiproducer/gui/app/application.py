# QApplication setup and configuration
import asyncio
import logging
import sys

from PyQt6.QtWidgets import QApplication
from qasync import QEventLoop

from ...backend.services.logging.logging_service import setup_logging
from ...config import ConfigError, ProducerSettings, load_settings

logger = logging.getLogger(__name__)


def setup_application() -> tuple[QApplication, QEventLoop]:
    """Initialize the Qt Application with qasync integration."""
    app = QApplication(sys.argv)
    app.setApplicationName("uiproducer")
    app.setApplicationVersion("1.0.0")

    # Install qasync event loop
    loop = QEventLoop(app)
    asyncio.set_event_loop(loop)
    app.aboutToQuit.connect(loop.stop)

    return app, loop


def run_application(window_class) -> None:
    """
    Main GUI entry point.

    Args:
        window_class: Main window class, constructed with the loaded settings
    """
    try:
        settings = load_settings()
    except ConfigError as e:
        setup_logging()
        logger.error(f"Configuration error, falling back to defaults: {e}")
        settings = ProducerSettings()
    else:
        setup_logging(
            verbose=settings.verbose,
            log_file=settings.log_file,
            force_color=settings.force_color,
        )

    try:
        app, loop = setup_application()

        window = window_class(settings)
        window.show()

        with loop:
            loop.run_forever()
        sys.exit(0)

    except Exception as e:
        logger.error(f"Application failed to start: {e}", exc_info=True)
        sys.exit(1)
