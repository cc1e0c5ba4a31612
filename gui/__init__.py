"""Graphical User Interface for Tempify."""

import logging
import sys
from typing import Optional


def launch_gui(template_id: Optional[str] = None):
    """Launch the GUI application."""
    print("Starting Tempify editor...")

    try:
        from PySide6.QtWidgets import QApplication, QStyleFactory
        from PySide6.QtCore import QtMsgType, qInstallMessageHandler
    except ImportError:
        raise ImportError("PySide6 is required for GUI mode. Install with: pip install PySide6")

    def qt_message_handler(msg_type, context, msg):
        """Route Qt messages into the application log."""
        if "Unable to open monitor interface" in msg and "DISPLAY" in msg:
            return

        logger = logging.getLogger("qt")
        if msg_type == QtMsgType.QtDebugMsg:
            logger.debug(f"Qt: {msg}")
        elif msg_type == QtMsgType.QtInfoMsg:
            logger.info(f"Qt: {msg}")
        elif msg_type == QtMsgType.QtWarningMsg:
            logger.warning(f"Qt: {msg}")
        elif msg_type == QtMsgType.QtCriticalMsg:
            logger.error(f"Qt Critical: {msg}")
        elif msg_type == QtMsgType.QtFatalMsg:
            logger.critical(f"Qt Fatal: {msg}")

    qInstallMessageHandler(qt_message_handler)

    from core.constants import APP_NAME
    from .design import EditorWindow

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    if "Fusion" in QStyleFactory.keys():
        app.setStyle("Fusion")

    window = EditorWindow()
    window.show()
    if template_id:
        window.open_template(template_id)

    sys.exit(app.exec())
