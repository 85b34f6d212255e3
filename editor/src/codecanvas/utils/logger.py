"""Global logging and error handling utilities"""
import sys
import logging
from PyQt5.QtWidgets import QMessageBox

logger = logging.getLogger(__name__)

# Detect debug mode - True if running from source, False if packaged
DEBUG_MODE = not getattr(sys, 'frozen', False)

_main_window = None

def set_main_window(window):
    """Set the main window reference for showing popups"""
    global _main_window
    _main_window = window

def get_main_window():
    return _main_window

def loggerRaise(e: Exception, user_message: str = None, title: str = "Error"):
    """Handle exceptions with optional popup in release mode
    
    Args:
        e: The exception to handle
        user_message: User-friendly message to show in popup (optional)
        title: Title for the popup dialog
    
    In DEBUG_MODE:
        - Just raises the exception (shows full traceback)
    
    In RELEASE_MODE:
        - Logs the full traceback
        - Shows popup with user message or exception string
        - Then raises the exception
    """
    if DEBUG_MODE:
        raise e

    message = user_message if user_message else str(e)
    logger.error("%s: %s", title, message, exc_info=e)

    if _main_window:
        QMessageBox.critical(_main_window, title, message)
    else:
        logger.error("Error popup (no window): %s - %s", title, message)

    raise e

def loggerWarn(message: str, title: str = "Warning", parent=None):
    """Report an expected, recoverable condition to the user without raising
    
    Used for bad input files and rejected exports, where the editor state is
    unchanged and the user only needs to know why nothing happened.
    """
    logger.warning("%s: %s", title, message)
    parent = parent or _main_window
    if parent:
        QMessageBox.warning(parent, title, message)
