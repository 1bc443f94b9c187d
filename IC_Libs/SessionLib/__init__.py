"""
SessionLib - Editing session orchestration

This module ties the image operations together into an undoable editing
session that renders onto a caller-owned surface. The PyQt5 surface adapter
lives in `IC_Libs.SessionLib.qt_surface` and is imported explicitly so the
engine does not require Qt.
"""

from IC_Libs.SessionLib.history_manager import HistoryManager
from IC_Libs.SessionLib.surface import Surface, ImageSurface
from IC_Libs.SessionLib.render_pipeline import render_image, render_snapshot
from IC_Libs.SessionLib.session_models import (
    SessionStatus,
    ResultStatus,
    OperationResult,
    EditorState,
)
from IC_Libs.SessionLib.edit_session import EditSession

__all__ = [
    "HistoryManager",
    "Surface",
    "ImageSurface",
    "render_image",
    "render_snapshot",
    "SessionStatus",
    "ResultStatus",
    "OperationResult",
    "EditorState",
    "EditSession",
]
