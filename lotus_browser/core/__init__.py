"""
Core layer: pane layout engine, record comparison, pagination and table
state. Nothing in here imports Dash.
"""

from .pane_layout import DragSession, PaneLayoutEngine, PointerEventBus
from .records import FieldKind, identity_key
from .sorting import sorted_by, toggle_sort
from .pagination import clamp_page, page, total_pages
from .table_state import TableState

__all__ = [
    "DragSession",
    "PaneLayoutEngine",
    "PointerEventBus",
    "FieldKind",
    "identity_key",
    "sorted_by",
    "toggle_sort",
    "clamp_page",
    "page",
    "total_pages",
    "TableState",
]
