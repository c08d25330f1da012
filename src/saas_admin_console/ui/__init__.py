from .filters import FilterField, FilterPanel, clean_filters, empty_filters
from .modal import ModalController, ModalMode, ModalState
from .pagination import PaginationControl, PaginationView, page_window, render_pagination
from .table import ColumnDef, RowAction, TableView, render_table, toggle_sort

__all__ = [
    "ColumnDef",
    "FilterField",
    "FilterPanel",
    "ModalController",
    "ModalMode",
    "ModalState",
    "PaginationControl",
    "PaginationView",
    "RowAction",
    "TableView",
    "clean_filters",
    "empty_filters",
    "page_window",
    "render_pagination",
    "render_table",
    "toggle_sort",
]
