"""
Output Package

Persistence and presentation of graded attempts.
"""

from .report import render_result_sheet
from .store import JsonResultStore, StoreError

__all__ = ["JsonResultStore", "StoreError", "render_result_sheet"]
