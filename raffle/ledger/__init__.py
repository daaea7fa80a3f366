"""Inventory and winner ledgers of a raffle session."""

from .inventory import InventoryLedger, available_prizes, selected_prize
from .winners import WinnerLedger, group_by_prize

__all__ = [
    "InventoryLedger",
    "WinnerLedger",
    "available_prizes",
    "group_by_prize",
    "selected_prize",
]
