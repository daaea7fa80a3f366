"""Single-operator raffle session engine."""

from .draw import DrawEngine, DrawState
from .ledger import InventoryLedger, WinnerLedger, available_prizes, selected_prize
from .models import Page, Participant, Prize, SessionAggregate, Winner
from .page_flow import PageFlowGuard, resolve_page
from .store import SessionStore

__all__ = [
    "DrawEngine",
    "DrawState",
    "InventoryLedger",
    "Page",
    "PageFlowGuard",
    "Participant",
    "Prize",
    "SessionAggregate",
    "SessionStore",
    "Winner",
    "WinnerLedger",
    "available_prizes",
    "resolve_page",
    "selected_prize",
]
