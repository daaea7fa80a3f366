"""Value objects making up a raffle session.

Everything here is plain data: the aggregate is serialized as a single JSON
document and every derived view (available prizes, selected prize, winner
groups) is computed from it on demand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Page(str, Enum):
    """Screens of the raffle presentation."""

    CONFIG = "config"
    PRIZE_SELECTION = "prize-selection"
    LOTTERY = "lottery"
    WINNERS = "winners"


@dataclass(frozen=True)
class Participant:
    """A person entered in the raffle.

    Attributes
    ----------
    id : str
        Identifier assigned at roster ingestion.
    full_name : str
        Name displayed during the draw.
    position : str
        Job title or position displayed under the name.
    """

    id: str
    full_name: str
    position: str

    def to_json(self) -> dict[str, Any]:
        return {"id": self.id, "fullName": self.full_name, "position": self.position}

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Participant":
        return cls(
            id=str(data["id"]),
            full_name=str(data["fullName"]),
            position=str(data["position"]),
        )


@dataclass(frozen=True)
class Prize:
    """A prize lot.

    Attributes
    ----------
    id : str
        Identifier of the lot.
    name : str
        Display name, also used to group winners.
    quantity : int
        Units still to be drawn.
    initial_quantity : int
        Units configured for the lot; never changes after creation.
    image_base64 : str
        Artwork as an embeddable ``data:`` URL.
    """

    id: str
    name: str
    quantity: int
    initial_quantity: int
    image_base64: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.quantity <= self.initial_quantity:
            raise ValueError(
                f"Prize '{self.id}' quantity must be between 0 and "
                f"{self.initial_quantity}, got {self.quantity}"
            )

    @property
    def is_available(self) -> bool:
        return self.quantity > 0

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "initialQuantity": self.initial_quantity,
            "imageBase64": self.image_base64,
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Prize":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            quantity=int(data["quantity"]),
            initial_quantity=int(data["initialQuantity"]),
            image_base64=str(data.get("imageBase64") or ""),
        )


@dataclass(frozen=True)
class Winner:
    """A confirmed draw.

    Participant and prize fields are snapshots taken at confirmation, so the
    record stays readable after the participant leaves the pool.
    """

    id: str
    participant_id: str
    full_name: str
    position: str
    prize_id: str
    prize_name: str
    timestamp: int
    """Confirmation time in epoch milliseconds."""

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "participantId": self.participant_id,
            "fullName": self.full_name,
            "position": self.position,
            "prizeId": self.prize_id,
            "prizeName": self.prize_name,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Winner":
        return cls(
            id=str(data["id"]),
            participant_id=str(data["participantId"]),
            full_name=str(data["fullName"]),
            position=str(data["position"]),
            prize_id=str(data["prizeId"]),
            prize_name=str(data["prizeName"]),
            timestamp=int(data["timestamp"]),
        )


@dataclass
class SessionAggregate:
    """Complete serializable state of one raffle session."""

    participants: list[Participant] = field(default_factory=list)
    prizes: list[Prize] = field(default_factory=list)
    winners: list[Winner] = field(default_factory=list)
    selected_prize_id: Optional[str] = None
    current_page: Page = Page.CONFIG
    is_configured: bool = False

    @classmethod
    def initial(cls) -> "SessionAggregate":
        return cls()

    def to_json(self) -> dict[str, Any]:
        return {
            "participants": [p.to_json() for p in self.participants],
            "prizes": [p.to_json() for p in self.prizes],
            "winners": [w.to_json() for w in self.winners],
            "selectedPrizeId": self.selected_prize_id,
            "currentPage": self.current_page.value,
            "isConfigured": self.is_configured,
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "SessionAggregate":
        """Rebuild an aggregate from its JSON form.

        Raises
        ------
        KeyError, TypeError, ValueError
            If ``data`` does not have the persisted shape.
        """
        if not isinstance(data, dict):
            raise TypeError("session payload must be a JSON object")
        selected = data.get("selectedPrizeId")
        return cls(
            participants=[Participant.from_json(p) for p in data.get("participants", [])],
            prizes=[Prize.from_json(p) for p in data.get("prizes", [])],
            winners=[Winner.from_json(w) for w in data.get("winners", [])],
            selected_prize_id=None if selected is None else str(selected),
            current_page=Page(data.get("currentPage", Page.CONFIG.value)),
            is_configured=bool(data.get("isConfigured", False)),
        )


__all__ = ["Page", "Participant", "Prize", "SessionAggregate", "Winner"]
