from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from .errors import ConfigurationError
from .ledger.inventory import select_prize as _select_prize, set_participants, set_prizes
from .models import Page, Participant, Prize
from .models.utils import generate_id
from .page_flow import PageFlowGuard
from .store import SessionStore

if TYPE_CHECKING:
    from .draw import DrawEngine


def build_prize(
    name: str,
    quantity: int,
    image_base64: str,
    *,
    prize_id: Optional[str] = None,
    existing_ids: Iterable[str] = (),
) -> Prize:
    """Create a fresh prize lot whose remaining units equal its configured units.

    Parameters
    ----------
    name : str
        Display name; surrounding whitespace is stripped.
    quantity : int
        Units to draw for this lot. Must be at least 1.
    image_base64 : str
        Artwork as produced by :func:`raffle.images.encode_image`.
    prize_id : Optional[str]
        Explicit identifier. A ``prize-`` prefixed random id is generated
        when omitted.
    existing_ids : Iterable[str]
        Identifiers already in use, avoided by the generator.
    """
    if quantity < 1:
        raise ConfigurationError(f"Prize '{name}' needs a quantity of at least 1")
    return Prize(
        id=prize_id or generate_id("prize", set(existing_ids)),
        name=name.strip(),
        quantity=quantity,
        initial_quantity=quantity,
        image_base64=image_base64,
    )


def configure_session(
    store: SessionStore,
    participants: Sequence[Participant],
    prizes: Sequence[Prize],
) -> Page:
    """Validate the roster and prize lots and open the session for drawing.

    The workflow performs, in a single store transaction:

    1. Check that participants were loaded and at least one prize exists.
    2. Check that every prize has a name, artwork and units to draw.
    3. Replace participants and prizes, mark the session configured and move
       it to the prize selection screen.

    Returns
    -------
    Page
        The page the session should show next.

    Raises
    ------
    ConfigurationError
        If any check fails. The session is left untouched.
    """
    if not participants:
        raise ConfigurationError("Participants must be loaded before starting")
    if not prizes:
        raise ConfigurationError("At least one prize must be configured")
    for prize in prizes:
        if not prize.name.strip() or not prize.image_base64:
            raise ConfigurationError("Every prize needs a name and an image")
        if prize.quantity < 1:
            raise ConfigurationError(f"Prize '{prize.name}' has no units to draw")

    with store.transaction() as state:
        set_participants(state, participants)
        set_prizes(state, prizes)
        state.selected_prize_id = None
        state.is_configured = True
        state.current_page = Page.PRIZE_SELECTION
    return PageFlowGuard(store).enter(Page.PRIZE_SELECTION)


def select_prize(store: SessionStore, prize_id: str) -> Page:
    """Choose the prize to draw next and enter the lottery screen.

    Raises
    ------
    ValueError
        If ``prize_id`` does not name an available prize.
    """
    with store.transaction() as state:
        _select_prize(state, prize_id)
    return PageFlowGuard(store).enter(Page.LOTTERY)


def reset_session(store: SessionStore, engine: Optional["DrawEngine"] = None) -> Page:
    """Wipe the session from memory and every storage tier.

    A draw in flight on ``engine`` is cancelled first so it can never commit
    into the fresh session.
    """
    if engine is not None:
        engine.cancel()
    store.reset()
    return PageFlowGuard(store).enter(Page.CONFIG)
