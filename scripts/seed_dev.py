import logging

from raffle.models import Participant
from raffle.store import SessionStore
from raffle.storage import durable_backend
from raffle.workflows import build_prize, configure_session

# 1x1 transparent PNG, enough for the lottery screen background.
PLACEHOLDER_IMAGE = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)

PARTICIPANTS = [
    ("Ana Torres", "Plant Manager"),
    ("Luis Ramirez", "Maintenance Technician"),
    ("Maria Quispe", "Quality Analyst"),
    ("Jorge Salazar", "Logistics Coordinator"),
    ("Carmen Rojas", "HR Specialist"),
    ("Pedro Huaman", "Process Engineer"),
]

PRIZES = [
    ("Smart TV 55\"", 1),
    ("Gift Card", 3),
    ("Wireless Headphones", 2),
]


def main() -> None:
    """Replace the durable session with a configured demo session."""
    logging.basicConfig(level=logging.INFO)
    store = SessionStore.open(durable_backend())
    store.reset()

    participants = [
        Participant(id=f"participant-{index}-seed", full_name=name, position=position)
        for index, (name, position) in enumerate(PARTICIPANTS)
    ]
    prizes = []
    for name, quantity in PRIZES:
        prizes.append(
            build_prize(
                name,
                quantity,
                PLACEHOLDER_IMAGE,
                existing_ids=[p.id for p in prizes],
            )
        )

    page = configure_session(store, participants, prizes)
    print(f"Seeded {len(participants)} participants and {len(prizes)} prizes; page={page.value}")


if __name__ == "__main__":
    main()
