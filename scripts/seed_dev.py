import logging

from sweepstake.db.engine import get_sessionmaker, make_engine
from sweepstake.models import Base, PrizeShare
from sweepstake.workflows import (
    add_participant_to,
    create_sweepstake,
    register_horse,
    toggle_participant_payment,
)

HORSES = [
    "Without A Fight",
    "Vauban",
    "Gold Trip",
    "Soulcombe",
    "Breakup",
    "Absurde",
    "Okita Soushi",
    "Interpretation",
]

PARTICIPANTS = ["Alice", "Bob", "Carol", "Dan"]


def main() -> None:
    """Seed the development database with a horse field and one sweepstake."""
    logging.basicConfig(level=logging.INFO)
    engine = make_engine()

    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    Session = get_sessionmaker(engine)

    with Session.begin() as session:
        for name in HORSES:
            register_horse(session, name)

        pool = create_sweepstake(
            session,
            "Office Cup",
            10,
            [
                PrizeShare(place=1, percentage=60),
                PrizeShare(place=2, percentage=30),
                PrizeShare(place=3, percentage=10),
            ],
        )
        for name in PARTICIPANTS:
            add_participant_to(session, pool.id, name)
        toggle_participant_payment(session, pool.id, 0)

    print("Seed completed.")


if __name__ == "__main__":
    main()
