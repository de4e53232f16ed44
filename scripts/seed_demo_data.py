import logging

from src.application.event_locks import EventLockRegistry
from src.application.event_service import EventService
from src.domain.roles import EventOrganizer
from src.domain.seat_layout import SectionSpec
from src.infrastructure.db.models import Base
from src.infrastructure.db.session import engine
from src.infrastructure.repositories.event_repository import SqlAlchemyEventRepository


logger = logging.getLogger(__name__)

DEMO_ORGANIZER_ID = "demo-organizer"


def seed_events(service: EventService) -> list[str]:
    event_defs = [
        {
            "title": "Sunidhi Chauhan Live Concert",
            "venue_id": "indira-gandhi-arena",
            "max_capacity": 520,
            "sections": [
                SectionSpec(section_name="Regular", rows=20, seats_per_row=20),
                SectionSpec(section_name="VIP", rows=6, seats_per_row=20),
            ],
        },
        {
            "title": "Holi Festival 2026",
            "venue_id": "jln-stadium-grounds",
            "max_capacity": 880,
            "sections": [
                SectionSpec(section_name="General", rows=35, seats_per_row=20),
                SectionSpec(section_name="Premium", rows=9, seats_per_row=20),
            ],
        },
        {
            "title": "Chamber Music Evening",
            "venue_id": "kamani-auditorium",
            "max_capacity": 60,
            "sections": [
                SectionSpec(section_name="Gold", rows=5, seats_per_row=12),
            ],
        },
    ]

    organizer = EventOrganizer(DEMO_ORGANIZER_ID)
    existing_titles = {
        event.title for event in service.list_events(organizer_id=DEMO_ORGANIZER_ID)
    }

    created = []
    for item in event_defs:
        if item["title"] in existing_titles:
            logger.info("Skipping existing demo event %r", item["title"])
            continue
        event = service.create_event(
            organizer=organizer,
            title=item["title"],
            sections=item["sections"],
            venue_id=item["venue_id"],
            max_capacity=item["max_capacity"],
        )
        created.append(event.id)
    return created


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    service = EventService(
        repository=SqlAlchemyEventRepository(),
        locks=EventLockRegistry(),
    )
    created = seed_events(service)
    print(f"Seed complete: {len(created)} demo event(s) added.")


if __name__ == "__main__":
    main()
