from sqlmodel import Session

from bingo.core.config import get_settings
from bingo.core.logging_config import configure_logging
from bingo.db.seed import seed_all
from bingo.db.session import build_engine, init_db


def run_seed():
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    engine = build_engine(settings.DATABASE_URL)
    init_db(engine)
    with Session(engine) as session:
        created = seed_all(session=session, seed_path=settings.SEED_PATH)
    print(f"{len(created)} template(s) created")


if __name__ == "__main__":
    run_seed()
