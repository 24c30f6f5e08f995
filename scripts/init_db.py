import logging

from exercise_tracker.config import Settings, configure_logging
from exercise_tracker.db.engine import create_store_engine
from exercise_tracker.db.schema import metadata

logger = logging.getLogger(__name__)


def main():
    settings = Settings()
    configure_logging(settings)

    engine = create_store_engine(settings.database_url)
    metadata.drop_all(engine)
    metadata.create_all(engine)
    engine.dispose()
    logger.info("DB schema created.")


if __name__ == "__main__":
    main()
