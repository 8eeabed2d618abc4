"""
main.py
-------
Demo entry point for the myorm mapping layer.

Responsibilities:
    - Build the configured data source and the demo schema.
    - Register the example entity with a BasicEntityManager.
    - Walk through save, find, find_all and delete.
"""

from db.connection import create_data_source
from db.init_db import create_tables
from models.person import Person
from persistence import BasicEntityManager
from utils.logger import get_logger

logger = get_logger(__name__)


def main() -> None:
    """Run the CRUD walkthrough against the configured database."""
    data_source = create_data_source()
    try:
        create_tables(data_source)
        manager = BasicEntityManager.create(data_source, {Person})

        saved = manager.save(Person(first_name="Ada", last_name="Lovelace", age=36))
        if saved is None:
            logger.error("Save failed, aborting demo.")
            return
        logger.info(f"Saved: {saved}")

        found = manager.find(Person, saved.id)
        logger.info(f"Found: {found}")

        for person in manager.find_all(Person):
            logger.info(f"Row: {person}")

        logger.info(f"Deleted: {manager.delete(saved)}")
    finally:
        data_source.close()


if __name__ == "__main__":
    main()
