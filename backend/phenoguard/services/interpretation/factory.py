"""
Builds stores and interpreters from a PhenoGuardConfig.

Used by the API startup hook and the command line; the pipeline classes never
read configuration themselves.
"""

import logging
from typing import Optional

from phenoguard.core.config import PhenoGuardConfig, get_config

from .interpreter import Interpreter
from .store import InMemoryReferenceStore, ReferenceDataStore

logger = logging.getLogger(__name__)

SUPPORTED_STORES = ("memory", "postgres")


def create_store(config: Optional[PhenoGuardConfig] = None) -> ReferenceDataStore:
    config = config or get_config()

    if config.store == "memory":
        path = config.resolved_reference_data_path()
        logger.info(f"Using in-memory reference store ({path})")
        return InMemoryReferenceStore.from_file(path)

    if config.store == "postgres":
        # psycopg2 is only imported when the relational store is selected
        from .postgres_store import PostgresReferenceStore

        db = config.database
        return PostgresReferenceStore.connect(
            host=db.host,
            port=db.port,
            dbname=db.name,
            user=db.user,
            password=db.password,
            min_connections=db.min_connections,
            max_connections=db.max_connections,
            connect_timeout=db.connect_timeout,
        )

    raise ValueError(
        f"Unsupported store '{config.store}'. Expected one of: {', '.join(SUPPORTED_STORES)}"
    )


def create_interpreter(
    config: Optional[PhenoGuardConfig] = None,
    store: Optional[ReferenceDataStore] = None,
) -> Interpreter:
    """Factory function to create an Interpreter; builds the store from config unless one is given."""
    config = config or get_config()
    return Interpreter(store or create_store(config), strict=config.strict)
