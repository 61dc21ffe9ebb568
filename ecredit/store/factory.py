"""Backend construction from configuration."""

from __future__ import annotations

import logging

from ecredit.config import EcreditConfig
from ecredit.store.base import Backend, TableClient
from ecredit.store.memory import InMemoryAuthClient, InMemoryTableClient
from ecredit.store.storage import LocalObjectStorage

logger = logging.getLogger(__name__)


def build_backend(config: EcreditConfig) -> Backend:
    """Assemble the table, storage and auth collaborators for ``config.backend``."""
    tables: TableClient
    if config.backend == "postgres":
        from ecredit.store.postgres import PostgresTableClient

        tables = PostgresTableClient(config.database.connection_string)
    else:
        tables = InMemoryTableClient()

    storage = LocalObjectStorage(
        root_dir=config.storage.root_dir,
        public_base_url=config.storage.public_base_url,
    )
    logger.info("Using %s backend with storage at %s", config.backend, config.storage.root_dir)
    return Backend(tables=tables, storage=storage, auth=InMemoryAuthClient())
