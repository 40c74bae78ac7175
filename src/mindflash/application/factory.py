"""
Context Factory
Centralizes building a StudyContext and its repository from config.
"""

import random

from mindflash.application.config import AppConfig
from mindflash.application.context import StudyContext
from mindflash.domain.ports import Clock, KeyValueStore
from mindflash.infrastructure.adapters.storage import JsonFileStore
from mindflash.infrastructure.clock import SystemClock
from mindflash.infrastructure.repository import LibraryRepository


def get_store(config: AppConfig) -> KeyValueStore:
    """Returns the KeyValueStore backing the configured data file."""
    return JsonFileStore(config.data_file)


def build_context(
    config: AppConfig,
    store: KeyValueStore | None = None,
    clock: Clock | None = None,
) -> tuple[StudyContext, LibraryRepository]:
    """
    Returns a loaded StudyContext together with the repository to save it.
    """
    repo = LibraryRepository(store or get_store(config))
    context = StudyContext(
        clock=clock or SystemClock(),
        rng=random.Random(config.seed),
        config=config,
    )
    repo.load_into(context)
    return context, repo
