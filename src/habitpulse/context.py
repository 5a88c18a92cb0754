"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import (
    SQLModelCompletionHistoryRepository,
    SQLModelHabitRepository,
    SQLModelVacationRepository,
)
from .services.completion_data import HabitCompletionDataService
from .services.execution import ExecutionPolicy, execution_from_config
from .services.habit_status import HabitStatusService


@dataclass
class AppContext:
    """Centralized application context with repositories and services."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory

    habit_repo: SQLModelHabitRepository
    completion_repo: SQLModelCompletionHistoryRepository
    vacation_repo: SQLModelVacationRepository

    execution: ExecutionPolicy
    status_service: HabitStatusService
    completion_data_service: HabitCompletionDataService

    def dispose(self) -> None:
        """Release pooled database connections."""
        self.engine.dispose()


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)

    habit_repo = SQLModelHabitRepository(session_factory)
    completion_repo = SQLModelCompletionHistoryRepository(session_factory)
    vacation_repo = SQLModelVacationRepository(session_factory)
    execution = execution_from_config(config)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        habit_repo=habit_repo,
        completion_repo=completion_repo,
        vacation_repo=vacation_repo,
        execution=execution,
        status_service=HabitStatusService(habit_repo, completion_repo, vacation_repo),
        completion_data_service=HabitCompletionDataService(
            habit_repo, completion_repo, vacation_repo, execution=execution
        ),
    )
