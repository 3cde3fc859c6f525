from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import DEFAULT_ISOLATION_LEVEL
from .database.connection import DBConfig, DatabaseConnection
from .database.mysql_base import MySQLTransactionManager
from .database.transaction import TransactionManager
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository
from .swaps.mysql_swap_repository import MySQLSwapRepository
from .swaps.repository import SwapRepository
from .swaps.service import SwapService
from .units.mysql_unit_repository import MySQLUnitRepository
from .units.repository import UnitRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    tx_manager: TransactionManager

    users_repo: UserRepository
    shifts_repo: ShiftRepository
    units_repo: UnitRepository
    schedules_repo: ScheduleRepository
    swaps_repo: SwapRepository

    auth_service: AuthService
    schedule_service: ScheduleService
    swap_service: SwapService


def wire(
    *,
    tx_manager: TransactionManager,
    users_repo: UserRepository,
    shifts_repo: ShiftRepository,
    units_repo: UnitRepository,
    schedules_repo: ScheduleRepository,
    swaps_repo: SwapRepository,
) -> Container:
    """Build services over the given repositories (MySQL in production, fakes in tests)."""
    return Container(
        tx_manager=tx_manager,
        users_repo=users_repo,
        shifts_repo=shifts_repo,
        units_repo=units_repo,
        schedules_repo=schedules_repo,
        swaps_repo=swaps_repo,
        auth_service=AuthService(users_repo),
        schedule_service=ScheduleService(tx_manager, schedules_repo, shifts_repo, units_repo),
        swap_service=SwapService(tx_manager, swaps_repo, schedules_repo),
    )


def build_container(*, db_config: dict, isolation_level: Optional[str] = DEFAULT_ISOLATION_LEVEL) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection(config)

    return wire(
        tx_manager=MySQLTransactionManager(conn, isolation_level=isolation_level),
        users_repo=MySQLUserRepository(conn),
        shifts_repo=MySQLShiftRepository(conn),
        units_repo=MySQLUnitRepository(conn),
        schedules_repo=MySQLScheduleRepository(),
        swaps_repo=MySQLSwapRepository(),
    )
