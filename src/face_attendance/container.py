from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from .attendance.ledger import AttendanceLedger
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import get_zone
from .core.constants import (
    DEFAULT_DISTANCE_THRESHOLD,
    DEFAULT_EMBEDDING_DIMENSION,
    DEFAULT_REFERENCE_TIMEZONE,
)
from .core.enums import DistanceMetric
from .database.connection import DatabaseConnection, DBConfig
from .extraction.base import EmbeddingExtractor
from .identities.mysql_identity_repository import MySQLIdentityRepository
from .identities.repository import IdentityRepository
from .identities.store import EmbeddingStore
from .matching.matcher import Matcher
from .reports.service import AttendanceReportService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    identities_repo: IdentityRepository
    attendance_repo: AttendanceRepository

    embedding_store: EmbeddingStore
    matcher: Matcher
    ledger: AttendanceLedger

    attendance_service: AttendanceService
    report_service: AttendanceReportService
    extractor: Optional[EmbeddingExtractor] = None


def assemble_container(
    identities_repo: IdentityRepository,
    attendance_repo: AttendanceRepository,
    *,
    conn: Optional[DatabaseConnection] = None,
    distance_threshold: float = DEFAULT_DISTANCE_THRESHOLD,
    distance_metric: str = DistanceMetric.EUCLIDEAN.value,
    embedding_dimension: int = DEFAULT_EMBEDDING_DIMENSION,
    reference_timezone: str = DEFAULT_REFERENCE_TIMEZONE,
    clock: Optional[Callable[[], datetime]] = None,
    extractor: Optional[EmbeddingExtractor] = None,
) -> Container:
    """Wire stores and services over the given repositories."""
    zone = get_zone(reference_timezone)

    embedding_store = EmbeddingStore(identities_repo, embedding_dimension=embedding_dimension, clock=clock)
    matcher = Matcher(distance_threshold=distance_threshold, metric=distance_metric)
    ledger = AttendanceLedger(attendance_repo, reference_tz=zone)
    attendance_service = AttendanceService(embedding_store, matcher, ledger, clock=clock)
    report_service = AttendanceReportService(reference_tz=zone)

    return Container(
        conn=conn,
        identities_repo=identities_repo,
        attendance_repo=attendance_repo,
        embedding_store=embedding_store,
        matcher=matcher,
        ledger=ledger,
        attendance_service=attendance_service,
        report_service=report_service,
        extractor=extractor,
    )


def build_container(*, db_config: dict, settings: Any = None, extractor: Optional[EmbeddingExtractor] = None) -> Container:
    """MySQL-backed container configured from a settings module."""
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble_container(
        MySQLIdentityRepository(conn),
        MySQLAttendanceRepository(conn),
        conn=conn,
        distance_threshold=float(getattr(settings, "DISTANCE_THRESHOLD", DEFAULT_DISTANCE_THRESHOLD)),
        distance_metric=str(getattr(settings, "DISTANCE_METRIC", DistanceMetric.EUCLIDEAN.value)),
        embedding_dimension=int(getattr(settings, "EMBEDDING_DIMENSION", DEFAULT_EMBEDDING_DIMENSION)),
        reference_timezone=str(getattr(settings, "REFERENCE_TIMEZONE", DEFAULT_REFERENCE_TIMEZONE)),
        extractor=extractor,
    )
