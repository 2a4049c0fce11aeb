"""
Sample data generator for person-tables.

Inserts a batch of synthetic person records through the record store's normal
insert path, one record at a time. Runs once during bootstrap, before the HTTP
server accepts traffic. The batch is not atomic: if a store call fails part way
through, the rows inserted so far stay and the failure is raised as
SeedingError.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from person_tables.domain.errors import PersonTablesError, SeedingError
from person_tables.domain.models import EyeColor, Person
from person_tables.seeding.names import synthetic_name
from person_tables.store.abstract import PersonStore
from person_tables.utils.logging import get_logger
from person_tables.utils.profiler import profile_block

log = get_logger(__name__)

EYE_COLORS = tuple(EyeColor)


@dataclass(frozen=True)
class SeedReport:
    rows: int
    duration_seconds: float
    rows_per_sec: float
    peak_rss_bytes: Optional[int] = None


def years_before(day: date, years: int) -> date:
    """The same calendar day `years` earlier (Feb 29 falls back to Feb 28)."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


class SampleDataGenerator:
    """
    Produce synthetic person records.

    Parameters
    ----------
    store : PersonStore
        Destination for the generated records.
    rows : int
        Number of records to insert.
    years : int
        Birth dates fall within the last `years` years, ending `today`.
    seed : int | None
        RNG seed; None draws a fresh seed.
    today : date | None
        Reference date; defaults to the current date.
    """

    def __init__(
        self,
        store: PersonStore,
        rows: int = 1_000,
        years: int = 40,
        seed: Optional[int] = None,
        today: Optional[date] = None,
    ) -> None:
        if rows < 0:
            raise ValueError(f"rows must be >= 0, got {rows}")
        if years <= 0:
            raise ValueError(f"years must be > 0, got {years}")
        self.store = store
        self.rows = rows
        self.years = years
        self.seed = seed
        self.today = today or date.today()
        self._rng = random.Random(seed)

    @property
    def earliest_birth(self) -> date:
        return years_before(self.today, self.years)

    def random_birth(self) -> date:
        span_days = (self.today - self.earliest_birth).days
        return self.earliest_birth + timedelta(days=self._rng.randint(0, span_days))

    def make_person(self) -> Person:
        return Person(
            name=synthetic_name(self._rng),
            birth=self.random_birth(),
            eyes=self._rng.choice(EYE_COLORS),
        )

    def generate(self) -> SeedReport:
        """
        Insert `rows` records sequentially and report throughput.

        Raises
        ------
        SeedingError
            If any insert fails; records inserted before the failure remain.
        """
        log.info(
            "Seeding started",
            extra={"rows": self.rows, "years": self.years, "store": self.store.name},
        )
        inserted = 0
        with profile_block("seed") as stats:
            for _ in range(self.rows):
                try:
                    self.store.insert(self.make_person())
                except PersonTablesError as exc:
                    log.error(
                        "Seeding aborted",
                        extra={"inserted": inserted, "requested": self.rows, "error": str(exc)},
                    )
                    raise SeedingError(
                        f"Seeding failed after {inserted} of {self.rows} records: {exc}"
                    ) from exc
                inserted += 1

        report = SeedReport(
            rows=inserted,
            duration_seconds=round(stats.duration_seconds, 3),
            rows_per_sec=round(stats.rate(inserted), 2),
            peak_rss_bytes=stats.peak_rss_bytes,
        )
        log.info(
            "Seeding completed",
            extra={"rows": report.rows, "duration_seconds": report.duration_seconds,
                   "rows_per_sec": report.rows_per_sec},
        )
        return report


__all__ = ["SampleDataGenerator", "SeedReport", "years_before"]
