"""Registry Statistics — running aggregates updated incrementally on each transition.

Invariants:
    - total_records and decrypted_records never decrease
    - decrypted_records <= total_records
    - cumulative_latency_seconds is the sum of (decrypted_at - submitted_at) over
      decrypted records; each finalize adds its own latency once
    - Never recomputed by scanning records: queries are O(1)

Design Decisions:
    - One dataclass holds every counter so a single lock guards them together
      (ADR: no transient inconsistency between counts)
    - average_latency_seconds defined as 0.0 when nothing is decrypted yet
"""

from dataclasses import dataclass


@dataclass
class RegistryStatistics:
    """Process-wide aggregate counters — pure dataclass, no IO."""

    total_records: int = 0
    decrypted_records: int = 0
    cumulative_latency_seconds: float = 0.0

    @property
    def average_latency_seconds(self) -> float:
        if self.decrypted_records == 0:
            return 0.0
        return self.cumulative_latency_seconds / self.decrypted_records

    def record_admissions(self, count: int) -> None:
        if count < 0:
            raise ValueError("admission count cannot be negative")
        self.total_records += count

    def record_decryption(self, latency_seconds: float) -> None:
        if self.decrypted_records >= self.total_records:
            raise ValueError("cannot decrypt more records than were admitted")
        self.decrypted_records += 1
        self.cumulative_latency_seconds += max(latency_seconds, 0.0)

    def copy(self) -> "RegistryStatistics":
        return RegistryStatistics(
            total_records=self.total_records,
            decrypted_records=self.decrypted_records,
            cumulative_latency_seconds=self.cumulative_latency_seconds,
        )

    def as_tuple(self) -> tuple[int, int, float]:
        return (
            self.total_records,
            self.decrypted_records,
            self.average_latency_seconds,
        )

    def to_dict(self) -> dict:
        return {
            "total_records": self.total_records,
            "decrypted_records": self.decrypted_records,
            "average_latency_seconds": self.average_latency_seconds,
        }
