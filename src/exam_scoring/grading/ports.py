"""
Module: grading.ports

Purpose:
    Abstract interfaces for the collaborators that consume a graded
    attempt: persistence, attempt accounting, certificate issuance and
    completion notification. The engine never knows how they store or
    deliver anything.

Key Classes:
    - ResultStore: Persists scores and summary
    - AttemptLedger: Attempts-used accounting
    - CertificateIssuer: Issues a certificate for a passed attempt
    - CompletionNotifier: Real-time completion notice

Used By:
    - grading.controller: publish_outcome()
    - output.store: JsonResultStore implements ResultStore
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from exam_scoring.core.models import AttemptSummary

if TYPE_CHECKING:
    from .controller import GradedAttempt


class ResultStore(ABC):
    """Persistence collaborator for graded attempts."""

    @abstractmethod
    def save(self, graded: GradedAttempt) -> None:
        """
        Store the scores and summary of an attempt.

        Re-grading the same attempt replaces the previous record as a whole.

        Args:
            graded: Fully scored and aggregated attempt
        """


class AttemptLedger(ABC):
    """Booking/attempts-used accounting."""

    @abstractmethod
    def record_attempt(self, attempt_id: str, is_passed: bool) -> None:
        """Record a finished attempt and its pass/fail outcome."""


class CertificateIssuer(ABC):
    """Certificate issuance, only ever called for passed attempts."""

    @abstractmethod
    def issue(self, attempt_id: str, summary: AttemptSummary) -> None:
        ...


class CompletionNotifier(ABC):
    """Completion notification dispatch."""

    @abstractmethod
    def notify(self, attempt_id: str, payload: dict) -> None:
        """
        Announce that an attempt has been graded.

        Args:
            attempt_id: Attempt graded
            payload: Summary fields only (see AttemptSummary.notification_payload)
        """
