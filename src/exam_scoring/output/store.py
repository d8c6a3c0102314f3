"""
Module: output.store

Purpose:
    File-backed ResultStore. Graded attempts live in one results.json
    keyed by attempt id; every save also appends an audit line to
    grading_log.jsonl. Writes hold an exclusive portalocker lock so
    concurrent graders (bulk re-grading) never interleave, and a
    re-graded attempt replaces its previous record as a whole.

Key Classes:
    - JsonResultStore: ResultStore implementation on the local disk
    - StoreError: Store could not be read or written

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - __main__: grade command
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Generator, List

import portalocker

from exam_scoring.grading.controller import GradedAttempt
from exam_scoring.grading.ports import ResultStore

logger = logging.getLogger(__name__)

RESULTS_FILENAME = "results.json"
LOG_FILENAME = "grading_log.jsonl"


class StoreError(Exception):
    """Result store could not be read or written."""


@contextmanager
def _locked(path: Path, mode: str, lock_type: int = portalocker.LOCK_EX) -> Generator:
    """Open a file with a lock held for the duration of the block."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if "r" in mode and not path.exists():
        path.write_text("{}", encoding="utf-8")

    with open(path, mode, encoding="utf-8") as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def _parse(content: str, path: Path) -> Dict[str, Any]:
    if not content.strip():
        return {}
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise StoreError(f"Corrupt result store {path}: {e}") from e
    if not isinstance(data, dict):
        raise StoreError(f"Corrupt result store {path}: expected an object")
    return data


class JsonResultStore(ResultStore):
    """
    ResultStore writing JSON files under a directory.

    Usage:
        store = JsonResultStore(Path("results"))
        store.save(graded)
        again = store.load(graded.attempt_id)

    Attributes:
        root: Directory holding results.json and grading_log.jsonl
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    @property
    def results_path(self) -> Path:
        return self.root / RESULTS_FILENAME

    @property
    def log_path(self) -> Path:
        return self.root / LOG_FILENAME

    def save(self, graded: GradedAttempt) -> None:
        """
        Store a graded attempt, replacing any earlier grading of it.

        Raises:
            StoreError: If the store cannot be read or written
        """
        record = graded.to_dict()
        try:
            with _locked(self.results_path, "r+") as f:
                results = _parse(f.read(), self.results_path)
                replaced = graded.attempt_id in results
                results[graded.attempt_id] = record
                f.seek(0)
                f.truncate()
                json.dump(results, f, indent=2, ensure_ascii=False)

            summary = graded.summary
            with _locked(self.log_path, "a") as f:
                f.write(json.dumps({
                    "attempt_id": graded.attempt_id,
                    "exam_id": graded.exam_id,
                    "obtained_marks": summary.obtained_marks,
                    "total_marks": summary.total_marks,
                    "is_passed": summary.is_passed,
                    "grade": summary.grade,
                    "regraded": replaced,
                    "saved_at": datetime.now(timezone.utc).isoformat(),
                }, ensure_ascii=False) + "\n")
        except OSError as e:
            raise StoreError(f"Failed to save attempt {graded.attempt_id}: {e}") from e

        action = "Replaced" if replaced else "Saved"
        logger.info(f"{action} attempt {graded.attempt_id} in {self.results_path}")

    def _read_all(self) -> Dict[str, Any]:
        if not self.results_path.exists():
            return {}
        try:
            with _locked(self.results_path, "r", portalocker.LOCK_SH) as f:
                return _parse(f.read(), self.results_path)
        except OSError as e:
            raise StoreError(f"Failed to read {self.results_path}: {e}") from e

    def load(self, attempt_id: str) -> GradedAttempt:
        """
        Load a stored attempt.

        Raises:
            StoreError: If the attempt is not stored
        """
        results = self._read_all()
        if attempt_id not in results:
            raise StoreError(f"No stored result for attempt {attempt_id}")
        return GradedAttempt.from_dict(results[attempt_id])

    def attempt_ids(self) -> List[str]:
        return sorted(self._read_all())

    def audit_log(self) -> List[Dict[str, Any]]:
        """All audit lines, oldest first."""
        if not self.log_path.exists():
            return []
        with _locked(self.log_path, "r", portalocker.LOCK_SH) as f:
            return [json.loads(line) for line in f if line.strip()]
