from __future__ import annotations

from models import SubmissionRecord


class SubmissionGate:
    """
    Client-side guard against saving a zero or non-improving score.
    The recording service stays the real authority on duplicates.
    """
    def __init__(self):
        self.record = SubmissionRecord()
        self.in_flight = False

    @property
    def last_submitted_score(self) -> int:
        return self.record.last_submitted_score

    def can_submit(self, current_score: int) -> bool:
        return current_score > 0 and current_score > self.record.last_submitted_score

    def record_submission(self, score: int) -> None:
        # Call only after the submission service confirmed success
        self.record.last_submitted_score = score

    def reset(self) -> None:
        # in_flight survives: an outstanding request still counts until it returns
        self.record = SubmissionRecord()
