"""
Interview session records and their on-disk store.
One JSON file per completed session.
"""
import os
import json
import uuid
import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

logger = logging.getLogger("session_store")


@dataclass
class SessionRecord:
    """Everything persisted about one finished interview."""
    session_id: str
    job_role: str
    experience_level: str
    interview_type: str
    conversation: List[Dict[str, str]] = field(default_factory=list)
    feedback: Dict[str, Any] = field(default_factory=dict)
    overall_score: int = 0
    communication_score: int = 0
    technical_score: int = 0
    question_count: int = 0
    completed_at: str = ""
    user_id: Optional[str] = None

    def summary(self) -> Dict[str, Any]:
        """Short description for history listings."""
        return {
            "session_id": self.session_id,
            "job_role": self.job_role,
            "interview_type": self.interview_type,
            "overall_score": self.overall_score,
            "question_count": self.question_count,
            "completed_at": self.completed_at,
        }


class SessionStore:
    """Saves finished interviews and reads back the history."""

    def __init__(self, sessions_dir: str = "./_sessions"):
        self.sessions_dir = sessions_dir
        os.makedirs(self.sessions_dir, exist_ok=True)

    def _get_record_path(self, session_id: str) -> str:
        return os.path.join(self.sessions_dir, f"{session_id}.json")

    def save(self,
             session_config,
             transcript,
             feedback_report,
             question_count: int,
             user_id: Optional[str] = None,
             session_id: Optional[str] = None) -> SessionRecord:
        """
        Persist a finished interview.

        Args:
            session_config: SessionConfig of the interview
            transcript: Sequence of Turn objects
            feedback_report: FeedbackReport computed at conclusion
            question_count: Number of questions the candidate was asked
            user_id: Owner of the record, if known
            session_id: Reuse an id (saving again overwrites the same record)

        Returns:
            The stored SessionRecord

        Raises:
            OSError: If the record cannot be written
        """
        feedback = feedback_report.to_dict()
        record = SessionRecord(
            session_id=session_id or uuid.uuid4().hex,
            job_role=session_config.job_role,
            experience_level=session_config.experience_level.value,
            interview_type=session_config.interview_type.value,
            conversation=[turn.to_dict() for turn in transcript],
            feedback=feedback,
            overall_score=feedback_report.overall_score,
            communication_score=feedback_report.communication_score,
            technical_score=feedback_report.technical_score,
            question_count=question_count,
            completed_at=datetime.now(timezone.utc).isoformat(),
            user_id=user_id,
        )

        path = self._get_record_path(record.session_id)
        tmp_path = path + ".tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(asdict(record), f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)

        logger.info(f"Saved interview session {record.session_id} to {path}")
        return record

    def get_session(self, session_id: str) -> Optional[SessionRecord]:
        """Load one record, or None if it does not exist or is unreadable."""
        path = self._get_record_path(session_id)
        if not os.path.exists(path):
            return None

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return SessionRecord(**data)
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Failed to load session {session_id}: {e}")
            return None

    def list_sessions(self, user_id: Optional[str] = None) -> List[SessionRecord]:
        """All stored sessions, newest first, optionally limited to one user."""
        records = []
        for filename in os.listdir(self.sessions_dir):
            if not filename.endswith('.json'):
                continue
            record = self.get_session(filename[:-5])
            if record is None:
                continue
            if user_id is not None and record.user_id != user_id:
                continue
            records.append(record)

        records.sort(key=lambda r: r.completed_at, reverse=True)
        return records

    def delete_session(self, session_id: str) -> bool:
        """Remove a stored session. Returns True if a record was deleted."""
        path = self._get_record_path(session_id)
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        logger.info(f"Deleted interview session {session_id}")
        return True
