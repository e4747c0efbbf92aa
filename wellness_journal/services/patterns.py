"""
Detected patterns: observations surfaced to the user until dismissed.
"""
from datetime import date
from typing import List, Sequence, Union
import logging

from sqlalchemy.orm import Session

from wellness_journal.core.database import commit_or_raise
from wellness_journal.core.exceptions import NotFoundError, ValidationError
from wellness_journal.models import Pattern, utcnow
from wellness_journal.schemas import PatternResponse, PatternType

logger = logging.getLogger(__name__)


def _to_response(pattern: Pattern) -> PatternResponse:
    return PatternResponse(
        id=pattern.id,
        detected_at=pattern.detected_at,
        type=pattern.pattern_type,
        description=pattern.description,
        data_points=pattern.data_points or [],
        confidence=pattern.confidence,
        dismissed=pattern.dismissed,
    )


def save_pattern(
    db: Session,
    pattern_type: Union[PatternType, str],
    description: str,
    data_points: Sequence[date],
    confidence: float
) -> PatternResponse:
    if not 0 <= confidence <= 1:
        raise ValidationError("confidence must be between 0 and 1", field="confidence")

    pattern = Pattern(
        detected_at=utcnow(),
        pattern_type=PatternType(pattern_type).value,
        description=description,
        data_points=[d.isoformat() for d in data_points],
        confidence=confidence,
        dismissed=False,
    )
    db.add(pattern)
    commit_or_raise(db)

    logger.info(f"Saved {pattern.pattern_type} pattern {pattern.id}")
    return _to_response(pattern)


def get_recent_patterns(db: Session, limit: int = 5) -> List[PatternResponse]:
    """Undismissed patterns, newest first."""
    patterns = db.query(Pattern).filter(
        Pattern.dismissed.is_(False)
    ).order_by(Pattern.detected_at.desc(), Pattern.id.desc()).limit(limit).all()
    return [_to_response(p) for p in patterns]


def dismiss_pattern(db: Session, pattern_id: int) -> PatternResponse:
    pattern = db.get(Pattern, pattern_id)
    if pattern is None:
        raise NotFoundError("Pattern", str(pattern_id))

    pattern.dismissed = True
    commit_or_raise(db)
    return _to_response(pattern)
