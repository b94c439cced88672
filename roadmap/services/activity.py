from roadmap.extensions import db
from roadmap.models.activity import Activity


def log_activity(subject, event: str, causer=None, description: str | None = None,
                 properties: dict | None = None, log_name: str = "default") -> Activity:
    """
    Append an audit entry for ``subject`` (any model with ``id`` and ``__tablename__``).
    Added to the current session only; the caller owns the commit.
    """
    entry = Activity(
        log_name=log_name,
        description=description or event,
        event=event,
        subject_type=subject.__tablename__,
        subject_id=subject.id,
        causer_id=getattr(causer, "id", None),
        properties=properties or {},
    )
    db.session.add(entry)
    return entry
