from sqlalchemy import func
from roadmap.extensions import db

class Activity(db.Model):
    """Append-only audit entry: ``causer`` did ``event`` to the subject row."""

    __tablename__ = "activity_log"

    id = db.Column(db.Integer, primary_key=True)
    log_name = db.Column(db.String(64), nullable=False, default="default", index=True)
    description = db.Column(db.Text, nullable=False)
    event = db.Column(db.String(64), nullable=True)

    subject_type = db.Column(db.String(64), nullable=False)
    subject_id = db.Column(db.Integer, nullable=False)
    # NULL causer: anonymous or system action
    causer_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    properties = db.Column(db.JSON, nullable=False, default=dict)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())

    causer = db.relationship("User")

    __table_args__ = (
        db.Index("ix_activity_log_subject", "subject_type", "subject_id"),
    )

    def to_dict(self):
        return dict(
            id=self.id,
            log_name=self.log_name,
            description=self.description,
            event=self.event,
            subject_type=self.subject_type,
            subject_id=self.subject_id,
            causer_id=self.causer_id,
            properties=self.properties or {},
            created_at=self.created_at.isoformat() if self.created_at else None,
        )

    def __repr__(self) -> str:
        return f"<Activity id={self.id} {self.subject_type}:{self.subject_id} event={self.event!r}>"
