from sqlalchemy import func
from roadmap.extensions import db

class Item(db.Model):
    __tablename__ = "items"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    # Nullable: widget submissions without an email are anonymous
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    user = db.relationship("User")
    votes = db.relationship("Vote", back_populates="item", lazy="dynamic", cascade="all, delete-orphan")

    def activities(self):
        from roadmap.models.activity import Activity
        return Activity.query.filter_by(subject_type=self.__tablename__, subject_id=self.id).order_by(Activity.id)

    def to_dict(self):
        return dict(
            id=self.id,
            title=self.title,
            content=self.content,
            user_id=self.user_id,
            total_votes=self.votes.count(),
            created_at=self.created_at.isoformat() if self.created_at else None,
            updated_at=self.updated_at.isoformat() if self.updated_at else None,
        )

    def __repr__(self) -> str:
        return f"<Item id={self.id} title={self.title!r}>"
