from sqlalchemy import func, UniqueConstraint
from roadmap.extensions import db

class Vote(db.Model):
    __tablename__ = "votes"

    id = db.Column(db.Integer, primary_key=True)
    item_id = db.Column(db.Integer, db.ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    item = db.relationship("Item", back_populates="votes")
    user = db.relationship("User", back_populates="votes")

    __table_args__ = (
        # One vote per (item, user), also under concurrent submissions
        UniqueConstraint("item_id", "user_id", name="uq_votes_item_user"),
    )

    def to_dict(self):
        return dict(
            id=self.id,
            item_id=self.item_id,
            user_id=self.user_id,
            created_at=self.created_at.isoformat() if self.created_at else None,
        )

    def __repr__(self) -> str:
        return f"<Vote id={self.id} item_id={self.item_id} user_id={self.user_id}>"
