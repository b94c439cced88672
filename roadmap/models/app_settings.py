from sqlalchemy import func, text
from roadmap.extensions import db

class AppSettings(db.Model):
    __tablename__ = "app_settings"

    id = db.Column(db.Integer, primary_key=True)
    # One row per settings group ("general", "widget")
    group = db.Column(db.String(64), nullable=False, unique=True)
    settings = db.Column(db.JSON, nullable=False, default=dict)
    settings_version = db.Column(db.Integer, nullable=False, default=1, server_default=text("1"))
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def to_dict(self):
        return dict(
            id=self.id,
            group=self.group,
            settings=self.settings or {},
            settings_version=self.settings_version,
            created_at=self.created_at.isoformat() if self.created_at else None,
            updated_at=self.updated_at.isoformat() if self.updated_at else None,
        )
