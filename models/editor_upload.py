from datetime import datetime, timezone

from db import db

class EditorUploadModel(db.Model):
    __tablename__ = "editor_uploads"

    id = db.Column(db.Integer, primary_key = True)
    title = db.Column(db.String(200), nullable = False)
    description = db.Column(db.Text, nullable = False)
    # Public URL of the video in the storage bucket
    video_url = db.Column(db.String(1024), nullable = False)
    created_at = db.Column(
        db.DateTime(timezone = True),
        default = lambda: datetime.now(timezone.utc),
        nullable = False
    )

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable = False)
    user = db.relationship("UserModel", back_populates = "editor_uploads")
