from datetime import datetime, timezone

from db import db

class UserModel(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key = True)
    name = db.Column(db.String(120), nullable = False)
    # Login identifier
    email = db.Column(db.String(255), unique = True, nullable = False, index = True)
    # pbkdf2_sha256 hash, never the plain password
    password = db.Column(db.String(256), nullable = False)
    # model, photographer, editor, recruiter or admin
    role = db.Column(db.String(20), nullable = False)
    has_profile = db.Column(db.Boolean, nullable = False, default = False)
    created_at = db.Column(
        db.DateTime(timezone = True),
        default = lambda: datetime.now(timezone.utc),
        nullable = False
    )

    # At most one creative profile per user
    profile = db.relationship("ProfileModel", back_populates = "user", uselist = False, cascade = "all, delete-orphan")
    # Videos uploaded by editors
    editor_uploads = db.relationship("EditorUploadModel", back_populates = "user", lazy = "dynamic", cascade = "all, delete-orphan")
