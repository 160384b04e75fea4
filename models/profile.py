from datetime import datetime, timezone

from db import db

class ProfileModel(db.Model):
    # Table keeps the name "models": the rows are talent profiles (models and photographers)
    __tablename__ = "models"

    id = db.Column(db.Integer, primary_key = True)
    # Unique so a user can never own two profiles
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), unique = True, nullable = False)
    name = db.Column(db.String(120), nullable = False)
    gender = db.Column(db.String(30), nullable = False)
    bio = db.Column(db.Text, nullable = False)
    portfolio = db.Column(db.String(1024))
    instagram_id = db.Column(db.String(255))
    # Main profile image, always one of the gallery URLs
    image = db.Column(db.String(1024), nullable = False)
    sample_video_url = db.Column(db.String(1024))
    created_at = db.Column(
        db.DateTime(timezone = True),
        default = lambda: datetime.now(timezone.utc),
        nullable = False
    )

    user = db.relationship("UserModel", back_populates = "profile")
    # Gallery rows, kept in upload order
    images = db.relationship(
        "GalleryImageModel",
        back_populates = "profile",
        order_by = "GalleryImageModel.id",
        cascade = "all, delete-orphan"
    )

    def asset_urls(self):
        # Every object-store URL this profile references, without duplicates
        urls = [image.image_url for image in self.images]
        if self.image and self.image not in urls:
            urls.append(self.image)
        if self.sample_video_url:
            urls.append(self.sample_video_url)
        return urls
