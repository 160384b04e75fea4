from db import db

class GalleryImageModel(db.Model):
    __tablename__ = "model_images"

    id = db.Column(db.Integer, primary_key = True)
    # Public URL of the image in the storage bucket
    image_url = db.Column(db.String(1024), nullable = False)

    # Foreign Key to link to the profile
    model_id = db.Column(db.Integer, db.ForeignKey("models.id"), nullable = False)
    profile = db.relationship("ProfileModel", back_populates = "images")
