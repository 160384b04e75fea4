'''
----------------------------
Gallery management on the logged-in user's profile
USER INTERACTION
----------------------------
'''

from flask import current_app, request
from flask.views import MethodView
from flask_smorest import Blueprint, abort
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import SQLAlchemyError

import cloud_storage
from db import db
from media import IMAGE, has_file, validate_files
from models import GalleryImageModel
from resources.profile import MAX_GALLERY_IMAGES, discard_uploads, get_own_profile
from schemas import GalleryUploadResultSchema, MainImageSchema, ProfileSchema

blp = Blueprint("gallery", __name__, description = "Operations on profile galleries")


@blp.route("/api/models/my-profile/gallery")
class GalleryUpload(MethodView):
    # Upload NEW gallery images
    @jwt_required()
    @blp.response(201, GalleryUploadResultSchema)
    def post(self):
        files = [f for f in request.files.getlist("galleryImages") if has_file(f)]
        if not files:
            abort(400, message = "No images were uploaded.")

        profile = get_own_profile(for_update = True)

        existing_count = len(profile.images)
        if existing_count + len(files) > MAX_GALLERY_IMAGES:
            remaining = max(MAX_GALLERY_IMAGES - existing_count, 0)
            abort(400, message = f"You can only upload {remaining} more images. Limit is {MAX_GALLERY_IMAGES}.")

        try:
            validate_files(files, IMAGE)
        except ValueError as e:
            abort(400, message = str(e))

        uploaded = []
        try:
            cloud_storage.upload_files(files, IMAGE, uploaded)
        except ConnectionError as e:
            discard_uploads(uploaded)
            abort(500, message = str(e))

        new_images = [GalleryImageModel(image_url = url, model_id = profile.id) for url in uploaded]
        try:
            db.session.add_all(new_images)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error("Database error while saving gallery for profile %s: %s", profile.id, e)
            discard_uploads(uploaded)
            abort(500, message = "Failed to upload images.")

        return {"message": f"{len(new_images)} images uploaded successfully.", "images": new_images}


# Set an existing gallery image as the main profile image
@blp.route("/api/models/my-profile/main-image")
class MainImage(MethodView):
    @jwt_required()
    @blp.arguments(MainImageSchema)
    @blp.response(200, ProfileSchema)
    def put(self, image_data):
        profile = get_own_profile()
        image_url = image_data["image_url"]

        if not any(image.image_url == image_url for image in profile.images):
            abort(403, message = "This image does not belong to your profile.")

        profile.image = image_url
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error("Failed to set main image for profile %s: %s", profile.id, e)
            abort(500, message = "Failed to set main image.")

        return profile


# Delete an image from the gallery
@blp.route("/api/models/my-profile/gallery/<int:image_id>")
class GalleryImage(MethodView):
    @jwt_required()
    def delete(self, image_id):
        profile = get_own_profile()

        image = GalleryImageModel.query.filter_by(id = image_id, model_id = profile.id).first()
        if image is None:
            abort(404, message = "Image not found or you do not have permission to delete it.")

        if image.image_url == profile.image:
            abort(400, message = "Cannot delete the main profile image. Please set a different one first.")

        url_to_delete = image.image_url
        try:
            db.session.delete(image)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error("Failed to delete gallery image %s: %s", image_id, e)
            abort(500, message = "Failed to delete image.")

        # Row is already gone, a storage failure only leaves an orphaned object
        if not cloud_storage.delete_file(url_to_delete):
            current_app.logger.warning("Gallery image %s deleted from DB, but GCS file deletion failed or was skipped", url_to_delete)

        return {"message": "Image deleted successfully."}
