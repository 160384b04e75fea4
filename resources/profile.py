'''
----------------------------
Profile actions for models and photographers
USER INTERACTIONS
----------------------------
'''

from flask import current_app, request
from flask.views import MethodView
from flask_smorest import Blueprint, abort
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import SQLAlchemyError, IntegrityError

import cloud_storage
from db import db
from media import IMAGE, VIDEO, has_file, validate_file, validate_files
from models import UserModel, ProfileModel, GalleryImageModel
from permissions import BROWSER_ROLES, PROFILE_ROLES, current_user_id, role_required
from schemas import PlainProfileSchema, ProfileSchema, ProfileUpdateSchema

blp = Blueprint("profiles", __name__, description = "Operations on talent profiles")

# Gallery bounds, the main image counts as a gallery entry
MIN_GALLERY_IMAGES = 4
MAX_GALLERY_IMAGES = 8


def get_own_profile(for_update = False):
    query = ProfileModel.query.filter_by(user_id = current_user_id())
    if for_update:
        # Row lock held until commit, so concurrent gallery changes see each other's counts
        query = query.with_for_update()
    profile = query.first()
    if profile is None:
        abort(404, message = "Profile not found.")
    return profile


def discard_uploads(urls):
    # Called after a failed request so no orphaned objects stay in the bucket
    if urls:
        current_app.logger.info("Cleaning up %d uploaded file(s) after failure", len(urls))
        cloud_storage.delete_files(urls)


@blp.route("/api/models")
class ProfileList(MethodView):
    # Catalogue for recruiters, newest profiles first
    @role_required(*BROWSER_ROLES)
    @blp.response(200, ProfileSchema(many = True))
    def get(self):
        return ProfileModel.query.order_by(ProfileModel.created_at.desc(), ProfileModel.id.desc()).all()

    # Create the profile in one go: text fields, main image, gallery and optional sample video
    @role_required(*PROFILE_ROLES)
    @blp.arguments(PlainProfileSchema, location = "form")
    @blp.response(201, ProfileSchema)
    def post(self, profile_data):
        user_id = current_user_id()

        main_image = request.files.get("mainImage")
        gallery_images = [f for f in request.files.getlist("galleryImages") if has_file(f)]
        sample_video = request.files.get("sampleVideo")
        if not has_file(sample_video):
            sample_video = None

        # Validate every file before anything is uploaded
        if not has_file(main_image):
            abort(400, message = "A valid main profile image is required.")
        try:
            validate_file(main_image, IMAGE)
        except ValueError as e:
            abort(400, message = f"A valid main profile image is required. {e}")

        if sample_video is not None:
            try:
                validate_file(sample_video, VIDEO)
            except ValueError as e:
                abort(400, message = f"The sample work must be a valid video file. {e}")

        gallery_count = 1 + len(gallery_images)
        if gallery_count < MIN_GALLERY_IMAGES:
            abort(400, message = f"A minimum of {MIN_GALLERY_IMAGES} gallery images (including the main image) are required at signup.")
        if gallery_count > MAX_GALLERY_IMAGES:
            abort(400, message = f"A maximum of {MAX_GALLERY_IMAGES} gallery images (including the main image) is allowed.")
        try:
            validate_files(gallery_images, IMAGE)
        except ValueError as e:
            abort(400, message = str(e))

        user = db.session.get(UserModel, user_id)
        if user is None:
            abort(404, message = "User not found.")
        if user.profile is not None:
            abort(409, message = "A profile already exists for this user.")

        # Upload to GCS, keeping track of what landed so it can be removed again
        uploaded = []
        try:
            main_image_url = cloud_storage.upload_file(main_image, IMAGE)
            uploaded.append(main_image_url)
            cloud_storage.upload_files(gallery_images, IMAGE, uploaded)
            gallery_urls = uploaded[1:]
            sample_video_url = None
            if sample_video is not None:
                sample_video_url = cloud_storage.upload_file(sample_video, VIDEO)
                uploaded.append(sample_video_url)
        except ConnectionError as e:
            discard_uploads(uploaded)
            abort(500, message = str(e))

        profile = ProfileModel(
            user_id = user.id,
            image = main_image_url,
            sample_video_url = sample_video_url,
            **profile_data
        )
        # Main image is the first gallery entry
        profile.images = [
            GalleryImageModel(image_url = url) for url in [main_image_url] + gallery_urls
        ]
        user.has_profile = True

        # Profile, gallery and the user flag are committed together or not at all
        try:
            db.session.add(profile)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            discard_uploads(uploaded)
            abort(409, message = "A profile already exists for this user.")
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error("Database error while creating profile for user %s: %s", user_id, e)
            discard_uploads(uploaded)
            abort(500, message = "Failed to create profile.")

        return profile


@blp.route("/api/models/my-profile")
class MyProfile(MethodView):
    @jwt_required()
    @blp.response(200, ProfileSchema)
    def get(self):
        return get_own_profile()

    # Update profile TEXT details, media goes through the gallery endpoints
    @jwt_required()
    @blp.arguments(ProfileUpdateSchema)
    @blp.response(200, ProfileSchema)
    def put(self, profile_data):
        profile = get_own_profile()

        for key, value in profile_data.items():
            setattr(profile, key, value)

        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error("Failed to update profile %s: %s", profile.id, e)
            abort(500, message = "Failed to update profile details.")

        return profile

    @jwt_required()
    def delete(self):
        profile = get_own_profile()
        asset_urls = profile.asset_urls()

        try:
            profile.user.has_profile = False
            db.session.delete(profile)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error("Failed to delete profile %s: %s", profile.id, e)
            abort(500, message = "Failed to delete profile.")

        cloud_storage.delete_files(asset_urls)
        return {"message": "Profile deleted successfully."}


# Fetch a specific public profile by user_id
@blp.route("/api/profile/<int:user_id>")
class PublicProfile(MethodView):
    @jwt_required()
    @blp.response(200, ProfileSchema)
    def get(self, user_id):
        return ProfileModel.query.filter_by(user_id = user_id).first_or_404(
            description = "Profile not found."
        )
