'''
----------------------------
Editor video uploads (videos only)
USER INTERACTION
----------------------------
'''

from flask import current_app, request
from flask.views import MethodView
from flask_smorest import Blueprint, abort
from sqlalchemy.exc import SQLAlchemyError

import cloud_storage
from db import db
from media import VIDEO, has_file, validate_file
from models import EditorUploadModel
from permissions import BROWSER_ROLES, current_user_id, role_required
from schemas import EditorVideoSchema, PlainEditorUploadSchema

blp = Blueprint("editor", __name__, description = "Operations on editor videos")


@blp.route("/api/editor/upload")
class EditorVideoUpload(MethodView):
    @role_required("editor")
    @blp.arguments(PlainEditorUploadSchema, location = "form")
    @blp.response(201, PlainEditorUploadSchema)
    def post(self, upload_data):
        video = request.files.get("video")
        if not has_file(video):
            abort(400, message = "Video file, title, and description are required.")

        try:
            validate_file(video, VIDEO)
        except ValueError as e:
            abort(400, message = str(e))

        try:
            video_url = cloud_storage.upload_file(video, VIDEO)
        except ConnectionError as e:
            abort(500, message = str(e))

        upload = EditorUploadModel(
            user_id = current_user_id(),
            video_url = video_url,
            **upload_data
        )
        try:
            db.session.add(upload)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error("Database error while saving video %s: %s", video_url, e)
            cloud_storage.delete_file(video_url)
            abort(500, message = "Server error during video upload.")

        return upload


@blp.route("/api/editor/my-videos")
class MyVideos(MethodView):
    @role_required("editor")
    @blp.response(200, PlainEditorUploadSchema(many = True))
    def get(self):
        return (
            EditorUploadModel.query
            .filter_by(user_id = current_user_id())
            .order_by(EditorUploadModel.created_at.desc(), EditorUploadModel.id.desc())
            .all()
        )


@blp.route("/api/editor/videos/<int:video_id>")
class EditorVideo(MethodView):
    @role_required("editor")
    def delete(self, video_id):
        upload = EditorUploadModel.query.filter_by(id = video_id, user_id = current_user_id()).first()
        if upload is None:
            abort(404, message = "Video not found or you do not have permission to delete it.")

        video_url = upload.video_url
        try:
            db.session.delete(upload)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error("Failed to delete video %s: %s", video_id, e)
            abort(500, message = "Failed to delete video.")

        if not cloud_storage.delete_file(video_url):
            current_app.logger.warning("Video %s deleted from DB, but GCS file deletion failed or was skipped", video_url)

        return {"message": "Video deleted successfully."}


# Catalogue of all editor work, for recruiters
@blp.route("/api/editors/videos")
class EditorVideoCatalogue(MethodView):
    @role_required(*BROWSER_ROLES)
    @blp.response(200, EditorVideoSchema(many = True))
    def get(self):
        return EditorUploadModel.query.order_by(
            EditorUploadModel.created_at.desc(), EditorUploadModel.id.desc()
        ).all()
