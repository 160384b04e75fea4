import io

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db import db
from models import ProfileModel, GalleryImageModel, UserModel
from tests.conftest import BUCKET_URL, image_file, profile_form, video_file


IMAGES_URL = BUCKET_URL + "modelconnect/images/"
VIDEOS_URL = BUCKET_URL + "modelconnect/videos/"


def test_create_profile(client, make_user, create_profile, bucket, app):
    headers, user = make_user(role = "model")

    resp = create_profile(headers, gallery = 3)
    assert resp.status_code == 201

    profile = resp.json
    assert profile["name"] == "Ada Lens"
    assert profile["user_id"] == user["id"]
    assert profile["role"] == "model"
    assert profile["sample_video_url"] is None
    assert len(profile["gallery"]) == 4
    # Main image is the first gallery entry
    assert profile["image"] == profile["gallery"][0]["image_url"]
    assert all(image["image_url"].startswith(IMAGES_URL) for image in profile["gallery"])
    assert bucket.urls() == {image["image_url"] for image in profile["gallery"]}

    with app.app_context():
        assert db.session.get(UserModel, user["id"]).has_profile is True


def test_create_profile_with_sample_video(make_user, create_profile, bucket):
    headers, _ = make_user(role = "photographer")

    resp = create_profile(headers, gallery = 4, video = True)
    assert resp.status_code == 201
    assert resp.json["sample_video_url"].startswith(VIDEOS_URL)
    assert resp.json["role"] == "photographer"
    assert len(bucket.objects) == 6


def test_create_profile_too_few_images(make_user, create_profile, bucket):
    headers, _ = make_user()

    resp = create_profile(headers, gallery = 2)
    assert resp.status_code == 400
    assert "minimum of 4" in resp.json["message"]
    assert bucket.upload_attempts == 0


def test_create_profile_too_many_images(make_user, create_profile, bucket):
    headers, _ = make_user()

    resp = create_profile(headers, gallery = 8)
    assert resp.status_code == 400
    assert bucket.upload_attempts == 0


def test_create_profile_requires_main_image(client, make_user):
    headers, _ = make_user()
    data = profile_form()
    del data["mainImage"]

    resp = client.post("/api/models", data = data, headers = headers, content_type = "multipart/form-data")
    assert resp.status_code == 400
    assert "main profile image" in resp.json["message"]


def test_create_profile_main_image_must_be_image(make_user, create_profile):
    headers, _ = make_user()

    resp = create_profile(headers, mainImage = video_file())
    assert resp.status_code == 400


def test_create_profile_rejects_non_video_sample(make_user, create_profile):
    headers, _ = make_user()

    resp = create_profile(headers, sampleVideo = image_file("not-a-video.jpg"))
    assert resp.status_code == 400
    assert "valid video" in resp.json["message"]


def test_create_profile_rejects_bad_gallery_file(make_user, create_profile):
    headers, _ = make_user()
    gallery = [image_file(f"g{i}.jpg") for i in range(3)] + [image_file("notes.txt", "text/plain")]

    resp = create_profile(headers, galleryImages = gallery)
    assert resp.status_code == 400


def test_create_profile_requires_bio(make_user, create_profile):
    headers, _ = make_user()

    resp = create_profile(headers, bio = "")
    assert resp.status_code == 422


def test_create_profile_wrong_role(make_user, create_profile):
    headers, _ = make_user(role = "recruiter")

    resp = create_profile(headers)
    assert resp.status_code == 403


def test_create_profile_only_once(make_user, create_profile, bucket):
    headers, _ = make_user()
    assert create_profile(headers).status_code == 201

    resp = create_profile(headers)
    assert resp.status_code == 409
    assert len(bucket.objects) == 4


def test_failed_upload_removes_earlier_uploads(make_user, create_profile, bucket, app):
    headers, _ = make_user()
    bucket.fail_on_upload = 3

    resp = create_profile(headers, gallery = 3)
    assert resp.status_code == 500
    assert bucket.objects == {}
    assert len(bucket.deleted) == 2

    with app.app_context():
        assert ProfileModel.query.count() == 0


def test_failed_commit_rolls_back_and_removes_uploads(make_user, create_profile, bucket, app, monkeypatch):
    headers, user = make_user()

    def failing_commit(self):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(Session, "commit", failing_commit)

    resp = create_profile(headers, gallery = 3, video = True)
    assert resp.status_code == 500
    assert resp.json["message"] == "Failed to create profile."
    assert bucket.objects == {}
    assert len(bucket.deleted) == 5

    with app.app_context():
        assert ProfileModel.query.count() == 0
        assert GalleryImageModel.query.count() == 0
        assert db.session.get(UserModel, user["id"]).has_profile is False


def test_oversized_request_rejected(app, make_user, create_profile, bucket):
    headers, _ = make_user()
    app.config["MAX_CONTENT_LENGTH"] = 1000

    resp = create_profile(headers, mainImage = (io.BytesIO(b"x" * 5000), "main.jpg", "image/jpeg"))
    assert resp.status_code == 413
    assert resp.json["code"] == 413
    assert bucket.upload_attempts == 0


def test_get_my_profile(client, make_user, create_profile):
    headers, _ = make_user()
    created = create_profile(headers).json

    resp = client.get("/api/models/my-profile", headers = headers)
    assert resp.status_code == 200
    assert resp.json["id"] == created["id"]
    assert [image["id"] for image in resp.json["gallery"]] == sorted(image["id"] for image in created["gallery"])


def test_get_my_profile_not_found(client, make_user):
    headers, _ = make_user()

    resp = client.get("/api/models/my-profile", headers = headers)
    assert resp.status_code == 404


def test_update_profile_text(client, make_user, create_profile):
    headers, _ = make_user()
    create_profile(headers)

    resp = client.put("/api/models/my-profile", json = {"bio": "Now booking for autumn.", "instagram_id": None}, headers = headers)
    assert resp.status_code == 200
    assert resp.json["bio"] == "Now booking for autumn."
    assert resp.json["instagram_id"] is None
    # Untouched fields keep their value
    assert resp.json["name"] == "Ada Lens"


def test_update_profile_without_profile(client, make_user):
    headers, _ = make_user()

    resp = client.put("/api/models/my-profile", json = {"bio": "Hello"}, headers = headers)
    assert resp.status_code == 404


def test_delete_profile_removes_assets(client, make_user, create_profile, bucket, app):
    headers, user = make_user()
    create_profile(headers, video = True)
    assert len(bucket.objects) == 5

    resp = client.delete("/api/models/my-profile", headers = headers)
    assert resp.status_code == 200
    assert bucket.objects == {}

    with app.app_context():
        assert ProfileModel.query.count() == 0
        assert GalleryImageModel.query.count() == 0
        assert db.session.get(UserModel, user["id"]).has_profile is False


def test_public_profile(client, make_user, create_profile):
    model_headers, model_user = make_user(role = "model")
    create_profile(model_headers)
    recruiter_headers, _ = make_user(role = "recruiter")

    resp = client.get(f"/api/profile/{model_user['id']}", headers = recruiter_headers)
    assert resp.status_code == 200
    assert resp.json["user_id"] == model_user["id"]
    assert resp.json["role"] == "model"
    assert len(resp.json["gallery"]) == 4


def test_public_profile_not_found(client, make_user):
    headers, user = make_user()

    resp = client.get(f"/api/profile/{user['id']}", headers = headers)
    assert resp.status_code == 404


def test_catalogue_for_recruiters(client, make_user, create_profile):
    first_headers, _ = make_user(role = "model")
    create_profile(first_headers, name = "First")
    second_headers, _ = make_user(role = "photographer")
    create_profile(second_headers, name = "Second")
    recruiter_headers, _ = make_user(role = "recruiter")

    resp = client.get("/api/models", headers = recruiter_headers)
    assert resp.status_code == 200
    # Newest first
    assert [profile["name"] for profile in resp.json] == ["Second", "First"]
    assert [profile["role"] for profile in resp.json] == ["photographer", "model"]


def test_catalogue_forbidden_for_creatives(client, make_user):
    headers, _ = make_user(role = "model")

    resp = client.get("/api/models", headers = headers)
    assert resp.status_code == 403
