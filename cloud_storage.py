'''
----------------------------
Google Cloud Storage helpers for uploaded media
NOT BY USER INTERACTION
----------------------------
'''

import uuid

from flask import current_app
from werkzeug.utils import secure_filename
from google.api_core.exceptions import NotFound
from google.cloud import storage


PUBLIC_URL_ROOT = "https://storage.googleapis.com"


def _bucket_name():
    bucket_name = current_app.config.get("GCS_BUCKET_NAME")
    if not bucket_name:
        raise ConnectionError("GCS bucket name is not configured")
    return bucket_name


def _url_prefix(bucket_name):
    return f"{PUBLIC_URL_ROOT}/{bucket_name}/"


def blob_name_from_url(url):
    # Returns None for URLs that do not point into our bucket
    prefix = _url_prefix(current_app.config.get("GCS_BUCKET_NAME") or "")
    if not url or not url.startswith(prefix) or url == prefix:
        return None
    return url[len(prefix):]


# Uploads a werkzeug FileStorage to the bucket and returns its public URL
def upload_file(file_to_upload, kind):
    bucket_name = _bucket_name()

    safe_filename = secure_filename(file_to_upload.filename or "") or kind.name
    # Unique blob name to avoid overwrites
    blob_name = f"{kind.folder}/{uuid.uuid4().hex}_{safe_filename}"

    try:
        storage_client = storage.Client()
        bucket = storage_client.bucket(bucket_name)
        blob = bucket.blob(blob_name)

        file_to_upload.stream.seek(0)
        blob.upload_from_file(
            file_to_upload.stream,
            content_type = file_to_upload.mimetype or "application/octet-stream"
        )
    except Exception as e:
        current_app.logger.error("GCS upload error for %s: %s", blob_name, e)
        raise ConnectionError(f"Failed to upload {kind.name} to cloud storage: {str(e)}")

    return _url_prefix(bucket_name) + blob_name


def upload_files(files, kind, uploaded):
    # Appends each URL to `uploaded` as soon as it exists so callers can clean up a partial batch
    for file in files:
        uploaded.append(upload_file(file, kind))
    return uploaded


def delete_file(url):
    # Deletes a file from GCS given its public URL. Returns False when nothing could be deleted
    blob_name = blob_name_from_url(url)
    if blob_name is None:
        current_app.logger.warning("Invalid GCS URL or bucket name for deletion: %s", url)
        return False

    try:
        storage_client = storage.Client()
        bucket = storage_client.bucket(current_app.config["GCS_BUCKET_NAME"])
        bucket.blob(blob_name).delete()
    except NotFound:
        current_app.logger.info("Blob %s was already gone from GCS", blob_name)
        return True
    except Exception as e:
        current_app.logger.error("GCS delete error for blob %s: %s", blob_name, e)
        return False

    current_app.logger.info("Deleted %s from GCS", blob_name)
    return True


def delete_files(urls):
    # Best effort, returns the URLs that could not be deleted
    failed = [url for url in urls if not delete_file(url)]
    if failed:
        current_app.logger.warning("Orphaned objects left in GCS: %s", failed)
    return failed
