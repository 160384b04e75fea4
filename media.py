'''
----------------------------
Upload rules for images and videos
NOT BY USER INTERACTION
----------------------------
'''

import os


class MediaKind:
    def __init__(self, name, extensions, mime_prefix, max_bytes, folder):
        self.name = name
        self.extensions = extensions
        self.mime_prefix = mime_prefix
        self.max_bytes = max_bytes
        # Bucket folder the blobs are written to
        self.folder = folder


IMAGE = MediaKind(
    name = "image",
    extensions = {"jpg", "jpeg", "png", "gif", "webp"},
    mime_prefix = "image/",
    max_bytes = 10 * 1024 * 1024,
    folder = "modelconnect/images"
)

VIDEO = MediaKind(
    name = "video",
    extensions = {"mp4", "mov", "avi", "mkv", "webm"},
    mime_prefix = "video/",
    max_bytes = 100 * 1024 * 1024,
    folder = "modelconnect/videos"
)


def file_extension(filename):
    if not filename or "." not in filename:
        return ""
    # Split from the right, only dividing into 2 parts
    return filename.rsplit(".", 1)[1].lower()


def file_size(file):
    stream = file.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def has_file(file):
    return file is not None and file.filename not in (None, "")


def validate_file(file, kind):
    # Raises ValueError with a client-facing message when the upload breaks the rules for its kind
    if not has_file(file):
        raise ValueError(f"No {kind.name} file selected")

    if file_extension(file.filename) not in kind.extensions:
        raise ValueError(
            f"File type not allowed for {file.filename}. Please upload one of: {', '.join(sorted(kind.extensions))}"
        )

    if not (file.mimetype or "").startswith(kind.mime_prefix):
        raise ValueError(f"{file.filename} is not a valid {kind.name} file")

    if file_size(file) > kind.max_bytes:
        raise ValueError(f"{file.filename} exceeds the {kind.max_bytes // (1024 * 1024)}MB limit for {kind.name}s")


def validate_files(files, kind):
    for file in files:
        validate_file(file, kind)
