from marshmallow import Schema, fields, validate, EXCLUDE

from permissions import ALL_ROLES, REGISTRABLE_ROLES

# --- Plain Schemas: Core attributes, for basic input / ID assignments ---

# User registration
class PlainUserSchema(Schema):
    id = fields.Int(dump_only = True)
    name = fields.Str(required = True, validate = validate.Length(min = 1, max = 120))
    email = fields.Email(required = True, validate = validate.Length(max = 255))
    # Password is load_only, so it's never dumped.
    password = fields.Str(required = True, load_only = True, validate = validate.Length(min = 6, max = 256))
    role = fields.Str(required = True, validate = validate.OneOf(REGISTRABLE_ROLES))

class UserLoginSchema(Schema):
    # Any string, a malformed address is just another wrong login
    email = fields.Str(required = True)
    password = fields.Str(required = True, load_only = True)

# Gallery rows attached to a profile
class PlainGalleryImageSchema(Schema):
    id = fields.Int(dump_only = True)
    image_url = fields.Str(dump_only = True)

# Profile text fields, sent as multipart form data alongside the media files
class PlainProfileSchema(Schema):
    class Meta:
        # Clients also post fields such as "role" that we take from the token instead
        unknown = EXCLUDE

    id = fields.Int(dump_only = True)
    user_id = fields.Int(dump_only = True)
    name = fields.Str(required = True, validate = validate.Length(min = 1, max = 120))
    gender = fields.Str(required = True, validate = validate.Length(min = 1, max = 30))
    bio = fields.Str(required = True, validate = validate.Length(min = 1, max = 5000))
    portfolio = fields.Str(allow_none = True, validate = validate.Length(max = 1024))
    instagram_id = fields.Str(allow_none = True, validate = validate.Length(max = 255))
    # Main image and sample video come in as files
    image = fields.Str(dump_only = True)
    sample_video_url = fields.Str(dump_only = True)
    created_at = fields.DateTime(dump_only = True)

class PlainEditorUploadSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Int(dump_only = True)
    title = fields.Str(required = True, validate = validate.Length(min = 1, max = 200))
    description = fields.Str(required = True, validate = validate.Length(min = 1, max = 5000))
    video_url = fields.Str(dump_only = True)
    created_at = fields.DateTime(dump_only = True)

# Full Schemas: Inherits from Plain, but adds class inter-relationships

class UserSchema(PlainUserSchema):
    role = fields.Str(dump_only = True)
    has_profile = fields.Bool(dump_only = True)
    created_at = fields.DateTime(dump_only = True)

class ProfileSchema(PlainProfileSchema):
    # Owner's role, so the catalogue can tell models from photographers
    role = fields.Str(attribute = "user.role", dump_only = True)
    gallery = fields.List(fields.Nested(PlainGalleryImageSchema()), attribute = "images", dump_only = True)

# Catalogue view of editor work, with who made it
class EditorVideoSchema(PlainEditorUploadSchema):
    user_id = fields.Int(dump_only = True)
    editor_name = fields.Str(attribute = "user.name", dump_only = True)

# --- Schemas for Specific Operations (like updates or specialized inputs) ---

# Admin edits of an account
class UserUpdateSchema(Schema):
    class Meta:
        # The admin dashboard posts back the whole user row
        unknown = EXCLUDE

    name = fields.Str(validate = validate.Length(min = 1, max = 120))
    email = fields.Email(validate = validate.Length(max = 255))
    role = fields.Str(validate = validate.OneOf(ALL_ROLES))

# Partial update of the profile text
class ProfileUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(validate = validate.Length(min = 1, max = 120))
    gender = fields.Str(validate = validate.Length(min = 1, max = 30))
    bio = fields.Str(validate = validate.Length(min = 1, max = 5000))
    portfolio = fields.Str(allow_none = True, validate = validate.Length(max = 1024))
    instagram_id = fields.Str(allow_none = True, validate = validate.Length(max = 255))

# Pick one of the gallery images as the main profile image
class MainImageSchema(Schema):
    image_url = fields.Str(required = True, data_key = "imageUrl", validate = validate.Length(min = 1))

class GalleryUploadResultSchema(Schema):
    message = fields.Str()
    images = fields.List(fields.Nested(PlainGalleryImageSchema()))
