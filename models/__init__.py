# By having it in __init__.py, we can use "from models import UserModel, ProfileModel"
from models.user import UserModel
from models.profile import ProfileModel
from models.gallery_image import GalleryImageModel
from models.editor_upload import EditorUploadModel
from models.tokens_blocklist import TokenBlocklist
