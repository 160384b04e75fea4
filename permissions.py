from functools import wraps

from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request
from flask_smorest import abort


# Roles that can sign themselves up
REGISTRABLE_ROLES = ("model", "photographer", "editor", "recruiter")
ALL_ROLES = REGISTRABLE_ROLES + ("admin",)
# Roles that own a profile with a gallery
PROFILE_ROLES = ("model", "photographer")
# Roles allowed to browse the catalogue
BROWSER_ROLES = ("recruiter", "admin")


def current_user_id():
    # JWT identity is stored as a string
    return int(get_jwt_identity())


def current_role():
    return get_jwt().get("role")


def role_required(*roles):
    def wrapper(fn):
        @wraps(fn)
        def decorator(*args, **kwargs):
            verify_jwt_in_request()
            if current_role() not in roles:
                abort(403, message = "You do not have permission to perform this action.")
            return fn(*args, **kwargs)

        return decorator

    return wrapper
