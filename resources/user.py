'''
----------------------------
User/account actions
USER INTERACTIONS
----------------------------
'''

from flask import current_app
from flask.views import MethodView
# Blueprint divides APIs into smaller segments
from flask_smorest import Blueprint, abort
# Hashes the password that the user enters
# and saves the scrambled password into the database
from passlib.hash import pbkdf2_sha256
from flask_jwt_extended import create_access_token, jwt_required, get_jwt
from sqlalchemy.exc import SQLAlchemyError, IntegrityError

import cloud_storage
from db import db
from models import UserModel, TokenBlocklist
from permissions import PROFILE_ROLES, current_user_id, current_role, role_required
from schemas import PlainUserSchema, UserLoginSchema, UserSchema, UserUpdateSchema

blp = Blueprint("users", __name__, description = "Operations on users")


def _is_self_or_admin(user_id):
    return current_user_id() == user_id or current_role() == "admin"


# Every stored object that belongs to this user's rows
def _user_asset_urls(user):
    urls = []
    if user.profile:
        urls.extend(user.profile.asset_urls())
    urls.extend(upload.video_url for upload in user.editor_uploads)
    return urls


@blp.route("/api/auth/register")
class UserRegister(MethodView):
    @blp.arguments(PlainUserSchema)
    def post(self, user_data):
        if UserModel.query.filter(UserModel.email == user_data["email"]).first():
            abort(409, message = "User with this email already exists.")

        user = UserModel(
            name = user_data["name"],
            email = user_data["email"],
            password = pbkdf2_sha256.hash(user_data["password"]),
            role = user_data["role"]
        )
        try:
            db.session.add(user)
            db.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            db.session.rollback()
            abort(409, message = "User with this email already exists.")
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error("Registration failed: %s", e)
            abort(500, message = "Server error during registration.")

        return {"message": "User registered successfully"}, 201


@blp.route("/api/auth/login")
class UserLogin(MethodView):
    @blp.arguments(UserLoginSchema)
    def post(self, user_data):
        user = UserModel.query.filter(
            UserModel.email == user_data["email"]
        ).first()

        # user must not be null, and verify must return True
        if user and pbkdf2_sha256.verify(user_data["password"], user.password):
            # Role travels in the token so role checks need no lookup
            token = create_access_token(identity = str(user.id), additional_claims = {"role": user.role})
            return {
                "message": "Login successful",
                "token": token,
                "user": UserSchema(only = ("id", "name", "email", "role", "has_profile")).dump(user)
            }

        abort(401, message = "Invalid credentials.")


@blp.route("/api/auth/logout")
class UserLogout(MethodView):
    @jwt_required()
    def post(self):
        jti = get_jwt()["jti"]
        if not TokenBlocklist.query.filter_by(jti = jti).first():
            db.session.add(TokenBlocklist(jti = jti))
            db.session.commit()
        return {"message": "Logged out successfully"}


@blp.route("/api/users")
class UserList(MethodView):
    @role_required("admin")
    @blp.response(200, UserSchema(many = True))
    def get(self):
        return UserModel.query.order_by(UserModel.created_at.desc(), UserModel.id.desc()).all()


@blp.route("/api/users/<int:user_id>")
class User(MethodView):
    @jwt_required()
    @blp.response(200, UserSchema)
    def get(self, user_id):
        if not _is_self_or_admin(user_id):
            abort(403, message = "You are not authorized to view this user")
        return db.get_or_404(UserModel, user_id, description = "User not found.")

    # Admins edit name, email and role
    @role_required("admin")
    @blp.arguments(UserUpdateSchema)
    @blp.response(200, UserSchema)
    def put(self, user_data, user_id):
        user = db.get_or_404(UserModel, user_id, description = "User not found.")

        if "email" in user_data and user_data["email"] != user.email:
            if UserModel.query.filter(UserModel.email == user_data["email"]).first():
                abort(409, message = "User with this email already exists.")

        # Profiles belong to models and photographers only
        if user.profile is not None and user_data.get("role", user.role) not in PROFILE_ROLES:
            abort(409, message = "Delete this user's profile before changing them to a role without profiles.")

        for key, value in user_data.items():
            setattr(user, key, value)

        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            abort(409, message = "User with this email already exists.")
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error("Failed to update user %s: %s", user_id, e)
            abort(500, message = "Failed to update user.")

        return user

    # Delete user, along with profile, gallery, editor uploads and their stored files
    @jwt_required()
    def delete(self, user_id):
        if not _is_self_or_admin(user_id):
            abort(403, message = "You are not authorized to delete this user")
        user = db.get_or_404(UserModel, user_id, description = "User not found.")

        asset_urls = _user_asset_urls(user)

        try:
            db.session.delete(user)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error("Failed to delete user %s: %s", user_id, e)
            abort(500, message = "Failed to delete user.")

        # Rows are gone, storage cleanup is best effort
        cloud_storage.delete_files(asset_urls)
        return {"message": "User deleted"}
