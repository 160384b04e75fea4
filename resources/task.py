'''
----------------------------
Cleanup revoked user tokens
NOT BY USER INTERACTION
----------------------------
'''

from flask import current_app, request
from flask.views import MethodView
from flask_smorest import Blueprint, abort

# Imports for OIDC token verification
from google.oauth2 import id_token
from google.auth.transport import requests
from google.auth.exceptions import GoogleAuthError

from clean_up import cleanup_revoked_tokens


blp = Blueprint("tasks", __name__, description = "Endpoints for scheduled tasks")


@blp.route("/tasks/cleanup-revoked-tokens")
class CleanupTask(MethodView):
    def post(self):
        # Only the Cloud Scheduler job, signed in with an OIDC token, may trigger this
        auth_header = request.headers.get("Authorization")
        if not auth_header or not auth_header.startswith("Bearer "):
            current_app.logger.warning("Cleanup task called without a bearer token")
            abort(401, message = "Missing or invalid Authorization header")

        token = auth_header.split(" ", 1)[1]

        try:
            id_token.verify_oauth2_token(
                token, requests.Request(), audience = current_app.config["CLOUD_RUN_SERVICE_URL"]
            )
        except (ValueError, GoogleAuthError) as e:
            current_app.logger.warning("Token verification failed: %s", e)
            abort(401, message = "Token verification failed")

        current_app.logger.info("Starting revoked token cleanup")
        deleted = cleanup_revoked_tokens()
        return {"message": "Cleanup of revoked tokens completed", "deleted": deleted}, 200
