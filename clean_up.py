from datetime import datetime, timezone, timedelta

from flask import current_app

from db import db
from models import TokenBlocklist

# Delete any revoked-token entries older than the token lifetime
def cleanup_revoked_tokens():
    # Tokens older than their lifetime are rejected as expired anyway
    expires_delta = current_app.config.get("JWT_ACCESS_TOKEN_EXPIRES", timedelta(hours = 2))
    cutoff = datetime.now(timezone.utc) - expires_delta

    # Delete multiple tokens at once
    deleted = TokenBlocklist.query.filter(TokenBlocklist.created_at < cutoff).delete()
    db.session.commit()
    current_app.logger.info("Removed %d expired entries from the token blocklist", deleted)
    return deleted
