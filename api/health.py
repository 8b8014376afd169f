from flask import Blueprint
from sqlalchemy import text

from api.responses import api_response
from models import storage

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    """
    Health check (also pings the database)
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up
    """
    storage.get_session().execute(text("SELECT 1"))
    return api_response({"status": "ok", "version": "1.0.0"}, "Healthy")
