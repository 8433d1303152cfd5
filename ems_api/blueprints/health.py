from flask import Blueprint

from ems_api.common.http import ok
from ems_api.extensions import db

bp = Blueprint("health", __name__, url_prefix="/api/v1")


@bp.get("/health")
def health():
    db.session.execute(db.text("SELECT 1"))
    return ok({"status": "ok"})
