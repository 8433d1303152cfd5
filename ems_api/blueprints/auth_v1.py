from datetime import timedelta

from flask import Blueprint, request
from flask_jwt_extended import create_access_token, jwt_required, get_jwt_identity

from ems_api.common.http import ok, fail
from ems_api.extensions import db
from ems_api.models.user import User

bp = Blueprint("auth_v1", __name__, url_prefix="/api/v1/auth")

def _user_payload(u: User):
    return {"id": u.id, "email": u.email, "full_name": u.full_name, "company_id": u.company_id}

@bp.post("/login")
def login():
    data = request.get_json(silent=True, force=True)
    if not isinstance(data, dict):
        data = {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    u = User.query.filter_by(email=email).first()
    if not u or not u.check_password(password) or u.status != "active":
        return fail("Invalid credentials", status=401)

    # company_id is the tenant every payroll call is scoped to
    add_claims = {"company_id": u.company_id, "email": u.email, "name": u.full_name}
    access = create_access_token(identity=str(u.id), additional_claims=add_claims, expires_delta=timedelta(days=1))
    return ok({"access": access, "user": _user_payload(u)})

@bp.get("/me")
@jwt_required()
def me():
    uid = get_jwt_identity()
    u = db.session.get(User, int(uid)) if uid else None
    if not u:
        return fail("User not found", status=404)
    return ok(_user_payload(u))
