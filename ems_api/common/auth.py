# ems_api/common/auth.py
from __future__ import annotations

from flask_jwt_extended import get_jwt, verify_jwt_in_request
from flask_jwt_extended.exceptions import NoAuthorizationError

from ems_api.common.errors import Unauthenticated


def current_company_id() -> int:
    """
    Resolve the tenant (company) of the current session from the JWT.

    Login puts the user's company in the `company_id` claim; every
    orchestration call receives it explicitly from here.
    """
    try:
        verify_jwt_in_request()
    except NoAuthorizationError:
        raise Unauthenticated("Authentication required")

    claims = get_jwt() or {}
    company_id = claims.get("company_id")
    if company_id is None:
        raise Unauthenticated("Session carries no company")
    try:
        return int(company_id)
    except (TypeError, ValueError):
        raise Unauthenticated("Session carries an invalid company")
