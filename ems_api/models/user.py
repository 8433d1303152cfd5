from datetime import datetime
from ems_api.extensions import db
from werkzeug.security import generate_password_hash, check_password_hash

class User(db.Model):
    __tablename__ = "users"

    id           = db.Column(db.Integer, primary_key=True)
    company_id   = db.Column(db.Integer, db.ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False, index=True)
    email        = db.Column(db.String(255), unique=True, index=True, nullable=False)
    password_hash= db.Column(db.String(255), nullable=False)
    full_name    = db.Column(db.String(255), nullable=False)
    status       = db.Column(db.String(20), default="active")
    created_at   = db.Column(db.DateTime, default=datetime.utcnow)

    company = db.relationship("Company", lazy="joined")

    # --- helpers ---
    def set_password(self, raw: str):
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw: str) -> bool:
        return check_password_hash(self.password_hash, raw)
