# db/models/user.py
import enum
from configs import db
from flask_login import UserMixin
from db.models.base import SerializerMixin, new_id, utcnow


class UserRole(enum.Enum):
    ADMIN = "ADMIN"
    STOCK = "STOCK"  # warehouse staff
    EMPLOYEE = "EMPLOYEE"  # signs own requisitions


class User(db.Model, UserMixin, SerializerMixin):
    __tablename__ = "user_account"
    __hidden__ = ("password_hash",)

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    email = db.Column(db.String(255), unique=True, index=True)
    first_name = db.Column(db.String(120))
    last_name = db.Column(db.String(120))
    profile_image_url = db.Column(db.String(500))
    password_hash = db.Column(db.String(255))
    role = db.Column(db.Enum(UserRole), default=UserRole.EMPLOYEE, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow)

    def get_id(self):
        return str(self.id)

    def has_role(self, *roles: UserRole):
        """True if the user holds one of the given roles."""
        return self.role in roles

    def summary(self) -> dict:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
        }
