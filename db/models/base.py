# db/models/base.py
import enum
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

# upper bound of the Integer columns (signed 32-bit on PostgreSQL)
INT_MAX = 2_147_483_647


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp (what DateTime columns store)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.title() for p in rest)


def jsonable(value):
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


class SerializerMixin:
    # columns never exposed by to_dict()
    __hidden__: tuple = ()

    def to_dict(self) -> dict:
        return {
            camel(col.key): jsonable(getattr(self, col.key))
            for col in self.__table__.columns
            if col.key not in self.__hidden__
        }

    def column_values(self) -> dict:
        return {col.key: getattr(self, col.key) for col in self.__table__.columns}


def detached_copy(obj):
    """New transient instance with the same column values."""
    if obj is None:
        return None
    return type(obj)(**obj.column_values())
