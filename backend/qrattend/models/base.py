"""Base model class with common functionality."""
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict
from qrattend import db
from qrattend.utils.helpers import utcnow, isoformat_utc

def serialize_value(value: Any) -> Any:
    """JSON-safe form of a column value: UTC instants, enum values, ISO dates."""
    if isinstance(value, datetime):
        return isoformat_utc(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return value

class BaseModel(db.Model):
    """Integer id plus a UTC creation instant."""
    
    __abstract__ = True
    
    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    
    def save(self) -> 'BaseModel':
        db.session.add(self)
        db.session.commit()
        return self
    
    def to_dict(self, exclude: list = None) -> Dict[str, Any]:
        exclude = exclude or []
        return {
            column.name: serialize_value(getattr(self, column.name))
            for column in self.__table__.columns
            if column.name not in exclude
        }
    
    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.id}>'
