from sqlalchemy import Column, Integer, String
from app.core.db import Base


class NumberSequence(Base):
    """Counters behind pouch and job numbers. Values are never handed out twice."""

    __tablename__ = "number_sequences"

    name = Column(String(50), primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<NumberSequence {self.name}={self.last_value}>"
