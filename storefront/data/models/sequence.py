from sqlalchemy import Column, Integer, String

from storefront.data.database import Base


class SequenceModel(Base):
    """Named counters incremented in place (order numbers)."""

    __tablename__ = "sequences"

    name = Column(String(50), primary_key=True)
    value = Column(Integer, nullable=False, default=0)
