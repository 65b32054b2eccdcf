# backend/models/cart.py
from sqlalchemy import Column, String, Text, DateTime, func
from database import Base

# Durable key-value slot holding one serialized cart per cart session.
# The value is the JSON array written by CartStore, never parsed by SQL.
class CartSnapshot(Base):
    __tablename__ = "cart_snapshots"

    key = Column(String(64), primary_key=True) # Cart session id
    value = Column(Text, nullable=False) # Serialized line items
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
