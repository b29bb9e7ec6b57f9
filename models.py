from sqlalchemy import Column, String, Text, DateTime
from datetime import datetime

from database import Base


class KeyValueItem(Base):
    """
    A single record of the credential key-value store.

    Keys follow the colon separated namespace scheme used by the Twitter
    plugin (e.g. ``main:twitter:app:<appKey>:app_credentials``); values are
    stored as JSON text.
    """
    __tablename__ = "kv_items"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
