"""
Availability Cache Model
Stores the last known TorBox cache status per infohash
"""
from datetime import datetime
from typing import List, Dict, Any
from sqlalchemy import String, Boolean, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from torbox_resolver.database import Base


class AvailabilityRecord(Base):
    """
    Cached answer of the TorBox ``checkcached`` endpoint for one infohash.
    ``cached`` is False when TorBox listed no files for the hash.
    """
    __tablename__ = "availability"
    
    infohash: Mapped[str] = mapped_column(String(40), primary_key=True)
    files: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    cached: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    def __repr__(self):
        return f"<AvailabilityRecord(hash={self.infohash[:8]}..., cached={self.cached})>"
