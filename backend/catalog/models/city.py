from sqlalchemy import Column, String, Boolean, Float, Integer
from sqlalchemy.orm import relationship
from .base import BaseModel


class City(BaseModel):
    __tablename__ = "cities"
    
    name = Column(String(100), nullable=False, index=True)
    arabic_name = Column(String(100))
    region = Column(String(100), nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    description = Column(String(1000))
    image_url = Column(String(500))
    is_popular = Column(Boolean, default=False, nullable=False)
    version = Column(Integer, nullable=False, default=1)
    
    # Relationships
    destinations = relationship(
        "Destination",
        back_populates="city",
        cascade="all, delete-orphan",
        order_by="Destination.id"
    )
    
    __mapper_args__ = {"version_id_col": version}
    
    @property
    def destination_count(self) -> int:
        """Computed from the current relation set, never stored."""
        return len(self.destinations)
