import enum

from sqlalchemy import (
    Column, String, Boolean, BigInteger, ForeignKey, Float, Integer, Numeric, Enum
)
from sqlalchemy.orm import relationship
from .base import BaseModel


class DestinationType(str, enum.Enum):
    HISTORICAL = "HISTORICAL"
    CULTURAL = "CULTURAL"
    RELIGIOUS = "RELIGIOUS"
    NATURE = "NATURE"
    BEACH = "BEACH"
    SHOPPING = "SHOPPING"
    RESTAURANT = "RESTAURANT"
    HOTEL = "HOTEL"
    ADVENTURE = "ADVENTURE"
    ENTERTAINMENT = "ENTERTAINMENT"
    EDUCATIONAL = "EDUCATIONAL"
    MUSEUM = "MUSEUM"

    @classmethod
    def _missing_(cls, value):
        # Accept "beach", "Beach", ...
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        return None


class Destination(BaseModel):
    __tablename__ = "destinations"
    
    name = Column(String(100), nullable=False, index=True)
    description = Column(String(1000))
    type = Column(Enum(DestinationType, name="destination_type"), nullable=False, index=True)
    price = Column(Numeric(10, 2))  # NULL means free or unspecified
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String(255))
    phone = Column(String(50))
    website = Column(String(255))
    opening_hours = Column(String(255))
    active = Column(Boolean, default=True, nullable=False)
    average_rating = Column(Float, default=0.0, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)
    version = Column(Integer, nullable=False, default=1)
    
    # Foreign keys
    city_id = Column(BigInteger, ForeignKey("cities.id"), nullable=False, index=True)
    
    # Relationships
    city = relationship("City", back_populates="destinations")
    images = relationship(
        "DestinationImage",
        back_populates="destination",
        cascade="all, delete-orphan",
        order_by=lambda: [DestinationImage.display_order, DestinationImage.id]
    )
    tags = relationship(
        "DestinationTag",
        back_populates="destination",
        cascade="all, delete-orphan",
        order_by="DestinationTag.id"
    )
    
    __mapper_args__ = {"version_id_col": version}
    
    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]
    

class DestinationImage(BaseModel):
    __tablename__ = "destination_images"
    
    image_url = Column(String(500), nullable=False)
    caption = Column(String(200))
    display_order = Column(Integer, default=0, nullable=False)
    
    # Foreign keys
    destination_id = Column(
        BigInteger, ForeignKey("destinations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    
    # Relationships
    destination = relationship("Destination", back_populates="images")


class DestinationTag(BaseModel):
    __tablename__ = "destination_tags"
    
    name = Column(String(50), nullable=False, index=True)
    
    # Foreign keys
    destination_id = Column(
        BigInteger, ForeignKey("destinations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    
    # Relationships
    destination = relationship("Destination", back_populates="tags")
