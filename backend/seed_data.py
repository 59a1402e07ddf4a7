#!/usr/bin/env python3
"""Seed script to populate the database with sample cities and destinations."""

import logging
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from catalog.core.database import Base, SessionLocal, engine
from catalog.models import City, Destination, DestinationImage, DestinationTag, DestinationType

logger = logging.getLogger(__name__)

CITIES = [
    {
        "name": "Marrakech",
        "arabic_name": "مراكش",
        "region": "Marrakech-Safi",
        "latitude": 31.6295,
        "longitude": -7.9811,
        "description": "The Red City, known for its medina, souks and gardens",
        "is_popular": True,
    },
    {
        "name": "Chefchaouen",
        "arabic_name": "شفشاون",
        "region": "Tanger-Tetouan-Al Hoceima",
        "latitude": 35.1681,
        "longitude": -5.2636,
        "description": "The blue pearl of the Rif mountains",
        "is_popular": True,
    },
    {
        "name": "Fes",
        "arabic_name": "فاس",
        "region": "Fes-Meknes",
        "latitude": 34.0181,
        "longitude": -5.0078,
        "description": "Home of the oldest continuously operating university",
        "is_popular": True,
    },
    {
        "name": "Essaouira",
        "arabic_name": "الصويرة",
        "region": "Marrakech-Safi",
        "latitude": 31.5085,
        "longitude": -9.7595,
        "description": "Windswept Atlantic port with a fortified medina",
        "is_popular": False,
    },
]

DESTINATIONS = [
    {
        "city": "Marrakech",
        "name": "Jemaa el-Fnaa",
        "type": DestinationType.CULTURAL,
        "latitude": 31.6258,
        "longitude": -7.9891,
        "price": None,
        "average_rating": 4.6,
        "review_count": 1250,
        "tags": ["square", "food", "nightlife"],
        "images": ["https://images.example.com/marrakech/jemaa-el-fnaa.jpg"],
    },
    {
        "city": "Marrakech",
        "name": "Jardin Majorelle",
        "type": DestinationType.NATURE,
        "latitude": 31.6417,
        "longitude": -8.0033,
        "price": Decimal("150.00"),
        "average_rating": 4.7,
        "review_count": 980,
        "tags": ["garden", "art"],
        "images": ["https://images.example.com/marrakech/majorelle.jpg"],
    },
    {
        "city": "Marrakech",
        "name": "Bahia Palace",
        "type": DestinationType.HISTORICAL,
        "latitude": 31.6216,
        "longitude": -7.9829,
        "price": Decimal("70.00"),
        "average_rating": 4.4,
        "review_count": 640,
        "tags": ["palace", "architecture"],
        "images": [],
    },
    {
        "city": "Chefchaouen",
        "name": "Blue Pearl Medina",
        "type": DestinationType.HISTORICAL,
        "latitude": 35.1681,
        "longitude": -5.2636,
        "price": None,
        "average_rating": 4.8,
        "review_count": 720,
        "tags": ["medina", "photography"],
        "images": ["https://images.example.com/chefchaouen/medina.jpg"],
    },
    {
        "city": "Chefchaouen",
        "name": "Akchour Waterfalls",
        "type": DestinationType.NATURE,
        "latitude": 35.2386,
        "longitude": -5.1697,
        "price": None,
        "average_rating": 4.5,
        "review_count": 310,
        "tags": ["hiking", "waterfall"],
        "images": [],
    },
    {
        "city": "Fes",
        "name": "Al Quaraouiyine",
        "type": DestinationType.RELIGIOUS,
        "latitude": 34.0646,
        "longitude": -4.9736,
        "price": None,
        "average_rating": 4.6,
        "review_count": 410,
        "tags": ["mosque", "university", "architecture"],
        "images": [],
    },
    {
        "city": "Fes",
        "name": "Chouara Tannery",
        "type": DestinationType.CULTURAL,
        "latitude": 34.0660,
        "longitude": -4.9707,
        "price": Decimal("20.00"),
        "average_rating": 4.2,
        "review_count": 530,
        "tags": ["crafts", "leather"],
        "images": [],
    },
    {
        "city": "Essaouira",
        "name": "Essaouira Beach",
        "type": DestinationType.BEACH,
        "latitude": 31.5050,
        "longitude": -9.7680,
        "price": None,
        "average_rating": 4.3,
        "review_count": 290,
        "tags": ["surf", "beach"],
        "images": [],
    },
]


def create_sample_data():
    """Create sample cities and their destinations."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    
    try:
        if db.query(City).count() > 0:
            logger.info("Database already contains cities, skipping sample data")
            return

        cities = {}
        for values in CITIES:
            city = City(**values)
            db.add(city)
            cities[city.name] = city
        db.flush()
        
        for values in DESTINATIONS:
            values = dict(values)
            city = cities[values.pop("city")]
            tags = values.pop("tags")
            images = values.pop("images")
            destination = Destination(city=city, **values)
            destination.tags = [DestinationTag(name=name) for name in tags]
            destination.images = [
                DestinationImage(image_url=url, display_order=order) for order, url in enumerate(images)
            ]
            db.add(destination)
        
        db.commit()
        logger.info("Sample data created successfully!")
        logger.info(f"Created {len(CITIES)} cities")
        logger.info(f"Created {len(DESTINATIONS)} destinations")
        
    except SQLAlchemyError as e:
        logger.error(f"Error creating sample data: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    create_sample_data()
