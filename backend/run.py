#!/usr/bin/env python3
"""
Run script for the City Catalog backend.

Set SEED_SAMPLE_DATA=true to load the sample cities into an empty
database before the server starts.
"""

import logging
import os

import uvicorn

from catalog.core.config import settings

logger = logging.getLogger(__name__)


def main():
    if settings.seed_sample_data:
        from seed_data import create_sample_data

        logging.basicConfig(level=settings.log_level.upper())
        logger.info("Seeding sample data before startup")
        create_sample_data()

    uvicorn.run(
        "catalog.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 8000)),
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    main()
