#!/usr/bin/env python3
"""
Database build for the purchasing application
Creates the tables and optionally loads the sample inventory
"""

from pathlib import Path
import json

from app import db
from app.logger import get_logger

logger = get_logger("purchasing.build")

SAMPLE_DATA_FILE = Path(__file__).parent / 'data' / 'build_data_sample.json'


def create_tables():
    """Create every table registered on db.Model"""
    logger.info("Creating database tables...")
    db.create_all()
    logger.info("Database tables ready")


def insert_sample_data(sample_file=SAMPLE_DATA_FILE):
    """
    Insert the sample products from build_data_sample.json.

    Products whose SKU already exists are skipped, so running the build twice
    does not duplicate data.

    Returns:
        int: number of products inserted
    """
    from app.data.inventory.product import Product

    if not Path(sample_file).exists():
        logger.warning(f"Sample data file not found: {sample_file}")
        return 0

    with open(sample_file, 'r', encoding='utf-8') as f:
        sample_data = json.load(f)

    products = sample_data.get('Inventory', {}).get('Products', [])
    existing = {sku for (sku,) in db.session.query(Product.sku).all()}
    new_products = [product for product in products if product['sku'] not in existing]

    if not new_products:
        logger.info("Sample products already present, skipping insertion")
        return 0

    Product.bulk_create_from_dicts(new_products)
    logger.info(f"Inserted {len(new_products)} sample products")
    return len(new_products)


def build_database(enable_sample_data=True):
    """
    Build the database inside the current app context.

    Args:
        enable_sample_data: also load the sample inventory
    """
    create_tables()
    if enable_sample_data:
        insert_sample_data()
    else:
        logger.debug("Sample data disabled")
