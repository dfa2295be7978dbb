#!/usr/bin/env python3
"""
Seed the products collection with sample nutrition data.

Usage:
    python database/scripts/seed.py            # insert samples
    python database/scripts/seed.py --clear    # drop existing products first
"""

import argparse
import asyncio
import sys

from dotenv import load_dotenv

# Load environment variables before the settings object is created
load_dotenv()

from motor.motor_asyncio import AsyncIOMotorClient

from nutrition_service.core.config import config
from nutrition_service.db.indexes import create_indexes

SAMPLE_PRODUCTS = [
    {
        "name": "Greek Yogurt",
        "weight": 150.0,
        "calories": 146.0,
        "fat": 3.8,
        "proteins": 15.0,
        "carbohydrate": 11.6,
        "sugar": 11.6,
        "sodium": 0.07,
        "potassium": 0.21,
        "imageUrl": None,
    },
    {
        "name": "Whole Wheat Bread",
        "weight": 40.0,
        "calories": 98.0,
        "fat": 1.4,
        "proteins": 4.0,
        "carbohydrate": 17.0,
        "sugar": 2.4,
        "sodium": 0.17,
        "potassium": 0.1,
        "imageUrl": None,
    },
    {
        "name": "Orange Juice",
        "weight": 250.0,
        "calories": 112.0,
        "fat": 0.5,
        "proteins": 1.7,
        "carbohydrate": 25.8,
        "sugar": 20.8,
        "sodium": 0.002,
        "potassium": 0.5,
        "imageUrl": None,
    },
    {
        "name": "Salted Peanuts",
        "weight": 30.0,
        "calories": 176.0,
        "fat": 15.0,
        "proteins": 7.0,
        "carbohydrate": 4.8,
        "sugar": 1.3,
        "sodium": 0.12,
        "potassium": 0.19,
        "imageUrl": None,
    },
]


class ProductDatabaseSeeder:
    def __init__(self):
        self.client = None
        self.collection = None

    async def connect(self):
        """Establish MongoDB connection"""
        print(f"Connecting to MongoDB database '{config.mongodb_database}'...")
        self.client = AsyncIOMotorClient(config.mongodb_url)
        db = self.client[config.mongodb_database]
        await db.command("ping")
        self.collection = db[config.mongodb_collection]
        print("Successfully connected to MongoDB!")

    async def clear_data(self):
        result = await self.collection.delete_many({})
        print(f"Removed {result.deleted_count} existing products")

    async def seed_products(self):
        await create_indexes(self.collection)
        result = await self.collection.insert_many([dict(p) for p in SAMPLE_PRODUCTS])
        print(f"Created {len(result.inserted_ids)} sample products")

    async def close(self):
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            print("MongoDB connection closed")


async def main(clear: bool) -> int:
    seeder = ProductDatabaseSeeder()
    try:
        print("=" * 50)
        print("Nutrition Service Database Seeder")
        print("=" * 50)

        await seeder.connect()
        if clear:
            await seeder.clear_data()
        await seeder.seed_products()

        print("=" * 50)
        print("Product database setup completed!")
        print("=" * 50)
        return 0
    except Exception as error:
        print(f"Product database setup failed: {error}")
        return 1
    finally:
        await seeder.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed sample nutrition products")
    parser.add_argument("--clear", action="store_true", help="delete existing products first")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.clear)))
