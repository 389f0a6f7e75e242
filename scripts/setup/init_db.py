"""
Initialize database: creates all tables and the first admin account.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--username admin] [--password secret]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from parking_registry.config import Settings
from parking_registry.database import Database
from parking_registry.services.auth_service import ensure_admin
from sqlalchemy import inspect, text


def main():
    settings = Settings()
    parser = argparse.ArgumentParser(description="Create tables and the admin account")
    parser.add_argument("--username", default=settings.ADMIN_USERNAME)
    parser.add_argument("--password", default=settings.ADMIN_PASSWORD)
    args = parser.parse_args()

    print("🗄️  Parking Registry DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    database = Database(settings.DATABASE_URL)
    try:
        with database.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running and DATABASE_URL is set in .env")
        sys.exit(1)

    print("\n📋 Creating tables...")
    database.create_tables()
    tables = sorted(inspect(database.engine).get_table_names())
    print(f"📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    db = database.session()
    try:
        if ensure_admin(db, args.username, args.password):
            print(f"\n👤 Admin '{args.username}' created")
        else:
            print(f"\n👤 Admin '{args.username}' already exists")
    finally:
        db.close()

    print("\n🎉 Database ready! You can now start the backend:")
    print("   uvicorn parking_registry.main:create_app --factory --host 0.0.0.0 --port 5000")


if __name__ == "__main__":
    main()
