"""CLI script to load demo classes and students into the configured database.
Usage: python scripts/seed_data.py [--reset]
"""
import sys
import argparse
import pathlib
# Ensure the project root is on sys.path so `school_records` imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from school_records.database import engine, create_db_and_tables, drop_db_and_tables
from school_records.seed import seed_demo_data


def main(reset: bool = False):
    """Create tables (optionally from scratch) and insert the demo rows."""
    if reset:
        print('Dropping existing tables')
        drop_db_and_tables()
    create_db_and_tables()
    with Session(engine) as session:
        result = seed_demo_data(session)
    print(f"Created {result['classes']} classes and {result['students']} students")


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--reset', action='store_true', help='Drop and recreate all tables first')
    args = parser.parse_args()
    main(reset=args.reset)
