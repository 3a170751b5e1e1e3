import sys
import os
from sqlalchemy.orm import Session

# Add project root to sys.path
sys.path.append(os.getcwd())

from models import get_engine, Base
from services import CatalogService
from loaders import load_catalog
from loaders.log import setup_logging

def init_db():
    setup_logging()
    print("Initializing Database...")
    engine = get_engine()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)

    print("Loading catalog from sheets...")
    result = load_catalog()
    print(result.message)

    with Session(engine) as session:
        count = CatalogService(session).replace(result)

    print(f"Stored {count} products.")
    if result.is_sample:
        print("WARNING: sheets were unavailable, the database holds sample data.")

if __name__ == "__main__":
    init_db()
