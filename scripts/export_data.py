import json
import os
import sys

# Add project root to sys.path
sys.path.append(os.getcwd())

from models import get_engine, get_session_factory
from services import CatalogService

def export_to_static():
    engine = get_engine()
    Session = get_session_factory(engine)
    session = Session()
    service = CatalogService(session)

    # Ensure output directory exists
    data_dir = os.path.join('static', 'data')
    os.makedirs(data_dir, exist_ok=True)

    # 1. Export Products (drivers sorted by OS)
    print("Exporting products...")
    products = [p.to_dict() for p in service.get_products()]
    with open(os.path.join(data_dir, 'products.json'), 'w', encoding='utf-8') as f:
        json.dump(products, f, ensure_ascii=False)

    # 2. Export Sidebar Tree
    print("Exporting sidebar tree...")
    with open(os.path.join(data_dir, 'tree.json'), 'w', encoding='utf-8') as f:
        json.dump(service.get_tree(), f, ensure_ascii=False)

    # 3. Export Status
    with open(os.path.join(data_dir, 'status.json'), 'w', encoding='utf-8') as f:
        json.dump(service.get_status(), f)

    session.close()
    print(f"Export complete. {len(products)} products saved to {data_dir}")

if __name__ == '__main__':
    export_to_static()
