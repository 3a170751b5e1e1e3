from flask import Flask, render_template, request, jsonify, redirect, url_for, g
from models import Base, get_engine, get_session_factory
from services import CatalogService
from loaders import load_catalog
from loaders.data_transformer import brand_color, short_os_label
from loaders.log import setup_logging

setup_logging()

app = Flask(__name__)
app.jinja_env.filters['brand_color'] = brand_color
app.jinja_env.filters['short_os'] = short_os_label

# Initialize DB connection factory
engine = get_engine()
Base.metadata.create_all(engine)
SessionLocal = get_session_factory(engine)

# Request Context Config
@app.before_request
def get_db():
    if 'db' not in g:
        g.db = SessionLocal()

@app.teardown_request
def close_db(e=None):
    db = g.pop('db', None)
    if db is not None:
        db.close()

def get_service():
    service = CatalogService(g.db)
    # First request against an empty store loads the catalog
    if not service.has_snapshot():
        service.replace(load_catalog())
    return service

@app.route('/')
def index():
    service = get_service()
    query = request.args.get('q', '').strip()
    products = service.search(query)
    return render_template(
        'index.html',
        products=products,
        tree=service.get_tree(),
        status=service.get_status(),
        query=query,
    )

@app.route('/refresh', methods=['POST'])
def refresh():
    service = CatalogService(g.db)
    result = load_catalog()
    service.replace(result)
    if request.accept_mimetypes.best == 'application/json':
        return jsonify({'message': result.message, 'is_sample': result.is_sample, 'count': len(result.catalog)})
    return redirect(url_for('index'))

@app.route('/api/products')
def api_products():
    service = get_service()
    products = service.search(request.args.get('q', ''))
    return jsonify([p.to_dict() for p in products])

@app.route('/api/tree')
def api_tree():
    return jsonify(get_service().get_tree())

@app.route('/api/status')
def api_status():
    return jsonify(get_service().get_status())

if __name__ == '__main__':
    app.run(debug=True, port=5000)
