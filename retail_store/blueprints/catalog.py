"""Catalog blueprint - stocking products and inventory queries."""
from datetime import date

from flask import Blueprint, current_app, jsonify, request

from retail_store.exceptions import BusinessLogicError, NotFoundError
from retail_store.models import Product, ProductCategory
from retail_store.services.store_service import get_store
from retail_store.utils.number_format import parse_date, parse_decimal, parse_quantity

catalog_bp = Blueprint('catalog', __name__, url_prefix='/catalog')


def _products_response(products):
    return jsonify({'products': [p.to_dict() for p in products], 'count': len(products)})


@catalog_bp.route('/', methods=['GET'])
def list_products():
    """Full inventory in stocking order."""
    return _products_response(get_store().get_store_inventory())


@catalog_bp.route('/', methods=['POST'])
def stock_product():
    """Add a product to the catalog."""
    data = request.get_json(silent=True) or {}

    name = str(data.get('name') or '').strip()
    if not name:
        raise BusinessLogicError('name is required')

    try:
        product = Product(
            id=parse_quantity(data.get('id'), 'id'),
            name=name,
            delivery_price=parse_decimal(data.get('delivery_price'), 'delivery_price'),
            expiry_date=parse_date(data.get('expiry_date'), 'expiry_date'),
            quantity=parse_quantity(data.get('quantity', 0)),
            category=ProductCategory(data.get('category', ProductCategory.FOOD.value)),
        )
    except ValueError as e:
        raise BusinessLogicError(str(e))

    get_store().stock_product(product)
    return jsonify(product.to_dict()), 201


@catalog_bp.route('/<int:product_id>', methods=['GET'])
def get_product(product_id):
    product = get_store().find_product(product_id)
    if product is None:
        raise NotFoundError(f'Product {product_id} not found', payload={'product_id': product_id})
    return jsonify(product.to_dict())


@catalog_bp.route('/expired', methods=['GET'])
def expired_products():
    """Products past their expiry date as of ?date= (default: today)."""
    as_of = request.args.get('date')
    try:
        as_of = parse_date(as_of) if as_of else date.today()
    except ValueError as e:
        raise BusinessLogicError(str(e))
    return _products_response(get_store().find_expired_items(as_of))


@catalog_bp.route('/low-stock', methods=['GET'])
def low_stock_products():
    """Products with quantity at or below ?threshold= (default: LOW_STOCK_THRESHOLD)."""
    threshold = request.args.get('threshold')
    if threshold is None:
        threshold = current_app.config.get('LOW_STOCK_THRESHOLD', 10)
    else:
        try:
            threshold = parse_quantity(threshold, 'threshold')
        except ValueError as e:
            raise BusinessLogicError(str(e))
    return _products_response(get_store().find_items_running_low(threshold))
