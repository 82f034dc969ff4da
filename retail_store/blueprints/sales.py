"""Sales blueprint - ringing up baskets and looking up receipts."""
from flask import Blueprint, current_app, jsonify, request

from retail_store.exceptions import BusinessLogicError, NotFoundError
from retail_store.services.store_service import get_store
from retail_store.utils.number_format import parse_quantity

sales_bp = Blueprint('sales', __name__, url_prefix='/sales')


def _parse_basket(raw_items) -> dict:
    """
    Turn the request's items into a basket, keeping the request order.

    Accepts {"<product_id>": qty, ...}; JSON object keys arrive as strings.
    """
    if not isinstance(raw_items, dict):
        raise BusinessLogicError('items must be an object mapping product id to quantity')

    basket = {}
    try:
        for raw_id, qty in raw_items.items():
            product_id = parse_quantity(raw_id, 'product id')
            if product_id in basket:
                raise BusinessLogicError(f'Product {product_id} appears more than once in items',
                                         payload={'product_id': product_id})
            basket[product_id] = parse_quantity(qty)
    except ValueError as e:
        raise BusinessLogicError(str(e))
    return basket


@sales_bp.route('/', methods=['POST'])
def create_sale():
    """Process a transaction for a registered cashier."""
    data = request.get_json(silent=True) or {}
    store = get_store()

    try:
        cashier_id = parse_quantity(data.get('cashier_id'), 'cashier_id')
    except ValueError as e:
        raise BusinessLogicError(str(e))

    cashier = store.find_cashier(cashier_id)
    if cashier is None:
        raise NotFoundError(f'Cashier {cashier_id} not found', payload={'cashier_id': cashier_id})

    basket = _parse_basket(data.get('items', {}))
    receipt = store.process_transaction(cashier, basket)
    return jsonify(receipt.to_dict()), 201


@sales_bp.route('/', methods=['GET'])
def list_sales():
    receipts = get_store().get_all_transactions()
    return jsonify({
        'receipts': [r.to_dict() for r in receipts],
        'count': len(receipts),
    })


@sales_bp.route('/<int:number>', methods=['GET'])
def get_sale(number):
    """A receipt issued by this process."""
    return jsonify(get_store().get_receipt(number).to_dict())


@sales_bp.route('/<int:number>/record', methods=['GET'])
def get_sale_record(number):
    """A receipt read back from the receipt store, including earlier runs."""
    receipt_store = current_app.extensions['receipt_store']
    receipt = receipt_store.read_receipt_record(number)
    payload = receipt.to_dict()
    payload['text'] = receipt.to_text()
    return jsonify(payload)
