"""Staff blueprint - cashier roster."""
from flask import Blueprint, jsonify, request

from retail_store.exceptions import BusinessLogicError
from retail_store.models import Cashier
from retail_store.services.store_service import get_store
from retail_store.utils.number_format import parse_decimal, parse_quantity

staff_bp = Blueprint('staff', __name__, url_prefix='/staff')


@staff_bp.route('/', methods=['GET'])
def list_cashiers():
    cashiers = get_store().get_store_employees()
    return jsonify({'cashiers': [c.to_dict() for c in cashiers], 'count': len(cashiers)})


@staff_bp.route('/', methods=['POST'])
def register_cashier():
    data = request.get_json(silent=True) or {}

    name = str(data.get('name') or '').strip()
    if not name:
        raise BusinessLogicError('name is required')

    try:
        cashier = Cashier(
            id=parse_quantity(data.get('id'), 'id'),
            name=name,
            salary=parse_decimal(data.get('salary', '0'), 'salary'),
        )
    except ValueError as e:
        raise BusinessLogicError(str(e))

    get_store().register_cashier(cashier)
    return jsonify(cashier.to_dict()), 201
