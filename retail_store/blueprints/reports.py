"""Reports blueprint - revenue, payroll and profit figures."""
from flask import Blueprint, jsonify

from retail_store.services.store_service import get_store

reports_bp = Blueprint('reports', __name__, url_prefix='/reports')


@reports_bp.route('/summary', methods=['GET'])
def summary():
    """Revenue, payroll, delivery costs and net profit from one snapshot."""
    return jsonify(get_store().summary())
