"""
Inventory routes: products, stock movements and suppliers
"""

from flask import request
from flask_login import login_required

from app.buisness.errors import NotFoundError
from app.presentation.routes.api import api_bp, json_body, respond, state


# Products

@api_bp.route('/products', methods=['GET'])
@login_required
def list_products():
    products = state().products
    if request.args.get('low_stock', '').lower() in ('1', 'true', 'yes'):
        return respond(products.get_low_stock_products())
    return respond(products.list_products())


@api_bp.route('/products', methods=['POST'])
@login_required
def add_product():
    return respond(state().products.add_product(json_body()), 201)


@api_bp.route('/products/<product_id>', methods=['GET'])
@login_required
def get_product(product_id):
    product = state().products.get_product(product_id)
    if product is None:
        raise NotFoundError("Produto não encontrado")
    return respond(product)


@api_bp.route('/products/<product_id>', methods=['PUT', 'PATCH'])
@login_required
def update_product(product_id):
    return respond(state().products.update_product(product_id, json_body()))


@api_bp.route('/products/<product_id>', methods=['DELETE'])
@login_required
def delete_product(product_id):
    state().products.delete_product(product_id)
    return respond({'deleted': product_id})


@api_bp.route('/products/<product_id>/stock', methods=['POST'])
@login_required
def update_stock(product_id):
    body = json_body()
    is_addition = body.get('isAddition', body.get('is_addition', True))
    product = state().products.update_stock(product_id, body.get('quantity'), bool(is_addition))
    return respond(product)


# Suppliers

@api_bp.route('/suppliers', methods=['GET'])
@login_required
def list_suppliers():
    return respond(state().suppliers.filter_suppliers(request.args.get('q')))


@api_bp.route('/suppliers', methods=['POST'])
@login_required
def add_supplier():
    return respond(state().suppliers.add_supplier(json_body()), 201)


@api_bp.route('/suppliers/<supplier_id>', methods=['GET'])
@login_required
def get_supplier(supplier_id):
    supplier = state().suppliers.get_supplier(supplier_id)
    if supplier is None:
        raise NotFoundError("Fornecedor não encontrado")
    return respond(supplier)


@api_bp.route('/suppliers/<supplier_id>', methods=['PUT', 'PATCH'])
@login_required
def update_supplier(supplier_id):
    return respond(state().suppliers.update_supplier(supplier_id, json_body()))


@api_bp.route('/suppliers/<supplier_id>', methods=['DELETE'])
@login_required
def delete_supplier(supplier_id):
    state().suppliers.delete_supplier(supplier_id)
    return respond({'deleted': supplier_id})
