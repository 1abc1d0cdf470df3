"""
Inventory: products, stock movements, low-stock alerts and suppliers.
"""

import pytest

from app.buisness.errors import ConflictError, NotFoundError, ValidationError

RICE = {
    'name': 'Arroz Integral',
    'sku': 'ARR001',
    'category': 'Alimentos',
    'price': 8.99,
    'cost': 5.50,
    'quantity': 45,
    'supplier': 'Distribuidor ABC',
    'minimumStock': 10,
    'description': 'Arroz integral tipo 1, pacote de 1kg',
}


def test_add_product(state):
    product = state.products.add_product(RICE)

    assert product.minimum_stock == 10
    assert product.quantity == 45
    assert state.products.get_product(product.id) is product
    assert product.to_dict()['minimumStock'] == 10


def test_duplicate_sku_conflicts(state):
    state.products.add_product(RICE)
    with pytest.raises(ConflictError):
        state.products.add_product(dict(RICE, name='Outro arroz'))


def test_update_product_sku_conflict(state):
    rice = state.products.add_product(RICE)
    beans = state.products.add_product(dict(RICE, name='Feijão', sku='FEI001'))

    with pytest.raises(ConflictError):
        state.products.update_product(beans.id, {'sku': 'ARR001'})

    updated = state.products.update_product(rice.id, {'sku': 'ARR001', 'price': '9.49'})
    assert updated.price == 9.49


def test_product_validation(state):
    with pytest.raises(ValidationError):
        state.products.add_product(dict(RICE, sku=''))
    with pytest.raises(ValidationError):
        state.products.add_product(dict(RICE, quantity=-1))
    with pytest.raises(ValidationError):
        state.products.add_product(dict(RICE, price='cheap'))


@pytest.mark.parametrize('field, value', [
    ('price', float('nan')),
    ('cost', float('inf')),
    ('price', 'nan'),
    ('quantity', float('inf')),
])
def test_non_finite_numbers_are_rejected(state, field, value):
    with pytest.raises(ValidationError) as excinfo:
        state.products.add_product(dict(RICE, **{field: value}))
    assert excinfo.value.field == field


def test_unknown_product(state):
    with pytest.raises(NotFoundError):
        state.products.update_product('missing', {'name': 'x'})
    with pytest.raises(NotFoundError):
        state.products.delete_product('missing')
    with pytest.raises(NotFoundError):
        state.products.update_stock('missing', 1)


def test_stock_removal_floors_at_zero_and_warns(state, notifier):
    product = state.products.add_product(RICE)

    state.products.update_stock(product.id, 5)
    assert product.quantity == 50

    state.products.update_stock(product.id, 45, is_addition=False)
    assert product.quantity == 5
    assert ('warning', 'Alerta: Estoque baixo para Arroz Integral') in notifier.messages

    state.products.update_stock(product.id, 100, is_addition=False)
    assert product.quantity == 0


def test_low_stock_products(state):
    rice = state.products.add_product(RICE)
    state.products.add_product(dict(RICE, sku='FEI001', quantity=32, minimumStock=15))
    state.products.update_stock(rice.id, 35, is_addition=False)

    assert [p.sku for p in state.products.get_low_stock_products()] == ['ARR001']


def test_delete_product(state):
    product = state.products.add_product(RICE)
    state.products.delete_product(product.id)
    assert state.products.get_product(product.id) is None


def test_supplier_crud_and_search(state):
    abc = state.suppliers.add_supplier({
        'name': 'Distribuidor ABC',
        'cnpj': '12.345.678/0001-90',
        'email': 'vendas@abc.com.br',
        'phone': '(11) 5555-0000',
        'address': 'Rua A, 100',
    })
    xyz = state.suppliers.add_supplier({'name': 'XYZ Atacado', 'cnpj': '98.765.432/0001-10', 'email': 'contato@xyz.com'})

    assert state.suppliers.filter_suppliers('abc') == [abc]
    assert state.suppliers.filter_suppliers('XYZ.COM') == [xyz]
    assert state.suppliers.filter_suppliers('98.765') == [xyz]
    assert state.suppliers.filter_suppliers('  ') == [abc, xyz]

    state.suppliers.update_supplier(abc.id, {'phone': '(11) 4444-0000'})
    assert state.suppliers.get_supplier(abc.id).phone == '(11) 4444-0000'

    state.suppliers.delete_supplier(abc.id)
    state.suppliers.delete_supplier(abc.id)
    assert state.suppliers.list_suppliers() == [xyz]


def test_supplier_errors(state):
    with pytest.raises(NotFoundError):
        state.suppliers.update_supplier('missing', {'name': 'x'})
    with pytest.raises(ValidationError):
        state.suppliers.add_supplier({'cnpj': '1'})
