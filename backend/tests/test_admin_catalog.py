from models.category import Category
from models.product import Product, ProductGroup


def test_create_and_rename_category(client, db_session, auth_headers):
    created = client.post("/admin/categories", headers=auth_headers,
                          json={"name": "Small Appliances", "description": "Irons and fans"})
    assert created.status_code == 200
    assert created.json()["slug"] == "small-appliances"

    renamed = client.put(f"/admin/categories/{created.json()['id']}", headers=auth_headers,
                         json={"name": "Home Comfort"})
    assert renamed.json()["slug"] == "home-comfort"
    assert renamed.json()["description"] == "Irons and fans"


def test_category_name_is_required_and_unique(client, auth_headers, catalog):
    assert client.post("/admin/categories", headers=auth_headers, json={}).status_code == 400

    duplicate = client.post("/admin/categories", headers=auth_headers, json={"name": "Cookers"})
    assert duplicate.status_code == 400
    assert "already exists" in duplicate.json()["detail"]


def test_category_in_use_cannot_be_deleted(client, db_session, auth_headers, catalog):
    cookers = db_session.query(Category).filter(Category.slug == "cookers").one()

    response = client.delete(f"/admin/categories/{cookers.id}", headers=auth_headers)

    assert response.status_code == 400
    assert db_session.get(Category, cookers.id) is not None


def test_unused_category_can_be_deleted(client, db_session, auth_headers):
    created = client.post("/admin/categories", headers=auth_headers, json={"name": "Outdoor"}).json()

    assert client.delete(f"/admin/categories/{created['id']}", headers=auth_headers).status_code == 200
    assert db_session.get(Category, created["id"]) is None
    assert client.delete(f"/admin/categories/{created['id']}", headers=auth_headers).status_code == 404


def test_create_product_group(client, auth_headers, category):
    response = client.post("/admin/product-groups", headers=auth_headers, json={
        "name": "Nunix Blender", "category_id": category.id, "base_price": 6000,
    })

    assert response.status_code == 200
    assert response.json()["slug"] == "nunix-blender"
    assert response.json()["products"] == []

    assert client.post("/admin/product-groups", headers=auth_headers, json={"name": "No Category"}).status_code == 400


def test_update_product_group(client, db_session, auth_headers, catalog):
    group = db_session.query(ProductGroup).one()
    response = client.put(f"/admin/product-groups/{group.id}", headers=auth_headers,
                          json={"featured": True, "base_price": 47000})

    assert response.status_code == 200
    assert (response.json()["featured"], response.json()["base_price"]) == (True, 47000)
    assert len(response.json()["products"]) == 3


def test_update_product_group_rejects_null_columns(client, db_session, auth_headers, catalog):
    group = db_session.query(ProductGroup).one()
    response = client.put(f"/admin/product-groups/{group.id}", headers=auth_headers,
                          json={"category_id": None, "featured": None})

    assert response.status_code == 400
    assert response.json()["detail"] == "Fields cannot be null: category_id, featured"


def test_deleting_group_detaches_variants(client, db_session, auth_headers, catalog):
    group = db_session.query(ProductGroup).one()
    variant_ids = [p.id for p in group.products]

    response = client.delete(f"/admin/product-groups/{group.id}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["detached"] == 3
    db_session.expire_all()
    assert db_session.query(ProductGroup).count() == 0
    for product in db_session.query(Product).filter(Product.id.in_(variant_ids)):
        assert product.group_id is None
        assert product.variant_value is None
