from chapa_quente.services import stock as stock_ledger


def test_stock_listing_covers_active_products_only(client, make_product):
    make_product(name="Bacon Royale", quantity=12)
    make_product(name="Antigo", quantity=3, is_active=False)
    rows = client.get("/api/stock").json()["stock"]
    assert [r["product_name"] for r in rows] == ["Bacon Royale"]
    assert rows[0]["quantity"] == 12


def test_missing_stock_row_reads_as_zero(client, make_product):
    pid = make_product(quantity=None)
    r = client.get(f"/api/stock/{pid}")
    assert r.status_code == 200
    assert r.json()["quantity"] == 0
    assert r.json()["updated_at"] is None


def test_single_product_lookup_includes_inactive(client, make_product):
    pid = make_product(quantity=7, is_active=False)
    assert client.get(f"/api/stock/{pid}").json()["quantity"] == 7


def test_stock_lookup_unknown_product_is_404(client):
    assert client.get("/api/stock/9999").status_code == 404


def test_set_stock_overwrites_quantity(client, admin_headers, make_product, stock_of):
    pid = make_product(quantity=5)
    r = client.put(f"/api/stock/{pid}", json={"quantity": 40}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["quantity"] == 40
    assert r.json()["updated_at"] is not None
    assert stock_of(pid) == 40


def test_set_stock_inserts_missing_row(client, admin_headers, make_product, stock_of):
    pid = make_product(quantity=None)
    client.put(f"/api/stock/{pid}", json={"quantity": 15}, headers=admin_headers)
    assert stock_of(pid) == 15


def test_set_stock_rejects_negative_or_missing(client, admin_headers, make_product, stock_of):
    pid = make_product(quantity=5)
    assert client.put(f"/api/stock/{pid}", json={"quantity": -1}, headers=admin_headers).status_code == 400
    assert client.put(f"/api/stock/{pid}", json={}, headers=admin_headers).status_code == 400
    assert stock_of(pid) == 5


def test_set_stock_unknown_product_is_404(client, admin_headers):
    assert client.put("/api/stock/9999", json={"quantity": 1}, headers=admin_headers).status_code == 404


def test_stock_mutations_require_admin(client, customer_headers, make_product):
    pid = make_product()
    assert client.put(f"/api/stock/{pid}", json={"quantity": 1}).status_code == 401
    assert client.put(f"/api/stock/{pid}", json={"quantity": 1}, headers=customer_headers).status_code == 403
    batch = {"updates": [{"product_id": pid, "quantity": 1}]}
    assert client.post("/api/stock/batch", json=batch, headers=customer_headers).status_code == 403


def test_batch_rejects_empty_list(client, admin_headers):
    r = client.post("/api/stock/batch", json={"updates": []}, headers=admin_headers)
    assert r.status_code == 400


def test_batch_rejects_non_list(client, admin_headers):
    r = client.post("/api/stock/batch", json={"updates": {"product_id": 1, "quantity": 3}}, headers=admin_headers)
    assert r.status_code == 400


def test_batch_with_one_entry_upserts_one_row(client, admin_headers, make_product, stock_of):
    touched = make_product(name="A", quantity=1)
    untouched = make_product(name="B", quantity=9)
    r = client.post(
        "/api/stock/batch",
        json={"updates": [{"product_id": touched, "quantity": 30}]},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert r.json()["count"] == 1
    assert stock_of(touched) == 30
    assert stock_of(untouched) == 9


def test_batch_is_all_or_nothing(client, admin_headers, make_product, stock_of):
    pid = make_product(quantity=1)
    r = client.post(
        "/api/stock/batch",
        json={"updates": [{"product_id": pid, "quantity": 30}, {"product_id": 9999, "quantity": 5}]},
        headers=admin_headers,
    )
    assert r.status_code == 404
    assert stock_of(pid) == 1


def test_batch_creates_missing_rows(client, admin_headers, make_product, stock_of):
    a = make_product(name="A", quantity=None)
    b = make_product(name="B", quantity=None)
    client.post(
        "/api/stock/batch",
        json={"updates": [{"product_id": a, "quantity": 3}, {"product_id": b, "quantity": 4}]},
        headers=admin_headers,
    )
    assert (stock_of(a), stock_of(b)) == (3, 4)


def test_low_stock_alerts(client, admin_headers, make_product):
    make_product(name="Fartura", quantity=80)
    make_product(name="Acabando", quantity=2)
    make_product(name="No limite", quantity=10)
    make_product(name="Sem registro", quantity=None)
    make_product(name="Inativo", quantity=0, is_active=False)

    body = client.get("/api/stock/alerts/low", headers=admin_headers).json()
    assert body["threshold"] == 10
    assert [r["product_name"] for r in body["low_stock"]] == ["Sem registro", "Acabando", "No limite"]
    assert [r["quantity"] for r in body["low_stock"]] == [0, 2, 10]

    narrow = client.get("/api/stock/alerts/low", params={"threshold": 2}, headers=admin_headers).json()
    assert [r["product_name"] for r in narrow["low_stock"]] == ["Sem registro", "Acabando"]


def test_low_stock_requires_admin(client, customer_headers):
    assert client.get("/api/stock/alerts/low", headers=customer_headers).status_code == 403


def test_consume_clamps_at_zero(session_factory, make_product):
    pid = make_product(quantity=3)
    with session_factory() as db:
        assert stock_ledger.consume(db, pid, 2) == 1
        assert stock_ledger.consume(db, pid, 5) == 0
        db.commit()
        assert stock_ledger.get_stock(db, pid)["quantity"] == 0
