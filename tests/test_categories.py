def test_category_crud(client, headers):
    resp = client.post("/api/categories", json={"name": "Rent"}, headers=headers)
    assert resp.status_code == 200
    category = resp.json()["data"]

    resp = client.patch(f"/api/categories/{category['id']}", json={"name": "Housing"}, headers=headers)
    assert resp.json()["data"]["name"] == "Housing"

    rows = client.get("/api/categories", headers=headers).json()["data"]
    assert [r["name"] for r in rows] == ["Housing"]

    assert client.delete(f"/api/categories/{category['id']}", headers=headers).json()["data"] == {"id": category["id"]}
    assert client.get(f"/api/categories/{category['id']}", headers=headers).status_code == 404


def test_categories_are_scoped_to_owner(client, headers, other_headers):
    category = client.post("/api/categories", json={"name": "Fun"}, headers=headers).json()["data"]

    assert client.get("/api/categories", headers=other_headers).json()["data"] == []
    assert client.get(f"/api/categories/{category['id']}", headers=other_headers).status_code == 404
    assert client.patch(f"/api/categories/{category['id']}", json={"name": "Mine now"},
                        headers=other_headers).status_code == 404

    resp = client.post("/api/categories/bulk-delete", json={"ids": [category["id"]]}, headers=other_headers)
    assert resp.json()["data"] == []
    assert client.get(f"/api/categories/{category['id']}", headers=headers).status_code == 200


def test_blank_name_is_rejected(client, headers):
    assert client.post("/api/categories", json={"name": ""}, headers=headers).status_code == 422
