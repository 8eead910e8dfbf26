# tests/test_categories.py
from app.models import Category
from tests.conftest import auth_headers, create_category, create_post


def test_list_categories_by_name(client, db_session):
    create_category(db_session, name="Zen")
    create_category(db_session, name="Art")

    response = client.get("/api/categories")
    assert response.status_code == 200
    assert [c["name"] for c in response.json()["categories"]] == ["Art", "Zen"]


def test_get_category(client, category):
    response = client.get(f"/api/categories/{category.id}")
    assert response.status_code == 200
    assert response.json()["color"] == "#007bff"
    assert client.get("/api/categories/999").status_code == 404


def test_create_category_admin_only(client, user, admin):
    payload = {"name": "Notes", "description": "Study notes", "color": "#ffc107"}

    assert client.post("/api/categories", json=payload).status_code == 401
    assert (
        client.post("/api/categories", json=payload, headers=auth_headers(user)).status_code
        == 403
    )

    created = client.post("/api/categories", json=payload, headers=auth_headers(admin))
    assert created.status_code == 201
    assert created.json()["post_count"] == 0


def test_create_category_rejects_duplicate_name_and_bad_color(client, admin, category):
    headers = auth_headers(admin)

    duplicate = client.post("/api/categories", json={"name": "Tech"}, headers=headers)
    assert duplicate.status_code == 409

    bad_color = client.post(
        "/api/categories", json={"name": "Misc", "color": "blue"}, headers=headers
    )
    assert bad_color.status_code == 422

    short_color = client.post(
        "/api/categories", json={"name": "Misc", "color": "#abc"}, headers=headers
    )
    assert short_color.status_code == 201


def test_rename_checks_uniqueness(client, db_session, admin, category):
    create_category(db_session, name="Life")
    headers = auth_headers(admin)

    clash = client.put(
        f"/api/categories/{category.id}", json={"name": "Life"}, headers=headers
    )
    assert clash.status_code == 409

    renamed = client.put(
        f"/api/categories/{category.id}",
        json={"name": "Technology", "color": "#123456"},
        headers=headers,
    )
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "Technology"
    assert renamed.json()["color"] == "#123456"


def test_delete_blocked_while_posts_reference_category(
    client, db_session, user, admin, category
):
    other = create_category(db_session, name="Archive")
    posts = [create_post(db_session, user, category, title=f"P{i}") for i in range(3)]
    headers = auth_headers(admin)

    blocked = client.delete(f"/api/categories/{category.id}", headers=headers)
    assert blocked.status_code == 409
    assert "3" in blocked.json()["message"]

    for post in posts:
        moved = client.put(
            f"/api/posts/{post.id}", json={"category_id": other.id}, headers=headers
        )
        assert moved.status_code == 200

    deleted = client.delete(f"/api/categories/{category.id}", headers=headers)
    assert deleted.status_code == 200
    db_session.expire_all()
    assert db_session.get(Category, category.id) is None
    assert db_session.get(Category, other.id).post_count == 3
