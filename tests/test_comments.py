# tests/test_comments.py
from app.models import Comment, Post
from tests.conftest import auth_headers, create_post


def _submit(client, post_id, parent_id=None, content="Nice post", name="Reader"):
    payload = {
        "post_id": post_id,
        "content": content,
        "author_name": name,
        "author_email": "reader@example.com",
    }
    if parent_id is not None:
        payload["parent_comment_id"] = parent_id
    return client.post("/api/comments", json=payload)


def _comment_count(db_session, post_id) -> int:
    db_session.expire_all()
    return db_session.get(Post, post_id).comment_count


def test_submit_is_pending_and_bumps_counter(client, db_session, user, category):
    post = create_post(db_session, user, category)

    response = _submit(client, post.id)
    assert response.status_code == 201
    comment = response.json()["comment"]
    assert comment["is_approved"] is False
    assert comment["author_avatar"].startswith("https://www.gravatar.com/avatar/")
    assert comment["author_avatar"].endswith("?d=identicon&s=80")
    assert "author_email" not in comment

    assert _comment_count(db_session, post.id) == 1


def test_submit_to_missing_post(client):
    assert _submit(client, 9999).status_code == 404


def test_reply_to_missing_parent_creates_nothing(client, db_session, user, category):
    post = create_post(db_session, user, category)

    response = _submit(client, post.id, parent_id=12345)
    assert response.status_code == 404
    assert db_session.query(Comment).count() == 0
    assert _comment_count(db_session, post.id) == 0


def test_reply_to_parent_on_another_post(client, db_session, user, category):
    first = create_post(db_session, user, category, title="First")
    second = create_post(db_session, user, category, title="Second")
    parent_id = _submit(client, first.id).json()["comment"]["id"]

    response = _submit(client, second.id, parent_id=parent_id)
    assert response.status_code == 404
    assert _comment_count(db_session, second.id) == 0


def test_tree_only_shows_approved_comments(client, db_session, user, admin, category):
    post = create_post(db_session, user, category)
    a_id = _submit(client, post.id, content="A").json()["comment"]["id"]
    b_id = _submit(client, post.id, parent_id=a_id, content="B").json()["comment"]["id"]

    listing = client.get(f"/api/comments/post/{post.id}?page=1&limit=20").json()
    assert listing["comments"] == []
    assert listing["pagination"]["total"] == 0

    headers = auth_headers(admin)
    for comment_id in (a_id, b_id):
        assert (
            client.put(f"/api/comments/{comment_id}/approve", headers=headers).status_code
            == 200
        )

    listing = client.get(f"/api/comments/post/{post.id}?page=1&limit=20").json()
    roots = listing["comments"]
    assert [c["id"] for c in roots] == [a_id]
    assert [r["id"] for r in roots[0]["replies"]] == [b_id]
    assert roots[0]["replies"][0]["replies"] == []
    assert listing["pagination"] == {"page": 1, "limit": 20, "total": 2, "pages": 1}


def test_reply_on_other_page_is_dropped(client, db_session, user, admin, category):
    post = create_post(db_session, user, category)
    a_id = _submit(client, post.id, content="A").json()["comment"]["id"]
    b_id = _submit(client, post.id, parent_id=a_id, content="B").json()["comment"]["id"]
    headers = auth_headers(admin)
    client.put(f"/api/comments/{a_id}/approve", headers=headers)
    client.put(f"/api/comments/{b_id}/approve", headers=headers)

    # newest first: page 1 holds only the reply, whose parent is on page 2
    first_page = client.get(f"/api/comments/post/{post.id}?page=1&limit=1").json()
    assert first_page["comments"] == []
    assert first_page["pagination"]["pages"] == 2

    second_page = client.get(f"/api/comments/post/{post.id}?page=2&limit=1").json()
    assert [c["id"] for c in second_page["comments"]] == [a_id]
    assert second_page["comments"][0]["replies"] == []


def test_list_for_missing_post(client):
    assert client.get("/api/comments/post/4242").status_code == 404


def test_approve_is_idempotent(client, db_session, user, admin, category):
    post = create_post(db_session, user, category)
    comment_id = _submit(client, post.id).json()["comment"]["id"]
    headers = auth_headers(admin)

    first = client.put(f"/api/comments/{comment_id}/approve", headers=headers)
    db_session.expire_all()
    moderated_at = db_session.get(Comment, comment_id).moderated_at

    second = client.put(f"/api/comments/{comment_id}/approve", headers=headers)
    assert first.status_code == second.status_code == 200
    assert second.json()["comment"]["is_approved"] is True

    db_session.expire_all()
    stored = db_session.get(Comment, comment_id)
    assert stored.moderated_by == admin.id
    assert stored.moderated_at == moderated_at


def test_approve_missing_comment(client, admin):
    response = client.put("/api/comments/777/approve", headers=auth_headers(admin))
    assert response.status_code == 404


def test_moderation_requires_admin(client, db_session, user, category):
    post = create_post(db_session, user, category)
    comment_id = _submit(client, post.id).json()["comment"]["id"]
    headers = auth_headers(user)

    assert client.put(f"/api/comments/{comment_id}/approve", headers=headers).status_code == 403
    assert client.delete(f"/api/comments/{comment_id}", headers=headers).status_code == 403
    assert client.get("/api/comments/admin/pending", headers=headers).status_code == 403
    assert client.get("/api/comments/admin/pending").status_code == 401


def test_delete_removes_direct_replies_and_adjusts_counter(
    client, db_session, user, admin, category
):
    post = create_post(db_session, user, category)
    parent_id = _submit(client, post.id, content="parent").json()["comment"]["id"]
    reply_one = _submit(client, post.id, parent_id=parent_id).json()["comment"]["id"]
    _submit(client, post.id, parent_id=parent_id)
    grandchild = _submit(client, post.id, parent_id=reply_one).json()["comment"]["id"]
    other = _submit(client, post.id, content="unrelated").json()["comment"]["id"]
    assert _comment_count(db_session, post.id) == 5

    response = client.delete(f"/api/comments/{parent_id}", headers=auth_headers(admin))
    assert response.status_code == 200

    assert _comment_count(db_session, post.id) == 2
    remaining = {c.id for c in db_session.query(Comment).all()}
    # deeper replies are left in place
    assert remaining == {grandchild, other}


def test_delete_missing_comment(client, admin):
    assert client.delete("/api/comments/31337", headers=auth_headers(admin)).status_code == 404


def test_pending_list_includes_post_title(client, db_session, user, admin, category):
    post = create_post(db_session, user, category, title="Moderated")
    _submit(client, post.id, content="first")
    _submit(client, post.id, content="second")

    response = client.get("/api/comments/admin/pending", headers=auth_headers(admin))
    assert response.status_code == 200
    body = response.json()
    assert [c["content"] for c in body["comments"]] == ["second", "first"]
    assert body["comments"][0]["post"] == {"id": post.id, "title": "Moderated"}
    assert body["pagination"]["total"] == 2


def test_deleting_post_deletes_its_comments(client, db_session, user, category):
    post = create_post(db_session, user, category)
    _submit(client, post.id)
    _submit(client, post.id)

    response = client.delete(f"/api/posts/{post.id}", headers=auth_headers(user))
    assert response.status_code == 200
    db_session.expire_all()
    assert db_session.query(Comment).count() == 0
