"""
Tests for review API endpoints.
"""

from conftest import buy, create_product, deliver, open_wallet

USER = {"X-User-Id": "1"}
OTHER_USER = {"X-User-Id": "2"}


def delivered_order(db_session, product, user_id=1):
    open_wallet(db_session, user_id=user_id, deposit="100.00")
    order = buy(db_session, user_id, (product, 1)).order
    deliver(db_session, order)
    return order


def post_review(client, product, order, headers=USER, **overrides):
    body = {
        "product_id": product.id,
        "order_id": order.id,
        "rating": 4,
        "title": "Solid",
        "comment": "Does what it says on the box.",
        "pros": ["Cheap"],
    }
    body.update(overrides)
    return client.post("/reviews", headers=headers, json=body)


class TestCreateReview:

    def test_create_returns_201(self, client, db_session):
        product = create_product(db_session)
        order = delivered_order(db_session, product)

        response = post_review(client, product, order)
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["rating"] == 4
        assert data["pros"] == ["Cheap"]
        assert data["verified_purchase"] is True

    def test_not_delivered_returns_403(self, client, db_session):
        product = create_product(db_session)
        open_wallet(db_session, deposit="100.00")
        order = buy(db_session, 1, (product, 1)).order

        response = post_review(client, product, order)
        assert response.status_code == 403
        assert response.json()["error"]["code"] == 5002

    def test_duplicate_returns_409(self, client, db_session):
        product = create_product(db_session)
        order = delivered_order(db_session, product)
        post_review(client, product, order)

        response = post_review(client, product, order)
        assert response.status_code == 409
        assert response.json()["error"]["code"] == 5003

    def test_rating_out_of_range_returns_422(self, client, db_session):
        product = create_product(db_session)
        order = delivered_order(db_session, product)
        response = post_review(client, product, order, rating=7)
        assert response.status_code == 422


class TestListReviews:

    def test_product_reviews_show_approved_with_stats(self, client, db_session):
        product = create_product(db_session)
        order = delivered_order(db_session, product)
        review_id = post_review(client, product, order).json()["id"]

        listed = client.get(f"/reviews/product/{product.id}").json()
        assert listed["reviews"] == []
        assert listed["stats"] is None

        client.patch(f"/reviews/{review_id}/moderation", json={"status": "approved"})

        response = client.get(f"/reviews/product/{product.id}")
        assert response.status_code == 200
        data = response.json()
        assert [r["id"] for r in data["reviews"]] == [review_id]
        assert data["stats"]["average_rating"] == 4.0
        assert data["stats"]["total_reviews"] == 1
        assert data["pagination"]["total"] == 1

    def test_unknown_product_returns_404(self, client):
        response = client.get("/reviews/product/999")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == 3001

    def test_my_reviews_include_pending(self, client, db_session):
        product = create_product(db_session)
        order = delivered_order(db_session, product)
        post_review(client, product, order)

        data = client.get("/reviews/mine", headers=USER).json()
        assert len(data["reviews"]) == 1
        assert client.get("/reviews/mine", headers=OTHER_USER).json()["reviews"] == []

    def test_products_to_review(self, client, db_session):
        product = create_product(db_session, name="Kettle")
        order = delivered_order(db_session, product)

        pending = client.get("/reviews/to-review", headers=USER).json()
        assert [p["product_name"] for p in pending] == ["Kettle"]
        assert pending[0]["order_number"] == order.order_number

        post_review(client, product, order)
        assert client.get("/reviews/to-review", headers=USER).json() == []

    def test_pending_queue(self, client, db_session):
        product = create_product(db_session)
        order = delivered_order(db_session, product)
        review_id = post_review(client, product, order).json()["id"]

        data = client.get("/reviews/pending").json()
        assert [r["id"] for r in data["reviews"]] == [review_id]


class TestManageReview:

    def test_update_own_review(self, client, db_session):
        product = create_product(db_session)
        order = delivered_order(db_session, product)
        review_id = post_review(client, product, order).json()["id"]

        response = client.patch(f"/reviews/{review_id}", headers=USER, json={"rating": 2})
        assert response.status_code == 200
        assert response.json()["rating"] == 2
        assert response.json()["status"] == "pending"

    def test_update_other_users_review_returns_403(self, client, db_session):
        product = create_product(db_session)
        order = delivered_order(db_session, product)
        review_id = post_review(client, product, order).json()["id"]

        response = client.patch(f"/reviews/{review_id}", headers=OTHER_USER, json={"rating": 1})
        assert response.status_code == 403
        assert response.json()["error"]["code"] == 5004

    def test_delete_own_review(self, client, db_session):
        product = create_product(db_session)
        order = delivered_order(db_session, product)
        review_id = post_review(client, product, order).json()["id"]

        response = client.delete(f"/reviews/{review_id}", headers=USER)
        assert response.status_code == 204
        assert client.get("/reviews/mine", headers=USER).json()["reviews"] == []

    def test_delete_unknown_review_returns_404(self, client):
        response = client.delete("/reviews/999", headers=USER)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == 5001

    def test_mark_helpful(self, client, db_session):
        product = create_product(db_session)
        order = delivered_order(db_session, product)
        review_id = post_review(client, product, order).json()["id"]

        client.post(f"/reviews/{review_id}/helpful")
        response = client.post(f"/reviews/{review_id}/helpful")
        assert response.status_code == 200
        assert response.json()["helpful_votes"] == 2

    def test_moderation_back_to_pending_returns_422(self, client, db_session):
        product = create_product(db_session)
        order = delivered_order(db_session, product)
        review_id = post_review(client, product, order).json()["id"]

        response = client.patch(f"/reviews/{review_id}/moderation", json={"status": "pending"})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == 1003
