"""Tests for cart owner resolution and the identity middleware."""

import pytest

from storefront.core.errors import IdentityMissing
from storefront.models.owner import OwnerKey, OwnerKind
from storefront.security.identity import TokenDirectory, resolve_owner, token_directory


class TestResolveOwner:
    def test_user_only(self):
        owner = resolve_owner("alice", None)
        assert owner == OwnerKey.user("alice")
        assert owner.kind == OwnerKind.USER
        assert owner.user_id == "alice"
        assert owner.session_id is None

    def test_session_only(self):
        owner = resolve_owner(None, "sess-1")
        assert owner == OwnerKey.session("sess-1")
        assert owner.user_id is None
        assert owner.session_id == "sess-1"

    def test_user_supersedes_session(self):
        assert resolve_owner("alice", "sess-1") == OwnerKey.user("alice")

    @pytest.mark.parametrize("user_id, session_id", [(None, None), ("", ""), ("", None)])
    def test_no_identity_fails(self, user_id, session_id):
        with pytest.raises(IdentityMissing):
            resolve_owner(user_id, session_id)

    def test_same_id_different_kind_are_different_owners(self):
        assert OwnerKey.user("x") != OwnerKey.session("x")
        assert len({OwnerKey.user("x"), OwnerKey.session("x")}) == 2

    def test_owner_id_required(self):
        with pytest.raises(ValueError):
            OwnerKey.user("")


class TestTokenDirectory:
    def test_register_and_lookup(self):
        directory = TokenDirectory()
        directory.register("tok", "alice")
        assert directory.lookup("tok") == "alice"
        assert directory.lookup("other") is None

    def test_revoke(self):
        directory = TokenDirectory()
        directory.register("tok", "alice")
        directory.revoke("tok")
        directory.revoke("tok")
        assert directory.lookup("tok") is None


@pytest.mark.api
class TestIdentityOverHttp:
    def test_request_without_credentials_is_rejected(self, client):
        response = client.get("/api/cart")
        assert response.status_code == 401
        assert response.json()["code"] == "identity_missing"

    def test_unknown_bearer_token_is_rejected(self, client):
        response = client.get("/api/cart", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
        assert response.json()["code"] == "invalid_token"

    def test_session_header_identifies_guest(self, client, shop_products):
        client.post(
            "/api/cart",
            json={"productId": "prod-a", "quantity": 1},
            headers={"X-Session-Id": "sess-1"},
        )
        assert len(client.get("/api/cart", headers={"X-Session-Id": "sess-1"}).json()) == 1
        assert client.get("/api/cart", headers={"X-Session-Id": "sess-2"}).json() == []

    def test_session_cookie_identifies_guest(self, client, shop_products):
        client.cookies.set("session_id", "sess-cookie")
        response = client.post("/api/cart", json={"productId": "prod-a", "quantity": 1})
        assert response.status_code == 200

        lines = client.get("/api/cart", headers={"X-Session-Id": "sess-cookie"}).json()
        assert [line["productId"] for line in lines] == ["prod-a"]

    def test_bearer_token_wins_over_session(self, client, shop_products):
        token_directory.register("tok-bob", "bob")
        both = {"Authorization": "Bearer tok-bob", "X-Session-Id": "sess-bob"}

        client.post("/api/cart", json={"productId": "prod-a", "quantity": 1}, headers=both)

        assert client.get("/api/cart", headers={"X-Session-Id": "sess-bob"}).json() == []
        user_lines = client.get("/api/cart", headers={"Authorization": "Bearer tok-bob"}).json()
        assert len(user_lines) == 1
