from __future__ import annotations

import pytest
from pydantic import SecretStr
from starlette.requests import Request

from storefront.config import Settings, settings
from storefront.core.security import (
    AuthResolver,
    BearerTokenAuth,
    Identity,
    SessionCookieAuth,
    create_access_token,
    hash_password,
    identity_from_token,
    verify_password,
)
from storefront.models import Plan
from storefront.seeds import seed_plans


def make_request(headers: dict[str, str]) -> Request:
    raw = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw})


def test_token_round_trip():
    identity = Identity(id="42", role="seller", email="s@example.com")

    assert identity_from_token(create_access_token(identity)) == identity


def test_expired_or_tampered_tokens_are_rejected():
    token = create_access_token(Identity(id="42", role="seller"), ttl_minutes=-1)

    assert identity_from_token(token) is None
    assert identity_from_token("not-a-token") is None


@pytest.mark.asyncio
async def test_resolver_prefers_bearer_over_cookie():
    resolver = AuthResolver([BearerTokenAuth(), SessionCookieAuth("sid")])
    bearer = create_access_token(Identity(id="admin", role="admin"))
    cookie = create_access_token(Identity(id="7", role="seller"))

    both = make_request({"Authorization": f"Bearer {bearer}", "Cookie": f"sid={cookie}"})
    cookie_only = make_request({"Cookie": f"sid={cookie}"})
    basic_auth = make_request({"Authorization": "Basic dXNlcjpwdw==", "Cookie": f"sid={cookie}"})
    nothing = make_request({})

    assert (await resolver.current_identity(both)).role == "admin"
    assert await resolver.current_identity(cookie_only) == Identity(id="7", role="seller")
    assert await resolver.current_identity(basic_auth) == Identity(id="7", role="seller")
    assert await resolver.current_identity(nothing) is None


@pytest.mark.asyncio
async def test_resolver_does_not_fall_back_when_bearer_token_is_invalid():
    resolver = AuthResolver([BearerTokenAuth(), SessionCookieAuth("sid")])
    cookie = create_access_token(Identity(id="7", role="seller"))

    request = make_request({"Authorization": "Bearer broken", "Cookie": f"sid={cookie}"})

    assert await resolver.current_identity(request) is None


def test_password_hashing():
    encoded = hash_password("s3cret", "00112233445566778899aabbccddeeff")

    assert verify_password("s3cret", encoded)
    assert not verify_password("wrong", encoded)
    assert not verify_password("s3cret", "garbage")


def test_admin_login_issues_token_and_cookie(client, monkeypatch):
    encoded = hash_password("s3cret", "00112233445566778899aabbccddeeff")
    monkeypatch.setattr(settings, "admin_password_hash", SecretStr(encoded))

    response = client.post("/api/v1/auth/login", json={"email": settings.admin_email, "password": "s3cret"})
    rejected = client.post("/api/v1/auth/login", json={"email": settings.admin_email, "password": "nope"})

    assert response.status_code == 200
    token = response.json()["access_token"]
    assert response.cookies.get(settings.session_cookie_name) == token
    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["role"] == "admin"
    assert rejected.status_code == 401


def test_feature_list_tolerates_legacy_values():
    assert Plan(features=["a", "b"]).feature_list == ["a", "b"]
    assert Plan(features='["a", "b"]').feature_list == ["a", "b"]
    assert Plan(features={"1": "a", "2": "b"}).feature_list == ["a", "b"]
    assert Plan(features="not json").feature_list == []
    assert Plan(features=None).feature_list == []


def test_seed_plans_is_idempotent(db):
    assert seed_plans(db) == 3
    assert seed_plans(db) == 0

    plans = db.query(Plan).order_by(Plan.price).all()
    assert [p.max_products for p in plans] == [20, 100, 999999]
    assert plans[-1].is_unlimited


def test_cors_origins_accepts_comma_separated_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.example, http://b.example")

    configured = Settings(_env_file=None)

    assert configured.cors_origins == ["http://a.example", "http://b.example"]


def test_cors_origins_empty_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "")

    assert Settings(_env_file=None).cors_origins == []
