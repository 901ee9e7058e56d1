"""
Integration tests for the HTTP routes
"""

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from entry_meta import SQLAlchemyEntryMetaStore
from form_validation import FormValidator
from tweet_field import TweetEmbedResolver, TweetField

pytestmark = [pytest.mark.integration]

OEMBED = "https://publish.twitter.com/oembed"
TWEET_URL = "https://twitter.com/jack/status/20"
EMBED_HTML = '<blockquote class="twitter-tweet">hello</blockquote>'
MISSING_ALIAS = {"error": {"code": 803}}


@pytest.fixture
def app(plugins, fetcher, embed_resolver):
    """
    Create the FastAPI app with its collaborators replaced by test doubles.
    """
    from main import app as main_app
    from dependencies import (
        get_form_validator,
        get_remote_fetcher,
        get_tweet_field,
    )

    main_app.dependency_overrides[get_remote_fetcher] = lambda: fetcher
    main_app.dependency_overrides[get_form_validator] = lambda: FormValidator(plugins, fetcher)
    main_app.dependency_overrides[get_tweet_field] = lambda: TweetField(embed_resolver)

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


def tweet_params(**extra):
    params = {"form_id": 1, "field_id": 2, "url": TWEET_URL}
    params.update(extra)
    return params


class TestValidateFormRoute:

    def test_marks_failing_field(self, client, fake_remote):
        fake_remote.add("GET", "https://graph.facebook.com/doesnotexist123456",
                        httpx.Response(404, json=MISSING_ALIAS))

        response = client.post("/forms/validate", json={
            "validation_result": {
                "is_valid": True,
                "form": {
                    "id": 1,
                    "fields": [
                        {"id": 1, "cssClass": "validate-twitter", "pageNumber": 1},
                        {"id": 2, "cssClass": "validate-facebook", "pageNumber": 1},
                    ],
                },
            },
            "values": {
                "input_1": "@validHandle",
                "input_2": "https://facebook.com/doesnotexist123456",
            },
            "current_page": 1,
        })

        assert response.status_code == 200
        body = response.json()
        assert body["is_valid"] is False
        twitter, facebook = body["form"]["fields"]
        assert facebook["failed_validation"] is True
        assert facebook["validation_message"] == "This is not a valid Facebook page or account."
        assert twitter["failed_validation"] is False

    def test_hidden_fields_are_skipped(self, client):
        response = client.post("/forms/validate", json={
            "validation_result": {
                "form": {"id": 1, "fields": [{"id": 1, "cssClass": "validate-twitter"}]},
            },
            "values": {"input_1": "not a handle!!"},
            "hidden_field_ids": [1],
        })

        assert response.status_code == 200
        assert response.json()["is_valid"] is True

    def test_malformed_body(self, client):
        response = client.post("/forms/validate", json={"values": {}})
        assert response.status_code == 422


class TestProfileCheckRoute:

    def test_invalid_handle(self, client, fake_remote):
        response = client.post("/profiles/twitter/check", json={"value": "not a handle!!"})

        assert response.status_code == 200
        assert response.json() == {"kind": "twitter", "value": "not a handle!!", "is_valid": False}
        assert fake_remote.calls == []

    def test_unknown_kind_is_valid(self, client):
        response = client.post("/profiles/myspace/check", json={"value": "tom"})
        assert response.json()["is_valid"] is True


class TestTweetValidateRoute:

    def test_valid(self, client):
        response = client.post("/fields/tweet/validate", json={"value": TWEET_URL})
        assert response.json() == {"is_valid": True, "message": ""}

    def test_not_a_tweet(self, client):
        response = client.post("/fields/tweet/validate", json={"value": "https://twitter.com/jack"})
        assert response.json() == {"is_valid": False, "message": "Not a valid Tweet URL."}


class TestRenderTweetRoute:

    def test_embeds_and_caches(self, client, fake_remote):
        fake_remote.add("GET", OEMBED, httpx.Response(200, json={"html": EMBED_HTML}))

        first = client.get("/entries/9/tweet", params=tweet_params())
        second = client.get("/entries/9/tweet", params=tweet_params())

        assert first.status_code == 200
        assert first.headers["content-type"].startswith("text/html")
        assert first.text == EMBED_HTML
        assert second.text == EMBED_HTML
        assert len(fake_remote.calls_to(OEMBED)) == 1

    def test_falls_back_to_link(self, client):
        response = client.get("/entries/9/tweet", params=tweet_params())

        assert response.status_code == 200
        assert f'href="{TWEET_URL}"' in response.text

    def test_link_is_escaped(self, client):
        response = client.get("/entries/9/tweet", params=tweet_params(url='https://x.com/"><script>'))

        assert "<script>" not in response.text

    def test_anonymous_nocache_is_ignored(self, client, fake_remote, meta_store):
        meta_store.set(9, "tweet_output_1:2", "<p>cached</p>", 1)

        response = client.get("/entries/9/tweet", params=tweet_params(nocache=1))

        assert response.text == "<p>cached</p>"
        assert fake_remote.calls == []

    def test_publisher_can_bypass_cache(self, client, fake_remote, meta_store):
        meta_store.set(9, "tweet_output_1:2", "<p>cached</p>", 1)
        fake_remote.add("GET", OEMBED, httpx.Response(200, json={"html": EMBED_HTML}))

        response = client.get(
            "/entries/9/tweet",
            params=tweet_params(nocache=1),
            headers={"Authorization": "Bearer test-publisher-key"}
        )

        assert response.text == EMBED_HTML
        assert meta_store.get(9, "tweet_output_1:2") == "<p>cached</p>"

    def test_wrong_key_does_not_bypass(self, client, fake_remote, meta_store):
        meta_store.set(9, "tweet_output_1:2", "<p>cached</p>", 1)

        response = client.get(
            "/entries/9/tweet",
            params=tweet_params(cache=0),
            headers={"Authorization": "Bearer wrong-key"}
        )

        assert response.text == "<p>cached</p>"

    def test_non_ascii_bearer_token_is_anonymous(self, client, fake_remote, meta_store):
        meta_store.set(9, "tweet_output_1:2", "<p>cached</p>", 1)

        response = client.get(
            "/entries/9/tweet",
            params=tweet_params(nocache=1),
            headers={"Authorization": "Bearer café".encode("latin-1")}
        )

        assert response.status_code == 200
        assert response.text == "<p>cached</p>"
        assert fake_remote.calls == []

    def test_unavailable_entry_meta_table(self, app, client, fake_remote, oembed_provider):
        from dependencies import get_tweet_field

        engine = create_engine(
            "sqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        store = SQLAlchemyEntryMetaStore(sessionmaker(bind=engine))
        app.dependency_overrides[get_tweet_field] = lambda: TweetField(TweetEmbedResolver(store, oembed_provider))
        fake_remote.add("GET", OEMBED, httpx.Response(200, json={"html": EMBED_HTML}))

        response = client.get("/entries/9/tweet", params=tweet_params())

        assert response.status_code == 200
        assert response.text == EMBED_HTML


class TestHealth:

    def test_lists_kinds(self, client):
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["kinds"][:2] == ["twitter", "facebook"]
