# tests/test_knowledge_api.py
"""
Tests for the category and knowledge base endpoints.
"""

import re
from typing import Any, Dict

import pytest

from tests.conftest import bearer, join, register

CATEGORIES = "/api/v1/categories"
KNOWLEDGE = "/api/v1/knowledge"


def create_category(client, headers, **fields: Any) -> Dict[str, Any]:
    body = {"name": "Network", "type": "knowledge", **fields}
    response = client.post(CATEGORIES, json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def draft(client, headers, category_id: str, **fields: Any) -> Dict[str, Any]:
    body = {
        "title": "Reset a VPN token",
        "content": "Open the self-service portal and choose Reset token.",
        "category_id": category_id,
        **fields,
    }
    response = client.post(KNOWLEDGE, json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def publish(client, headers, article_id: str) -> Dict[str, Any]:
    response = client.post(f"{KNOWLEDGE}/{article_id}/publish", headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["data"]


@pytest.fixture
def category(client, admin_headers) -> Dict[str, Any]:
    return create_category(client, admin_headers)


@pytest.fixture
def agent(client, admin_headers) -> Dict[str, Any]:
    return join(client, admin_headers, role="agent", name="Alex Agent")


# ============== Categories ==============

class TestCategories:

    def test_manager_creates_and_everyone_lists(self, client, admin_headers, member_headers, category):
        assert category["is_active"] is True
        assert category["type"] == "knowledge"

        response = client.get(CATEGORIES, headers=member_headers)

        assert response.status_code == 200
        assert [c["name"] for c in response.json()["data"]] == ["Network"]

    def test_regular_user_cannot_create(self, client, member_headers):
        response = client.post(CATEGORIES, json={"name": "Hardware"}, headers=member_headers)

        assert response.status_code == 403

    def test_name_is_unique_per_type(self, client, admin_headers, category):
        duplicate = client.post(CATEGORIES, json={"name": "network", "type": "knowledge"}, headers=admin_headers)
        assert duplicate.status_code == 409

        other_type = client.post(CATEGORIES, json={"name": "Network", "type": "incident"}, headers=admin_headers)
        assert other_type.status_code == 201

    def test_invalid_color_fails_validation(self, client, admin_headers):
        response = client.post(CATEGORIES, json={"name": "Hardware", "color": "red"}, headers=admin_headers)

        assert response.status_code == 400

    def test_subcategories_nest_one_level(self, client, admin_headers, category):
        child = create_category(client, admin_headers, name="VPN", parent_id=category["id"])
        assert child["parent_id"] == category["id"]

        response = client.post(
            CATEGORIES, json={"name": "Tokens", "type": "knowledge", "parent_id": child["id"]}, headers=admin_headers
        )
        assert response.status_code == 400

        children = client.get(CATEGORIES, params={"parent_id": category["id"]}, headers=admin_headers).json()["data"]
        assert [c["id"] for c in children] == [child["id"]]

    def test_unknown_parent_is_not_found(self, client, admin_headers):
        response = client.post(CATEGORIES, json={"name": "VPN", "parent_id": "missing"}, headers=admin_headers)

        assert response.status_code == 404

    def test_update_category(self, client, admin_headers, category):
        response = client.put(
            f"{CATEGORIES}/{category['id']}", json={"name": "Networking", "color": "#FF5733"}, headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Networking"
        assert data["color"] == "#FF5733"

    def test_deactivated_category_is_hidden_by_default(self, client, admin_headers, category):
        response = client.delete(f"{CATEGORIES}/{category['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"]["is_active"] is False

        assert client.get(CATEGORIES, headers=admin_headers).json()["data"] == []
        listed = client.get(CATEGORIES, params={"include_inactive": True}, headers=admin_headers).json()["data"]
        assert [c["id"] for c in listed] == [category["id"]]

    def test_permanent_delete_refused_while_in_use(self, client, admin_headers, category):
        child = create_category(client, admin_headers, name="VPN", parent_id=category["id"])
        url = f"{CATEGORIES}/{category['id']}/permanent"

        assert client.delete(url, headers=admin_headers).status_code == 400

        client.delete(f"{CATEGORIES}/{child['id']}/permanent", headers=admin_headers)
        draft(client, admin_headers, category["id"])
        assert client.delete(url, headers=admin_headers).status_code == 400

    def test_permanent_delete(self, client, admin_headers, category):
        response = client.delete(f"{CATEGORIES}/{category['id']}/permanent", headers=admin_headers)

        assert response.status_code == 200
        assert client.get(f"{CATEGORIES}/{category['id']}", headers=admin_headers).status_code == 404

    def test_categories_are_isolated_between_organizations(self, client, category):
        other = register(client, organization_name="Globex")

        response = client.get(f"{CATEGORIES}/{category['id']}", headers=bearer(other))

        assert response.status_code == 404


# ============== Articles ==============

class TestArticles:

    def test_draft_gets_ids_and_slug(self, client, admin_headers, admin, category):
        article = draft(client, admin_headers, category["id"], tags=["vpn"])

        assert re.fullmatch(r"KB-\d{4}-00001", article["article_id"])
        assert article["slug"] == "reset-a-vpn-token"
        assert article["status"] == "draft"
        assert article["version"] == 1
        assert article["visibility"] == "internal"
        assert article["author"]["id"] == admin["user"]["id"]

    def test_duplicate_title_gets_unique_slug(self, client, admin_headers, category):
        first = draft(client, admin_headers, category["id"])
        second = draft(client, admin_headers, category["id"])

        assert second["slug"] != first["slug"]
        assert second["slug"].startswith("reset-a-vpn-token-")

    def test_category_must_exist_and_be_active(self, client, admin_headers, category):
        body = {"title": "t", "content": "c", "category_id": "missing"}
        assert client.post(KNOWLEDGE, json=body, headers=admin_headers).status_code == 404

        client.delete(f"{CATEGORIES}/{category['id']}", headers=admin_headers)
        body["category_id"] = category["id"]
        assert client.post(KNOWLEDGE, json=body, headers=admin_headers).status_code == 400

    def test_regular_user_cannot_draft(self, client, member_headers, category):
        response = client.post(
            KNOWLEDGE, json={"title": "t", "content": "c", "category_id": category["id"]}, headers=member_headers
        )

        assert response.status_code == 403

    def test_lookup_by_kb_id_and_slug(self, client, admin_headers, category):
        article = draft(client, admin_headers, category["id"])

        by_kb_id = client.get(f"{KNOWLEDGE}/{article['article_id']}", headers=admin_headers)
        by_slug = client.get(f"{KNOWLEDGE}/{article['slug']}", headers=admin_headers)

        assert by_kb_id.json()["data"]["id"] == article["id"]
        assert by_slug.json()["data"]["id"] == article["id"]
        assert client.get(f"{KNOWLEDGE}/nothing-here", headers=admin_headers).status_code == 404

    def test_regular_user_reads_only_published_public_articles(self, client, admin_headers, member_headers, category):
        public = draft(client, admin_headers, category["id"], title="Public guide", visibility="public")
        internal = draft(client, admin_headers, category["id"], title="Internal runbook")

        assert client.get(f"{KNOWLEDGE}/{public['id']}", headers=member_headers).status_code == 404

        publish(client, admin_headers, public["id"])
        publish(client, admin_headers, internal["id"])

        assert client.get(f"{KNOWLEDGE}/{public['id']}", headers=member_headers).status_code == 200
        assert client.get(f"{KNOWLEDGE}/{internal['id']}", headers=member_headers).status_code == 404
        listed = client.get(KNOWLEDGE, headers=member_headers).json()["data"]
        assert [a["id"] for a in listed] == [public["id"]]
        assert len(client.get(KNOWLEDGE, headers=admin_headers).json()["data"]) == 2

    def test_only_author_or_manager_changes_an_article(self, client, admin_headers, agent, category):
        own = draft(client, bearer(agent), category["id"], title="Agent notes")
        other = draft(client, admin_headers, category["id"], title="Admin notes")

        assert client.post(f"{KNOWLEDGE}/{other['id']}/publish", headers=bearer(agent)).status_code == 403
        assert client.put(f"{KNOWLEDGE}/{other['id']}", json={"title": "Mine"}, headers=bearer(agent)).status_code == 403

        assert publish(client, bearer(agent), own["id"])["status"] == "published"
        assert client.post(f"{KNOWLEDGE}/{own['id']}/archive", headers=admin_headers).status_code == 200

    def test_content_edit_bumps_version(self, client, admin_headers, category):
        article = draft(client, admin_headers, category["id"])
        url = f"{KNOWLEDGE}/{article['id']}"

        retitled = client.put(url, json={"title": "Reset your VPN token"}, headers=admin_headers).json()["data"]
        assert retitled["version"] == 1

        revised = client.put(url, json={"content": "Call the service desk."}, headers=admin_headers).json()["data"]
        assert revised["version"] == 2
        assert revised["content"] == "Call the service desk."

    def test_publish_and_archive_lifecycle(self, client, admin_headers, category):
        article = draft(client, admin_headers, category["id"])
        url = f"{KNOWLEDGE}/{article['id']}"

        published = publish(client, admin_headers, article["id"])
        assert published["published_at"] is not None
        assert client.post(f"{url}/publish", headers=admin_headers).status_code == 400

        archived = client.post(f"{url}/archive", headers=admin_headers).json()["data"]
        assert archived["status"] == "archived"
        assert client.put(url, json={"title": "Revived"}, headers=admin_headers).status_code == 400

    def test_views_are_counted_on_request(self, client, admin_headers, category):
        article = draft(client, admin_headers, category["id"])
        url = f"{KNOWLEDGE}/{article['id']}"

        client.get(url, params={"increment_views": True}, headers=admin_headers)
        viewed = client.get(url, params={"increment_views": True}, headers=admin_headers).json()["data"]

        assert viewed["metrics"]["views"] == 2
        assert client.get(url, headers=admin_headers).json()["data"]["metrics"]["views"] == 2

    def test_feedback_on_published_article(self, client, admin_headers, member_headers, category):
        article = draft(client, admin_headers, category["id"], visibility="public")
        url = f"{KNOWLEDGE}/{article['id']}/feedback"

        assert client.post(url, json={"helpful": True}, headers=admin_headers).status_code == 400

        publish(client, admin_headers, article["id"])
        client.post(url, json={"helpful": True, "rating": 5}, headers=admin_headers)
        response = client.post(url, json={"rating": 4}, headers=member_headers)

        assert response.status_code == 200
        metrics = response.json()["data"]
        assert metrics["helpful_count"] == 1
        assert metrics["rating_count"] == 2
        assert metrics["avg_rating"] == 4.5
        assert client.post(url, json={"rating": 6}, headers=member_headers).status_code == 400

    def test_delete_by_author(self, client, admin_headers, agent, category):
        article = draft(client, bearer(agent), category["id"])

        assert client.delete(f"{KNOWLEDGE}/{article['id']}", headers=bearer(agent)).status_code == 200
        assert client.get(f"{KNOWLEDGE}/{article['id']}", headers=admin_headers).status_code == 404


# ============== Discovery ==============

class TestDiscovery:

    def test_search_matches_published_articles_only(self, client, admin_headers, category):
        published = draft(client, admin_headers, category["id"], title="VPN token reset")
        draft(client, admin_headers, category["id"], title="VPN split tunnel")
        draft(client, admin_headers, category["id"], title="Printer drivers")
        publish(client, admin_headers, published["id"])

        response = client.get(f"{KNOWLEDGE}/search", params={"q": "vpn"}, headers=admin_headers)

        assert response.status_code == 200
        assert [a["id"] for a in response.json()["data"]] == [published["id"]]

    def test_search_requires_query(self, client, admin_headers):
        assert client.get(f"{KNOWLEDGE}/search", headers=admin_headers).status_code == 400

    def test_popular_orders_by_views(self, client, admin_headers, category):
        quiet = draft(client, admin_headers, category["id"], title="Quiet")
        busy = draft(client, admin_headers, category["id"], title="Busy")
        for article in (quiet, busy):
            publish(client, admin_headers, article["id"])
        for _ in range(3):
            client.get(f"{KNOWLEDGE}/{busy['id']}", params={"increment_views": True}, headers=admin_headers)

        popular = client.get(f"{KNOWLEDGE}/popular", headers=admin_headers).json()["data"]

        assert [a["id"] for a in popular] == [busy["id"], quiet["id"]]

    def test_featured_lists_published_featured_articles(self, client, admin_headers, category):
        featured = draft(client, admin_headers, category["id"], title="Start here", is_featured=True)
        draft(client, admin_headers, category["id"], title="Unpublished", is_featured=True)
        publish(client, admin_headers, featured["id"])

        response = client.get(f"{KNOWLEDGE}/featured", headers=admin_headers)

        assert [a["id"] for a in response.json()["data"]] == [featured["id"]]

    def test_filters_by_tag_and_status(self, client, admin_headers, category):
        tagged = draft(client, admin_headers, category["id"], title="Tagged", tags=["vpn", "remote"])
        draft(client, admin_headers, category["id"], title="Untagged")

        by_tag = client.get(KNOWLEDGE, params={"tag": "remote"}, headers=admin_headers).json()["data"]
        published = client.get(KNOWLEDGE, params={"status": "published"}, headers=admin_headers).json()

        assert [a["id"] for a in by_tag] == [tagged["id"]]
        assert published["pagination"]["total"] == 0

    def test_stats(self, client, admin_headers, category):
        first = draft(client, admin_headers, category["id"], title="One")
        draft(client, admin_headers, category["id"], title="Two")
        publish(client, admin_headers, first["id"])
        client.get(f"{KNOWLEDGE}/{first['id']}", params={"increment_views": True}, headers=admin_headers)
        client.post(f"{KNOWLEDGE}/{first['id']}/feedback", json={"rating": 4}, headers=admin_headers)

        stats = client.get(f"{KNOWLEDGE}/stats", headers=admin_headers).json()["data"]

        assert stats["total_articles"] == 2
        assert stats["published_articles"] == 1
        assert stats["draft_articles"] == 1
        assert stats["total_views"] == 1
        assert stats["avg_rating"] == 4


# ============== Links ==============

class TestLinks:

    def test_link_incident_by_ticket_id(self, client, admin_headers, category):
        article = draft(client, admin_headers, category["id"])
        incident = client.post(
            "/api/v1/incidents", json={"title": "VPN down", "description": "No tunnel"}, headers=admin_headers
        ).json()["data"]
        url = f"{KNOWLEDGE}/{article['id']}/link-incident"

        linked = client.post(url, json={"incident_id": incident["incident_id"]}, headers=admin_headers)
        assert linked.status_code == 200
        assert linked.json()["data"]["linked_incidents"] == [incident["incident_id"]]

        assert client.post(url, json={"incident_id": incident["id"]}, headers=admin_headers).status_code == 400
        assert client.post(url, json={"incident_id": "INC-2024-99999"}, headers=admin_headers).status_code == 404

    def test_link_known_error(self, client, admin_headers, category):
        article = draft(client, admin_headers, category["id"])
        problem = client.post(
            "/api/v1/problems", json={"title": "DNS", "description": "Lookups time out"}, headers=admin_headers
        ).json()["data"]
        known = client.post(
            f"/api/v1/problems/{problem['id']}/known-error",
            json={"title": "DNS cache", "symptoms": "Timeouts", "root_cause": "Stale cache", "workaround": "Flush"},
            headers=admin_headers,
        ).json()["data"]["known_error"]
        url = f"{KNOWLEDGE}/{article['id']}/link-known-error"

        response = client.post(url, json={"ke_id": known["ke_id"]}, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["known_errors"] == [known["ke_id"]]
        assert data["linked_problems"] == [problem["problem_id"]]
        assert client.post(url, json={"ke_id": known["ke_id"]}, headers=admin_headers).status_code == 400
        assert client.post(url, json={"ke_id": "KE-00000000"}, headers=admin_headers).status_code == 404

    def test_regular_user_cannot_link(self, client, admin_headers, member_headers, category):
        article = draft(client, admin_headers, category["id"])

        response = client.post(
            f"{KNOWLEDGE}/{article['id']}/link-incident", json={"incident_id": "INC-2024-00001"}, headers=member_headers
        )

        assert response.status_code == 403
