# tests/test_auth_api.py
"""
Tests for registration, login, token refresh and password changes.
"""

from tests.conftest import PASSWORD, bearer, register


# ============== Registration ==============

class TestRegister:

    def test_founder_becomes_admin_of_new_organization(self, client):
        data = register(client, email="Founder@Example.com", organization_name="Acme IT")

        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == "founder@example.com"
        assert data["user"]["role"] == "admin"
        assert data["user"]["organization_id"]
        assert "password_hash" not in data["user"]

    def test_joining_user_is_regular_member(self, member, organization_id):
        assert member["user"]["role"] == "user"
        assert member["user"]["organization_id"] == organization_id

    def test_duplicate_email_conflicts(self, client):
        register(client, email="dup@example.com")

        response = client.post(
            "/api/v1/auth/register",
            json={"email": "dup@example.com", "name": "Again", "password": PASSWORD},
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    def test_without_organization_name_user_has_no_organization(self, client, organization_id):
        response = client.post(
            "/api/v1/auth/register",
            json={"email": "x@example.com", "name": "X", "password": PASSWORD, "organization_id": organization_id},
        )

        assert response.status_code == 201
        user = response.json()["data"]["user"]
        assert user["organization_id"] is None
        assert user["role"] == "user"

    def test_short_password_fails_validation(self, client):
        response = client.post(
            "/api/v1/auth/register",
            json={"email": "x@example.com", "name": "X", "password": "short"},
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["field"] == "password"

    def test_second_organization_with_same_name_gets_unique_slug(self, client, admin_headers):
        other = register(client, organization_name="Acme IT")

        first = client.get("/api/v1/organizations/current", headers=admin_headers).json()["data"]
        second = client.get("/api/v1/organizations/current", headers=bearer(other)).json()["data"]

        assert first["slug"] == "acme-it"
        assert second["slug"].startswith("acme-it-")


# ============== Login & Tokens ==============

class TestLogin:

    def test_login_returns_token_pair(self, client, admin):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": admin["user"]["email"], "password": PASSWORD},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["user"]["last_login_at"] is not None

    def test_wrong_password_is_unauthorized(self, client, admin):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": admin["user"]["email"], "password": "not-the-password"},
        )

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"]["message"] == "Invalid email or password"

    def test_me_requires_a_token(self, client):
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"

    def test_me_returns_current_user(self, client, admin, admin_headers):
        response = client.get("/api/v1/auth/me", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["id"] == admin["user"]["id"]

    def test_refresh_issues_new_access_token(self, client, admin):
        response = client.post("/api/v1/auth/refresh", json={"refresh_token": admin["refresh_token"]})

        assert response.status_code == 200
        new_tokens = response.json()["data"]
        assert client.get("/api/v1/auth/me", headers=bearer(new_tokens)).status_code == 200

    def test_access_token_is_not_a_refresh_token(self, client, admin):
        response = client.post("/api/v1/auth/refresh", json={"refresh_token": admin["access_token"]})

        assert response.status_code == 401

    def test_refresh_token_cannot_authenticate_requests(self, client, admin):
        headers = {"Authorization": f"Bearer {admin['refresh_token']}"}

        assert client.get("/api/v1/auth/me", headers=headers).status_code == 401


# ============== Password ==============

class TestChangePassword:

    def test_change_password_then_login_with_new_one(self, client, admin, admin_headers):
        response = client.post(
            "/api/v1/auth/change-password",
            json={"current_password": PASSWORD, "new_password": "an0ther-passw0rd"},
            headers=admin_headers,
        )
        assert response.status_code == 200

        login = client.post(
            "/api/v1/auth/login",
            json={"email": admin["user"]["email"], "password": "an0ther-passw0rd"},
        )
        assert login.status_code == 200

    def test_wrong_current_password(self, client, admin_headers):
        response = client.post(
            "/api/v1/auth/change-password",
            json={"current_password": "wrong-password", "new_password": "an0ther-passw0rd"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Current password is incorrect"


# ============== Organization Membership ==============

class TestOrganizationMembers:

    url = "/api/v1/organizations/current/members"

    def test_admin_adds_registered_user(self, client, admin_headers, organization_id):
        newcomer = register(client, name="Nia Newcomer")

        response = client.post(self.url, json={"email": newcomer["user"]["email"], "role": "agent"}, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["organization_id"] == organization_id
        assert data["role"] == "agent"
        members = client.get(self.url, headers=admin_headers).json()["data"]
        assert newcomer["user"]["id"] in [m["id"] for m in members]

    def test_only_admin_adds_members(self, client, member_headers):
        newcomer = register(client)

        response = client.post(self.url, json={"email": newcomer["user"]["email"]}, headers=member_headers)

        assert response.status_code == 403

    def test_unknown_email_is_not_found(self, client, admin_headers):
        response = client.post(self.url, json={"email": "nobody@example.com"}, headers=admin_headers)

        assert response.status_code == 404

    def test_existing_member_conflicts(self, client, admin_headers, member):
        response = client.post(self.url, json={"email": member["user"]["email"]}, headers=admin_headers)

        assert response.status_code == 409

    def test_user_of_another_organization_is_rejected(self, client, admin_headers):
        outsider = register(client, organization_name="Globex")

        response = client.post(self.url, json={"email": outsider["user"]["email"]}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "User already belongs to another organization"

    def test_unknown_role_fails_validation(self, client, admin_headers):
        newcomer = register(client)

        response = client.post(self.url, json={"email": newcomer["user"]["email"], "role": "owner"}, headers=admin_headers)

        assert response.status_code == 400

    def test_admin_changes_member_role(self, client, admin_headers, member, member_headers):
        response = client.put(f"{self.url}/{member['user']['id']}", json={"role": "manager"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "manager"
        assert client.get("/api/v1/auth/me", headers=member_headers).json()["data"]["role"] == "manager"

    def test_admin_cannot_demote_themselves(self, client, admin, admin_headers):
        response = client.put(f"{self.url}/{admin['user']['id']}", json={"role": "user"}, headers=admin_headers)

        assert response.status_code == 400

    def test_removed_member_loses_access(self, client, admin_headers, member, member_headers):
        response = client.delete(f"{self.url}/{member['user']['id']}", headers=admin_headers)

        assert response.status_code == 200
        denied = client.get("/api/v1/organizations/current", headers=member_headers)
        assert denied.status_code == 403
        assert denied.json()["error"]["message"] == "No organization selected"

    def test_admin_cannot_remove_themselves(self, client, admin, admin_headers):
        response = client.delete(f"{self.url}/{admin['user']['id']}", headers=admin_headers)

        assert response.status_code == 400

    def test_member_of_other_organization_is_not_found(self, client, admin_headers):
        outsider = register(client, organization_name="Globex")

        response = client.delete(f"{self.url}/{outsider['user']['id']}", headers=admin_headers)

        assert response.status_code == 404
