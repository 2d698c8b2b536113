"""
HTTP tests for the import and contact-list routers.
"""
import json

from outreach.config import get_settings
from outreach.services.csv_import_service import build_list_name

CSV_TEXT = "Email,First Name,Last Name,Company,Status\n" \
           "john@x.com,John,Doe,\"Acme, Inc\",Replied\n" \
           ",,,,\n" \
           "jane@x.com,Jane,Roe,Globex,Meeting Scheduled\n"


def _upload(client, headers, text=CSV_TEXT, file_name="prospects.csv", column_mapping=None):
    data = {}
    if column_mapping is not None:
        data["column_mapping"] = json.dumps(column_mapping)
    return client.post(
        "/api/import/preview",
        files={"file": (file_name, text.encode("utf-8"), "text/csv")},
        data=data,
        headers=headers,
    )


class TestAuth:

    def test_missing_token(self, client):
        assert client.get("/api/contact-lists/").status_code == 401

    def test_invalid_token(self, client):
        response = client.get(
            "/api/contact-lists/", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401


class TestPreview:

    def test_preview(self, client, auth_headers):
        response = _upload(client, auth_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["headers"] == ["Email", "First Name", "Last Name", "Company", "Status"]
        assert body["column_mapping"]["company"] == "Company"
        assert body["total_rows"] == 3
        assert body["importable_count"] == 2
        assert body["contacts"][0]["company"] == "Acme, Inc"
        assert body["contacts"][0]["status"] == "replied"
        assert body["contacts"][2]["status"] == "meeting_scheduled"

    def test_preview_with_mapping_override(self, client, auth_headers):
        response = _upload(client, auth_headers, column_mapping={"company": ""})
        assert response.status_code == 200
        assert response.json()["contacts"][0]["company"] is None

    def test_preview_bad_mapping(self, client, auth_headers):
        response = _upload(client, auth_headers, column_mapping={"email": "Nope"})
        assert response.status_code == 400

    def test_preview_header_only(self, client, auth_headers):
        response = _upload(client, auth_headers, text="Email,First Name\n")
        assert response.status_code == 400

    def test_preview_rejects_other_extensions(self, client, auth_headers):
        response = _upload(client, auth_headers, file_name="prospects.xlsx")
        assert response.status_code == 400

    def test_preview_rejects_oversized_upload(self, client, auth_headers, monkeypatch):
        settings = get_settings()
        monkeypatch.setattr(settings, "max_upload_bytes", 16)
        response = _upload(client, auth_headers)
        assert response.status_code == 413

    def test_preview_accepts_upload_at_limit(self, client, auth_headers, monkeypatch):
        settings = get_settings()
        monkeypatch.setattr(settings, "max_upload_bytes", len(CSV_TEXT.encode("utf-8")))
        response = _upload(client, auth_headers)
        assert response.status_code == 200
        assert response.json()["total_rows"] == 3


class TestExecute:

    def _contacts(self, client, auth_headers):
        return _upload(client, auth_headers).json()["contacts"]

    def test_execute_import(self, client, auth_headers):
        contacts = self._contacts(client, auth_headers)
        response = client.post(
            "/api/import/execute",
            json={"file_name": "prospects.csv", "contacts": contacts},
            headers=auth_headers,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["imported"] == 2
        assert body["skipped"] == 1
        assert body["contact_list"]["name"] == build_list_name("prospects")
        assert body["contact_list"]["contact_count"] == 2
        assert body["contact_list"]["source"] == "csv_import"

        list_id = body["contact_list"]["id"]
        stored = client.get(f"/api/contact-lists/{list_id}/contacts", headers=auth_headers)
        assert [c["email"] for c in stored.json()] == ["john@x.com", "jane@x.com"]

    def test_duplicate_file_is_conflict(self, client, auth_headers):
        contacts = self._contacts(client, auth_headers)
        payload = {"file_name": "prospects.csv", "contacts": contacts}
        assert client.post("/api/import/execute", json=payload, headers=auth_headers).status_code == 201

        response = client.post("/api/import/execute", json=payload, headers=auth_headers)
        assert response.status_code == 409
        assert "prospects.csv" in response.json()["detail"]

    def test_no_contacts_with_data(self, client, auth_headers):
        response = client.post(
            "/api/import/execute",
            json={"file_name": "empty.csv", "contacts": [{"email": " "}]},
            headers=auth_headers,
        )
        assert response.status_code == 400


class TestContactLists:

    def test_create_manual_list(self, client, auth_headers):
        response = client.post(
            "/api/contact-lists/", json={"name": "Warm intros"}, headers=auth_headers
        )
        assert response.status_code == 201
        body = response.json()
        assert body["name"] == build_list_name("Warm intros")
        assert body["source"] == "manual"
        assert body["contact_count"] == 0

        again = client.post(
            "/api/contact-lists/", json={"name": "warm intros"}, headers=auth_headers
        )
        assert again.status_code == 409

    def test_blank_manual_list_name(self, client, auth_headers):
        response = client.post("/api/contact-lists/", json={"name": "  "}, headers=auth_headers)
        assert response.status_code == 400

    def test_lists_are_per_user(self, client, auth_headers, other_auth_headers):
        created = client.post(
            "/api/contact-lists/", json={"name": "Mine"}, headers=auth_headers
        ).json()
        assert client.get("/api/contact-lists/", headers=other_auth_headers).json() == []
        response = client.get(f"/api/contact-lists/{created['id']}", headers=other_auth_headers)
        assert response.status_code == 404

    def test_delete_and_recount(self, client, auth_headers):
        contacts = _upload(client, auth_headers).json()["contacts"]
        list_id = client.post(
            "/api/import/execute",
            json={"file_name": "prospects.csv", "contacts": contacts},
            headers=auth_headers,
        ).json()["contact_list"]["id"]

        recount = client.post(f"/api/contact-lists/{list_id}/recount", headers=auth_headers)
        assert recount.json() == {"list_id": list_id, "contact_count": 2}

        deleted = client.delete(f"/api/contact-lists/{list_id}", headers=auth_headers)
        assert deleted.json()["contacts_deleted"] == 2
        assert client.get(f"/api/contact-lists/{list_id}", headers=auth_headers).status_code == 404

    def test_statuses(self, client):
        statuses = client.get("/api/contact-lists/statuses").json()
        assert statuses[0] == {"value": "not_contacted", "label": "Not Contacted", "order": 1}
        assert len(statuses) == 8

    def test_rename_list(self, client, auth_headers):
        created = client.post(
            "/api/contact-lists/", json={"name": "Warm intros"}, headers=auth_headers
        ).json()
        response = client.put(
            f"/api/contact-lists/{created['id']}",
            json={"name": "Hot intros", "description": "Follow up this week"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Hot intros"
        assert response.json()["description"] == "Follow up this week"

    def test_rename_list_conflicts_and_validation(self, client, auth_headers, other_auth_headers):
        first = client.post(
            "/api/contact-lists/", json={"name": "Alpha"}, headers=auth_headers
        ).json()
        second = client.post(
            "/api/contact-lists/", json={"name": "Beta"}, headers=auth_headers
        ).json()
        url = f"/api/contact-lists/{second['id']}"

        clash = client.put(url, json={"name": first["name"].upper()}, headers=auth_headers)
        assert clash.status_code == 409
        assert client.put(url, json={"name": second["name"]}, headers=auth_headers).status_code == 200
        assert client.put(url, json={"name": " "}, headers=auth_headers).status_code == 400
        assert client.put(url, json={"name": "X"}, headers=other_auth_headers).status_code == 404


class TestContacts:

    def _import(self, client, auth_headers, file_name="prospects.csv"):
        contacts = _upload(client, auth_headers).json()["contacts"]
        return client.post(
            "/api/import/execute",
            json={"file_name": file_name, "contacts": contacts},
            headers=auth_headers,
        ).json()["contact_list"]["id"]

    def _count(self, client, auth_headers, list_id):
        return client.get(f"/api/contact-lists/{list_id}", headers=auth_headers).json()["contact_count"]

    def test_list_contacts_filters(self, client, auth_headers):
        first = self._import(client, auth_headers)
        self._import(client, auth_headers, file_name="other.csv")

        everything = client.get("/api/contacts/", headers=auth_headers).json()
        assert len(everything) == 4
        in_first = client.get("/api/contacts/", params={"list_id": first}, headers=auth_headers).json()
        assert [c["email"] for c in in_first] == ["john@x.com", "jane@x.com"]
        replied = client.get("/api/contacts/", params={"status": "replied"}, headers=auth_headers).json()
        assert {c["email"] for c in replied} == {"john@x.com"}
        assert len(replied) == 2

        missing = client.get("/api/contacts/", params={"list_id": "nope"}, headers=auth_headers)
        assert missing.status_code == 404

    def test_update_and_move_contact(self, client, auth_headers):
        source = self._import(client, auth_headers)
        target = client.post(
            "/api/contact-lists/", json={"name": "Qualified"}, headers=auth_headers
        ).json()["id"]
        contact = client.get(f"/api/contact-lists/{source}/contacts", headers=auth_headers).json()[0]

        response = client.put(
            f"/api/contacts/{contact['id']}",
            json={"status": "qualified", "list_id": target},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "qualified"
        assert response.json()["list_id"] == target
        assert self._count(client, auth_headers, source) == 1
        assert self._count(client, auth_headers, target) == 1

    def test_update_contact_errors(self, client, auth_headers, other_auth_headers):
        source = self._import(client, auth_headers)
        contact = client.get(f"/api/contact-lists/{source}/contacts", headers=auth_headers).json()[0]
        url = f"/api/contacts/{contact['id']}"

        assert client.put(url, json={"status": "ghosted"}, headers=auth_headers).status_code == 422
        assert client.put(url, json={"status": None}, headers=auth_headers).status_code == 400
        assert client.put(url, json={"list_id": "nope"}, headers=auth_headers).status_code == 404
        assert client.put(url, json={"company": "X"}, headers=other_auth_headers).status_code == 404
        assert self._count(client, auth_headers, source) == 2

    def test_delete_contact(self, client, auth_headers, other_auth_headers):
        source = self._import(client, auth_headers)
        contact = client.get(f"/api/contact-lists/{source}/contacts", headers=auth_headers).json()[0]
        url = f"/api/contacts/{contact['id']}"

        assert client.delete(url, headers=other_auth_headers).status_code == 404
        assert client.delete(url, headers=auth_headers).json() == {"message": "Contact deleted"}
        assert client.delete(url, headers=auth_headers).status_code == 404
        assert self._count(client, auth_headers, source) == 1


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
