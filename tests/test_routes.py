# tests/test_routes.py

"""
Router tests: auth is overridden, storage is the in-memory fake.
"""

from fastapi.testclient import TestClient

from core.decision import Decision
from core.errors import decision_to_http
from models.enums import DenyReason, ScopedRole


# -----------------------------------------------------
# Auth + error mapping
# -----------------------------------------------------
def test_missing_token_is_401(client: TestClient):
    response = client.get("/objects/10")
    assert response.status_code == 401


def test_unrelated_actor_gets_403(client: TestClient, login, actors):
    login(actors["stranger_builder"])
    assert client.get("/objects/10").status_code == 403
    assert client.get("/objects/10/media/photos").status_code == 403


def test_missing_resource_is_404(client: TestClient, login, actors):
    login(actors["owner"])
    assert client.get("/projects/123456").status_code == 404
    assert client.delete("/media/photos/123456").status_code == 404


def test_storage_failure_is_500(client: TestClient, login, actors, store):
    login(actors["owner"])
    store.fail_with = "Failed to fetch from objects"

    response = client.get("/objects/10")

    assert response.status_code == 500
    assert "failed" in response.json()["detail"]


# -----------------------------------------------------
# Objects
# -----------------------------------------------------
def test_create_and_delete_object(client: TestClient, login, actors):
    login(actors["owner"])

    response = client.post("/objects", json={"title": "Beach house"})
    assert response.status_code == 201
    created = response.json()["object"]
    assert created["owner_actor_id"] == actors["owner"].id

    assert client.delete(f"/objects/{created['id']}").status_code == 200
    assert client.get(f"/objects/{created['id']}").status_code == 404


def test_list_objects_owned_and_assigned(client: TestClient, login, actors):
    login(actors["builder"])
    ids = {o["id"] for o in client.get("/objects").json()["objects"]}
    assert ids == {10}

    login(actors["admin"])
    ids = {o["id"] for o in client.get("/objects").json()["objects"]}
    assert {10, 20} <= ids


def test_builder_cannot_update_object(client: TestClient, login, actors):
    login(actors["builder"])
    assert client.put("/objects/10", json={"title": "Mine now"}).status_code == 403

    login(actors["designer"])
    response = client.put("/objects/10", json={"title": "Renamed"})
    assert response.status_code == 200
    assert response.json()["object"]["title"] == "Renamed"


# -----------------------------------------------------
# Assignments
# -----------------------------------------------------
def test_owner_assigns_designer(client: TestClient, login, actors):
    login(actors["owner"])

    response = client.post("/objects/10/assignments", json={"actor_id": 7, "role": "designer"})

    assert response.status_code == 201
    assert response.json()["assignment"]["scoped_role"] == "DESIGNER"


def test_assigning_wrong_role_is_403(client: TestClient, login, actors):
    login(actors["owner"])
    response = client.post("/objects/10/assignments", json={"actor_id": 5, "role": "DESIGNER"})
    assert response.status_code == 403


def test_assigning_unknown_role_is_422(client: TestClient, login, actors):
    login(actors["owner"])
    response = client.post("/objects/10/assignments", json={"actor_id": 5, "role": "OWNER"})
    assert response.status_code == 422


def test_self_removal_and_forbidden_removal(client: TestClient, login, actors):
    login(actors["designer"])
    assert client.delete("/objects/10/assignments", params={"actor_id": 3}).status_code == 403

    login(actors["builder"])
    assert client.delete("/objects/10/assignments", params={"actor_id": 3}).status_code == 200
    assert client.get("/objects/10").status_code == 403


def test_list_assignments(client: TestClient, login, actors):
    login(actors["builder"])
    response = client.get("/objects/10/assignments")

    assert response.status_code == 200
    assert {a["actor_id"] for a in response.json()["assignments"]} == {2, 3}


# -----------------------------------------------------
# Projects & stages
# -----------------------------------------------------
def test_project_creation(client: TestClient, login, actors):
    login(actors["designer"])
    response = client.post("/objects/10/projects", json={"title": "Extension"})
    assert response.status_code == 201
    assert response.json()["project"]["status"] == "PLANNING"

    login(actors["builder"])
    assert client.post("/objects/10/projects", json={"title": "Shed"}).status_code == 403


def test_builder_changes_stage_status_only(client: TestClient, login, actors):
    login(actors["builder"])

    response = client.put("/stages/200", json={"status": "IN_PROGRESS"})
    assert response.status_code == 200
    assert response.json()["stage"]["status"] == "IN_PROGRESS"

    assert client.put("/stages/200", json={"title": "Renamed"}).status_code == 403


def test_owner_lists_projects_without_flag_filtering(client: TestClient, login, actors):
    login(actors["owner"])
    response = client.get("/objects/10/projects")

    assert response.status_code == 200
    assert [p["id"] for p in response.json()["projects"]] == [100]


# -----------------------------------------------------
# Media + visibility
# -----------------------------------------------------
def test_owner_sees_only_visible_photos(client: TestClient, login, actors):
    login(actors["owner"])
    owner_ids = {p["id"] for p in client.get("/objects/10/media/photos").json()["photos"]}
    assert owner_ids == {300}

    login(actors["designer"])
    designer_ids = {p["id"] for p in client.get("/objects/10/media/photos").json()["photos"]}
    assert designer_ids == {300, 301, 302}


def test_upload_defaults_and_hide(client: TestClient, login, actors):
    login(actors["owner"])
    owner_photo = client.post("/objects/10/media/photos", json={"file_name": "front.jpg"}).json()["record"]
    assert owner_photo["visible_to_owner"] is True
    assert owner_photo["uploaded_by"] == actors["owner"].id

    login(actors["builder"])
    builder_photo = client.post("/objects/10/media/photos", json={"file_name": "rebar.jpg"}).json()["record"]
    assert builder_photo["visible_to_owner"] is False

    response = client.put(f"/media/photos/{owner_photo['id']}/visibility", json={"visible_to_owner": False})
    assert response.status_code == 200

    login(actors["owner"])
    owner_ids = {p["id"] for p in client.get("/objects/10/media/photos").json()["photos"]}
    assert owner_photo["id"] not in owner_ids


def test_upload_into_foreign_folder_is_rejected(client: TestClient, login, store, actors):
    store.add("photo_folders", id=801, object_id=20)
    login(actors["builder"])

    response = client.post("/objects/10/media/photos", json={"file_name": "x.jpg", "folder_id": 801})
    assert response.status_code == 400


def test_owner_cannot_upload_models(client: TestClient, login, actors):
    login(actors["owner"])
    assert client.post("/objects/10/media/models", json={"file_name": "house.ifc"}).status_code == 403


def test_unknown_media_kind_is_422(client: TestClient, login, actors):
    login(actors["owner"])
    assert client.get("/objects/10/media/drawings").status_code == 422


# -----------------------------------------------------
# Comments
# -----------------------------------------------------
def test_comment_flow(client: TestClient, login, actors):
    login(actors["builder"])
    response = client.post("/photos/300/comments", json={"content": "Fixed", "x": 12.5, "y": 40})
    assert response.status_code == 201
    comment = response.json()["comment"]
    assert comment["author_id"] == actors["builder"].id
    assert comment["visible_to_owner"] is False

    login(actors["designer"])
    assert client.delete(f"/comments/{comment['id']}").status_code == 403

    login(actors["builder"])
    assert client.put(f"/comments/{comment['id']}/visibility", json={"visible_to_owner": True}).status_code == 200
    assert client.delete(f"/comments/{comment['id']}").status_code == 200


def test_owner_sees_only_visible_model_comments(client: TestClient, login, actors):
    login(actors["owner"])
    response = client.get("/models/500/comments")

    assert response.status_code == 200
    assert response.json()["comments"] == []


def test_comment_coordinates_validated(client: TestClient, login, actors):
    login(actors["owner"])
    response = client.post("/photos/300/comments", json={"content": "Off image", "x": 150})
    assert response.status_code == 422


# -----------------------------------------------------
# Health
# -----------------------------------------------------
def test_health_app(client: TestClient):
    response = client.get("/health/app")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_app_starts_with_all_routers(client: TestClient):
    # Startup hooks have run once the client context is entered
    response = client.get("/openapi.json")
    assert response.status_code == 200

    paths = response.json()["paths"]
    assert "/objects/{object_id}/folders" in paths
    assert "/media/{kind}/{record_id}/move" in paths


# -----------------------------------------------------
# Visibility toggles
# -----------------------------------------------------
def test_related_actors_toggle_media_visibility(client: TestClient, login, store, actors):
    store.add("videos", id=900, object_id=10, uploaded_by=3, visible_to_owner=False)

    login(actors["designer"])
    response = client.put("/media/photos/301/visibility", json={"visible_to_owner": True})
    assert response.status_code == 200
    assert response.json()["record"]["visible_to_owner"] is True
    assert client.put("/media/videos/900/visibility", json={"visible_to_owner": True}).status_code == 200

    login(actors["owner"])
    assert client.put("/media/photos/300/visibility", json={"visible_to_owner": False}).status_code == 200
    owner_ids = {p["id"] for p in client.get("/objects/10/media/photos").json()["photos"]}
    assert owner_ids == {301}

    login(actors["stranger_builder"])
    assert client.put("/media/photos/300/visibility", json={"visible_to_owner": True}).status_code == 403


def test_only_author_toggles_comment_visibility(client: TestClient, login, actors):
    login(actors["designer"])
    assert client.put("/model-comments/600/visibility", json={"visible_to_owner": True}).status_code == 403

    login(actors["builder"])
    assert client.put("/model-comments/600/visibility", json={"visible_to_owner": True}).status_code == 200


# -----------------------------------------------------
# Folders
# -----------------------------------------------------
def test_list_folders_in_order(client: TestClient, login, store, actors):
    store.add("photo_folders", id=802, object_id=10, name="Handover", order_index=-1)
    store.add("photo_folders", id=803, object_id=20, name="Elsewhere")
    login(actors["owner"])

    response = client.get("/objects/10/folders")

    assert response.status_code == 200
    assert [f["id"] for f in response.json()["folders"]] == [802, 800]


def test_create_folder_and_reject_duplicate_name(client: TestClient, login, actors):
    login(actors["builder"])

    response = client.post("/objects/10/folders", json={"name": "  Roof  "})
    assert response.status_code == 201
    assert response.json()["folder"]["name"] == "Roof"
    assert response.json()["folder"]["object_id"] == 10

    response = client.post("/objects/10/folders", json={"name": "Week 1"})
    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]

    # Names are unique per object only
    login(actors["other_owner"])
    assert client.post("/objects/20/folders", json={"name": "Week 1"}).status_code == 201


def test_rename_folder(client: TestClient, login, store, actors):
    store.add("photo_folders", id=802, object_id=10, name="Week 2")
    login(actors["owner"])

    assert client.put("/folders/802", json={"name": "Week 1"}).status_code == 400
    assert client.put("/folders/800", json={"name": "Week 1"}).status_code == 200

    response = client.put("/folders/800", json={"name": "Footings", "order_index": 3})
    assert response.status_code == 200
    assert response.json()["folder"]["name"] == "Footings"
    assert response.json()["folder"]["order_index"] == 3

    assert client.put("/folders/800", json={}).status_code == 400


def test_delete_folder_keeps_its_photos(client: TestClient, login, store, actors):
    store.update_record("photos", 300, {"folder_id": 800})
    store.add("videos", id=900, object_id=10, uploaded_by=3, folder_id=800)

    login(actors["stranger_designer"])
    assert client.delete("/folders/800").status_code == 403

    login(actors["owner"])
    assert client.delete("/folders/800").status_code == 200

    assert store.get_record("photo_folders", 800) is None
    assert store.get_record("photos", 300)["folder_id"] is None
    assert store.get_record("videos", 900)["folder_id"] is None
    assert client.delete("/folders/800").status_code == 404


# -----------------------------------------------------
# Moving media between folders
# -----------------------------------------------------
def test_move_photo_between_folders(client: TestClient, login, store, actors):
    login(actors["owner"])

    response = client.put("/media/photos/301/move", json={"folder_id": 800})
    assert response.status_code == 200
    assert response.json()["record"]["folder_id"] == 800

    response = client.put("/media/photos/301/move", json={"folder_id": None})
    assert response.status_code == 200
    assert response.json()["record"]["folder_id"] is None


def test_move_into_foreign_folder_is_404(client: TestClient, login, store, actors):
    store.add("photo_folders", id=801, object_id=20, name="Other site")
    login(actors["builder"])

    assert client.put("/media/photos/300/move", json={"folder_id": 801}).status_code == 404
    assert client.put("/media/photos/300/move", json={"folder_id": 555555}).status_code == 404
    assert store.get_record("photos", 300).get("folder_id") is None


def test_move_is_limited_to_photos_and_videos(client: TestClient, login, actors):
    login(actors["designer"])
    assert client.put("/media/documents/700/move", json={"folder_id": 800}).status_code == 400

    login(actors["stranger_builder"])
    assert client.put("/media/photos/300/move", json={"folder_id": 800}).status_code == 403


# -----------------------------------------------------
# Object listing ignores mismatched bindings
# -----------------------------------------------------
def test_list_objects_skips_mismatched_binding(client: TestClient, login, store, actors):
    # Actor 7 is a DESIGNER; a BUILDER binding grants nothing
    store.upsert_assignment(7, 20, ScopedRole.builder)
    login(actors["stranger_designer"])

    assert client.get("/objects").json()["objects"] == []
    assert client.get("/objects/20").status_code == 403


def test_conflict_maps_to_400():
    error = decision_to_http(Decision.deny(DenyReason.conflict, "Folder with this name already exists"))
    assert error.status_code == 400
