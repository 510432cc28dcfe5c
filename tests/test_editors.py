def test_create_editor_hides_password(client, alice):
    _, headers = alice

    response = client.post(
        "/editors/", json={"email": "cutter@studio.io", "password": "pw", "tier": "premium"}, headers=headers
    )

    body = response.json()
    assert response.status_code == 201
    assert body["username"] == "cutter"
    assert body["tier"] == "premium"
    assert not any("password" in key for key in body)


def test_create_editor_requires_credentials(client, alice):
    _, headers = alice

    response = client.post("/editors/", json={"username": "nobody"}, headers=headers)

    assert response.status_code == 400


def test_list_editors_by_video(client, alice):
    _, headers = alice
    on_video = client.post("/editors/", json={"email": "a@studio.io", "password": "pw"}, headers=headers).json()
    client.post("/editors/", json={"email": "b@studio.io", "password": "pw"}, headers=headers)
    channel = client.post("/channels/", json={"name": "studio"}, headers=headers).json()
    video = client.post(
        "/videos/", json={"channel": {"id": channel["id"]}, "editors": [{"id": on_video["id"]}]}, headers=headers
    ).json()

    filtered = client.get("/editors/", params={"video_id": video["id"]}, headers=headers).json()

    assert [e["id"] for e in filtered] == [on_video["id"]]
    assert len(client.get("/editors/", headers=headers).json()) == 2


def test_update_editor(client, alice):
    _, headers = alice
    editor = client.post("/editors/", json={"email": "c@studio.io", "password": "pw"}, headers=headers).json()

    response = client.patch(f"/editors/{editor['id']}", json={"username": "colorist", "trial": True}, headers=headers)

    assert response.json()["username"] == "colorist"
    assert response.json()["trial"] is True
    assert response.json()["email"] == "c@studio.io"


def test_delete_editor_detaches_from_video(client, alice):
    _, headers = alice
    editor = client.post("/editors/", json={"email": "d@studio.io", "password": "pw"}, headers=headers).json()
    channel = client.post("/channels/", json={"name": "studio"}, headers=headers).json()
    video = client.post(
        "/videos/", json={"channel": {"id": channel["id"]}, "editors": [{"id": editor["id"]}]}, headers=headers
    ).json()

    response = client.delete(f"/editors/{editor['id']}", headers=headers)

    assert response.json() == {"message": "Editor deleted successfully"}
    assert client.get(f"/videos/{video['id']}", headers=headers).json()["editors"] == []
    assert client.get(f"/editors/{editor['id']}", headers=headers).status_code == 404
