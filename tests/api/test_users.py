"""
Profile reads and owner-only profile and banner updates.
"""

import pytest

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64


@pytest.mark.asyncio
async def test_authenticated_user(client, make_user, auth_headers):
    user = await make_user()

    response = await client.get("/user", headers=await auth_headers(user))

    assert response.status_code == 200
    assert response.json()["user"]["username"] == user.username


@pytest.mark.asyncio
async def test_authenticated_user_requires_token(client):
    response = await client.get("/user")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_profile_reports_ownership(client, make_user, auth_headers):
    user = await make_user()
    other = await make_user()

    anonymous = await client.get(f"/user/{user.username}")
    as_owner = await client.get(
        f"/user/{user.username}", headers=await auth_headers(user)
    )
    as_other = await client.get(
        f"/user/{user.username}", headers=await auth_headers(other)
    )

    assert anonymous.status_code == 200
    assert anonymous.json()["owner"] is False
    assert as_owner.json()["owner"] is True
    assert as_other.json()["owner"] is False
    assert as_owner.json()["user"]["id"] == user.id


@pytest.mark.asyncio
async def test_unknown_profile(client):
    response = await client.get("/user/ghost_user")

    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"


@pytest.mark.asyncio
async def test_anonymous_profile_updates_on_unknown_user_are_unauthenticated(client):
    banner = await client.put("/user/ghost_user/update-banner")
    profile = await client.put("/user/ghost_user/update-profile", data={"name": "Ghost"})

    assert banner.status_code == 401
    assert profile.status_code == 401


@pytest.mark.asyncio
async def test_update_profile_fields(client, make_user, auth_headers):
    user = await make_user()

    response = await client.put(
        f"/user/{user.username}/update-profile",
        data={"name": "New Name", "username": "new.handle"},
        headers=await auth_headers(user),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["owner"] is True
    assert body["user"]["name"] == "New Name"
    assert body["user"]["username"] == "new.handle"
    assert (await client.get("/user/new.handle")).status_code == 200


@pytest.mark.asyncio
async def test_update_profile_keeps_own_username(client, make_user, auth_headers):
    user = await make_user("keep_me")

    response = await client.put(
        f"/user/{user.username}/update-profile",
        data={"username": "keep_me"},
        headers=await auth_headers(user),
    )

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_update_profile_rejects_taken_username(client, make_user, auth_headers):
    user = await make_user()
    await make_user("taken_name")

    response = await client.put(
        f"/user/{user.username}/update-profile",
        data={"username": "taken_name"},
        headers=await auth_headers(user),
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "The username has already been taken."


@pytest.mark.asyncio
async def test_update_profile_of_someone_else(client, make_user, auth_headers):
    user = await make_user()
    other = await make_user()

    response = await client.put(
        f"/user/{user.username}/update-profile",
        data={"name": "Hijacked"},
        headers=await auth_headers(other),
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "You cannot update profile that are not yours"


@pytest.mark.asyncio
async def test_update_avatar_stores_the_image(
    client, make_user, auth_headers, media_root
):
    user = await make_user()

    response = await client.put(
        f"/user/{user.username}/update-profile",
        files={"image": ("me.jpg", JPEG_BYTES, "image/jpeg")},
        headers=await auth_headers(user),
    )

    assert response.status_code == 200
    image_url = response.json()["user"]["image_url"]
    assert image_url.startswith("http://test/storage/avatar/")
    relative = image_url.removeprefix("http://test/storage/")
    assert (media_root / relative).read_bytes() == JPEG_BYTES


@pytest.mark.asyncio
async def test_update_banner_replaces_previous_file(
    client, make_user, auth_headers, media_root
):
    user = await make_user()
    headers = await auth_headers(user)
    url = f"/user/{user.username}/update-banner"

    first = await client.put(
        url, files={"banner": ("one.png", PNG_BYTES, "image/png")}, headers=headers
    )
    second = await client.put(
        url, files={"banner": ("two.png", PNG_BYTES, "image/png")}, headers=headers
    )

    assert first.status_code == 200
    assert second.status_code == 200
    old = first.json()["user"]["banner_url"].removeprefix("http://test/storage/")
    new = second.json()["user"]["banner_url"].removeprefix("http://test/storage/")
    assert old != new
    assert not (media_root / old).exists()
    assert (media_root / new).exists()

    served = await client.get(f"/storage/{new}")
    assert served.status_code == 200
    assert served.content == PNG_BYTES


@pytest.mark.asyncio
async def test_update_banner_requires_a_file(client, make_user, auth_headers):
    user = await make_user()

    response = await client.put(
        f"/user/{user.username}/update-banner", headers=await auth_headers(user)
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "The banner field is required."


@pytest.mark.asyncio
async def test_update_banner_rejects_other_file_types(client, make_user, auth_headers):
    user = await make_user()

    response = await client.put(
        f"/user/{user.username}/update-banner",
        files={"banner": ("notes.txt", b"plain text", "text/plain")},
        headers=await auth_headers(user),
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "The banner must be a file of type: jpg, jpeg, png."


@pytest.mark.asyncio
async def test_update_banner_of_someone_else(client, make_user, auth_headers):
    user = await make_user()
    other = await make_user()

    response = await client.put(
        f"/user/{user.username}/update-banner",
        files={"banner": ("one.png", PNG_BYTES, "image/png")},
        headers=await auth_headers(other),
    )

    assert response.status_code == 403
