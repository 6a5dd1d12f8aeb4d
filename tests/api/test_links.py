"""
Link CRUD, visits and listing over HTTP.
"""

import pytest
from sqlalchemy import func, select

from linkshelf.db import AppAsyncSessionLocal
from linkshelf.models import ArchiveLink, Link, LinkTag, VisibilityType


def link_body(tags, /, **overrides) -> dict:
    body = {
        "title": "My first link",
        "url": "https://example.com/post",
        "description": "<p>A <b>great</b> read</p>",
        "tags": [tag.id for tag in tags],
        "visibility": VisibilityType.PUBLIC.value,
    }
    body.update(overrides)
    return body


async def tag_ids_of(link_id: int) -> set[int]:
    async with AppAsyncSessionLocal() as session:
        result = await session.execute(
            select(LinkTag.tag_id).where(LinkTag.link_id == link_id)
        )
        return set(result.scalars().all())


@pytest.mark.asyncio
async def test_create_link(client, make_user, make_tags, auth_headers):
    user = await make_user()
    tags = await make_tags()

    response = await client.post(
        "/links", json=link_body(tags[:2]), headers=await auth_headers(user)
    )

    assert response.status_code == 201
    link = response.json()["link"]
    assert len(link["hash"]) == 10
    assert link["slug"] == "my-first-link"
    assert link["excerpt"] == "A great read"
    assert link["views"] == 0
    assert link["visibility"] == "Public"
    assert link["author"]["id"] == user.id
    assert [tag["id"] for tag in link["tags"]] == [tags[0].id, tags[1].id]


@pytest.mark.asyncio
async def test_create_link_requires_authentication(client, make_tags):
    tags = await make_tags()

    response = await client.post("/links", json=link_body(tags[:1]))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_link_accepts_five_tags(client, make_user, make_tags, auth_headers):
    user = await make_user()
    tags = await make_tags()

    response = await client.post(
        "/links", json=link_body(tags[:5]), headers=await auth_headers(user)
    )

    assert response.status_code == 201
    assert len(response.json()["link"]["tags"]) == 5


@pytest.mark.asyncio
async def test_create_link_rejects_six_tags(client, make_user, make_tags, auth_headers):
    user = await make_user()
    tags = await make_tags()

    response = await client.post(
        "/links", json=link_body(tags[:6]), headers=await auth_headers(user)
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "The tags must not have more than 5 items."


@pytest.mark.asyncio
async def test_create_link_rejects_empty_tags(client, make_user, auth_headers):
    user = await make_user()

    response = await client.post(
        "/links", json=link_body([]), headers=await auth_headers(user)
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "The tags field is required."


@pytest.mark.asyncio
async def test_create_link_rejects_unknown_and_duplicate_tags(
    client, make_user, make_tags, auth_headers
):
    user = await make_user()
    tags = await make_tags()
    headers = await auth_headers(user)

    unknown = await client.post(
        "/links", json={**link_body(tags), "tags": [9999]}, headers=headers
    )
    assert unknown.status_code == 422
    assert unknown.json()["detail"] == "The selected tags.0 is invalid."

    repeated = await client.post(
        "/links",
        json={**link_body(tags), "tags": [tags[0].id, tags[0].id]},
        headers=headers,
    )
    assert repeated.status_code == 422
    assert repeated.json()["detail"] == "The tags.1 field has a duplicate value."


@pytest.mark.asyncio
async def test_create_link_validates_url_and_visibility(
    client, make_user, make_tags, auth_headers
):
    user = await make_user()
    tags = await make_tags()
    headers = await auth_headers(user)

    bad_url = await client.post(
        "/links", json=link_body(tags[:1], url="not a url"), headers=headers
    )
    assert bad_url.status_code == 422
    assert bad_url.json()["detail"] == "The url must be a valid URL."

    bad_visibility = await client.post(
        "/links", json=link_body(tags[:1], visibility=7), headers=headers
    )
    assert bad_visibility.status_code == 422
    assert bad_visibility.json()["detail"] == "The selected visibility is invalid."


@pytest.mark.asyncio
async def test_create_link_rejects_long_title(client, make_user, make_tags, auth_headers):
    user = await make_user()
    tags = await make_tags()

    response = await client.post(
        "/links", json=link_body(tags[:1], title="x" * 81), headers=await auth_headers(user)
    )

    assert response.status_code == 422
    assert (
        response.json()["detail"]
        == "The title must not be greater than 80 characters."
    )


@pytest.mark.asyncio
async def test_titles_sharing_a_slug_get_suffixes(
    client, make_user, make_tags, auth_headers
):
    user = await make_user()
    tags = await make_tags()
    headers = await auth_headers(user)

    slugs = []
    for _ in range(3):
        response = await client.post(
            "/links", json=link_body(tags[:1], title="Same Title"), headers=headers
        )
        slugs.append(response.json()["link"]["slug"])

    assert slugs == ["same-title", "same-title-1", "same-title-2"]


@pytest.mark.asyncio
async def test_private_link_is_hidden_from_other_users(
    client, make_user, make_link, auth_headers
):
    owner = await make_user()
    stranger = await make_user()
    link = await make_link(owner, visibility=VisibilityType.PRIVATE)

    as_stranger = await client.get(
        f"/links/{link.slug}", headers=await auth_headers(stranger)
    )
    anonymous = await client.get(f"/links/{link.slug}")
    as_owner = await client.get(f"/links/{link.slug}", headers=await auth_headers(owner))

    assert as_stranger.status_code == 403
    assert (
        as_stranger.json()["detail"]
        == "You cannot access private link that are not yours"
    )
    assert anonymous.status_code == 403
    assert as_owner.status_code == 200
    assert as_owner.json()["link"]["visibility"] == "Private"


@pytest.mark.asyncio
async def test_unknown_link_is_not_found(client):
    response = await client.get("/links/does-not-exist")

    assert response.status_code == 404
    assert response.json()["detail"] == "Link not found"


@pytest.mark.asyncio
async def test_update_replaces_the_whole_tag_set(
    client, make_user, make_tags, make_link, auth_headers
):
    user = await make_user()
    tags = await make_tags()
    link = await make_link(user, tags=tags[:3], description="Kept description")

    response = await client.put(
        f"/links/{link.slug}",
        json={
            "title": "Renamed link",
            "url": "https://example.org/",
            "tags": [tags[3].id, tags[4].id],
            "visibility": VisibilityType.PRIVATE.value,
        },
        headers=await auth_headers(user),
    )

    assert response.status_code == 200
    body = response.json()["link"]
    assert body["slug"] == "renamed-link"
    assert body["visibility"] == "Private"
    assert body["description"] == "Kept description"
    assert await tag_ids_of(link.id) == {tags[3].id, tags[4].id}
    assert {tag["id"] for tag in body["tags"]} == {tags[3].id, tags[4].id}


@pytest.mark.asyncio
async def test_failed_update_leaves_tags_untouched(
    client, make_user, make_tags, make_link, auth_headers
):
    user = await make_user()
    tags = await make_tags()
    link = await make_link(user, tags=tags[:2])

    response = await client.put(
        f"/links/{link.slug}",
        json=link_body(tags[:1], tags=[tags[2].id, 9999]),
        headers=await auth_headers(user),
    )

    assert response.status_code == 422
    assert await tag_ids_of(link.id) == {tags[0].id, tags[1].id}


@pytest.mark.asyncio
async def test_only_the_owner_may_update_or_delete(
    client, make_user, make_tags, make_link, auth_headers
):
    owner = await make_user()
    stranger = await make_user()
    tags = await make_tags()
    link = await make_link(owner, tags=tags[:1])
    headers = await auth_headers(stranger)

    update = await client.put(
        f"/links/{link.slug}", json=link_body(tags[:1]), headers=headers
    )
    delete = await client.delete(f"/links/{link.slug}", headers=headers)

    assert update.status_code == 403
    assert update.json()["detail"] == "You cannot update link that are not yours"
    assert delete.status_code == 403
    assert delete.json()["detail"] == "You cannot delete link that are not yours"


@pytest.mark.asyncio
async def test_delete_link_removes_its_associations(
    client, make_user, make_tags, make_link, make_archive, auth_headers
):
    user = await make_user()
    tags = await make_tags()
    link = await make_link(user, tags=tags[:2])
    await make_archive(user, links=[link])

    response = await client.delete(f"/links/{link.slug}", headers=await auth_headers(user))

    assert response.status_code == 200
    assert response.json() == {"status": True, "message": "Link deleted successfully"}
    async with AppAsyncSessionLocal() as session:
        assert await session.get(Link, link.id) is None
        memberships = await session.scalar(
            select(func.count(ArchiveLink.id)).where(ArchiveLink.link_id == link.id)
        )
        assert memberships == 0
    assert await tag_ids_of(link.id) == set()


@pytest.mark.asyncio
async def test_visit_counts_exactly_one_view(client, make_user, make_link):
    user = await make_user()
    link = await make_link(user, url="https://example.com/destination")

    response = await client.get(f"/g/{link.hash}")

    assert response.status_code == 200
    assert response.json() == {"url": "https://example.com/destination"}
    async with AppAsyncSessionLocal() as session:
        stored = await session.get(Link, link.id)
        assert stored.views == 1


@pytest.mark.asyncio
async def test_visit_private_link_of_someone_else(
    client, make_user, make_link, auth_headers
):
    owner = await make_user()
    link = await make_link(owner, visibility=VisibilityType.PRIVATE)

    anonymous = await client.get(f"/g/{link.hash}")
    as_owner = await client.get(f"/g/{link.hash}", headers=await auth_headers(owner))

    assert anonymous.status_code == 403
    assert as_owner.status_code == 200


@pytest.mark.asyncio
async def test_visit_unknown_hash(client):
    response = await client.get("/g/0000000000")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_listing_shows_public_links_only(client, make_user, make_link):
    user = await make_user()
    public = await make_link(user, "Public one")
    await make_link(user, "Hidden one", visibility=VisibilityType.PRIVATE)

    response = await client.get("/links")

    assert response.status_code == 200
    body = response.json()
    assert [link["id"] for link in body["data"]] == [public.id]
    assert body["meta"]["total"] == 1
    assert body["meta"]["from"] == 1
    assert body["meta"]["to"] == 1
    assert body["links"]["next"] is None


@pytest.mark.asyncio
async def test_listing_is_paginated_by_twenty(client, make_user, make_link):
    user = await make_user()
    for index in range(25):
        await make_link(user, f"Link {index}")

    first = (await client.get("/links")).json()
    second = (await client.get("/links", params={"page": 2})).json()

    assert len(first["data"]) == 20
    assert len(second["data"]) == 5
    assert first["meta"]["last_page"] == 2
    assert first["meta"]["per_page"] == 20
    assert first["links"]["next"] == "http://test/links?page=2"
    assert second["links"]["prev"] == "http://test/links?page=1"
    assert second["meta"]["from"] == 21
    assert second["meta"]["to"] == 25


@pytest.mark.asyncio
async def test_create_link_rejects_out_of_range_ids(
    client, make_user, make_tags, auth_headers
):
    user = await make_user()
    tags = await make_tags()
    headers = await auth_headers(user)

    huge_visibility = await client.post(
        "/links", json=link_body(tags[:1], visibility=10**20), headers=headers
    )
    assert huge_visibility.status_code == 422
    assert huge_visibility.json()["detail"] == "The selected visibility is invalid."

    zero_tag = await client.post(
        "/links", json=link_body(tags[:1], tags=[0]), headers=headers
    )
    assert zero_tag.status_code == 422
    assert zero_tag.json()["detail"] == "The selected tags.0 is invalid."


@pytest.mark.asyncio
async def test_anonymous_writes_on_unknown_link_are_unauthenticated(client):
    update = await client.put("/links/does-not-exist", json={})
    delete = await client.delete("/links/does-not-exist")

    assert update.status_code == 401
    assert delete.status_code == 401
