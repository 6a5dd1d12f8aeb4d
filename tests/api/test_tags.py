import pytest


@pytest.mark.asyncio
async def test_list_tags(client, make_tags):
    tags = await make_tags("python", "design")

    response = await client.get("/tags")

    assert response.status_code == 200
    assert response.json() == {
        "data": [{"id": tag.id, "name": tag.name} for tag in tags]
    }


@pytest.mark.asyncio
async def test_list_tags_when_empty(client):
    response = await client.get("/tags")

    assert response.json() == {"data": []}
