"""Endpoint tests for /cidades, the reference shape for every resource."""
from urllib.parse import parse_qs, urlsplit


async def create_estado(client, auth_headers, sigla="SP", nome="São Paulo"):
    response = await client.post("/estados", json={"nome": nome, "sigla": sigla}, headers=auth_headers)
    assert response.status_code == 201
    return response.json()["idEstado"]


async def create_cidade(client, estado_id, nome):
    response = await client.post("/cidades", json={"nome": nome, "idEstado": estado_id})
    assert response.status_code == 201
    return response.json()


async def test_list_empty(client):
    response = await client.get("/cidades")
    assert response.status_code == 200

    body = response.json()
    assert body["data"] == []
    assert body["page"] == 1
    assert body["pageSize"] == 10
    assert body["totalCount"] == 0
    assert body["totalPages"] == 0
    assert body["hasNextPage"] is False
    assert body["hasPreviousPage"] is False
    assert body["links"] == [
        {"rel": "self", "href": "/cidades?page=1&pageSize=10", "method": "GET"},
    ]


async def test_create_returns_201_with_location_and_links(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)

    response = await client.post("/cidades", json={"nome": "Campinas", "idEstado": estado_id})
    assert response.status_code == 201

    body = response.json()
    assert body["nome"] == "Campinas"
    assert body["idEstado"] == estado_id
    assert response.headers["location"] == f"/cidades/{body['idCidade']}"
    assert [link["rel"] for link in body["links"]] == ["self", "update", "delete", "all"]
    assert body["links"][3]["href"] == "/cidades"


async def test_create_with_missing_estado_is_400(client):
    response = await client.post("/cidades", json={"nome": "Campinas", "idEstado": 999})
    assert response.status_code == 400
    assert "999" in response.json()["detail"]

    listing = await client.get("/cidades")
    assert listing.json()["totalCount"] == 0


async def test_get_by_id(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)
    cidade = await create_cidade(client, estado_id, "Santos")

    response = await client.get(f"/cidades/{cidade['idCidade']}")
    assert response.status_code == 200
    assert response.json()["nome"] == "Santos"


async def test_get_missing_is_404(client):
    response = await client.get("/cidades/42")
    assert response.status_code == 404


async def test_non_numeric_id_is_rejected(client):
    response = await client.get("/cidades/abc")
    assert response.status_code == 422


async def test_pagination_walks_through_pages(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)
    for i in range(25):
        await create_cidade(client, estado_id, f"Cidade {i:02d}")

    first = (await client.get("/cidades", params={"page": 1, "pageSize": 10})).json()
    assert len(first["data"]) == 10
    assert first["totalCount"] == 25
    assert first["totalPages"] == 3
    assert first["hasNextPage"] is True
    assert first["hasPreviousPage"] is False
    assert [link["rel"] for link in first["links"]] == ["self", "next", "last"]

    last = (await client.get("/cidades", params={"page": 3, "pageSize": 10})).json()
    assert len(last["data"]) == 5
    assert last["data"][-1]["nome"] == "Cidade 24"
    assert last["hasNextPage"] is False
    assert [link["rel"] for link in last["links"]] == ["self", "first", "previous"]


async def test_listed_items_omit_all_link(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)
    await create_cidade(client, estado_id, "Sorocaba")

    body = (await client.get("/cidades")).json()
    assert [link["rel"] for link in body["data"][0]["links"]] == ["self", "update", "delete"]


async def test_out_of_range_paging_is_clamped(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)
    await create_cidade(client, estado_id, "Jundiaí")

    body = (await client.get("/cidades", params={"page": -5, "pageSize": 500})).json()
    assert body["page"] == 1
    assert body["pageSize"] == 100
    assert len(body["data"]) == 1


async def test_page_past_the_end_is_empty(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)
    await create_cidade(client, estado_id, "Bauru")

    body = (await client.get("/cidades", params={"page": 5})).json()
    assert body["data"] == []
    assert body["totalCount"] == 1
    assert body["hasPreviousPage"] is True


async def test_filters_combine_and_are_echoed_in_links(client, auth_headers):
    sp = await create_estado(client, auth_headers, "SP")
    rj = await create_estado(client, auth_headers, "RJ", "Rio de Janeiro")
    await create_cidade(client, sp, "São José dos Campos")
    await create_cidade(client, rj, "São Gonçalo")
    await create_cidade(client, sp, "Campinas")

    response = await client.get("/cidades", params={"nome": "São", "estadoId": sp})
    body = response.json()

    assert body["totalCount"] == 1
    assert body["data"][0]["nome"] == "São José dos Campos"

    self_href = body["links"][0]["href"]
    query = parse_qs(urlsplit(self_href).query)
    assert query == {"page": ["1"], "pageSize": ["10"], "nome": ["São"], "estadoId": [str(sp)]}
    assert self_href.index("nome=") < self_href.index("estadoId=")


async def test_name_filter_is_case_sensitive(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)
    await create_cidade(client, estado_id, "Campinas")

    assert (await client.get("/cidades", params={"nome": "camp"})).json()["totalCount"] == 0
    assert (await client.get("/cidades", params={"nome": "Camp"})).json()["totalCount"] == 1


async def test_wildcards_in_filter_are_literal(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)
    await create_cidade(client, estado_id, "Campinas")

    assert (await client.get("/cidades", params={"nome": "%"})).json()["totalCount"] == 0


async def test_blank_filter_is_ignored(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)
    await create_cidade(client, estado_id, "Marília")

    body = (await client.get("/cidades", params={"nome": "   "})).json()
    assert body["totalCount"] == 1
    assert body["links"][0]["href"] == "/cidades?page=1&pageSize=10"


async def test_update_returns_204(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)
    cidade = await create_cidade(client, estado_id, "Franca")

    response = await client.put(
        f"/cidades/{cidade['idCidade']}", json={"nome": "Franca do Imperador", "idEstado": estado_id}
    )
    assert response.status_code == 204
    assert response.content == b""

    updated = (await client.get(f"/cidades/{cidade['idCidade']}")).json()
    assert updated["nome"] == "Franca do Imperador"


async def test_update_missing_is_404(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)
    response = await client.put("/cidades/77", json={"nome": "X", "idEstado": estado_id})
    assert response.status_code == 404


async def test_update_to_missing_estado_is_400(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)
    cidade = await create_cidade(client, estado_id, "Limeira")

    response = await client.put(f"/cidades/{cidade['idCidade']}", json={"nome": "Limeira", "idEstado": 555})
    assert response.status_code == 400

    unchanged = (await client.get(f"/cidades/{cidade['idCidade']}")).json()
    assert unchanged["idEstado"] == estado_id


async def test_update_keeping_a_dangling_reference_is_allowed(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)
    cidade = await create_cidade(client, estado_id, "Ourinhos")
    await client.delete(f"/estados/{estado_id}", headers=auth_headers)

    # Unchanged references are not re-validated
    response = await client.put(f"/cidades/{cidade['idCidade']}", json={"nome": "Ourinhos", "idEstado": estado_id})
    assert response.status_code == 204


async def test_delete_returns_204_then_404(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)
    cidade = await create_cidade(client, estado_id, "Assis")

    response = await client.delete(f"/cidades/{cidade['idCidade']}")
    assert response.status_code == 204

    assert (await client.get(f"/cidades/{cidade['idCidade']}")).status_code == 404
    assert (await client.delete(f"/cidades/{cidade['idCidade']}")).status_code == 404


async def test_delete_does_not_cascade(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)
    cidade = await create_cidade(client, estado_id, "Tatuí")

    assert (await client.delete(f"/estados/{estado_id}", headers=auth_headers)).status_code == 204

    orphan = await client.get(f"/cidades/{cidade['idCidade']}")
    assert orphan.status_code == 200
    assert orphan.json()["idEstado"] == estado_id


async def test_reference_deleted_between_check_and_write_is_not_caught(
    client, auth_headers, session_factory, monkeypatch
):
    """Known weak consistency: the existence check and the insert are separate statements."""
    import routers.cidades
    from models.estado import Estado
    from services.references import ensure_exists

    estado_id = await create_estado(client, auth_headers)

    async def check_then_lose_estado(db, model, key, label):
        await ensure_exists(db, model, key, label)
        async with session_factory() as other:
            await other.delete(await other.get(Estado, key))
            await other.commit()

    monkeypatch.setattr(routers.cidades, "ensure_exists", check_then_lose_estado)

    response = await client.post("/cidades", json={"nome": "Botucatu", "idEstado": estado_id})
    assert response.status_code == 201
    assert (await client.get(f"/estados/{estado_id}", headers=auth_headers)).status_code == 404


async def test_huge_page_number_is_an_empty_page(client, auth_headers):
    estado_id = await create_estado(client, auth_headers)
    await create_cidade(client, estado_id, "Avaré")

    response = await client.get("/cidades", params={"page": 10**19, "pageSize": 100})
    assert response.status_code == 200

    body = response.json()
    assert body["data"] == []
    assert body["page"] == 10**19
    assert body["totalCount"] == 1
    assert [link["rel"] for link in body["links"]] == ["self", "first", "previous"]
