"""Endpoint tests for the fleet resources: hierarchy, motos, trackers and service records."""
from datetime import datetime, timedelta, timezone

import pytest

from security.tokens import create_JWT_access_token


async def post(client, path, payload, headers=None):
    response = await client.post(path, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
async def setor_id(client, auth_headers):
    """Estado -> Cidade -> Unidade -> Setor chain."""
    estado = await post(client, "/estados", {"nome": "São Paulo", "sigla": "SP"}, auth_headers)
    cidade = await post(client, "/cidades", {"nome": "São Paulo", "idEstado": estado["idEstado"]})
    unidade = await post(client, "/unidades", {"nome": "Pátio Butantã", "idCidade": cidade["idCidade"]})
    setor = await post(client, "/setores", {"nome": "Manutenção", "idUnidade": unidade["idUnidade"]})
    return setor["idSetor"]


@pytest.fixture
async def moto_id(client, auth_headers, setor_id):
    moto = await post(
        client,
        "/motos",
        {"modelo": "Mottu Sport", "placa": "ABC1D23", "status": "Disponível", "idSetor": setor_id},
        auth_headers,
    )
    return moto["idMoto"]


# -----------------------------------------------------------------------------
# Health / root
# -----------------------------------------------------------------------------

async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == 200
    assert body["statusMessage"] == "OK"
    assert body["timestamp"]


async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert "/docs" in response.json()["message"]


# -----------------------------------------------------------------------------
# Authentication
# -----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "path",
    ["/motos", "/estados", "/defeitos", "/manutencoes", "/localizacoes", "/rfid"],
)
async def test_protected_routes_require_a_token(client, path):
    response = await client.get(path)
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.parametrize(
    "path",
    ["/cidades", "/unidades", "/setores", "/defeitos-moto", "/historicos", "/lora"],
)
async def test_open_routes_need_no_token(client, path):
    assert (await client.get(path)).status_code == 200


async def test_garbage_token_is_401(client):
    response = await client.get("/motos", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_expired_token_is_401(client):
    token = create_JWT_access_token("someone", expires_delta=timedelta(minutes=-5))
    response = await client.get("/motos", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Access token has expired"


async def test_valid_token_is_accepted(client, auth_headers):
    assert (await client.get("/motos", headers=auth_headers)).status_code == 200


# -----------------------------------------------------------------------------
# Hierarchy
# -----------------------------------------------------------------------------

async def test_unidade_requires_existing_cidade(client):
    response = await client.post("/unidades", json={"nome": "Pátio", "idCidade": 12})
    assert response.status_code == 400


async def test_setor_requires_existing_unidade(client):
    response = await client.post("/setores", json={"nome": "Pintura", "idUnidade": 3})
    assert response.status_code == 400


async def test_setores_filter_by_unidade(client, setor_id):
    setor = (await client.get(f"/setores/{setor_id}")).json()

    body = (await client.get("/setores", params={"unidadeId": setor["idUnidade"]})).json()
    assert body["totalCount"] == 1
    assert body["links"][0]["href"] == f"/setores?page=1&pageSize=10&unidadeId={setor['idUnidade']}"

    assert (await client.get("/setores", params={"unidadeId": 999})).json()["totalCount"] == 0


async def test_estados_sigla_is_case_insensitive_exact(client, auth_headers):
    await post(client, "/estados", {"nome": "São Paulo", "sigla": "SP"}, auth_headers)
    await post(client, "/estados", {"nome": "Espírito Santo", "sigla": "ES"}, auth_headers)

    body = (await client.get("/estados", params={"sigla": "sp"}, headers=auth_headers)).json()
    assert body["totalCount"] == 1
    assert body["data"][0]["sigla"] == "SP"

    partial = (await client.get("/estados", params={"sigla": "S"}, headers=auth_headers)).json()
    assert partial["totalCount"] == 0


# -----------------------------------------------------------------------------
# Motos
# -----------------------------------------------------------------------------

async def test_create_moto_sets_timestamps(client, auth_headers, moto_id):
    moto = (await client.get(f"/motos/{moto_id}", headers=auth_headers)).json()
    assert moto["placa"] == "ABC1D23"
    assert moto["dataCadastro"]
    assert moto["dataAtualizacao"]


async def test_create_moto_with_missing_setor_is_400(client, auth_headers):
    response = await client.post(
        "/motos",
        json={"modelo": "Mottu E", "placa": "XYZ9K87", "status": "Disponível", "idSetor": 404},
        headers=auth_headers,
    )
    assert response.status_code == 400


async def test_motos_filters(client, auth_headers, setor_id):
    for placa, modelo, status in [
        ("AAA1A11", "Mottu Sport", "Disponível"),
        ("BBB2B22", "Mottu E", "Manutenção"),
        ("AAA3C33", "Honda Pop", "Disponível"),
    ]:
        await post(
            client,
            "/motos",
            {"modelo": modelo, "placa": placa, "status": status, "idSetor": setor_id},
            auth_headers,
        )

    by_placa = (await client.get("/motos", params={"placa": "AAA"}, headers=auth_headers)).json()
    assert by_placa["totalCount"] == 2

    combined = (
        await client.get("/motos", params={"placa": "AAA", "modelo": "Mottu"}, headers=auth_headers)
    ).json()
    assert [m["placa"] for m in combined["data"]] == ["AAA1A11"]
    assert combined["links"][0]["href"] == "/motos?page=1&pageSize=10&placa=AAA&modelo=Mottu"

    by_setor = (await client.get("/motos", params={"setorId": setor_id}, headers=auth_headers)).json()
    assert by_setor["totalCount"] == 3


async def test_update_moto_moves_sector_and_touches_timestamp(client, auth_headers, moto_id, setor_id):
    before = (await client.get(f"/motos/{moto_id}", headers=auth_headers)).json()
    setor = (await client.get(f"/setores/{setor_id}")).json()
    other = await post(client, "/setores", {"nome": "Pronta", "idUnidade": setor["idUnidade"]})

    response = await client.put(
        f"/motos/{moto_id}",
        json={"modelo": "Mottu Sport", "placa": "ABC1D23", "status": "Alugada", "idSetor": other["idSetor"]},
        headers=auth_headers,
    )
    assert response.status_code == 204

    after = (await client.get(f"/motos/{moto_id}", headers=auth_headers)).json()
    assert after["status"] == "Alugada"
    assert after["idSetor"] == other["idSetor"]
    assert after["dataCadastro"] == before["dataCadastro"]
    assert after["dataAtualizacao"] >= before["dataAtualizacao"]


async def test_update_moto_to_missing_setor_is_400(client, auth_headers, moto_id):
    response = await client.put(
        f"/motos/{moto_id}",
        json={"modelo": "Mottu Sport", "placa": "ABC1D23", "status": "Alugada", "idSetor": 999},
        headers=auth_headers,
    )
    assert response.status_code == 400


# -----------------------------------------------------------------------------
# Defeitos
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("nome", [None, "", "   "])
async def test_defeito_requires_a_name(client, auth_headers, nome):
    response = await client.post("/defeitos", json={"nome": nome, "descricao": "x"}, headers=auth_headers)
    assert response.status_code == 400


async def test_defeito_update_with_blank_name_is_400(client, auth_headers):
    defeito = await post(client, "/defeitos", {"nome": "Freio", "descricao": "Pastilha gasta"}, auth_headers)

    response = await client.put(
        f"/defeitos/{defeito['idDefeito']}", json={"nome": " ", "descricao": None}, headers=auth_headers
    )
    assert response.status_code == 400


async def test_defeito_moto_defaults_dates_and_checks_both_refs(client, auth_headers, moto_id):
    defeito = await post(client, "/defeitos", {"nome": "Farol"}, auth_headers)

    missing = await client.post("/defeitos-moto", json={"idMoto": moto_id, "idDefeito": 999})
    assert missing.status_code == 400
    missing = await client.post("/defeitos-moto", json={"idMoto": 999, "idDefeito": defeito["idDefeito"]})
    assert missing.status_code == 400

    report = await post(client, "/defeitos-moto", {"idMoto": moto_id, "idDefeito": defeito["idDefeito"]})
    assert report["dataRegistro"]
    assert report["dataAtualizacao"]

    body = (await client.get("/defeitos-moto", params={"motoId": moto_id})).json()
    assert body["totalCount"] == 1
    assert body["links"][0]["href"] == f"/defeitos-moto?page=1&pageSize=10&motoId={moto_id}"


async def test_defeito_moto_keeps_supplied_registration_date(client, auth_headers, moto_id):
    defeito = await post(client, "/defeitos", {"nome": "Pneu"}, auth_headers)
    registered = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

    report = await post(
        client,
        "/defeitos-moto",
        {"idMoto": moto_id, "idDefeito": defeito["idDefeito"], "dataRegistro": registered.isoformat()},
    )
    assert report["dataRegistro"].startswith("2024-03-01T12:00:00")


# -----------------------------------------------------------------------------
# Service records
# -----------------------------------------------------------------------------

async def test_manutencao_lifecycle(client, auth_headers, moto_id):
    payload = {
        "idMoto": moto_id,
        "descricao": "Troca de óleo",
        "dataManutencao": "2024-05-10T09:00:00+00:00",
        "custoEstimado": 120.5,
        "tipo": "Preventiva",
    }
    manutencao = await post(client, "/manutencoes", payload, auth_headers)
    assert response_links(manutencao) == ["self", "update", "delete", "all"]

    body = (await client.get("/manutencoes", params={"tipo": "Prev"}, headers=auth_headers)).json()
    assert body["totalCount"] == 1

    missing = await client.post("/manutencoes", json={**payload, "idMoto": 999}, headers=auth_headers)
    assert missing.status_code == 400

    response = await client.delete(f"/manutencoes/{manutencao['idManutencao']}", headers=auth_headers)
    assert response.status_code == 204


async def test_historico_validates_each_sector(client, moto_id, setor_id):
    payload = {
        "idMoto": moto_id,
        "idSetorOrigem": setor_id,
        "idSetorDestino": 999,
        "dataMovimento": "2024-05-10T09:00:00+00:00",
    }
    response = await client.post("/historicos", json=payload)
    assert response.status_code == 400
    assert "Destination Setor" in response.json()["detail"]

    historico = await post(client, "/historicos", {**payload, "idSetorDestino": setor_id})

    body = (
        await client.get("/historicos", params={"setorOrigemId": setor_id, "setorDestinoId": setor_id})
    ).json()
    assert body["totalCount"] == 1
    assert body["data"][0]["idMovimentacao"] == historico["idMovimentacao"]


async def test_localizacao_checks_refs_and_coordinates(client, auth_headers, moto_id, setor_id):
    payload = {"latitude": -23.5613, "longitude": -46.6565, "idMoto": moto_id, "idSetor": setor_id}
    localizacao = await post(client, "/localizacoes", payload, auth_headers)
    assert localizacao["latitude"] == pytest.approx(-23.5613)

    bad_setor = await client.post("/localizacoes", json={**payload, "idSetor": 999}, headers=auth_headers)
    assert bad_setor.status_code == 400

    out_of_range = await client.post("/localizacoes", json={**payload, "latitude": 123}, headers=auth_headers)
    assert out_of_range.status_code == 422


# -----------------------------------------------------------------------------
# Trackers
# -----------------------------------------------------------------------------

async def test_lora_without_moto_skips_reference_check(client):
    for moto in (0, None):
        lora = await post(client, "/lora", {"numeroLora": 4711, "moto": moto})
        assert lora["moto"] is None
        assert lora["numeroLora"] == "4711"


async def test_lora_with_missing_moto_is_400(client):
    response = await client.post("/lora", json={"numeroLora": 4711, "moto": 999})
    assert response.status_code == 400


async def test_lora_number_filter_is_a_text_substring(client, moto_id):
    await post(client, "/lora", {"numeroLora": 12345, "moto": moto_id})
    await post(client, "/lora", {"numeroLora": 99234, "moto": 0})
    await post(client, "/lora", {"numeroLora": 777, "moto": None})

    body = (await client.get("/lora", params={"numeroLora": "234"})).json()
    assert sorted(item["numeroLora"] for item in body["data"]) == ["12345", "99234"]

    assigned = (await client.get("/lora", params={"motoId": moto_id})).json()
    assert assigned["totalCount"] == 1


async def test_lora_can_be_unassigned_on_update(client, moto_id):
    lora = await post(client, "/lora", {"numeroLora": 1, "moto": moto_id})

    response = await client.put(f"/lora/{lora['idLora']}", json={"numeroLora": 1, "moto": 0})
    assert response.status_code == 204
    assert (await client.get(f"/lora/{lora['idLora']}")).json()["moto"] is None


async def test_rfid_number_rendered_as_text(client, auth_headers, moto_id):
    rfid = await post(client, "/rfid", {"numeroRfid": 880012, "idMoto": moto_id}, auth_headers)
    assert rfid["numeroRfid"] == "880012"
    assert rfid["idMoto"] == moto_id

    body = (await client.get("/rfid", params={"numeroRfid": "0012"}, headers=auth_headers)).json()
    assert body["totalCount"] == 1

    missing = await client.post("/rfid", json={"numeroRfid": 1, "idMoto": 999}, headers=auth_headers)
    assert missing.status_code == 400


async def test_deleting_a_moto_leaves_its_trackers(client, auth_headers, moto_id):
    rfid = await post(client, "/rfid", {"numeroRfid": 5, "idMoto": moto_id}, auth_headers)

    assert (await client.delete(f"/motos/{moto_id}", headers=auth_headers)).status_code == 204

    orphan = await client.get(f"/rfid/{rfid['idRfid']}", headers=auth_headers)
    assert orphan.status_code == 200
    assert orphan.json()["idMoto"] == moto_id


def response_links(body):
    return [link["rel"] for link in body["links"]]


async def test_unchanged_moto_update_still_touches_timestamp(client, auth_headers, moto_id, setor_id):
    before = (await client.get(f"/motos/{moto_id}", headers=auth_headers)).json()

    response = await client.put(
        f"/motos/{moto_id}",
        json={"modelo": "Mottu Sport", "placa": "ABC1D23", "status": "Disponível", "idSetor": setor_id},
        headers=auth_headers,
    )
    assert response.status_code == 204

    after = (await client.get(f"/motos/{moto_id}", headers=auth_headers)).json()
    assert after["dataAtualizacao"] > before["dataAtualizacao"]
