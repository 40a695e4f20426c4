import pytest
from sqlalchemy import select

from models.cidade import Cidade
from utils.filters import FilterSet
from utils.pagination import PageMeta, PageRequest, build_envelope, compute_total_pages, paginate


@pytest.mark.parametrize(
    "page, page_size, expected",
    [
        (None, None, (1, 10)),
        (0, 10, (1, 10)),
        (-5, 500, (1, 100)),
        (3, 0, (3, 1)),
        (2, -7, (2, 1)),
        (4, 100, (4, 100)),
    ],
)
def test_normalize_clamps_raw_values(page, page_size, expected):
    request = PageRequest.normalize(page, page_size)
    assert (request.page, request.page_size) == expected


def test_offset_skips_previous_pages():
    assert PageRequest.normalize(3, 10).offset == 20
    assert PageRequest.normalize(1, 25).offset == 0


@pytest.mark.parametrize(
    "total_count, page_size, expected",
    [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 10, 3), (100, 1, 100)],
)
def test_compute_total_pages(total_count, page_size, expected):
    assert compute_total_pages(total_count, page_size) == expected


def test_first_page_of_three():
    meta = PageMeta.for_count(PageRequest.normalize(1, 10), 25)
    assert meta.total_pages == 3
    assert meta.has_next_page is True
    assert meta.has_previous_page is False
    assert meta.item_count == 10


def test_last_partial_page():
    meta = PageMeta.for_count(PageRequest.normalize(3, 10), 25)
    assert meta.has_next_page is False
    assert meta.has_previous_page is True
    assert meta.item_count == 5


def test_page_past_the_end_is_empty_not_an_error():
    meta = PageMeta.for_count(PageRequest.normalize(9, 10), 25)
    assert meta.item_count == 0
    assert meta.has_next_page is False
    assert meta.has_previous_page is True


def test_empty_collection():
    meta = PageMeta.for_count(PageRequest.normalize(1, 10), 0)
    assert meta.total_pages == 0
    assert meta.has_next_page is False
    assert meta.has_previous_page is False
    assert meta.item_count == 0


def test_envelope_carries_meta_and_links():
    meta = PageMeta.for_count(PageRequest.normalize(2, 10), 25)
    envelope = build_envelope(["a", "b"], meta, "/motos", FilterSet.of(placa="ABC"))

    assert envelope.data == ["a", "b"]
    assert envelope.page == 2
    assert envelope.page_size == 10
    assert envelope.total_count == 25
    assert envelope.total_pages == 3
    assert envelope.has_next_page and envelope.has_previous_page
    assert [link.rel for link in envelope.links] == ["self", "first", "previous", "next", "last"]
    assert envelope.links[0].href == "/motos?page=2&pageSize=10&placa=ABC"


def test_envelope_serializes_camel_case():
    meta = PageMeta.for_count(PageRequest.normalize(1, 10), 0)
    body = build_envelope([], meta, "/cidades", FilterSet()).model_dump(by_alias=True)

    assert set(body) == {
        "data", "page", "pageSize", "totalCount", "totalPages",
        "hasNextPage", "hasPreviousPage", "links",
    }


async def seed_cidades(db_session, count):
    db_session.add_all([Cidade(nome=f"Cidade {i}", id_estado=1) for i in range(count)])
    await db_session.commit()


def count_executes(db_session, monkeypatch):
    calls = []
    original = db_session.execute

    async def execute(statement, *args, **kwargs):
        calls.append(statement)
        return await original(statement, *args, **kwargs)

    monkeypatch.setattr(db_session, "execute", execute)
    return calls


@pytest.mark.parametrize("page, expected", [(1, 10), (3, 5), (4, 0)])
async def test_paginate_returns_item_count_rows(db_session, page, expected):
    await seed_cidades(db_session, 25)

    envelope = await paginate(
        db_session,
        select(Cidade).order_by(Cidade.id_cidade),
        page_request=PageRequest.normalize(page, 10),
        filters=FilterSet(),
        base_path="/cidades",
        to_dto=lambda cidade: cidade.nome,
    )

    meta = PageMeta.for_count(PageRequest.normalize(page, 10), 25)
    assert len(envelope.data) == meta.item_count == expected


async def test_paginate_skips_the_row_query_past_the_end(db_session, monkeypatch):
    await seed_cidades(db_session, 3)
    calls = count_executes(db_session, monkeypatch)

    envelope = await paginate(
        db_session,
        select(Cidade).order_by(Cidade.id_cidade),
        page_request=PageRequest.normalize(10**19, 10),
        filters=FilterSet(),
        base_path="/cidades",
        to_dto=lambda cidade: cidade.nome,
    )

    assert envelope.data == []
    assert envelope.total_count == 3
    assert len(calls) == 1
