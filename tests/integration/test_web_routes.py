"""Integration tests for the home, search, detail and download routes."""

from collections.abc import Awaitable, Callable
from datetime import date
from pathlib import Path

import httpx
import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from jdih.app.db.models import Document

pytestmark = pytest.mark.integration

MakeDocument = Callable[..., Awaitable[int]]


async def counters(engine: AsyncEngine, document_id: int) -> tuple[int, int]:
    async with AsyncSession(engine) as session:
        row = (
            await session.execute(
                select(Document.view_count, Document.download_count).where(
                    Document.id == document_id
                )
            )
        ).one()
    return (row.view_count, row.download_count)


class TestSearch:
    """GET /search."""

    @pytest.mark.asyncio
    async def test_putusan_2023_date_asc(
        self, client: httpx.AsyncClient, make_document: MakeDocument
    ) -> None:
        march = await make_document("Putusan Maret", type_slug="putusan", published_date=date(2023, 3, 1))
        january = await make_document("Putusan Januari", type_slug="putusan", published_date=date(2023, 1, 15))
        await make_document("Putusan Lama", type_slug="putusan", published_date=date(2022, 12, 31))
        await make_document("Putusan Tanpa Tanggal", type_slug="putusan")
        await make_document("Peraturan 2023", type_slug="peraturan", published_date=date(2023, 2, 1))
        await make_document(
            "Putusan Konsep", type_slug="putusan", status_slug="draft", published_date=date(2023, 2, 1)
        )

        response = await client.get(
            "/search", params={"document_type": "putusan", "year": 2023, "sort": "date_asc"}
        )

        assert response.status_code == 200
        body = response.json()
        results = body["results"]
        assert [document["id"] for document in results["data"]] == [january, march]
        assert results["total"] == 2
        assert results["page"] == 1
        assert results["per_page"] == 20
        assert results["last_page"] == 1
        assert body["query"] == {
            "q": None,
            "document_type": "putusan",
            "subject": None,
            "year": 2023,
            "sort": "date_asc",
        }

    @pytest.mark.asyncio
    async def test_filter_options(self, client: httpx.AsyncClient, make_document: MakeDocument) -> None:
        await make_document("UU 2021", published_date=date(2021, 5, 5), subjects=["hukum-pidana"])

        body = (await client.get("/search")).json()

        assert [item["slug"] for item in body["filters"]["document_types"]] == [
            "peraturan",
            "putusan",
            "monografi",
            "artikel",
        ]
        assert len(body["filters"]["subjects"]) == 8
        assert body["filters"]["years"] == [2021]
        assert body["query"]["sort"] == "relevance"

    @pytest.mark.asyncio
    async def test_blank_fields_and_unknown_sort(
        self, client: httpx.AsyncClient, make_document: MakeDocument
    ) -> None:
        await make_document("UU Satu")

        response = await client.get("/search?q=&document_type=&subject=&sort=bogus")

        assert response.status_code == 200
        assert response.json()["results"]["total"] == 1
        assert response.json()["query"]["sort"] == "relevance"

    @pytest.mark.asyncio
    async def test_result_carries_relations_and_excerpt(
        self, client: httpx.AsyncClient, make_document: MakeDocument
    ) -> None:
        await make_document(
            "Buku Hukum",
            type_slug="monografi",
            subjects=["hukum-perdata"],
            authors=["satjipto-rahardjo"],
            abstract="<p>" + "a" * 200 + "</p>",
            file_path="documents/buku.pdf",
        )

        document = (await client.get("/search", params={"q": "buku"})).json()["results"]["data"][0]

        assert document["document_type"]["slug"] == "monografi"
        assert [author["slug"] for author in document["authors"]] == ["satjipto-rahardjo"]
        assert [subject["slug"] for subject in document["subjects"]] == ["hukum-perdata"]
        assert document["excerpt"] == "a" * 150 + "..."
        assert "file_path" not in document

    @pytest.mark.asyncio
    async def test_repeated_param_is_422(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/search?year=2023&year=2024")

        assert response.status_code == 422
        assert response.json() == {
            "detail": [
                {
                    "loc": ["query", "year"],
                    "msg": "multiple values are not supported",
                    "type": "value_error",
                }
            ]
        }

    @pytest.mark.asyncio
    async def test_page_zero_is_422(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/search", params={"page": 0})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_second_page(self, client: httpx.AsyncClient, make_document: MakeDocument) -> None:
        for n in range(21):
            await make_document(f"UU Nomor {n}", published_date=date(2020, 1, 1))

        results = (await client.get("/search", params={"page": 2})).json()["results"]

        assert results["total"] == 21
        assert len(results["data"]) == 1
        assert results["last_page"] == 2


class TestHome:
    """GET /."""

    @pytest.mark.asyncio
    async def test_home_sections(self, client: httpx.AsyncClient, make_document: MakeDocument) -> None:
        featured = await make_document("UU Unggulan", is_featured=True, published_date=date(2023, 1, 1))
        await make_document("Putusan Satu", type_slug="putusan", published_date=date(2024, 1, 1))
        await make_document("Putusan Dua", type_slug="putusan", published_date=date(2024, 2, 1))
        await make_document("UU Konsep", status_slug="draft")

        response = await client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["stats"]["total_documents"] == 3
        assert body["stats"]["total_types"] == 4
        assert body["stats"]["total_subjects"] == 8
        assert body["stats"]["documents_this_month"] == 3
        assert body["document_types"][0]["slug"] == "putusan"
        assert [document["id"] for document in body["featured_documents"]] == [featured]
        assert [document["title"] for document in body["latest_documents"]] == [
            "Putusan Dua",
            "Putusan Satu",
            "UU Unggulan",
        ]


class TestDetail:
    """GET /{type_slug}/{document_slug}."""

    @pytest.mark.asyncio
    async def test_detail_counts_a_view(
        self, client: httpx.AsyncClient, make_document: MakeDocument, engine: AsyncEngine
    ) -> None:
        document_id = await make_document(
            "Putusan Utama", type_slug="putusan", slug="putusan-utama", subjects=["hukum-pidana"]
        )
        related = await make_document("Putusan Lain", type_slug="putusan")

        response = await client.get("/putusan/putusan-utama")

        assert response.status_code == 200
        body = response.json()
        assert body["document"]["id"] == document_id
        assert body["subjects"][0]["breadcrumb"] == "Hukum Pidana"
        assert [document["id"] for document in body["related_documents"]] == [related]
        assert await counters(engine, document_id) == (1, 0)

        await client.get("/putusan/putusan-utama")
        assert await counters(engine, document_id) == (2, 0)

    @pytest.mark.asyncio
    async def test_wrong_type_is_404(self, client: httpx.AsyncClient, make_document: MakeDocument) -> None:
        await make_document("Putusan Utama", type_slug="putusan", slug="putusan-utama")

        response = await client.get("/peraturan/putusan-utama")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unpublished_is_404_and_not_counted(
        self, client: httpx.AsyncClient, make_document: MakeDocument, engine: AsyncEngine
    ) -> None:
        draft_id = await make_document("UU Konsep", slug="uu-konsep", status_slug="draft")

        response = await client.get("/peraturan/uu-konsep")

        assert response.status_code == 404
        assert await counters(engine, draft_id) == (0, 0)


class TestDownload:
    """GET /{type_slug}/{document_slug}/download."""

    @pytest.mark.asyncio
    async def test_download_streams_file_and_counts(
        self,
        client: httpx.AsyncClient,
        make_document: MakeDocument,
        engine: AsyncEngine,
        storage_root: Path,
    ) -> None:
        (storage_root / "documents").mkdir()
        (storage_root / "documents" / "uu-1.pdf").write_bytes(b"%PDF-1.4 test")
        document_id = await make_document(
            "UU Nomor 1", slug="uu-nomor-1", file_path="documents/uu-1.pdf", file_format="pdf"
        )

        response = await client.get("/peraturan/uu-nomor-1/download")

        assert response.status_code == 200
        assert response.content == b"%PDF-1.4 test"
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == "attachment; filename*=utf-8''UU%20Nomor%201.pdf"
        assert await counters(engine, document_id) == (0, 1)

    @pytest.mark.asyncio
    async def test_missing_file_is_404_and_not_counted(
        self, client: httpx.AsyncClient, make_document: MakeDocument, engine: AsyncEngine
    ) -> None:
        document_id = await make_document(
            "UU Hilang", slug="uu-hilang", file_path="documents/hilang.pdf"
        )

        response = await client.get("/peraturan/uu-hilang/download")

        assert response.status_code == 404
        assert response.json() == {"detail": "File not found"}
        assert await counters(engine, document_id) == (0, 0)

    @pytest.mark.asyncio
    async def test_no_file_path_is_404(
        self, client: httpx.AsyncClient, make_document: MakeDocument, engine: AsyncEngine
    ) -> None:
        document_id = await make_document("UU Tanpa Berkas", slug="uu-tanpa-berkas")

        response = await client.get("/peraturan/uu-tanpa-berkas/download")

        assert response.status_code == 404
        assert await counters(engine, document_id) == (0, 0)
