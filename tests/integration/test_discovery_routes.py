"""Integration tests for the search-style endpoints."""

from __future__ import annotations

import pytest
from compass.domain.llm_schemas import CurrencyConversion, JobResults
from fastapi import status
from httpx import AsyncClient

from tests.utils import FakeLLM, auth_headers


class TestSearch:
    @pytest.mark.asyncio
    async def test_options(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/search/options")

        payload = response.json()
        assert "USD" in payload["currencies"]
        assert payload["mentor_fields"]
        assert payload["experience_levels"]

    @pytest.mark.asyncio
    async def test_job_search(self, async_client: AsyncClient, fake_llm: FakeLLM) -> None:
        fake_llm.script(
            JobResults,
            {
                "jobs": [
                    {
                        "title": "Junior Analyst",
                        "company": "Acme",
                        "location": "Remote",
                        "link": "https://jobs.example.com/1",
                    }
                ]
            },
        )

        response = await async_client.post(
            "/jobs/search", json={"field": "Finance"}, headers=auth_headers()
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["jobs"][0]["company"] == "Acme"
        assert response.json()["degraded"] is False
        assert fake_llm.calls[0].add_context_from_internet is True

    @pytest.mark.asyncio
    async def test_failed_searches_degrade(self, async_client: AsyncClient) -> None:
        headers = auth_headers()

        mentors = await async_client.post("/mentors/search", json={}, headers=headers)
        universities = await async_client.post(
            "/universities/search", json={"major": "Biology"}, headers=headers
        )
        trends = await async_client.get("/market-trends", headers=headers)

        assert mentors.json() == {"mentors": [], "degraded": True}
        assert universities.json() == {"universities": [], "degraded": True}
        assert trends.json() == {"growing_fields": [], "declining_fields": [], "degraded": True}


class TestCurrency:
    @pytest.mark.asyncio
    async def test_conversion(self, async_client: AsyncClient, fake_llm: FakeLLM) -> None:
        fake_llm.script(
            CurrencyConversion,
            {
                "converted_amount": 92.5,
                "exchange_rate": 0.925,
                "from_currency": "USD",
                "to_currency": "EUR",
                "original_amount": 100,
            },
        )

        response = await async_client.post(
            "/currency/convert",
            json={"amount": 100, "from_currency": "usd", "to_currency": "eur"},
            headers=auth_headers(),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["converted_amount"] == 92.5
        assert "Convert 100.0 USD to EUR" in fake_llm.calls[0].prompt

    @pytest.mark.asyncio
    async def test_unsupported_currency(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/currency/convert",
            json={"amount": 5, "from_currency": "XYZ", "to_currency": "EUR"},
            headers=auth_headers(),
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_failed_conversion_degrades(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/currency/convert", json={"amount": 5}, headers=auth_headers()
        )

        payload = response.json()
        assert payload["degraded"] is True
        assert payload["from_currency"] == "USD"
        assert payload["to_currency"] == "EUR"


class TestMentorOptIn:
    @pytest.mark.asyncio
    async def test_opt_in_requires_profile(self, async_client: AsyncClient) -> None:
        headers = auth_headers()

        redirected = await async_client.post("/mentors/opt-in", headers=headers)
        assert redirected.status_code == status.HTTP_303_SEE_OTHER

        await async_client.post(
            "/welcome",
            json={"academic_info": {"education_status": "working_professional"}},
            headers=headers,
        )
        response = await async_client.post("/mentors/opt-in", headers=headers)

        assert response.json() == {"is_mentor": True}
