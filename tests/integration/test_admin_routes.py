"""Integration tests for admin assignment, responder management and dashboard."""

from __future__ import annotations

import pytest
from fastapi import status
from httpx import AsyncClient
from src.domain import User

from tests.utils import headers_for

NEW_RESPONDER = {
    "name": "Deacon Sarah",
    "email": "sarah@askline.org",
    "password": "sarah-password",
    "expertise": ["Pastoral", "Church Music"],
}


async def _ask(client: AsyncClient, asker: User, title: str = "Question") -> str:
    response = await client.post(
        "/questions", json={"title": title, "content": "..."}, headers=headers_for(asker)
    )
    return response.json()["id"]


class TestAssign:
    @pytest.mark.asyncio
    async def test_assign_pending_question(
        self, async_client: AsyncClient, admin: User, asker: User, responder: User
    ) -> None:
        question_id = await _ask(async_client, asker)

        response = await async_client.post(
            f"/admin/questions/{question_id}/assign",
            json={"responderId": responder.user_id},
            headers=headers_for(admin),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "assigned"
        assert response.json()["responder"]["id"] == responder.user_id

    @pytest.mark.asyncio
    async def test_assign_to_non_responder(
        self, async_client: AsyncClient, admin: User, asker: User
    ) -> None:
        question_id = await _ask(async_client, asker)

        response = await async_client.post(
            f"/admin/questions/{question_id}/assign",
            json={"responder_id": asker.user_id},
            headers=headers_for(admin),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"]["field"] == "responder_id"

    @pytest.mark.asyncio
    async def test_assign_claimed_question(
        self,
        async_client: AsyncClient,
        admin: User,
        asker: User,
        responder: User,
        other_responder: User,
    ) -> None:
        question_id = await _ask(async_client, asker)
        await async_client.patch(
            f"/responder/questions/{question_id}/start", headers=headers_for(responder)
        )

        response = await async_client.post(
            f"/admin/questions/{question_id}/assign",
            json={"responderId": other_responder.user_id},
            headers=headers_for(admin),
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"]["message"] == "Question already claimed"

    @pytest.mark.asyncio
    async def test_assign_requires_admin(
        self, async_client: AsyncClient, asker: User, responder: User
    ) -> None:
        question_id = await _ask(async_client, asker)

        response = await async_client.post(
            f"/admin/questions/{question_id}/assign",
            json={"responderId": responder.user_id},
            headers=headers_for(responder),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestResponderManagement:
    @pytest.mark.asyncio
    async def test_create_and_fetch_responder(
        self, async_client: AsyncClient, admin: User
    ) -> None:
        created = await async_client.post(
            "/admin/responders", json=NEW_RESPONDER, headers=headers_for(admin)
        )

        assert created.status_code == status.HTTP_201_CREATED
        responder = created.json()["responder"]
        assert responder["name"] == "Deacon Sarah"
        assert responder["expertise"] == ["Pastoral", "Church Music"]

        fetched = await async_client.get(
            f"/admin/responders/{responder['id']}", headers=headers_for(admin)
        )
        assert fetched.json()["email"] == "sarah@askline.org"

        login = await async_client.post(
            "/auth/login",
            json={"email": NEW_RESPONDER["email"], "password": NEW_RESPONDER["password"]},
        )
        assert login.status_code == status.HTTP_200_OK
        assert login.json()["user"]["role"] == "responder"

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(
        self, async_client: AsyncClient, admin: User, responder: User
    ) -> None:
        response = await async_client.post(
            "/admin/responders",
            json={**NEW_RESPONDER, "email": responder.email},
            headers=headers_for(admin),
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.asyncio
    async def test_missing_expertise_is_unprocessable(
        self, async_client: AsyncClient, admin: User
    ) -> None:
        response = await async_client.post(
            "/admin/responders",
            json={**NEW_RESPONDER, "expertise": []},
            headers=headers_for(admin),
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_list_by_expertise(
        self,
        async_client: AsyncClient,
        admin: User,
        responder: User,
        other_responder: User,
    ) -> None:
        response = await async_client.get(
            "/admin/responders", params={"expertise": "Theology"}, headers=headers_for(admin)
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["count"] == 1
        assert data["responders"][0]["id"] == responder.user_id

    @pytest.mark.asyncio
    async def test_list_unknown_expertise(self, async_client: AsyncClient, admin: User) -> None:
        response = await async_client.get(
            "/admin/responders", params={"expertise": "Astrology"}, headers=headers_for(admin)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_update_responder(
        self, async_client: AsyncClient, admin: User, responder: User
    ) -> None:
        response = await async_client.put(
            f"/admin/responders/{responder.user_id}",
            json={"status": "inactive", "expertise": ["Theology", "Old Testament"]},
            headers=headers_for(admin),
        )

        assert response.status_code == status.HTTP_200_OK
        updated = response.json()["responder"]
        assert updated["status"] == "inactive"
        assert updated["expertise"] == ["Theology", "Old Testament"]

    @pytest.mark.asyncio
    async def test_get_unknown_responder(self, async_client: AsyncClient, admin: User) -> None:
        response = await async_client.get("/admin/responders/nope", headers=headers_for(admin))

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDashboard:
    @pytest.mark.asyncio
    async def test_stats_and_activities(
        self, async_client: AsyncClient, admin: User, asker: User, responder: User
    ) -> None:
        answered_id = await _ask(async_client, asker, "Answered")
        await _ask(async_client, asker, "Waiting")
        base = f"/responder/questions/{answered_id}"
        await async_client.patch(f"{base}/start", headers=headers_for(responder))
        await async_client.post(f"{base}/answer", json={"answer": "Yes"}, headers=headers_for(responder))

        stats = await async_client.get("/admin/dashboard/stats", headers=headers_for(admin))

        assert stats.status_code == status.HTTP_200_OK
        data = stats.json()
        assert data["responders"] == {"total": 1, "active": 1}
        assert data["questions"] == {
            "total": 2,
            "answered": 1,
            "pending": 1,
            "response_rate": 50,
        }
        assert data["performance"]["window_days"] == 30

        activities = await async_client.get(
            "/admin/dashboard/activities", params={"limit": 2}, headers=headers_for(admin)
        )
        assert activities.status_code == status.HTTP_200_OK
        feed = activities.json()
        assert [entry["type"] for entry in feed] == ["answer", "status_change"]
        assert feed[0]["responder"] == "Pastor John"

    @pytest.mark.asyncio
    async def test_activity_limit_bounds(self, async_client: AsyncClient, admin: User) -> None:
        response = await async_client.get(
            "/admin/dashboard/activities", params={"limit": 500}, headers=headers_for(admin)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_dashboard_requires_admin(
        self, async_client: AsyncClient, responder: User
    ) -> None:
        response = await async_client.get(
            "/admin/dashboard/stats", headers=headers_for(responder)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
