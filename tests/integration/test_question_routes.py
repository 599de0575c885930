"""Integration tests for the asker and responder question endpoints."""

from __future__ import annotations

import pytest
from fastapi import status
from httpx import AsyncClient
from src.core.auth import Role
from src.domain import User

from tests.utils import auth_headers, headers_for

QUESTION = {
    "title": "Is prayer required daily?",
    "content": "How often should a believer pray?",
    "isPublic": True,
    "isAnonymous": False,
}


async def _create(client: AsyncClient, asker: User, **overrides) -> dict:
    response = await client.post(
        "/questions", json={**QUESTION, **overrides}, headers=headers_for(asker)
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


class TestCreateQuestion:
    @pytest.mark.asyncio
    async def test_create_returns_pending_question(
        self, async_client: AsyncClient, asker: User
    ) -> None:
        data = await _create(async_client, asker)

        assert data["title"] == QUESTION["title"]
        assert data["status"] == "pending"
        assert data["responder"] is None
        assert data["answer"] is None
        assert data["is_public"] is True
        assert data["asker"]["id"] == asker.user_id

    @pytest.mark.asyncio
    async def test_blank_title_returns_field_error(
        self, async_client: AsyncClient, asker: User
    ) -> None:
        response = await async_client.post(
            "/questions", json={**QUESTION, "title": "  "}, headers=headers_for(asker)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"]["field"] == "title"

    @pytest.mark.asyncio
    async def test_requires_asker_role(
        self, async_client: AsyncClient, responder: User
    ) -> None:
        response = await async_client.post(
            "/questions", json=QUESTION, headers=headers_for(responder)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_requires_token(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/questions", json=QUESTION)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestReadQuestions:
    @pytest.mark.asyncio
    async def test_public_listing_masks_anonymous_asker(
        self, async_client: AsyncClient, asker: User
    ) -> None:
        created = await _create(async_client, asker, isAnonymous=True)
        assert created["asker"] is not None

        response = await async_client.get("/questions/public")

        assert response.status_code == status.HTTP_200_OK
        listed = response.json()
        assert [q["id"] for q in listed] == [created["id"]]
        assert listed[0]["asker"] is None
        assert asker.user_id not in response.text

    @pytest.mark.asyncio
    async def test_my_questions(
        self, async_client: AsyncClient, asker: User, other_asker: User
    ) -> None:
        mine = await _create(async_client, asker)
        await _create(async_client, other_asker)

        response = await async_client.get(
            "/questions/my", params={"status": "pending"}, headers=headers_for(asker)
        )

        assert response.status_code == status.HTTP_200_OK
        assert [q["id"] for q in response.json()] == [mine["id"]]

    @pytest.mark.asyncio
    async def test_my_questions_unknown_status(
        self, async_client: AsyncClient, asker: User
    ) -> None:
        response = await async_client.get(
            "/questions/my", params={"status": "bogus"}, headers=headers_for(asker)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"]["field"] == "status"

    @pytest.mark.asyncio
    async def test_get_missing_question(self, async_client: AsyncClient, asker: User) -> None:
        response = await async_client.get("/questions/nope", headers=headers_for(asker))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_private_question_forbidden_to_other_asker(
        self, async_client: AsyncClient, asker: User, other_asker: User
    ) -> None:
        created = await _create(async_client, asker, isPublic=False)

        response = await async_client.get(
            f"/questions/{created['id']}", headers=headers_for(other_asker)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestResponderWorkflow:
    @pytest.mark.asyncio
    async def test_claim_work_answer_close(
        self, async_client: AsyncClient, asker: User, responder: User
    ) -> None:
        question = await _create(async_client, asker)
        base = f"/responder/questions/{question['id']}"
        headers = headers_for(responder)

        claimed = await async_client.patch(f"{base}/start", headers=headers)
        assert claimed.status_code == status.HTTP_200_OK
        assert claimed.json()["status"] == "assigned"
        assert claimed.json()["responder"]["id"] == responder.user_id
        assert claimed.json()["assigned_at"] is not None

        working = await async_client.patch(f"{base}/progress", headers=headers)
        assert working.json()["status"] == "in_progress"

        answered = await async_client.post(
            f"{base}/answer", json={"answer": "Yes, ..."}, headers=headers
        )
        assert answered.status_code == status.HTTP_200_OK
        assert answered.json()["status"] == "answered"
        assert answered.json()["answer"]["content"] == "Yes, ..."

        closed = await async_client.post(f"/questions/{question['id']}/close", headers=headers)
        assert closed.status_code == status.HTTP_200_OK
        assert closed.json()["status"] == "closed"

        # Asker sees the answer on their own question
        seen = await async_client.get(f"/questions/{question['id']}", headers=headers_for(asker))
        assert seen.json()["answer"]["content"] == "Yes, ..."

    @pytest.mark.asyncio
    async def test_second_claim_returns_conflict_with_current_state(
        self,
        async_client: AsyncClient,
        asker: User,
        responder: User,
        other_responder: User,
    ) -> None:
        question = await _create(async_client, asker)
        url = f"/responder/questions/{question['id']}/start"
        await async_client.patch(url, headers=headers_for(responder))

        response = await async_client.patch(url, headers=headers_for(other_responder))

        assert response.status_code == status.HTTP_409_CONFLICT
        detail = response.json()["detail"]
        assert detail["message"] == "Question already claimed"
        assert detail["question"]["responder"]["id"] == responder.user_id

    @pytest.mark.asyncio
    async def test_other_responder_cannot_answer(
        self,
        async_client: AsyncClient,
        asker: User,
        responder: User,
        other_responder: User,
    ) -> None:
        question = await _create(async_client, asker)
        base = f"/responder/questions/{question['id']}"
        await async_client.patch(f"{base}/start", headers=headers_for(responder))

        response = await async_client.post(
            f"{base}/answer", json={"answer": "Mine"}, headers=headers_for(other_responder)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_empty_answer_is_rejected(
        self, async_client: AsyncClient, asker: User, responder: User
    ) -> None:
        question = await _create(async_client, asker)
        base = f"/responder/questions/{question['id']}"
        await async_client.patch(f"{base}/start", headers=headers_for(responder))

        response = await async_client.post(
            f"{base}/answer", json={"answer": "   "}, headers=headers_for(responder)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"]["field"] == "answer"

    @pytest.mark.asyncio
    async def test_queue_filters(
        self, async_client: AsyncClient, asker: User, responder: User
    ) -> None:
        unclaimed = await _create(async_client, asker, title="Unclaimed")
        claimed = await _create(async_client, asker, title="Claimed")
        await async_client.patch(
            f"/responder/questions/{claimed['id']}/start", headers=headers_for(responder)
        )

        everything = await async_client.get(
            "/responder/questions", headers=headers_for(responder)
        )
        pending = await async_client.get(
            "/responder/questions", params={"status": "pending"}, headers=headers_for(responder)
        )

        assert {q["id"] for q in everything.json()} == {unclaimed["id"], claimed["id"]}
        assert [q["id"] for q in pending.json()] == [claimed["id"]]

    @pytest.mark.asyncio
    async def test_queue_requires_responder(self, async_client: AsyncClient) -> None:
        response = await async_client.get(
            "/responder/questions", headers=auth_headers("asker-1", Role.ASKER)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_claim_missing_question(
        self, async_client: AsyncClient, responder: User
    ) -> None:
        response = await async_client.patch(
            "/responder/questions/nope/start", headers=headers_for(responder)
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
