"""
Tests for review group endpoints.

These tests cover the /api/v1/review-groups endpoints including:
- Creating a group with its owner membership and criteria
- Listing the caller's groups
- Group detail and membership checks
- Owner-only settings update and cascading delete
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewbox.models import (
    EvaluationCriteria,
    EvaluationScores,
    Invitations,
    ReviewGroupMembers,
    ReviewGroups,
    Reviews,
    ReviewSubjects,
)


@pytest.mark.api
class TestCreateReviewGroup:
    """Tests for POST /api/v1/review-groups."""

    async def test_create_group(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        owner_headers: dict,
        sample_group_data: dict,
    ):
        response = await client.post(
            "/api/v1/review-groups", json=sample_group_data, headers=owner_headers
        )
        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        group_id = data["review_group"]["id"]
        assert data["review_group"]["name"] == "Lunch spots"

        roles = await db_session.execute(
            select(ReviewGroupMembers.user_id, ReviewGroupMembers.role).where(
                ReviewGroupMembers.review_group_id == group_id
            )
        )
        assert roles.all() == [("user-0001", "owner")]

        criteria = await db_session.execute(
            select(EvaluationCriteria.name, EvaluationCriteria.order_index)
            .where(EvaluationCriteria.review_group_id == group_id)
            .order_by(EvaluationCriteria.order_index)
        )
        assert criteria.all() == [("Taste", 0), ("Price", 1)]

    async def test_create_group_accepts_snake_case_and_criterion_objects(
        self, client: AsyncClient, owner_headers: dict
    ):
        response = await client.post(
            "/api/v1/review-groups",
            json={
                "name": "Dramas",
                "category_id": "cat-drama",
                "evaluation_criteria": [{"name": "Story"}, {"name": " "}, {"name": "Cast"}],
            },
            headers=owner_headers,
        )
        assert response.status_code == 201
        group_id = response.json()["review_group"]["id"]

        detail = await client.get(f"/api/v1/review-groups/{group_id}", headers=owner_headers)
        names = [c["name"] for c in detail.json()["group"]["evaluation_criteria"]]
        assert names == ["Story", "Cast"]

    async def test_create_group_requires_criteria(
        self, client: AsyncClient, owner_headers: dict, sample_group_data: dict
    ):
        sample_group_data["evaluationCriteria"] = ["", "   "]
        response = await client.post(
            "/api/v1/review-groups", json=sample_group_data, headers=owner_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "At least one evaluation criteria is required"

    async def test_create_group_rejects_unknown_category(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        owner_headers: dict,
        sample_group_data: dict,
    ):
        sample_group_data["categoryId"] = "cat-missing"
        response = await client.post(
            "/api/v1/review-groups", json=sample_group_data, headers=owner_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid category"

        groups = await db_session.execute(select(ReviewGroups.id))
        assert groups.all() == []

    async def test_create_group_rejects_long_name(
        self, client: AsyncClient, owner_headers: dict, sample_group_data: dict
    ):
        sample_group_data["name"] = "x" * 101
        response = await client.post(
            "/api/v1/review-groups", json=sample_group_data, headers=owner_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Group name must be 1-100 characters"

    async def test_create_group_rejects_too_many_metadata_fields(
        self, client: AsyncClient, owner_headers: dict, sample_group_data: dict
    ):
        sample_group_data["metadataFields"] = [
            {"key": f"k{i}", "label": f"Field {i}"} for i in range(6)
        ]
        response = await client.post(
            "/api/v1/review-groups", json=sample_group_data, headers=owner_headers
        )
        assert response.status_code == 400

    async def test_create_group_rejects_select_without_options(
        self, client: AsyncClient, owner_headers: dict, sample_group_data: dict
    ):
        sample_group_data["metadataFields"] = [{"key": "genre", "label": "Genre", "type": "select"}]
        response = await client.post(
            "/api/v1/review-groups", json=sample_group_data, headers=owner_headers
        )
        assert response.status_code == 400

    async def test_create_group_requires_auth(
        self, client: AsyncClient, sample_group_data: dict
    ):
        response = await client.post("/api/v1/review-groups", json=sample_group_data)
        assert response.status_code == 401


@pytest.mark.api
class TestListReviewGroups:
    """Tests for GET /api/v1/review-groups."""

    async def test_lists_only_my_groups(
        self, client: AsyncClient, create_group, owner_headers: dict, member_headers: dict
    ):
        mine = await create_group(name="Mine")
        await create_group(headers=member_headers, name="Bob's")

        response = await client.get("/api/v1/review-groups", headers=owner_headers)
        assert response.status_code == 200
        groups = response.json()["review_groups"]
        assert [g["id"] for g in groups] == [mine["id"]]
        assert groups[0]["role"] == "owner"
        assert groups[0]["category"]["name"] == "レストラン"

    async def test_newest_membership_first(
        self, client: AsyncClient, create_group, owner_headers: dict
    ):
        first = await create_group(name="First")
        second = await create_group(name="Second")

        response = await client.get("/api/v1/review-groups", headers=owner_headers)
        assert [g["id"] for g in response.json()["review_groups"]] == [second["id"], first["id"]]


@pytest.mark.api
class TestGetReviewGroup:
    """Tests for GET /api/v1/review-groups/{id}."""

    async def test_detail(self, create_group):
        group = await create_group()
        assert group["user_role"] == "owner"
        assert group["member_count"] == 1
        assert group["category"]["id"] == "cat-restaurant"
        assert [c["order_index"] for c in group["evaluation_criteria"]] == [0, 1]
        assert group["metadata_fields"][1]["options"] == ["Ramen", "Curry"]

    async def test_member_count_is_live(
        self, client: AsyncClient, create_group, add_member, member_headers: dict
    ):
        group = await create_group()
        await add_member(group["id"], "user-0002")

        response = await client.get(f"/api/v1/review-groups/{group['id']}", headers=member_headers)
        assert response.status_code == 200
        assert response.json()["group"]["member_count"] == 2
        assert response.json()["group"]["user_role"] == "member"

    async def test_non_member_denied(
        self, client: AsyncClient, create_group, outsider_headers: dict
    ):
        group = await create_group()
        response = await client.get(
            f"/api/v1/review-groups/{group['id']}", headers=outsider_headers
        )
        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Access denied"}

    async def test_missing_group(self, client: AsyncClient, owner_headers: dict):
        response = await client.get("/api/v1/review-groups/does-not-exist", headers=owner_headers)
        assert response.status_code == 404


@pytest.mark.api
class TestUpdateReviewGroup:
    """Tests for PUT /api/v1/review-groups/{id} and /settings."""

    @pytest.mark.parametrize("suffix", ["", "/settings"])
    async def test_owner_updates_settings(
        self, client: AsyncClient, create_group, owner_headers: dict, suffix: str
    ):
        group = await create_group()
        response = await client.put(
            f"/api/v1/review-groups/{group['id']}{suffix}",
            json={"name": "Dinner spots", "description": "", "isPrivate": False},
            headers=owner_headers,
        )
        assert response.status_code == 200
        updated = response.json()["group"]
        assert updated["name"] == "Dinner spots"
        assert updated["description"] is None
        assert updated["is_private"] is False

    async def test_admin_cannot_update(
        self, client: AsyncClient, create_group, add_member, member_headers: dict
    ):
        group = await create_group()
        await add_member(group["id"], "user-0002", role="admin")
        response = await client.put(
            f"/api/v1/review-groups/{group['id']}",
            json={"name": "Hijacked"},
            headers=member_headers,
        )
        assert response.status_code == 403

    async def test_criteria_are_not_editable(
        self, client: AsyncClient, create_group, owner_headers: dict
    ):
        group = await create_group()
        response = await client.put(
            f"/api/v1/review-groups/{group['id']}",
            json={"name": "Lunch", "evaluationCriteria": ["Speed"]},
            headers=owner_headers,
        )
        assert response.status_code == 400


@pytest.mark.api
class TestDeleteReviewGroup:
    """Tests for DELETE /api/v1/review-groups/{id} and /settings."""

    async def test_delete_cascades(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        create_group,
        add_member,
        create_subject,
        create_review,
        owner_headers: dict,
        member_headers: dict,
    ):
        group = await create_group()
        await add_member(group["id"], "user-0002")
        subject_a = await create_subject(group["id"], name="A")
        subject_b = await create_subject(group["id"], name="B")
        await create_review(group, subject_a["id"], [4, 2])
        await create_review(group, subject_a["id"], [5, 5], headers=member_headers)
        await create_review(group, subject_b["id"], [3, 3])
        invite = await client.post(
            f"/api/v1/review-groups/{group['id']}/members/invite",
            json={"invitedUserDisplayId": "100003"},
            headers=owner_headers,
        )
        assert invite.status_code == 201

        response = await client.delete(
            f"/api/v1/review-groups/{group['id']}/settings", headers=owner_headers
        )
        assert response.status_code == 200
        assert response.json()["success"] is True

        group_deleted = await db_session.execute(
            select(ReviewGroups.deleted_at).where(ReviewGroups.id == group["id"])
        )
        assert group_deleted.scalar_one() is not None

        subjects = await db_session.execute(
            select(ReviewSubjects.deleted_at).where(ReviewSubjects.review_group_id == group["id"])
        )
        subject_marks = subjects.scalars().all()
        assert len(subject_marks) == 2
        assert all(mark is not None for mark in subject_marks)

        reviews = await db_session.execute(select(Reviews.deleted_at))
        review_marks = reviews.scalars().all()
        assert len(review_marks) == 3
        assert all(mark is not None for mark in review_marks)

        members = await db_session.execute(
            select(ReviewGroupMembers.deleted_at).where(
                ReviewGroupMembers.review_group_id == group["id"]
            )
        )
        assert all(mark is not None for mark in members.scalars().all())

        criteria = await db_session.execute(select(EvaluationCriteria.deleted_at))
        assert all(mark is not None for mark in criteria.scalars().all())

        invitations = await db_session.execute(select(Invitations.deleted_at))
        assert all(mark is not None for mark in invitations.scalars().all())

        scores = await db_session.execute(select(EvaluationScores.id))
        assert scores.all() == []

    async def test_deleted_group_is_gone(
        self, client: AsyncClient, create_group, owner_headers: dict
    ):
        group = await create_group()
        await client.delete(f"/api/v1/review-groups/{group['id']}", headers=owner_headers)

        detail = await client.get(f"/api/v1/review-groups/{group['id']}", headers=owner_headers)
        assert detail.status_code == 404

        listing = await client.get("/api/v1/review-groups", headers=owner_headers)
        assert listing.json()["review_groups"] == []

    async def test_only_owner_can_delete(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        create_group,
        add_member,
        member_headers: dict,
    ):
        group = await create_group()
        await add_member(group["id"], "user-0002", role="admin")

        response = await client.delete(
            f"/api/v1/review-groups/{group['id']}", headers=member_headers
        )
        assert response.status_code == 403

        still_there = await db_session.execute(
            select(ReviewGroups.deleted_at).where(ReviewGroups.id == group["id"])
        )
        assert still_there.scalar_one() is None
