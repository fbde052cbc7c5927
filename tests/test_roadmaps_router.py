# FILE: tests/test_roadmaps_router.py
"""
Tests for roadmapx/roadmaps/router.py and roadmapx/roadmaps/ai_router.py
Roadmap CRUD, ownership, status changes, milestones and AI generation routes.
"""

import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest
from unittest.mock import patch
from botocore.exceptions import ClientError
from sqlalchemy.exc import SQLAlchemyError

from conftest import comprehend_result, roadmap_payload, switch_user


def _create(client, **overrides):
    response = client.post("/api/roadmaps", json=roadmap_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateRoadmap:
    """Test POST /api/roadmaps."""

    def test_creates_draft_with_tree(self, client):
        """New roadmaps are drafts with upcoming phases and open milestones."""
        body = _create(client)

        assert body["status"] == "draft"
        assert body["skills"] == ["Python", "FastAPI"]
        assert len(body["phases"]) == 2
        first = body["phases"][0]
        assert first["status"] == "upcoming"
        assert [m["title"] for m in first["milestones"]] == ["Install Python", "Hello API"]
        assert all(m["completed"] is False for m in first["milestones"])
        resource = first["milestones"][0]["resources"][0]
        assert resource["url"] == "https://docs.python.org/3/tutorial/"
        assert resource["type"] == "document"

    def test_without_phases(self, client):
        """Phases are optional."""
        body = _create(client, phases=None)
        assert body["phases"] == []

    def test_phases_returned_in_order(self, client):
        """Phases come back sorted by order, not insertion."""
        payload_phases = [
            {"title": "Second", "order": 2, "duration": "1 week"},
            {"title": "First", "order": 1, "duration": "1 week"},
        ]
        roadmap_id = _create(client, phases=payload_phases)["id"]

        body = client.get(f"/api/roadmaps/{roadmap_id}").json()
        assert [p["title"] for p in body["phases"]] == ["First", "Second"]

    @pytest.mark.parametrize("field,value", [
        ("skill_level", "guru"),
        ("preference", "osmosis"),
        ("time_frame", 0),
        ("title", ""),
    ])
    def test_invalid_payload_is_400(self, client, field, value):
        """Validation failures use the 400 error shape."""
        response = client.post("/api/roadmaps", json=roadmap_payload(**{field: value}))

        assert response.status_code == 400
        assert response.json()["detail"] == "Validation error"
        assert response.json()["errors"]

    def test_invalid_resource_url(self, client):
        """Resource URLs must be valid URLs."""
        payload = roadmap_payload()
        payload["phases"][0]["milestones"][0]["resources"][0]["url"] = "not a url"

        assert client.post("/api/roadmaps", json=payload).status_code == 400


class TestReadRoadmaps:
    """Test list and detail routes."""

    def test_list_has_counts(self, client):
        """Listing carries phase and progress counts."""
        _create(client)
        _create(client, title="Second", phases=None)

        body = client.get("/api/roadmaps").json()

        assert len(body) == 2
        counts = {r["title"]: r["phase_count"] for r in body}
        assert counts == {"Learn FastAPI": 2, "Second": 0}
        assert all(r["progress_count"] == 0 for r in body)

    def test_detail_includes_progress(self, client):
        """Detail view embeds progress entries."""
        roadmap_id = _create(client)["id"]
        client.post(f"/api/progress/{roadmap_id}", json={"completed": True, "notes": "day one"})

        body = client.get(f"/api/roadmaps/{roadmap_id}").json()

        assert len(body["progress"]) == 1
        assert body["progress"][0]["notes"] == "day one"

    def test_unknown_roadmap(self, client):
        """Unknown roadmap is 404."""
        assert client.get("/api/roadmaps/does-not-exist").status_code == 404

    def test_other_users_roadmaps_are_invisible(self, client, identity):
        """Another user's roadmap is 404 on every route."""
        roadmap_id = _create(client)["id"]

        switch_user(identity)

        assert client.get("/api/roadmaps").json() == []
        assert client.get(f"/api/roadmaps/{roadmap_id}").status_code == 404
        assert client.put(f"/api/roadmaps/{roadmap_id}", json={"title": "Mine now"}).status_code == 404
        assert client.delete(f"/api/roadmaps/{roadmap_id}").status_code == 404
        assert client.patch(f"/api/roadmaps/{roadmap_id}/status", json={"status": "active"}).status_code == 404


class TestUpdateRoadmap:
    """Test PUT /api/roadmaps/{id}."""

    def test_partial_update_keeps_phases(self, client):
        """Fields not sent are left alone, phases included."""
        roadmap_id = _create(client)["id"]

        response = client.put(f"/api/roadmaps/{roadmap_id}", json={"title": "Renamed", "time_frame": 10})

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Renamed"
        assert body["time_frame"] == 10
        assert body["goal"] == "Build production APIs"
        assert len(body["phases"]) == 2

    def test_phases_replace_tree(self, client):
        """Sending phases replaces the whole tree."""
        created = _create(client)
        old_milestone = created["phases"][0]["milestones"][0]["id"]
        client.post(f"/api/progress/{created['id']}", json={"completed": True, "milestone_id": old_milestone})

        response = client.put(
            f"/api/roadmaps/{created['id']}",
            json={"phases": [{"title": "Only phase", "order": 1, "duration": "8 weeks",
                              "milestones": [{"title": "Everything", "order": 1}]}]},
        )

        assert response.status_code == 200
        phases = response.json()["phases"]
        assert [p["title"] for p in phases] == ["Only phase"]
        assert phases[0]["milestones"][0]["id"] != old_milestone

        # Progress survives with its milestone link cleared
        entries = client.get(f"/api/progress/{created['id']}").json()
        assert len(entries) == 1
        assert entries[0]["milestone_id"] is None

    def test_update_validation(self, client):
        """Invalid update fields are 400."""
        roadmap_id = _create(client)["id"]
        response = client.put(f"/api/roadmaps/{roadmap_id}", json={"skill_level": "guru"})
        assert response.status_code == 400


class TestDeleteRoadmap:
    """Test DELETE /api/roadmaps/{id}."""

    def test_delete(self, client):
        """Deleted roadmaps are gone and a second delete is 404."""
        roadmap_id = _create(client)["id"]

        assert client.delete(f"/api/roadmaps/{roadmap_id}").status_code == 204
        assert client.get(f"/api/roadmaps/{roadmap_id}").status_code == 404
        assert client.delete(f"/api/roadmaps/{roadmap_id}").status_code == 404

    def test_delete_cascades_progress(self, client):
        """Deleting a roadmap removes its progress entries."""
        roadmap_id = _create(client)["id"]
        client.post(f"/api/progress/{roadmap_id}", json={"completed": False})

        client.delete(f"/api/roadmaps/{roadmap_id}")

        assert client.get(f"/api/progress/{roadmap_id}").json() == []


class TestRoadmapStatus:
    """Test PATCH /api/roadmaps/{id}/status."""

    @pytest.mark.parametrize("status", ["active", "completed", "draft"])
    def test_valid_status(self, client, status):
        """Each allowed status is accepted."""
        roadmap_id = _create(client)["id"]

        response = client.patch(f"/api/roadmaps/{roadmap_id}/status", json={"status": status})

        assert response.status_code == 200
        assert response.json()["status"] == status

    @pytest.mark.parametrize("body", [{"status": "archived"}, {}])
    def test_invalid_status(self, client, body):
        """Unknown or missing status is 400."""
        roadmap_id = _create(client)["id"]

        response = client.patch(f"/api/roadmaps/{roadmap_id}/status", json=body)

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid status"

    def test_invalid_status_checked_before_lookup(self, client):
        """Status is validated before the roadmap is looked up."""
        response = client.patch("/api/roadmaps/missing/status", json={"status": "archived"})
        assert response.status_code == 400

    def test_unknown_roadmap(self, client):
        """Valid status on an unknown roadmap is 404."""
        response = client.patch("/api/roadmaps/missing/status", json={"status": "active"})
        assert response.status_code == 404


class TestMilestones:
    """Test PATCH /api/roadmaps/milestones/{id}."""

    def test_mark_completed(self, client):
        """Completion is stored and visible in the roadmap detail."""
        created = _create(client)
        milestone_id = created["phases"][0]["milestones"][1]["id"]

        response = client.patch(f"/api/roadmaps/milestones/{milestone_id}", json={"completed": True})

        assert response.status_code == 200
        assert response.json()["completed"] is True
        detail = client.get(f"/api/roadmaps/{created['id']}").json()
        assert detail["phases"][0]["milestones"][1]["completed"] is True

    def test_other_users_milestone(self, client, identity):
        """Another user's milestone is 404."""
        milestone_id = _create(client)["phases"][0]["milestones"][0]["id"]

        switch_user(identity)

        response = client.patch(f"/api/roadmaps/milestones/{milestone_id}", json={"completed": True})
        assert response.status_code == 404

    def test_requires_completed(self, client):
        """Body without completed is 400."""
        milestone_id = _create(client)["phases"][0]["milestones"][0]["id"]
        response = client.patch(f"/api/roadmaps/milestones/{milestone_id}", json={})
        assert response.status_code == 400


class TestAiRoutes:
    """Test /api/roadmaps/ai/* and /api/roadmaps/{id}/ai/enhance."""

    DESCRIPTION = "I want to become a Python developer in 3 months"

    @patch("roadmapx.ai.comprehend.analyze_text")
    def test_generate_saves_draft(self, mock_analyze, client):
        """Generated roadmap is stored as a draft and listed."""
        mock_analyze.return_value = comprehend_result(entities=[{"Type": "OTHER", "Text": "Python"}])

        response = client.post("/api/roadmaps/ai/generate", json={"description": self.DESCRIPTION})

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Roadmap generated successfully using AI"
        assert body["roadmap"]["status"] == "draft"
        assert body["roadmap"]["title"] == "Python Learning Path"
        assert len(body["roadmap"]["phases"]) == 4
        assert body["ai_analysis"] == {"skills_detected": ["Python"], "time_frame": 12, "skill_level": "beginner"}

        listed = client.get("/api/roadmaps").json()
        assert [r["id"] for r in listed] == [body["roadmap"]["id"]]

    def test_generate_requires_description(self, client):
        """Descriptions shorter than 10 characters are 400."""
        response = client.post("/api/roadmaps/ai/generate", json={"description": "short"})
        assert response.status_code == 400

    @patch("roadmapx.ai.comprehend.analyze_text")
    def test_generate_service_failure(self, mock_analyze, client):
        """Comprehend errors give the structured 500 and store nothing."""
        mock_analyze.side_effect = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "denied"}}, "DetectEntities"
        )

        response = client.post("/api/roadmaps/ai/generate", json={"description": self.DESCRIPTION})

        assert response.status_code == 500
        detail = response.json()["detail"]
        assert detail["error"] == "Failed to generate roadmap"
        assert "DEV_FAKE_COMPREHEND" in detail["hint"]
        assert client.get("/api/roadmaps").json() == []

    @patch("roadmapx.ai.comprehend.analyze_text")
    def test_generate_zero_weeks_uses_default(self, mock_analyze, client):
        """A description asking for 0 weeks gets the 12-week default."""
        mock_analyze.return_value = comprehend_result()

        response = client.post(
            "/api/roadmaps/ai/generate", json={"description": "I want to learn Python in 0 weeks please"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["roadmap"]["time_frame"] == 12
        assert body["ai_analysis"]["time_frame"] == 12
        assert body["roadmap"]["phases"][0]["duration"] == "3 weeks"

    @patch("roadmapx.ai.comprehend.analyze_text")
    def test_generate_blank_goal_phrase_uses_default(self, mock_analyze, client):
        """A 'become' phrase with nothing after it falls back to the default goal."""
        mock_analyze.return_value = comprehend_result()

        response = client.post("/api/roadmaps/ai/generate", json={"description": "I want to become  . Python please"})

        assert response.status_code == 201
        roadmap = response.json()["roadmap"]
        assert roadmap["goal"] == "Achieve learning goals"
        assert roadmap["title"] == "Python Learning Path"

    @patch("roadmapx.roadmaps.service.create_roadmap")
    @patch("roadmapx.ai.comprehend.analyze_text")
    def test_generate_save_failure(self, mock_analyze, mock_create, client):
        """Failing to store the generated roadmap gives the structured 500."""
        mock_analyze.return_value = comprehend_result()
        mock_create.side_effect = SQLAlchemyError("database is locked")

        response = client.post("/api/roadmaps/ai/generate", json={"description": self.DESCRIPTION})

        assert response.status_code == 500
        detail = response.json()["detail"]
        assert detail["error"] == "Failed to generate roadmap"
        assert "database is locked" in detail["message"]
        assert "hint" in detail
        assert client.get("/api/roadmaps").json() == []

    @patch("roadmapx.ai.comprehend.analyze_text")
    def test_analyze(self, mock_analyze, client):
        """Analysis preview returns suggestions and stores nothing."""
        mock_analyze.return_value = comprehend_result(sentiment="POSITIVE")

        response = client.post("/api/roadmaps/ai/analyze", json={"description": self.DESCRIPTION})

        assert response.status_code == 200
        body = response.json()
        assert body["analysis"]["skills"] == ["Python"]
        assert body["suggestions"] == {
            "recommended_skills": ["Python"],
            "estimated_time_frame": "12 weeks",
            "recommended_level": "beginner",
            "motivation_level": "POSITIVE",
        }
        assert client.get("/api/roadmaps").json() == []

    def test_analyze_requires_description(self, client):
        """Missing description is 400."""
        response = client.post("/api/roadmaps/ai/analyze", json={})
        assert response.status_code == 400
        assert response.json()["detail"] == "Description is required"

    @patch("roadmapx.ai.comprehend.analyze_text")
    def test_enhance(self, mock_analyze, client):
        """Suggestions for an existing roadmap."""
        mock_analyze.return_value = comprehend_result()
        roadmap_id = _create(client)["id"]

        response = client.post(f"/api/roadmaps/{roadmap_id}/ai/enhance")

        assert response.status_code == 200
        body = response.json()
        assert body["roadmap_id"] == roadmap_id
        assert body["suggestions"]["progress_insights"]["recommended_next_steps"] == ["Basics", "Deploy"]

    def test_enhance_unknown_roadmap(self, client):
        """Unknown roadmap is 404."""
        assert client.post("/api/roadmaps/missing/ai/enhance").status_code == 404
