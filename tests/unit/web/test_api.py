#!/usr/bin/env python3
"""
API tests for the Tulen web backend.

Runs the FastAPI app against an in-memory SQLite database through
dependency overrides; bearer tokens are signed with a test secret.
"""

import unittest

import jwt
from fastapi.testclient import TestClient

from core.config_loader import AuthConfig
from web.backend.app import app
from web.backend.dependencies import get_session_factory, get_auth_config
from tests import create_test_engine, create_session_factory, TestDataBuilder

TEST_AUTH = AuthConfig(jwt_secret="tulen-test-secret-0123456789abcdef", jwt_algorithm="HS256")


def auth_header(user_id: int) -> dict:
    token = jwt.encode({"userId": user_id}, TEST_AUTH.jwt_secret, algorithm=TEST_AUTH.jwt_algorithm)
    return {"Authorization": f"Bearer {token}"}


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        self.engine = create_test_engine()
        session_factory = create_session_factory(self.engine)
        self.data = TestDataBuilder(session_factory)

        app.dependency_overrides[get_session_factory] = lambda: session_factory
        app.dependency_overrides[get_auth_config] = lambda: TEST_AUTH
        self.client = TestClient(app)

        self.cs = self.data.bubble("Computer Science", "Programming")
        self.math = self.data.bubble("Mathematics")
        self.python = self.data.skill("Python", self.cs)
        self.writing = self.data.skill("Academic Writing")

        self.sara = self.data.user("sara", "Computer Science", 1, self.cs)
        self.tom = self.data.user("tom", "Computer Science", 3, self.cs)
        self.uma = self.data.user("uma", "Physics", 2, self.cs)
        self.data.endorse(self.tom, self.python, level=5)
        self.data.endorse(self.uma, self.python, level=4)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.engine.dispose()

    def create_request(self, user_id=None, **overrides):
        body = {
            "bubble_id": self.cs,
            "skill_id": self.python,
            "specific_topic": "Decorators",
            "learning_objectives": "Write my own",
            "preferred_schedule": "Tuesdays",
        }
        body.update(overrides)
        return self.client.post("/api/study-requests", json=body, headers=auth_header(user_id or self.sara))


class TestPublicEndpoints(ApiTestCase):

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy", "service": "tulen-api"})

    def test_list_skills(self):
        response = self.client.get("/api/skills")

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["count"], 2)
        self.assertEqual([s["name"] for s in data["skills"]], ["Academic Writing", "Python"])

    def test_list_bubbles_anonymous_and_authenticated(self):
        anonymous = self.client.get("/api/bubbles").json()
        self.assertEqual(len(anonymous["bubbles"]), 2)
        self.assertIsNone(anonymous["current_bubble"])

        mine = self.client.get("/api/bubbles", headers=auth_header(self.sara)).json()
        self.assertEqual(mine["current_bubble"]["bubble_id"], self.cs)
        self.assertEqual(mine["current_bubble"]["description"], "Programming")

    def test_bubble_detail_and_skills(self):
        self.assertEqual(self.client.get(f"/api/bubbles/{self.cs}").json()["bubble"]["name"], "Computer Science")

        skills = self.client.get(f"/api/bubbles/{self.cs}/skills").json()
        self.assertEqual([s["name"] for s in skills["skills"]], ["Python"])

    def test_unknown_bubble_is_404(self):
        response = self.client.get("/api/bubbles/9999")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["type"], "NotFoundError")
        self.assertFalse(response.json()["success"])


class TestAuthentication(ApiTestCase):

    def test_missing_token(self):
        response = self.client.get("/api/my-requests")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(
            response.json(),
            {"success": False, "error": "No token provided", "type": "HTTPException"}
        )

    def test_bad_signature(self):
        token = jwt.encode({"userId": self.sara}, "some-other-secret-0123456789abcdef", algorithm="HS256")
        response = self.client.get("/api/my-requests", headers={"Authorization": f"Bearer {token}"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "Invalid token")

    def test_optional_token_still_verified(self):
        response = self.client.get("/api/bubbles", headers={"Authorization": "Bearer not-a-jwt"})
        self.assertEqual(response.status_code, 401)

    def test_profile(self):
        response = self.client.get("/api/user/profile", headers=auth_header(self.tom))

        self.assertEqual(response.status_code, 200)
        profile = response.json()["profile"]
        self.assertEqual(profile["username"], "tom")
        self.assertEqual(profile["current_bubble_id"], self.cs)
        self.assertEqual(
            profile["skills"],
            [{"skill_id": self.python, "name": "Python", "proficiency_level": 5, "is_teaching": True}]
        )

    def test_profile_of_unknown_user(self):
        response = self.client.get("/api/user/profile", headers=auth_header(9999))
        self.assertEqual(response.status_code, 404)

    def test_update_profile(self):
        response = self.client.put(
            "/api/user/profile",
            json={"username": " Tom ", "university": "Aalto", "major": "Data Science"},
            headers=auth_header(self.tom)
        )

        self.assertEqual(response.status_code, 200)
        profile = response.json()["profile"]
        self.assertEqual(profile["username"], "Tom")
        self.assertEqual(profile["university"], "Aalto")
        self.assertEqual(profile["major"], "Data Science")
        self.assertEqual(profile["email"], "tom@uni.test")

        stored = self.client.get("/api/user/profile", headers=auth_header(self.tom)).json()["profile"]
        self.assertEqual(stored["username"], "Tom")
        self.assertEqual(stored["department"], "Computer Science")

    def test_update_profile_rejects_taken_email(self):
        response = self.client.put(
            "/api/user/profile", json={"email": "sara@uni.test"}, headers=auth_header(self.tom)
        )

        self.assertEqual(response.status_code, 409)
        stored = self.client.get("/api/user/profile", headers=auth_header(self.tom)).json()["profile"]
        self.assertEqual(stored["email"], "tom@uni.test")

    def test_update_profile_validation(self):
        blank = self.client.put("/api/user/profile", json={"username": "  "}, headers=auth_header(self.tom))
        empty = self.client.put("/api/user/profile", json={}, headers=auth_header(self.tom))

        self.assertEqual(blank.status_code, 422)
        self.assertIn("username", blank.json()["errors"])
        self.assertEqual(empty.status_code, 422)

    def test_update_profile_requires_token(self):
        response = self.client.put("/api/user/profile", json={"major": "Law"})
        self.assertEqual(response.status_code, 401)

    def test_update_profile_of_unknown_user(self):
        response = self.client.put("/api/user/profile", json={"major": "Law"}, headers=auth_header(9999))
        self.assertEqual(response.status_code, 404)


class TestStudyRequestEndpoints(ApiTestCase):

    def test_create_request(self):
        response = self.create_request(specific_topic="  Generators ")

        self.assertEqual(response.status_code, 201)
        request = response.json()["request"]
        self.assertEqual(request["status"], "open")
        self.assertEqual(request["specific_topic"], "Generators")
        self.assertEqual(request["skill_name"], "Python")
        self.assertEqual(request["requester_name"], "sara")
        self.assertTrue(request["is_own_request"])

    def test_create_request_validation(self):
        response = self.create_request(specific_topic="   ")

        self.assertEqual(response.status_code, 422)
        data = response.json()
        self.assertEqual(data["type"], "ValidationError")
        self.assertIn("specific_topic", data["errors"])

    def test_create_request_outside_own_bubble(self):
        response = self.create_request(bubble_id=self.math, skill_id=self.writing)
        self.assertEqual(response.status_code, 403)

    def test_bubble_requests_flag_own_requests(self):
        request_id = self.create_request().json()["request"]["request_id"]

        as_owner = self.client.get(f"/api/bubbles/{self.cs}/requests", headers=auth_header(self.sara)).json()
        as_other = self.client.get(f"/api/bubbles/{self.cs}/requests", headers=auth_header(self.tom)).json()
        anonymous = self.client.get(f"/api/bubbles/{self.cs}/requests").json()

        self.assertEqual([r["request_id"] for r in as_owner["requests"]], [request_id])
        self.assertTrue(as_owner["requests"][0]["is_own_request"])
        self.assertFalse(as_other["requests"][0]["is_own_request"])
        self.assertIsNone(anonymous["requests"][0]["is_own_request"])

    def test_potential_matches(self):
        request_id = self.create_request().json()["request"]["request_id"]

        response = self.client.get(f"/api/potential-matches/{request_id}", headers=auth_header(self.sara))

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["count"], 2)
        self.assertEqual([c["user_id"] for c in data["candidates"]], [self.tom, self.uma])
        self.assertEqual(data["candidates"][0]["score"], 90)
        self.assertTrue(data["candidates"][0]["match_details"]["department_match"])

    def test_potential_matches_only_for_owner(self):
        request_id = self.create_request().json()["request"]["request_id"]
        response = self.client.get(f"/api/potential-matches/{request_id}", headers=auth_header(self.tom))
        self.assertEqual(response.status_code, 403)

    def test_select_and_respond(self):
        request_id = self.create_request().json()["request"]["request_id"]

        selected = self.client.post(
            f"/api/study-requests/{request_id}/select", json={"teacher_id": self.tom}, headers=auth_header(self.sara)
        )
        self.assertEqual(selected.status_code, 201)
        self.assertEqual(selected.json()["match"]["status"], "pending")
        self.assertEqual(selected.json()["match"]["request_status"], "pending")

        accepted = self.client.post(
            f"/api/study-requests/{request_id}/respond", json={"accepted": True}, headers=auth_header(self.tom)
        )
        self.assertEqual(accepted.status_code, 200)
        self.assertEqual(accepted.json()["match"]["status"], "active")
        self.assertEqual(accepted.json()["message"], "Request accepted successfully")

        again = self.client.post(
            f"/api/study-requests/{request_id}/respond", json={"accepted": True}, headers=auth_header(self.tom)
        )
        self.assertEqual(again.status_code, 409)
        self.assertEqual(again.json()["type"], "ConflictError")

    def test_respond_body_must_be_boolean(self):
        request_id = self.create_request().json()["request"]["request_id"]
        response = self.client.post(
            f"/api/study-requests/{request_id}/respond", json={}, headers=auth_header(self.tom)
        )
        self.assertEqual(response.status_code, 422)

    def test_cancel_pending(self):
        request_id = self.create_request().json()["request"]["request_id"]
        self.client.post(
            f"/api/study-requests/{request_id}/select", json={"teacher_id": self.tom}, headers=auth_header(self.sara)
        )

        response = self.client.post(f"/api/study-requests/{request_id}/cancel", headers=auth_header(self.sara))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["request"]["status"], "open")
        self.assertEqual(self.data.notification_types(self.tom), ["new_request", "request_cancelled"])

    def test_delete_rules(self):
        request_id = self.create_request().json()["request"]["request_id"]
        self.client.post(
            f"/api/study-requests/{request_id}/select", json={"teacher_id": self.tom}, headers=auth_header(self.sara)
        )

        blocked = self.client.delete(f"/api/study-requests/{request_id}", headers=auth_header(self.sara))
        self.assertEqual(blocked.status_code, 409)

        self.client.post(f"/api/study-requests/{request_id}/cancel", headers=auth_header(self.sara))
        deleted = self.client.delete(f"/api/study-requests/{request_id}", headers=auth_header(self.sara))
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(deleted.json()["message"], "Request deleted successfully")

        mine = self.client.get("/api/my-requests", headers=auth_header(self.sara)).json()
        self.assertEqual(mine["count"], 0)

    def test_unknown_request(self):
        response = self.client.delete("/api/study-requests/9999", headers=auth_header(self.sara))
        self.assertEqual(response.status_code, 404)


class TestMatchEndpoints(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.request_id = self.create_request().json()["request"]["request_id"]
        selected = self.client.post(
            f"/api/study-requests/{self.request_id}/select",
            json={"teacher_id": self.tom},
            headers=auth_header(self.sara)
        )
        self.match_id = selected.json()["match"]["match_id"]
        self.client.post(
            f"/api/study-requests/{self.request_id}/respond", json={"accepted": True}, headers=auth_header(self.tom)
        )

    def test_list_matches_by_role(self):
        teaching = self.client.get("/api/matches?role=teaching", headers=auth_header(self.tom)).json()
        learning = self.client.get("/api/matches", headers=auth_header(self.sara)).json()

        self.assertEqual(teaching["role"], "teaching")
        self.assertEqual(teaching["matches"][0]["other_user"], "sara")
        self.assertEqual(teaching["matches"][0]["match_status"], "active")
        self.assertEqual(learning["role"], "learning")
        self.assertEqual(learning["matches"][0]["other_user"], "tom")
        self.assertEqual(learning["matches"][0]["topic"], "Decorators")

    def test_list_matches_with_role_in_path(self):
        teaching = self.client.get("/api/matches/teaching", headers=auth_header(self.tom))
        learning = self.client.get("/api/matches/learning", headers=auth_header(self.tom))

        self.assertEqual(teaching.status_code, 200)
        self.assertEqual(teaching.json()["matches"][0]["match_id"], self.match_id)
        self.assertEqual(learning.json()["count"], 0)
        self.assertEqual(
            self.client.get("/api/matches/mentoring", headers=auth_header(self.tom)).status_code, 422
        )

    def test_invalid_role(self):
        response = self.client.get("/api/matches?role=mentoring", headers=auth_header(self.tom))
        self.assertEqual(response.status_code, 422)
        self.assertIn("role", response.json()["errors"])

    def test_complete(self):
        response = self.client.post(
            f"/api/matches/{self.match_id}/complete",
            json={"rating": 5, "feedback": "Great session"},
            headers=auth_header(self.sara)
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["match"]["status"], "completed")
        self.assertEqual(data["match"]["request_status"], "completed")
        self.assertEqual(data["rating"]["rated_id"], self.tom)
        self.assertEqual(data["rating"]["comment"], "Great session")
        self.assertEqual(data["message"], "Session marked as completed")

        teaching = self.client.get("/api/matches?role=teaching", headers=auth_header(self.tom)).json()
        self.assertEqual(teaching["matches"][0]["feedback"], "Great session")

    def test_complete_rejects_bad_rating(self):
        response = self.client.post(
            f"/api/matches/{self.match_id}/complete", json={"rating": 9}, headers=auth_header(self.sara)
        )
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["type"], "ValidationError")

    def test_complete_by_stranger(self):
        response = self.client.post(
            f"/api/matches/{self.match_id}/complete", json={"rating": 4}, headers=auth_header(self.uma)
        )
        self.assertEqual(response.status_code, 403)

    def test_cancel(self):
        response = self.client.post(f"/api/matches/{self.match_id}/cancel", headers=auth_header(self.tom))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["match"]["status"], "cancelled")
        self.assertEqual(response.json()["match"]["request_status"], "cancelled")

        again = self.client.post(f"/api/matches/{self.match_id}/cancel", headers=auth_header(self.tom))
        self.assertEqual(again.status_code, 409)


class TestNotificationEndpoints(ApiTestCase):

    def test_list_and_mark_read(self):
        request_id = self.create_request().json()["request"]["request_id"]
        self.client.post(
            f"/api/study-requests/{request_id}/select", json={"teacher_id": self.tom}, headers=auth_header(self.sara)
        )
        self.client.post(
            f"/api/study-requests/{request_id}/respond", json={"accepted": False}, headers=auth_header(self.tom)
        )

        listed = self.client.get("/api/notifications", headers=auth_header(self.sara)).json()
        self.assertEqual(listed["count"], 2)
        self.assertEqual(listed["unread_count"], 2)
        self.assertEqual([n["type"] for n in listed["notifications"]], ["request_declined", "request_sent"])

        marked = self.client.put("/api/notifications/read", headers=auth_header(self.sara)).json()
        self.assertEqual(marked["updated"], 2)

        unread = self.client.get("/api/notifications?unread_only=true", headers=auth_header(self.sara)).json()
        self.assertEqual(unread["count"], 0)

        # Teacher's notifications are untouched
        teacher = self.client.get("/api/notifications", headers=auth_header(self.tom)).json()
        self.assertEqual(teacher["unread_count"], 1)


class TestBubbleMembershipEndpoints(ApiTestCase):

    def test_join_requires_leaving_first(self):
        response = self.client.post(f"/api/bubbles/{self.math}/join", headers=auth_header(self.sara))
        self.assertEqual(response.status_code, 409)

        same = self.client.post(f"/api/bubbles/{self.cs}/join", headers=auth_header(self.sara)).json()
        self.assertFalse(same["joined"])
        self.assertEqual(same["message"], "Already a member of this bubble")

    def test_leave_then_join(self):
        request_id = self.create_request().json()["request"]["request_id"]
        self.client.post(
            f"/api/study-requests/{request_id}/select", json={"teacher_id": self.tom}, headers=auth_header(self.sara)
        )

        left = self.client.post("/api/bubbles/leave", headers=auth_header(self.tom))
        self.assertEqual(left.status_code, 200)
        self.assertEqual(left.json()["reopened_request_ids"], [request_id])
        self.assertEqual(left.json()["bubble_id"], self.cs)

        joined = self.client.post(f"/api/bubbles/{self.math}/join", headers=auth_header(self.tom)).json()
        self.assertTrue(joined["joined"])

        mine = self.client.get("/api/my-requests", headers=auth_header(self.sara)).json()
        self.assertEqual(mine["requests"][0]["status"], "open")

    def test_leave_without_bubble(self):
        loner = self.data.user("lou")
        response = self.client.post("/api/bubbles/leave", headers=auth_header(loner))
        self.assertEqual(response.status_code, 409)


if __name__ == '__main__':
    unittest.main()
