"""
Test authentication endpoints and token handling.
"""
from datetime import timedelta

from fastapi.testclient import TestClient
from jose import jwt

from campus_events.auth_util import create_access_token
from campus_events.config import settings
from campus_events.model import UserRole
from conftest import PASSWORD


class TestRegister:
    def test_register_student(self, client: TestClient, college):
        response = client.post(
            "/api/auth/register",
            json={
                "email": "maya@north.edu",
                "password": "hunter22",
                "firstName": "Maya",
                "lastName": "Iyer",
                "studentId": "NC-001",
                "collegeId": college.id,
                "role": "student",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "User registered successfully"
        assert data["user"]["email"] == "maya@north.edu"
        assert data["user"]["firstName"] == "Maya"
        assert data["user"]["collegeName"] == "North Campus"
        assert data["user"]["role"] == "student"
        assert "passwordHash" not in data["user"]

        claims = jwt.decode(data["token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert claims["userId"] == data["user"]["id"]
        assert claims["collegeId"] == college.id
        assert claims["role"] == "student"

    def test_register_duplicate_email(self, client: TestClient, student, college):
        response = client.post(
            "/api/auth/register",
            json={
                "email": student.email,
                "password": "hunter22",
                "firstName": "Other",
                "lastName": "Person",
                "collegeId": college.id,
                "role": "student",
            },
        )

        assert response.status_code == 409
        assert response.json() == {"error": "Conflict", "message": "User with this email already exists"}

    def test_register_unknown_college(self, client: TestClient, db_session):
        response = client.post(
            "/api/auth/register",
            json={
                "email": "nobody@north.edu",
                "password": "hunter22",
                "firstName": "No",
                "lastName": "Body",
                "collegeId": 999,
                "role": "admin",
            },
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid college ID"

    def test_register_validation_error(self, client: TestClient, college):
        response = client.post(
            "/api/auth/register",
            json={
                "email": "short@north.edu",
                "password": "123",
                "firstName": "Sam",
                "lastName": "Lee",
                "collegeId": college.id,
                "role": "student",
            },
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Validation Error"
        assert data["message"].startswith("password")
        assert data["details"][0]["field"] == "password"


class TestLogin:
    def test_login_success(self, client: TestClient, student):
        response = client.post("/api/auth/login", json={"email": student.email, "password": PASSWORD})

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["user"]["id"] == student.id
        assert data["token"]

    def test_login_wrong_password(self, client: TestClient, student):
        response = client.post("/api/auth/login", json={"email": student.email, "password": "wrong-one"})

        assert response.status_code == 401
        assert response.json() == {"error": "Access denied", "message": "Invalid email or password"}

    def test_login_inactive_user(self, client: TestClient, make_user, college):
        user = make_user(college, UserRole.student, is_active=False)
        response = client.post("/api/auth/login", json={"email": user.email, "password": PASSWORD})

        assert response.status_code == 401


class TestTokens:
    def test_profile(self, client: TestClient, admin, admin_headers):
        response = client.get("/api/auth/profile", headers=admin_headers)

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["id"] == admin.id
        assert user["role"] == "admin"
        assert user["collegeName"] == "North Campus"

    def test_missing_token(self, client: TestClient, db_session):
        response = client.get("/api/auth/profile")

        assert response.status_code == 401
        assert response.json() == {"error": "Access denied", "message": "No token provided"}

    def test_tampered_token(self, client: TestClient, student):
        token = jwt.encode({"sub": str(student.id)}, "not-the-secret", algorithm="HS256")
        response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403
        assert response.json()["message"] == "Invalid token"

    def test_expired_token(self, client: TestClient, student):
        token = create_access_token(student, expires_delta=timedelta(minutes=-5))
        response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["message"] == "Token expired"

    def test_deactivated_user_token_rejected(self, client: TestClient, db_session, student, student_headers):
        student.is_active = False
        db_session.commit()

        response = client.get("/api/auth/profile", headers=student_headers)

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token or user not found"

    def test_refresh_issues_new_token(self, client: TestClient, student, student_headers):
        response = client.post("/api/auth/refresh", headers=student_headers)

        assert response.status_code == 200
        claims = jwt.decode(response.json()["token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert claims["userId"] == student.id

    def test_logout(self, client: TestClient, student_headers):
        response = client.post("/api/auth/logout", headers=student_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Logout successful"


def test_list_colleges_is_public(client: TestClient, college, other_college):
    response = client.get("/api/auth/colleges")

    assert response.status_code == 200
    names = [c["name"] for c in response.json()["colleges"]]
    assert names == ["North Campus", "South Campus"]


def test_health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"
