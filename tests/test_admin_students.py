"""관리자 학생 API 테스트."""

from httpx import AsyncClient

from tests.conftest import make_email, make_user

STUDENTS = "/api/v1/admin/students"


class TestStudents:
    """학생 관리 테스트."""

    async def test_list_only_students(self, client: AsyncClient, db, emperor_headers, student, knight):
        await make_email(db, student, "perm@moemail.app", permanent=True)
        await make_user(db, "sleepy_student", "student", enabled=False)

        res = await client.get(f"{STUDENTS}/", headers=emperor_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["total"] == 2
        by_name = {s["username"]: s for s in data["students"]}
        assert set(by_name) == {"student", "sleepy_student"}
        assert by_name["student"]["permanent_email_count"] == 1

        res = await client.get(f"{STUDENTS}/", params={"status": "disabled"}, headers=emperor_headers)
        assert [s["username"] for s in res.json()["students"]] == ["sleepy_student"]

    async def test_search_matches_username(self, client: AsyncClient, db, emperor_headers, student):
        await make_user(db, "alice", "student")
        res = await client.get(f"{STUDENTS}/", params={"search": "ALI"}, headers=emperor_headers)
        assert [s["username"] for s in res.json()["students"]] == ["alice"]

    async def test_non_student_target_rejected(self, client: AsyncClient, emperor_headers, knight):
        res = await client.get(f"{STUDENTS}/{knight.id}", headers=emperor_headers)
        assert res.status_code == 400
        assert res.json() == {"error": "User is not a student"}

        res = await client.put(f"{STUDENTS}/{knight.id}", json={"enabled": False}, headers=emperor_headers)
        assert res.status_code == 400

        res = await client.post(f"{STUDENTS}/{knight.id}/emails", json={}, headers=emperor_headers)
        assert res.status_code == 400

    async def test_detail_status_and_emails(self, client: AsyncClient, emperor_headers, student):
        res = await client.get(f"{STUDENTS}/{student.id}", headers=emperor_headers)
        assert res.status_code == 200
        assert res.json()["primary_role"] == "student"

        res = await client.post(
            f"{STUDENTS}/{student.id}/emails",
            json={"custom_address": "studybox", "is_permanent": True},
            headers=emperor_headers,
        )
        assert res.status_code == 201

        res = await client.get(f"{STUDENTS}/{student.id}/emails", headers=emperor_headers)
        assert res.json()["permanent_count"] == 1

        res = await client.put(f"{STUDENTS}/{student.id}", json={"enabled": False}, headers=emperor_headers)
        assert res.status_code == 200
        assert res.json()["user"]["enabled"] is False

        res = await client.post(f"{STUDENTS}/{student.id}/emails", json={}, headers=emperor_headers)
        assert res.status_code == 400

    async def test_student_cannot_manage_students(self, client: AsyncClient, student_headers):
        res = await client.get(f"{STUDENTS}/", headers=student_headers)
        assert res.status_code == 403
