import uuid
from datetime import timedelta

from jose import jwt

from digitalhouse.core import security
from digitalhouse.core.config import settings
from tests.base import ApiTestCase

ME_URL = f"{settings.API_V1_STR}/auth/me"
HELP_URL = f"{settings.API_V1_STR}/help-requests"


class TestBearerAuth(ApiTestCase):

    async def test_me_returns_token_owner(self):
        user = await self.make_user("Priya", location="San Francisco, CA")
        r = await self.client.get(ME_URL, headers=self.auth_headers(user))
        self.assertEqual(r.status_code, 200, r.text)
        data = r.json()
        self.assertEqual(data["id"], str(user.id))
        self.assertEqual(data["firstName"], "Priya")
        self.assertEqual(data["userType"], "member")

    async def test_missing_token_is_401(self):
        for method, url in (("GET", ME_URL), ("GET", HELP_URL), ("POST", HELP_URL)):
            r = await self.client.request(method, url)
            self.assertEqual(r.status_code, 401, url)

    async def test_garbage_token_is_401(self):
        r = await self.client.get(ME_URL, headers={"Authorization": "Bearer not-a-jwt"})
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["detail"], "Could not validate credentials")

    async def test_expired_token_is_401(self):
        user = await self.make_user("Priya")
        token = security.create_access_token(user.id, expires_delta=timedelta(minutes=-1))
        r = await self.client.get(ME_URL, headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(r.status_code, 401)

    async def test_wrong_signature_is_401(self):
        user = await self.make_user("Priya")
        token = jwt.encode({"sub": str(user.id)}, "some-other-secret", algorithm=security.ALGORITHM)
        r = await self.client.get(ME_URL, headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(r.status_code, 401)

    async def test_unknown_user_is_401(self):
        token = security.create_access_token(uuid.uuid4())
        r = await self.client.get(ME_URL, headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(r.status_code, 401)

    async def test_subject_must_be_a_user_id(self):
        token = security.create_access_token("admin")
        r = await self.client.get(ME_URL, headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(r.status_code, 401)

    async def test_health_is_public(self):
        r = await self.client.get("/health")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["status"], "ok")


class TestAccessToken(ApiTestCase):

    async def test_token_round_trip(self):
        subject = uuid.uuid4()
        payload = security.decode_access_token(security.create_access_token(subject))
        self.assertEqual(payload["sub"], str(subject))
        self.assertIn("exp", payload)
