# tests/helpers.py

import hashlib
import os
import tempfile
import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pixmarket import models  # noqa: F401
from pixmarket.config import settings_loader
from pixmarket.db.database import Base, get_db
from pixmarket.main import app

API = "/api"


def digest(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


class ApiTestCase(unittest.TestCase):
    """Runs the app against a fresh in-memory database for every test."""

    def create_test_engine(self):
        return create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    def setUp(self):
        self.engine = self.create_test_engine()
        Base.metadata.create_all(bind=self.engine)
        self.SessionTesting = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        with self.SessionTesting() as db:
            settings_loader.initialize_db_with_default_settings(db)
            settings_loader.load_settings_from_db(db)

        def override_get_db():
            db = self.SessionTesting()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        Base.metadata.drop_all(bind=self.engine)
        self.engine.dispose()

    # helpers

    def register(self, user_id="alice01", password="alice-password", account=None):
        response = self.client.post(f"{API}/users", json={
            "user_id": user_id,
            "user_account": account or f"0x{user_id}account",
            "user_password": digest(password),
            "user_privatekey": f"{user_id}-private-key",
        })
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["data"]

    def login(self, user_id="alice01", password="alice-password"):
        response = self.client.post(f"{API}/users/login", json={
            "user_id": user_id,
            "user_password": digest(password),
        })
        self.assertEqual(response.status_code, 200, response.text)
        return {"Authorization": f"Bearer {response.json()['data']['access_token']}"}

    def register_and_login(self, user_id="alice01", password="alice-password"):
        user = self.register(user_id, password)
        return user, self.login(user_id, password)

    def mint(self, headers, token_id, title="Sunset", category="landscape", price=0, info=None):
        response = self.client.post(f"{API}/pictures", headers=headers, json={
            "token_id": token_id,
            "picture_url": f"https://ipfs.example/{token_id}.png",
            "picture_title": title,
            "picture_info": info,
            "picture_category": category,
            "picture_price": price,
        })
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["data"]

    def list_for_sale(self, headers, token_id, price):
        response = self.client.post(
            f"{API}/pictures/{token_id}/sale", headers=headers, json={"picture_price": price}
        )
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["data"]


class FileDatabaseTestCase(ApiTestCase):
    """
    Same as ApiTestCase, but on a SQLite file so every session gets its own
    connection and concurrent requests really contend for the database.
    """

    def create_test_engine(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmpdir.cleanup)
        path = os.path.join(self._tmpdir.name, "pixmarket.db")
        return create_engine(
            f"sqlite:///{path}",
            connect_args={"check_same_thread": False, "timeout": 30},
        )

    def new_client(self):
        return TestClient(app)
