# tests/test_settings_loader.py

import unittest
from unittest import mock

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pixmarket import models  # noqa: F401
from pixmarket.config import settings_loader
from pixmarket.core import lifespan as lifespan_module
from pixmarket.db.database import Base
from pixmarket.main import app
from pixmarket.models import ServerSetting


class SettingsLoaderTestCase(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite://", poolclass=StaticPool)
        Base.metadata.create_all(bind=self.engine)
        self.db = sessionmaker(bind=self.engine)()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_get_setting_before_load(self):
        with mock.patch.object(settings_loader, "db_settings_cache", {}):
            with self.assertRaises(RuntimeError):
                settings_loader.get_setting("REGISTER_ENDPOINT_ENABLED")

    def test_defaults_are_seeded_once(self):
        settings_loader.initialize_db_with_default_settings(self.db)
        settings_loader.initialize_db_with_default_settings(self.db)
        names = sorted(setting.name for setting in self.db.query(ServerSetting).all())
        self.assertEqual(names, ["REGISTER_ENDPOINT_ENABLED", "SALE_REGISTRATION_ENABLED"])

    def test_values_are_parsed(self):
        settings_loader.initialize_db_with_default_settings(self.db)
        setting = self.db.query(ServerSetting).filter(ServerSetting.name == "SALE_REGISTRATION_ENABLED").one()
        setting.value = "False"
        self.db.commit()

        cache = settings_loader.load_settings_from_db(self.db)
        self.assertIs(cache["REGISTER_ENDPOINT_ENABLED"], True)
        self.assertIs(cache["SALE_REGISTRATION_ENABLED"], False)
        self.assertIs(settings_loader.get_setting("SALE_REGISTRATION_ENABLED"), False)

    def test_missing_rows_fall_back_to_defaults(self):
        cache = settings_loader.load_settings_from_db(self.db)
        self.assertIs(cache["REGISTER_ENDPOINT_ENABLED"], True)

    def test_changed_values_are_logged(self):
        settings_loader.initialize_db_with_default_settings(self.db)
        settings_loader.load_settings_from_db(self.db)
        setting = self.db.query(ServerSetting).filter(ServerSetting.name == "REGISTER_ENDPOINT_ENABLED").one()
        setting.value = "false"
        self.db.commit()

        with self.assertLogs("pixmarket.config.settings_loader", "INFO") as logs:
            settings_loader.load_settings_from_db(self.db)
        self.assertEqual(len(logs.records), 1)
        self.assertIn("REGISTER_ENDPOINT_ENABLED", logs.output[0])
        self.assertIn(
            "REGISTER_ENDPOINT_ENABLED=False, SALE_REGISTRATION_ENABLED=True", settings_loader.describe_settings()
        )

    def test_unknown_setting(self):
        settings_loader.load_settings_from_db(self.db)
        with self.assertRaises(KeyError):
            settings_loader.get_setting("NO_SUCH_SETTING")


class LifespanTestCase(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine(
            "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
        )
        patcher = mock.patch.multiple(
            lifespan_module,
            engine=self.engine,
            SessionLocal=sessionmaker(bind=self.engine),
        )
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        self.engine.dispose()

    def test_startup_seeds_and_logs_flags(self):
        with self.assertLogs("pixmarket.core.lifespan", "INFO") as logs:
            with TestClient(app):
                self.assertIs(settings_loader.get_setting("SALE_REGISTRATION_ENABLED"), True)

        loaded = [line for line in logs.output if "Runtime settings loaded" in line]
        self.assertEqual(len(loaded), 1)
        self.assertIn("REGISTER_ENDPOINT_ENABLED=True", loaded[0])
        with sessionmaker(bind=self.engine)() as db:
            self.assertEqual(db.query(ServerSetting).count(), 2)


if __name__ == '__main__':
    unittest.main()
