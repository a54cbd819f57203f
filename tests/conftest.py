# Settings are read when the application package is imported, so the
# environment has to be in place before any test module imports it.
import os

os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["SQLALCHEMY_DATABASE_URL"] = "sqlite://"
os.environ["SETTINGS_RELOAD_INTERVAL_SECONDS"] = "0"
