import django
import pytest
from django.conf import settings


def pytest_configure(config):
    if settings.configured:
        return
    settings.configure(
        DEBUG=False,
        SECRET_KEY="rail-acl-tests",
        DATABASES={
            "default": {
                "ENGINE": "django.db.backends.sqlite3",
                "NAME": ":memory:",
            }
        },
        INSTALLED_APPS=[
            "django.contrib.auth",
            "django.contrib.contenttypes",
            "test_app",
        ],
        DEFAULT_AUTO_FIELD="django.db.models.AutoField",
        USE_TZ=True,
        RAIL_ACL={},
    )
    django.setup()


@pytest.fixture(autouse=True)
def _reset_acl_state():
    from rail_acl import hooks
    from rail_acl.config_proxy import clear_runtime_settings

    clear_runtime_settings()
    yield
    clear_runtime_settings()
    hooks._ENGINES.clear()
