"""Root test configuration: reuse the package's environment isolation."""

from chat_providers.tests.conftest import isolated_config  # noqa: F401 - autouse fixture
