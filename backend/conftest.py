import pytest


@pytest.fixture(autouse=True)
def _test_client_session_engine(settings):
    # The app does not install django.contrib.sessions; the DRF test client's
    # logout() (via force_authenticate(None)) still needs a session backend.
    settings.SESSION_ENGINE = 'django.contrib.sessions.backends.signed_cookies'
