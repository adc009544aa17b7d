import pytest

from gemini_consistency.errors.exceptions import make_transport_error
from gemini_consistency.types import CallSuccess, ErrorKind


class FakeTransport:
    """Transport that replays scripted outcomes; the last one repeats."""

    def __init__(self, name, outcomes):
        self.name = name
        self._outcomes = list(outcomes)
        self.requests = []
        self.closed = False

    @property
    def calls(self):
        return len(self.requests)

    async def invoke(self, request):
        self.requests.append(request)
        outcome = self._outcomes[min(len(self.requests), len(self._outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def close(self):
        self.closed = True


@pytest.fixture
def make_transport():
    return FakeTransport


@pytest.fixture
def unavailable():
    def _unavailable(message="HTTP 503"):
        return make_transport_error(message, kind=ErrorKind.SERVER_UNAVAILABLE, http_status=503)

    return _unavailable


@pytest.fixture
def ok():
    def _ok(text="Paris", latency_ms=12):
        return CallSuccess(text=text, latency_ms=latency_ms)

    return _ok


@pytest.fixture
def sleeps():
    """Recorded sleep durations (seconds) instead of real waits."""
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(seconds):
        sleeps.append(seconds)

    return _sleep


@pytest.fixture
def sample_png_bytes():
    """Minimal valid PNG for testing (1x1 white pixel)."""
    import base64
    return base64.b64decode(
        "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR4"
        "nGP4z8BQDwAEgAF/pooBPQAAAABJRU5ErkJggg=="
    )


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep real keys and the real settings DB out of tests."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.setenv("GEMINI_CONSISTENCY_SETTINGS_DB", str(tmp_path / "settings.db"))


@pytest.fixture
def noisy_png_bytes():
    """400x400 PNG of random noise; compresses poorly so it exceeds 100 KB."""
    import io
    import random

    from PIL import Image

    rng = random.Random(42)
    img = Image.new("RGB", (400, 400))
    img.putdata(
        [(rng.randrange(256), rng.randrange(256), rng.randrange(256)) for _ in range(400 * 400)]
    )
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
