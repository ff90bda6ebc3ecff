"""Shared test fixtures."""
import io
import json
import zipfile

import httpx
import pytest

from bioverify_core.crypto import encrypt
from bioverify_core.provider import ProviderClient, clear_client_cache
from bioverify_core.settings import Settings
from bioverify_core.tenants import upsert_tenant

TENANT_ID = "tenant-1"
ACTOR_ID = "admin-1"
BASE_URL = "https://sot.example.test/api"
CLIENT_ID = "client-abc"
KEY = "0123456789abcdef"
IV = "fedcba9876543210"
FILE_URL = "https://files.example.test/results.zip"

HEADER = "PSN,FirstName,MiddleName,Surname,GradeLevel,StateMinistry,Cadre,OnTransfer,DateOfFirstAppointment,DateOfConfirmation,BVN"


@pytest.fixture(autouse=True)
def sqlite_db(tmp_path, monkeypatch):
    path = tmp_path / "bioverify.db"
    monkeypatch.setenv("SQLITE_PATH", str(path))
    yield path
    clear_client_cache()


@pytest.fixture
def ids():
    return {
        "tenant_id": TENANT_ID,
        "actor_id": ACTOR_ID,
        "base_url": BASE_URL,
        "client_id": CLIENT_ID,
        "key": KEY,
        "iv": IV,
        "file_url": FILE_URL,
        "header": HEADER,
    }


@pytest.fixture
def provider_config():
    return {
        "providerName": "OPTIMA",
        "apiBaseUrl": BASE_URL,
        "clientId": CLIENT_ID,
        "decryptionKey": KEY,
        "decryptionIv": IV,
    }


@pytest.fixture
def tenant(provider_config):
    return upsert_tenant(TENANT_ID, "Test State", json.dumps(provider_config))


@pytest.fixture
def make_artifact():
    """Build a zip holding one AES-CBC encrypted CSV file."""

    def build(text: str, key: str = KEY, iv: str = IV, name: str = "results.csv") -> bytes:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
            zf.writestr(name, encrypt(text.encode("utf-8"), key, iv))
        return buf.getvalue()

    return build


@pytest.fixture
def csv_text():
    """Result CSV from (psn, first, surname, grade, ministry) tuples."""

    def build(*rows) -> str:
        lines = [HEADER]
        for psn, first, surname, grade, ministry in rows:
            lines.append(
                f"{psn},{first},,{surname},{grade},{ministry},Admin,false,1262304000000,1293840000000,22233344455"
            )
        return "\n".join(lines) + "\n"

    return build


class FakeProvider:
    """Scripted stand-in for the provider's bulk API."""

    def __init__(self, statuses=None, artifact=b"", job_id="ext-job-1", submit_status=200):
        self.statuses = list(statuses or [{"status": "COMPLETED", "fileUrl": FILE_URL}])
        self.artifact = artifact
        self.job_id = job_id
        self.submit_status = submit_status
        self.requests: list[httpx.Request] = []
        self.polls = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "POST" and path.endswith("/bulk-inquiry"):
            if self.submit_status != 200:
                return httpx.Response(self.submit_status, text="upstream unavailable")
            return httpx.Response(200, json={"data": {"jobId": self.job_id}})
        if request.method == "GET" and path.endswith("/status"):
            self.polls += 1
            status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
            return httpx.Response(200, json={"data": status})
        if request.method == "GET" and str(request.url) == FILE_URL:
            return httpx.Response(200, content=self.artifact)
        return httpx.Response(404, text="not found")

    def client(self, config=None) -> ProviderClient:
        return ProviderClient(BASE_URL, CLIENT_ID, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def fast_settings():
    return Settings(poll_interval_seconds=0, poll_timeout_seconds=None, progress_batch_size=2)
