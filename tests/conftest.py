import pytest
from shotgrid_rest.client import ShotgridClient
from shotgrid_rest.models import TokenResponse
from shotgrid_rest.session import Session

SERVER = "https://mock-sg.com"
API = f"{SERVER}/api/v1"


@pytest.fixture
def client():
    return ShotgridClient(base_url=SERVER, script_name="script", script_key="key")


@pytest.fixture
def session(client):
    token = TokenResponse(
        token_type="Bearer",
        access_token="mock-token",
        expires_in=600,
        refresh_token="mock-refresh",
    )
    return Session(client, token)
