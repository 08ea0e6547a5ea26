import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from etabs_bridge.session.connection import ConnectionManager
from etabs_bridge.session.model_handle import ModelHandle
from tests.fixtures.com_fakes import (
    FakeGateway,
    FakeProbe,
    PatchedApi,
    PatchedSapModel,
    RecordingObserver,
    make_descriptor,
)


@pytest.fixture
def sap_model() -> PatchedSapModel:
    return PatchedSapModel()


@pytest.fixture
def api(sap_model: PatchedSapModel) -> PatchedApi:
    return PatchedApi(sap_model)


@pytest.fixture
def recorder() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def handle(api: PatchedApi, recorder: RecordingObserver) -> ModelHandle:
    """Attached handle over a PatchedSapModel, publishing to `recorder`."""
    model_handle = ModelHandle(api, make_descriptor(), api_version=1.0, observers=[recorder])
    return model_handle._attach()


@pytest.fixture
def gateway(api: PatchedApi) -> FakeGateway:
    return FakeGateway(api)


@pytest.fixture
def connection(gateway: FakeGateway, recorder: RecordingObserver) -> ConnectionManager:
    return ConnectionManager(
        probe=FakeProbe([make_descriptor()]),
        gateway=gateway,
        observers=[recorder],
    )
