"""
Test Configuration
==================

Pytest fixtures for shielded pool tests.
"""

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["VERIFIER_MODE"] = "static"

from shieldpool.config import PoolSettings, Settings  # noqa: E402
from shieldpool.config.settings import DEFAULT_ZERO_VALUE  # noqa: E402
from shieldpool.custody import InMemoryAssetCustody  # noqa: E402
from shieldpool.engine import ShieldedPoolEngine  # noqa: E402
from shieldpool.ledger import (  # noqa: E402
    ConfidentialLedger,
    PlaintextArithmetic,
    PlaintextDecryptionOracle,
)
from shieldpool.zk.models import ZKProof  # noqa: E402
from shieldpool.zk.verifier import StaticProofVerifier  # noqa: E402


POOL_ADDRESS = "0x0000000000000000000000000000000000000001"
ALICE = "0x" + "a1" * 20
BOB = "0x" + "b2" * 20
RELAYER = "0x" + "c3" * 20

DENOMINATION = 1_000
TEST_LEVELS = 8
TEST_ROOT_HISTORY = 5
SIGNING_KEY = b"test-disclosure-key"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


# ============================================================================
# Accounts
# ============================================================================


@pytest.fixture
def pool_address() -> str:
    return POOL_ADDRESS


@pytest.fixture
def alice() -> str:
    return ALICE


@pytest.fixture
def bob() -> str:
    return BOB


@pytest.fixture
def relayer() -> str:
    return RELAYER


# ============================================================================
# Components
# ============================================================================


@pytest.fixture
def arithmetic() -> PlaintextArithmetic:
    """Plaintext oblivious arithmetic backend."""
    return PlaintextArithmetic()


@pytest.fixture
def ledger(arithmetic: PlaintextArithmetic) -> ConfidentialLedger:
    """Confidential ledger owned by the pool."""
    return ConfidentialLedger(arithmetic, owner=POOL_ADDRESS)


@pytest.fixture
def oracle(ledger: ConfidentialLedger) -> PlaintextDecryptionOracle:
    """Decryption oracle over the test ledger."""
    return PlaintextDecryptionOracle(ledger, signing_key=SIGNING_KEY)


@pytest.fixture
def custody() -> InMemoryAssetCustody:
    """Mock custody with funded depositors."""
    custody = InMemoryAssetCustody(escrow_account=POOL_ADDRESS)
    custody.mint(ALICE, 10 * DENOMINATION)
    custody.mint(BOB, 10 * DENOMINATION)
    return custody


@pytest.fixture
def verifier() -> StaticProofVerifier:
    """Verifier double accepting every well-formed call."""
    return StaticProofVerifier(result=True)


@pytest.fixture
def engine(
    verifier: StaticProofVerifier,
    custody: InMemoryAssetCustody,
    ledger: ConfidentialLedger,
    oracle: PlaintextDecryptionOracle,
) -> ShieldedPoolEngine:
    """Small pool: 2**8 leaves, 5 retained roots."""
    return ShieldedPoolEngine(
        verifier=verifier,
        custody=custody,
        ledger=ledger,
        disclosure_verifier=oracle,
        denomination=DENOMINATION,
        levels=TEST_LEVELS,
        root_history_size=TEST_ROOT_HISTORY,
        zero_value=DEFAULT_ZERO_VALUE,
    )


@pytest.fixture
def sample_proof() -> ZKProof:
    """Structurally valid Groth16 proof in snarkjs layout."""
    return ZKProof(
        pi_a=["11", "12", "1"],
        pi_b=[["21", "22"], ["23", "24"], ["1", "0"]],
        pi_c=["31", "32", "1"],
    )


@pytest.fixture
def test_settings() -> Settings:
    """Settings for a small development pool."""
    return Settings(
        pool=PoolSettings(
            levels=TEST_LEVELS,
            root_history_size=TEST_ROOT_HISTORY,
            denomination=DENOMINATION,
            address=POOL_ADDRESS,
        ),
    )


# ============================================================================
# Service Clients
# ============================================================================


@pytest_asyncio.fixture
async def pool_api_client(test_settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Pool API with a fresh development pool."""
    from services.pool_api.main import app
    from shieldpool.bootstrap import build_development_pool

    app.state.pool = build_development_pool(test_settings)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.state.pool = None
