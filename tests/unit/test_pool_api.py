"""
Unit tests for the Pool API service.
"""

from typing import Any

import pytest
from httpx import AsyncClient

from shieldpool.auth import create_access_token
from shieldpool.client import Note
from shieldpool.core.field import to_hex32


DENOMINATION = 1_000


def proof_payload() -> dict[str, Any]:
    return {
        "pi_a": ["11", "12", "1"],
        "pi_b": [["21", "22"], ["23", "24"], ["1", "0"]],
        "pi_c": ["31", "32", "1"],
    }


def bearer(account: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(account)}"}


async def fund(client: AsyncClient, account: str, amount: int = 5 * DENOMINATION) -> None:
    response = await client.post("/api/v1/dev/faucet", json={"account": account, "amount": amount})
    assert response.status_code == 200


async def deposit(client: AsyncClient, note: Note, depositor: str) -> dict[str, Any]:
    response = await client.post(
        "/api/v1/pool/deposit",
        json={"commitment": to_hex32(note.commitment)},
        headers=bearer(depositor),
    )
    assert response.status_code == 200
    return response.json()


def claim_payload(note: Note, root: str, recipient: str, relayer: str) -> dict[str, Any]:
    return {
        "proof": proof_payload(),
        "root": root,
        "recipient": recipient,
        "nullifier_hash": str(note.nullifier_hash),
        "relayer": relayer,
    }


class TestHealth:
    """Tests for health endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, pool_api_client: AsyncClient) -> None:
        """Test health reports engine and custody."""
        response = await pool_api_client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "pool_api"
        assert data["components"]["engine"]["next_leaf_index"] == 0
        assert data["components"]["custody"]["mode"] == "mock"

    @pytest.mark.asyncio
    async def test_root(self, pool_api_client: AsyncClient) -> None:
        """Test root endpoint."""
        response = await pool_api_client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "Shielded Pool API"


class TestPoolOperations:
    """Tests for pool operation endpoints."""

    @pytest.mark.asyncio
    async def test_deposit_and_state(self, pool_api_client: AsyncClient, alice: str) -> None:
        """Test that a deposit moves the root and leaf index."""
        await fund(pool_api_client, alice)
        note = Note.generate()

        data = await deposit(pool_api_client, note, alice)
        assert data["success"] is True
        assert data["operation"] == "deposit"
        assert data["leaf_index"] == 0
        assert data["effects"][0]["type"] == "deposited"

        state = (await pool_api_client.get("/api/v1/pool/state")).json()
        assert state["current_root"] == data["root"]
        assert state["next_leaf_index"] == 1
        assert state["denomination"] == str(DENOMINATION)

        known = (await pool_api_client.get(f"/api/v1/pool/roots/{data['root']}")).json()
        assert known["known"] is True

    @pytest.mark.asyncio
    async def test_duplicate_deposit_conflict(
        self, pool_api_client: AsyncClient, alice: str
    ) -> None:
        """Test 409 for a resubmitted commitment."""
        await fund(pool_api_client, alice)
        note = Note.generate()
        await deposit(pool_api_client, note, alice)

        response = await pool_api_client.post(
            "/api/v1/pool/deposit",
            json={"commitment": str(note.commitment)},
            headers=bearer(alice),
        )
        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "duplicate_commitment"

    @pytest.mark.asyncio
    async def test_invalid_commitment(self, pool_api_client: AsyncClient, alice: str) -> None:
        """Test 422 for out-of-field input."""
        response = await pool_api_client.post(
            "/api/v1/pool/deposit",
            json={"commitment": "-5"},
            headers=bearer(alice),
        )
        assert response.status_code == 422
        assert response.json()["error_code"] == "invalid_field_element"

    @pytest.mark.asyncio
    async def test_deposit_without_funds(self, pool_api_client: AsyncClient, bob: str) -> None:
        """Test 502 when custody refuses the transfer."""
        response = await pool_api_client.post(
            "/api/v1/pool/deposit",
            json={"commitment": "1"},
            headers=bearer(bob),
        )
        assert response.status_code == 502
        assert response.json()["error_code"] == "custody_error"

    @pytest.mark.asyncio
    async def test_withdraw_and_double_spend(
        self, pool_api_client: AsyncClient, alice: str, bob: str, relayer: str
    ) -> None:
        """Test withdraw, nullifier status and 409 on replay."""
        await fund(pool_api_client, alice)
        note = Note.generate()
        root = (await deposit(pool_api_client, note, alice))["root"]

        payload = claim_payload(note, root, bob, relayer)
        response = await pool_api_client.post("/api/v1/pool/withdraw", json=payload)
        assert response.status_code == 200
        assert response.json()["effects"][0]["type"] == "withdrawn"

        status = await pool_api_client.get(f"/api/v1/pool/nullifiers/{note.nullifier_hash}")
        assert status.json()["spent"] is True

        replay = await pool_api_client.post("/api/v1/pool/withdraw", json=payload)
        assert replay.status_code == 409
        assert replay.json()["error_code"] == "already_spent"

    @pytest.mark.asyncio
    async def test_unknown_root(
        self, pool_api_client: AsyncClient, alice: str, bob: str, relayer: str
    ) -> None:
        """Test 400 for a root outside the history window."""
        await fund(pool_api_client, alice)
        note = Note.generate()
        await deposit(pool_api_client, note, alice)

        response = await pool_api_client.post(
            "/api/v1/pool/withdraw",
            json=claim_payload(note, "0x1234", bob, relayer),
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "unknown_root"

    @pytest.mark.asyncio
    async def test_wrap_unwrap_finalize(
        self, pool_api_client: AsyncClient, alice: str, relayer: str
    ) -> None:
        """Test the full confidential round trip over HTTP."""
        await fund(pool_api_client, alice)
        note = Note.generate()
        root = (await deposit(pool_api_client, note, alice))["root"]

        wrapped = await pool_api_client.post(
            "/api/v1/pool/wrap",
            json=claim_payload(note, root, alice, relayer),
        )
        assert wrapped.status_code == 200
        assert wrapped.json()["effects"][0]["type"] == "wrapped"

        balance = (await pool_api_client.get(f"/api/v1/pool/balances/{alice}")).json()
        assert balance["handle"] is not None

        new_note = Note.generate()
        unwrapped = await pool_api_client.post(
            "/api/v1/pool/unwrap",
            json={"new_commitment": to_hex32(new_note.commitment)},
            headers=bearer(alice),
        )
        assert unwrapped.status_code == 200
        index = unwrapped.json()["unwrap_index"]

        pending = (await pool_api_client.get(f"/api/v1/pool/unwraps/{index}")).json()
        assert pending["owner"] == alice

        disclosure = (await pool_api_client.get(f"/api/v1/dev/unwraps/{index}/disclosure")).json()
        assert int(disclosure["clear_amount"], 16) == DENOMINATION

        finalized = await pool_api_client.post(
            f"/api/v1/pool/unwrap/{index}/finalize",
            json={
                "clear_amount": disclosure["clear_amount"],
                "disclosure_proof": disclosure["disclosure_proof"],
            },
        )
        assert finalized.status_code == 200
        assert finalized.json()["effects"][0]["type"] == "unwrap_finalized"
        assert finalized.json()["leaf_index"] == 1

        pending = (await pool_api_client.get(f"/api/v1/pool/unwraps/{index}")).json()
        assert pending["owner"] is None

        again = await pool_api_client.post(
            f"/api/v1/pool/unwrap/{index}/finalize",
            json={
                "clear_amount": disclosure["clear_amount"],
                "disclosure_proof": disclosure["disclosure_proof"],
            },
        )
        assert again.status_code == 409
        assert again.json()["error_code"] == "already_processed"

    @pytest.mark.asyncio
    async def test_finalize_unknown_index(self, pool_api_client: AsyncClient) -> None:
        """Test 404 for indices never issued."""
        response = await pool_api_client.post(
            "/api/v1/pool/unwrap/7/finalize",
            json={"clear_amount": "00" * 32, "disclosure_proof": "00" * 32},
        )
        assert response.status_code == 404
        assert response.json()["error_code"] == "not_found"

    @pytest.mark.asyncio
    async def test_unwrap_without_balance(self, pool_api_client: AsyncClient, bob: str) -> None:
        """Test 400 for an owner with no confidential balance."""
        response = await pool_api_client.post(
            "/api/v1/pool/unwrap",
            json={"new_commitment": "42"},
            headers=bearer(bob),
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "zero_balance"


class TestPoolEvents:
    """Tests for the events endpoint."""

    @pytest.mark.asyncio
    async def test_events_paging(self, pool_api_client: AsyncClient, alice: str) -> None:
        """Test ordered paging through the log."""
        await fund(pool_api_client, alice)
        for _ in range(3):
            await deposit(pool_api_client, Note.generate(), alice)

        first = (await pool_api_client.get("/api/v1/pool/events", params={"limit": 2})).json()
        assert [e["sequence"] for e in first["events"]] == [0, 1]
        assert first["next_sequence"] == 2

        rest = (
            await pool_api_client.get(
                "/api/v1/pool/events", params={"since": first["next_sequence"]}
            )
        ).json()
        assert [e["sequence"] for e in rest["events"]] == [2]
        assert rest["events"][0]["leaf_index"] == 2


class TestAuthentication:
    """Tests for account-bound operations."""

    @pytest.mark.asyncio
    async def test_deposit_requires_token(self, pool_api_client: AsyncClient) -> None:
        """Test 401 without a bearer token."""
        response = await pool_api_client.post("/api/v1/pool/deposit", json={"commitment": "1"})
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_invalid_token(self, pool_api_client: AsyncClient) -> None:
        """Test 401 for a token that does not decode."""
        response = await pool_api_client.post(
            "/api/v1/pool/unwrap",
            json={"new_commitment": "42"},
            headers={"Authorization": "Bearer not-a-token"},
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_dev_token(self, pool_api_client: AsyncClient, alice: str) -> None:
        """Test that issued tokens authenticate deposits."""
        await fund(pool_api_client, alice)
        issued = await pool_api_client.post("/api/v1/dev/token", json={"account": alice})
        assert issued.status_code == 200
        token = issued.json()["access_token"]

        response = await pool_api_client.post(
            "/api/v1/pool/deposit",
            json={"commitment": "1"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_foreign_owner_unwrap_refused(
        self, pool_api_client: AsyncClient, alice: str, bob: str, relayer: str
    ) -> None:
        """Test that a caller cannot unwrap someone else's balance."""
        await fund(pool_api_client, alice)
        note = Note.generate()
        root = (await deposit(pool_api_client, note, alice))["root"]
        await pool_api_client.post(
            "/api/v1/pool/wrap", json=claim_payload(note, root, alice, relayer)
        )
        handle = (await pool_api_client.get(f"/api/v1/pool/balances/{alice}")).json()["handle"]

        response = await pool_api_client.post(
            "/api/v1/pool/unwrap",
            json={"owner": alice, "new_commitment": "42"},
            headers=bearer(bob),
        )
        assert response.status_code == 403
        assert response.json()["error_code"] == "access_denied"

        after = (await pool_api_client.get(f"/api/v1/pool/balances/{alice}")).json()["handle"]
        assert after == handle
        state = (await pool_api_client.get("/api/v1/pool/state")).json()
        assert state["stats"]["pending_unwraps"] == 0

    @pytest.mark.asyncio
    async def test_foreign_depositor_refused(
        self, pool_api_client: AsyncClient, alice: str, bob: str
    ) -> None:
        """Test that a caller cannot pull another account's funds."""
        await fund(pool_api_client, alice)
        response = await pool_api_client.post(
            "/api/v1/pool/deposit",
            json={"commitment": "1", "depositor": alice},
            headers=bearer(bob),
        )
        assert response.status_code == 403

        health = (await pool_api_client.get("/health")).json()
        assert health["components"]["custody"]["escrow_balance"] == 0

    @pytest.mark.asyncio
    async def test_pool_account_refused(
        self, pool_api_client: AsyncClient, pool_address: str
    ) -> None:
        """Test that the escrow account cannot deposit or unwrap."""
        response = await pool_api_client.post(
            "/api/v1/pool/unwrap",
            json={"new_commitment": "42"},
            headers=bearer(pool_address),
        )
        assert response.status_code == 403
        assert response.json()["error_code"] == "access_denied"


class TestMalformedRequests:
    """Tests for request validation."""

    @pytest.mark.asyncio
    async def test_short_g2_coordinate(
        self, pool_api_client: AsyncClient, bob: str, relayer: str
    ) -> None:
        """Test 422 rather than a server error for a truncated pi_b pair."""
        payload = claim_payload(Note.generate(), "0x1234", bob, relayer)
        payload["proof"]["pi_b"] = [["1"], ["2"]]

        response = await pool_api_client.post("/api/v1/pool/withdraw", json=payload)
        assert response.status_code == 422
