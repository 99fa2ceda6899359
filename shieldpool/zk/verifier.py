"""
ZK-SNARK Proof Verification
===========================

Groth16 verification of wrap/withdraw proofs.

The pool consumes verification as a synchronous predicate. Two backends:
``SnarkjsProofVerifier`` shells out to ``snarkjs groth16 verify``;
``StaticProofVerifier`` is an in-process double for development and tests.

Version: 0.1.0
"""

import json
import shlex
import subprocess
import tempfile
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from shieldpool.config import VerifierMode, VerifierSettings
from shieldpool.logging import get_logger
from shieldpool.zk.models import SIGNAL_ORDER, G1Point, G2Point

logger = get_logger(__name__)

PUBLIC_SIGNAL_COUNT = len(SIGNAL_ORDER)


class ProofVerifier(Protocol):
    """Deterministic, side-effect free proof predicate."""

    def verify(
        self,
        p_a: G1Point,
        p_b: G2Point,
        p_c: G1Point,
        public_signals: Sequence[int],
    ) -> bool: ...


class SnarkjsProofVerifier:
    """
    Off-chain Groth16 verifier backed by snarkjs.

    Points are taken in verifier-contract order and converted back to the
    snarkjs layout before verification.
    """

    def __init__(
        self,
        verification_key: str | Path,
        command: str = "npx snarkjs",
        timeout_seconds: int = 60,
    ):
        """
        Initialize the verifier.

        Args:
            verification_key: Path to verification_key.json
            command: snarkjs invocation
            timeout_seconds: Abort verification after this long
        """
        self.verification_key = Path(verification_key)
        self.command = shlex.split(command)
        self.timeout_seconds = timeout_seconds
        self._validate_setup()

    def _validate_setup(self) -> None:
        if not self.verification_key.exists():
            logger.warning(
                "zk_verification_key_not_found",
                path=str(self.verification_key),
            )

    @staticmethod
    def _snarkjs_proof(p_a: G1Point, p_b: G2Point, p_c: G1Point) -> dict:
        return {
            "pi_a": [str(p_a[0]), str(p_a[1]), "1"],
            "pi_b": [
                [str(p_b[0][1]), str(p_b[0][0])],
                [str(p_b[1][1]), str(p_b[1][0])],
                ["1", "0"],
            ],
            "pi_c": [str(p_c[0]), str(p_c[1]), "1"],
            "protocol": "groth16",
            "curve": "bn128",
        }

    def verify(
        self,
        p_a: G1Point,
        p_b: G2Point,
        p_c: G1Point,
        public_signals: Sequence[int],
    ) -> bool:
        if len(public_signals) != PUBLIC_SIGNAL_COUNT:
            logger.warning("zk_public_signal_count_mismatch", count=len(public_signals))
            return False

        if not self.verification_key.exists():
            logger.error("zk_verification_key_missing", path=str(self.verification_key))
            return False

        with tempfile.TemporaryDirectory(prefix="shieldpool-verify-") as tmp:
            proof_file = Path(tmp) / "proof.json"
            public_file = Path(tmp) / "public.json"
            proof_file.write_text(json.dumps(self._snarkjs_proof(p_a, p_b, p_c)))
            public_file.write_text(json.dumps([str(s) for s in public_signals]))

            start_time = time.time()
            try:
                result = subprocess.run(
                    [
                        *self.command,
                        "groth16",
                        "verify",
                        str(self.verification_key),
                        str(public_file),
                        str(proof_file),
                    ],
                    capture_output=True,
                    text=True,
                    timeout=self.timeout_seconds,
                )
            except subprocess.TimeoutExpired:
                logger.error("zk_verification_timeout", timeout_seconds=self.timeout_seconds)
                return False

        verification_time_ms = int((time.time() - start_time) * 1000)
        is_valid = result.returncode == 0 and "OK" in result.stdout

        logger.info(
            "zk_proof_verified",
            valid=is_valid,
            verification_time_ms=verification_time_ms,
        )
        if not is_valid and result.stderr:
            logger.debug("zk_verifier_stderr", stderr=result.stderr.strip())
        return is_valid


class StaticProofVerifier:
    """
    In-process verifier double.

    Returns a fixed verdict, or, when ``expected_signals`` is given,
    accepts exactly that public-signal vector. Every call is recorded.
    """

    def __init__(
        self,
        result: bool = True,
        expected_signals: Sequence[int] | None = None,
    ) -> None:
        self.result = result
        self.expected_signals = list(expected_signals) if expected_signals is not None else None
        self.calls: list[list[int]] = []

    def verify(
        self,
        p_a: G1Point,
        p_b: G2Point,
        p_c: G1Point,
        public_signals: Sequence[int],
    ) -> bool:
        signals = list(public_signals)
        self.calls.append(signals)
        if len(signals) != PUBLIC_SIGNAL_COUNT:
            return False
        if self.expected_signals is not None:
            return signals == self.expected_signals
        return self.result


def get_proof_verifier(config: VerifierSettings) -> ProofVerifier:
    """Build the verifier selected by configuration."""
    if config.mode == VerifierMode.SNARKJS:
        return SnarkjsProofVerifier(
            verification_key=config.verification_key,
            command=config.snarkjs_command,
            timeout_seconds=config.timeout_seconds,
        )
    return StaticProofVerifier(result=config.static_result)
