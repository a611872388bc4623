"""Integration tests for the incremental upload pipeline."""

import hashlib
from pathlib import Path

import pytest

from wasm_deployments import upload_changed, upload_contract
from wasm_deployments.config import DeployConfig
from wasm_deployments.exceptions import ArtifactNotFoundError, LedgerError, RegistryInconsistencyError
from wasm_deployments.registries import ChecksumStore, CodeRegistry

H1 = hashlib.sha256(b"\x00asm-a").hexdigest()
H2 = hashlib.sha256(b"\x00asm-b").hexdigest()


def registries(config: DeployConfig):
    return (
        CodeRegistry(config.state_root).load(config.network),
        ChecksumStore(config.state_root).load(config.network),
    )


class TestFirstUpload:
    """Test uploading into an empty state directory."""

    def test_uploads_all_artifacts(self, config: DeployConfig, ledger):
        """Test the a.wasm / b.wasm scenario from an empty store."""
        code_ids = upload_changed(config, ledger)

        assert code_ids == {"a": 1, "b": 2}
        assert registries(config) == ({"a": 1, "b": 2}, {"a": H1, "b": H2})

    def test_uploads_in_discovery_order(self, config: DeployConfig, ledger):
        """Test that binaries are sent in file name order by the deployer."""
        upload_changed(config, ledger)

        calls = ledger.calls_to("store_code")
        assert [wasm for _, wasm in calls] == [b"\x00asm-a", b"\x00asm-b"]
        assert all(sender == "jmes1deployer" for sender, _ in calls)

    def test_settles_after_each_upload(self, config: DeployConfig, ledger):
        """Test that every upload waits for propagation."""
        upload_changed(config, ledger)

        assert ledger.settlements == 2


class TestIdempotence:
    """Test re-running the upload pipeline."""

    def test_second_run_makes_no_calls(self, config: DeployConfig, ledger):
        """Test that an unchanged artifact set is never re-uploaded."""
        upload_changed(config, ledger)
        first = registries(config)
        ledger.calls.clear()

        code_ids = upload_changed(config, ledger)

        assert ledger.calls == []
        assert code_ids == {"a": 1, "b": 2}
        assert registries(config) == first

    def test_changed_artifact_is_reuploaded_alone(self, config: DeployConfig, ledger):
        """Test that only the modified binary is sent again."""
        upload_changed(config, ledger)
        (config.artifacts_dir / "b.wasm").write_bytes(b"\x00asm-b2")
        ledger.calls.clear()

        code_ids = upload_changed(config, ledger)

        assert [wasm for _, wasm in ledger.calls_to("store_code")] == [b"\x00asm-b2"]
        assert code_ids == {"a": 1, "b": 3}
        assert registries(config)[1]["b"] == hashlib.sha256(b"\x00asm-b2").hexdigest()

    def test_new_artifact_is_uploaded(self, config: DeployConfig, ledger):
        """Test that a newly built contract is picked up."""
        upload_changed(config, ledger)
        (config.artifacts_dir / "c-aarch64.wasm").write_bytes(b"\x00asm-c")
        ledger.calls.clear()

        code_ids = upload_changed(config, ledger)

        assert len(ledger.calls_to("store_code")) == 1
        assert code_ids["c"] == 3

    def test_networks_are_isolated(self, config: DeployConfig, ledger):
        """Test that uploading to one network says nothing about another."""
        upload_changed(config, ledger)
        config.network = "mainnet"
        ledger.calls.clear()

        upload_changed(config, ledger)

        assert len(ledger.calls_to("store_code")) == 2


class TestPartialFailure:
    """Test failures in the middle of an upload run."""

    def test_failure_keeps_earlier_progress(self, config: DeployConfig, ledger):
        """Test that a failed upload leaves completed entries in place."""
        ledger.fail_on["store_code"] = {2}

        with pytest.raises(LedgerError):
            upload_changed(config, ledger)

        assert registries(config) == ({"a": 1}, {"a": H1})

    def test_rerun_retries_only_failed(self, config: DeployConfig, ledger):
        """Test that a re-run resumes with the artifact that failed."""
        ledger.fail_on["store_code"] = {2}
        with pytest.raises(LedgerError):
            upload_changed(config, ledger)
        ledger.fail_on.clear()
        ledger.calls.clear()

        code_ids = upload_changed(config, ledger)

        assert [wasm for _, wasm in ledger.calls_to("store_code")] == [b"\x00asm-b"]
        assert set(code_ids) == {"a", "b"}


class TestConsistencyCheck:
    """Test load-time detection of inconsistent registries."""

    def test_checksum_without_code_id_fails_fast(self, config: DeployConfig, ledger):
        """Test that a hand-deleted code id is reported, not silently skipped."""
        upload_changed(config, ledger)
        CodeRegistry(config.state_root).save(config.network, {"a": 1})
        ledger.calls.clear()

        with pytest.raises(RegistryInconsistencyError):
            upload_changed(config, ledger)

        assert ledger.calls == []


class TestUploadContract:
    """Test force-uploading a single contract."""

    def test_uploads_even_when_unchanged(self, config: DeployConfig, ledger):
        """Test that a named upload ignores the checksum store."""
        upload_changed(config, ledger)
        ledger.calls.clear()

        code_id = upload_contract(config, ledger, "a")

        assert code_id == 3
        assert len(ledger.calls_to("store_code")) == 1
        assert registries(config)[0] == {"a": 3, "b": 2}

    def test_unknown_contract_raises(self, config: DeployConfig, ledger):
        """Test that a missing artifact is reported."""
        with pytest.raises(ArtifactNotFoundError):
            upload_contract(config, ledger, "nope")

    def test_missing_artifacts_dir_raises(self, config: DeployConfig, ledger, tmp_path: Path):
        """Test that a missing build output is reported."""
        config.artifacts_dir = tmp_path / "missing"

        with pytest.raises(FileNotFoundError):
            upload_changed(config, ledger)
