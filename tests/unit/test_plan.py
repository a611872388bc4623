"""Unit tests for instantiation plans."""

import json
from pathlib import Path

import pytest

from wasm_deployments.config import DeployConfig
from wasm_deployments.exceptions import PlanError
from wasm_deployments.plan import default_plan, load_plan, validate_plan
from wasm_deployments.types import CodeIdReference, ContractSpec, Reference


class TestDefaultPlan:
    """Test the default_plan function."""

    def test_order_and_root(self, config: DeployConfig):
        """Test that governance comes first and is the only root."""
        plan = default_plan(config, period_start_epoch=1660000000)

        assert [c.name for c in plan] == ["governance", "identityservice", "art_dealer"]
        assert [c.is_governance_root for c in plan] == [True, False, False]
        validate_plan(plan)

    def test_governance_template(self, config: DeployConfig):
        """Test the governance constructor values."""
        governance = default_plan(config, period_start_epoch=1660000000)[0]

        assert governance.template == {
            "owner": "jmes1deployer",
            "proposal_required_deposit": "10000000",
            "proposal_required_percentage": 10,
            "period_start_epoch": 1660000000,
            "posting_period_length": 70,
            "voting_period_length": 20,
        }

    def test_owner_overrides_deployer(self, config: DeployConfig):
        """Test that a configured owner is used."""
        config.owner = "jmes1owner"
        assert default_plan(config)[0].template["owner"] == "jmes1owner"

    def test_art_dealer_references(self, config: DeployConfig):
        """Test that art_dealer points at its dependencies."""
        art_dealer = default_plan(config)[2]

        assert art_dealer.template["owner"] == Reference("governance")
        assert art_dealer.template["identityservice_contract"] == Reference("identityservice")
        assert art_dealer.template["art_nft_code_id"] == CodeIdReference("cw721_metadata_onchain")


class TestValidatePlan:
    """Test the validate_plan function."""

    def test_valid_chain(self, plan):
        """Test a plan in dependency order."""
        validate_plan(plan)

    def test_out_of_order_reference_raises(self, plan):
        """Test that a reference to a later contract is rejected."""
        with pytest.raises(PlanError) as exc_info:
            validate_plan([plan[0], plan[2], plan[1]])

        assert "identityservice" in str(exc_info.value)

    def test_requires_exactly_one_root(self):
        """Test root count validation."""
        with pytest.raises(PlanError):
            validate_plan([ContractSpec(name="a", template={})])

        with pytest.raises(PlanError):
            validate_plan(
                [
                    ContractSpec(name="a", template={}, is_governance_root=True),
                    ContractSpec(name="b", template={}, is_governance_root=True),
                ]
            )

    def test_duplicate_names_raise(self):
        """Test that a contract cannot appear twice."""
        with pytest.raises(PlanError):
            validate_plan(
                [
                    ContractSpec(name="a", template={}, is_governance_root=True),
                    ContractSpec(name="a", template={}),
                ]
            )


class TestLoadPlan:
    """Test the load_plan function."""

    def test_loads_and_parses_markers(self, tmp_path: Path):
        """Test loading a JSON plan."""
        plan_file = tmp_path / "plan.json"
        plan_file.write_text(
            json.dumps(
                [
                    {"name": "governance", "governance_root": True, "msg": {"owner": "jmes1o"}},
                    {
                        "name": "identityservice",
                        "label": "identity v2",
                        "msg": {"owner": "__governance", "dao_code": "__code_id:dao_members"},
                    },
                ]
            )
        )

        plan = load_plan(plan_file)

        assert plan[0].is_governance_root
        assert plan[1].instance_label == "identity v2"
        assert plan[1].template == {
            "owner": Reference("governance"),
            "dao_code": CodeIdReference("dao_members"),
        }

    def test_missing_file_raises(self, tmp_path: Path):
        """Test that a missing plan file raises PlanError."""
        with pytest.raises(PlanError):
            load_plan(tmp_path / "missing.json")

    def test_invalid_json_raises(self, tmp_path: Path):
        """Test that malformed JSON raises PlanError."""
        plan_file = tmp_path / "plan.json"
        plan_file.write_text("{ nope")

        with pytest.raises(PlanError):
            load_plan(plan_file)

    def test_entry_without_msg_raises(self, tmp_path: Path):
        """Test that entries must carry a constructor message."""
        plan_file = tmp_path / "plan.json"
        plan_file.write_text(json.dumps([{"name": "governance", "governance_root": True}]))

        with pytest.raises(PlanError):
            load_plan(plan_file)

    def test_out_of_order_file_raises(self, tmp_path: Path):
        """Test dependency validation on loaded plans."""
        plan_file = tmp_path / "plan.json"
        plan_file.write_text(
            json.dumps(
                [
                    {"name": "art_dealer", "msg": {"id": "__identityservice"}},
                    {"name": "governance", "governance_root": True, "msg": {}},
                    {"name": "identityservice", "msg": {}},
                ]
            )
        )

        with pytest.raises(PlanError):
            load_plan(plan_file)
