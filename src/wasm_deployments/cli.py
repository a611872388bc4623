"""Command line entry point for wasm-deployments library."""

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from .config import load_config, resolve_state_root
from .constants import DEFAULT_NETWORK, NETWORK_CONFIG, WIRING_MSG_KEY
from .deployments import DeploymentState, deploy, upload_changed, upload_contract
from .exceptions import DeploymentError
from .ledger import HttpLedgerClient
from .plan import load_plan
from .types import DeployMode

logger = logging.getLogger("wasm_deployments")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--network",
        choices=sorted(NETWORK_CONFIG),
        default=os.environ.get("NETWORK_ENV", DEFAULT_NETWORK),
        help="target network (default: $NETWORK_ENV or %(default)s)",
    )
    common.add_argument("--env-file", help="env file to read (default: ./.<network>.env)")
    common.add_argument("--state-dir", help="registry directory (default: ./.wasm-deployments)")
    common.add_argument("--artifacts-dir", help="directory of compiled .wasm files")
    common.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    parser = argparse.ArgumentParser(
        prog="wasm-deploy",
        description="Upload and instantiate CosmWasm contracts incrementally.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    deploy_parser = subparsers.add_parser(
        "deploy", parents=[common], help="upload changed binaries and instantiate the plan"
    )
    deploy_parser.add_argument(
        "--mode",
        choices=[m.value for m in DeployMode],
        default=DeployMode.RESUME.value,
        help="resume skips contracts that already have an address (default: %(default)s)",
    )
    deploy_parser.add_argument("--plan", help="JSON instantiation plan (default: built-in plan)")
    deploy_parser.add_argument(
        "--no-wiring", action="store_true", help="skip the final set_contract call"
    )

    upload_parser = subparsers.add_parser(
        "upload", parents=[common], help="upload changed binaries, or one named contract"
    )
    upload_parser.add_argument("contract", nargs="?", help="force-upload this contract only")

    subparsers.add_parser("status", parents=[common], help="print the persisted registries")

    return parser


def _status(args: argparse.Namespace) -> int:
    state_root = resolve_state_root(args.network, args.env_file, args.state_dir)
    state = DeploymentState(args.network, state_root)
    json.dump(
        {
            "network": args.network,
            "checksums": state.checksums(),
            "code_ids": state.code_ids(),
            "contract_addrs": state.addresses(),
            "wiring": state.wiring(),
        },
        sys.stdout,
        indent=2,
    )
    sys.stdout.write("\n")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        if args.command == "status":
            return _status(args)

        config = load_config(
            args.network,
            env_file=args.env_file,
            state_root=args.state_dir,
            artifacts_dir=args.artifacts_dir,
        )
        client = HttpLedgerClient(config)

        if args.command == "upload":
            if args.contract:
                upload_contract(config, client, args.contract)
            else:
                upload_changed(config, client)
        elif args.command == "deploy":
            plan = load_plan(args.plan) if args.plan else None
            deploy(
                config,
                client,
                plan=plan,
                mode=DeployMode(args.mode),
                wiring_key=None if args.no_wiring else WIRING_MSG_KEY,
            )
    except DeploymentError as e:
        logger.error("%s failed: %s", args.command, e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
