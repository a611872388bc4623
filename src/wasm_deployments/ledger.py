"""Remote ledger access for wasm-deployments library."""

import base64
import logging
import time
from typing import Any, Dict, List, Optional, Protocol

import requests

from .config import DeployConfig
from .exceptions import AttributeNotFoundError, EventNotFoundError, LedgerError, SettlementTimeoutError
from .types import TxEvent, TxResult

logger = logging.getLogger(__name__)

MSG_STORE_CODE = "/cosmwasm.wasm.v1.MsgStoreCode"
MSG_INSTANTIATE_CONTRACT = "/cosmwasm.wasm.v1.MsgInstantiateContract"
MSG_EXECUTE_CONTRACT = "/cosmwasm.wasm.v1.MsgExecuteContract"
MSG_UPDATE_ADMIN = "/cosmwasm.wasm.v1.MsgUpdateAdmin"

LATEST_BLOCK_PATH = "/cosmos/base/tendermint/v1beta1/blocks/latest"


class LedgerClient(Protocol):
    """Capabilities the pipelines need from the ledger."""

    def store_code(self, sender: str, wasm: bytes) -> TxResult: ...

    def instantiate(
        self, sender: str, admin: str, code_id: int, msg: Dict[str, Any], label: str
    ) -> TxResult: ...

    def execute(self, sender: str, contract: str, msg: Dict[str, Any]) -> TxResult: ...

    def update_admin(self, sender: str, contract: str, new_admin: str) -> TxResult: ...

    def wait_for_settlement(self) -> None: ...


def get_attribute(result: TxResult, event_type: str, key: str) -> str:
    """
    Extract a single attribute value from a transaction result.

    Args:
        result: Broadcast result
        event_type: Event type, e.g. "instantiate"
        key: Attribute key, e.g. "_contract_address"

    Returns:
        Value of the first matching attribute

    Raises:
        EventNotFoundError: If no event of that type was emitted
        AttributeNotFoundError: If the event lacks the attribute
    """
    events = [e for e in result.events if e.type == event_type]
    if not events:
        raise EventNotFoundError(
            f"Event '{event_type}' not found in transaction {result.txhash}"
        )

    for event in events:
        for attribute in event.attributes:
            if attribute.get("key") == key:
                return attribute["value"]

    raise AttributeNotFoundError(
        f"Attribute '{key}' not found in '{event_type}' event of transaction {result.txhash}"
    )


def parse_tx_result(data: Dict[str, Any]) -> TxResult:
    """
    Parse a broadcast response into a TxResult.

    Accepts both the LCD shape ({"tx_response": {...}}) and a bare
    tx response. Events are read from logs when present, falling back to
    the top-level events list.

    Raises:
        KeyError: If the response is missing txhash
    """
    tx = data.get("tx_response", data)

    raw_events: List[Dict[str, Any]] = []
    for log in tx.get("logs") or []:
        raw_events.extend(log.get("events", []))
    if not raw_events:
        raw_events = tx.get("events") or []

    return TxResult(
        txhash=tx["txhash"],
        height=int(tx.get("height") or 0),
        code=int(tx.get("code") or 0),
        raw_log=tx.get("raw_log", ""),
        events=[
            TxEvent(type=e["type"], attributes=list(e.get("attributes", [])))
            for e in raw_events
        ],
    )


class HttpLedgerClient:
    """
    LedgerClient backed by an HTTP signer service and an LCD endpoint.

    The signer service holds the deployer key (for example derived from the
    deployer mnemonic) and is the only component that signs. This client
    never sees key material.

    Signer request, one transaction per call:

        POST {signer_url}/txs
        Content-Type: application/json

        {
            "chain_id": "jmes-testnet-1",
            "signer": "<deployer address, must match the service's key>",
            "msgs": [
                {"@type": "/cosmwasm.wasm.v1.MsgInstantiateContract", ...}
            ]
        }

    Each message uses the Cosmos SDK proto-JSON encoding: "@type" is the
    type URL, field names are the proto names (snake_case), uint64 values
    such as code_id are strings and wasm_byte_code is base64. The service
    fills in fees, gas, sequence and account number, signs, and broadcasts
    in block (commit) mode so the response carries the execution outcome.

    Signer response: HTTP 200 with either a bare tx response or the LCD
    broadcast shape wrapping it, i.e. {"tx_response": {...}}. The fields read
    are "txhash", "height", "code" (0 is success), "raw_log", and the events,
    taken from "logs"[].events when present and from the top-level "events"
    otherwise. Each event is {"type": str, "attributes": [{"key", "value"}]}
    with plain-text keys and values.

    Any non-200 status, a body that is not such a document, or a non-zero
    code raises LedgerError. Block heights for settlement are read from the
    LCD at GET {lcd_url}/cosmos/base/tendermint/v1beta1/blocks/latest.
    """

    def __init__(self, config: DeployConfig):
        self.config = config
        self._last_height: Optional[int] = None

    def store_code(self, sender: str, wasm: bytes) -> TxResult:
        msg = {
            "@type": MSG_STORE_CODE,
            "sender": sender,
            "wasm_byte_code": base64.b64encode(wasm).decode("ascii"),
        }
        return self._broadcast(sender, msg)

    def instantiate(
        self, sender: str, admin: str, code_id: int, msg: Dict[str, Any], label: str
    ) -> TxResult:
        return self._broadcast(
            sender,
            {
                "@type": MSG_INSTANTIATE_CONTRACT,
                "sender": sender,
                "admin": admin,
                "code_id": str(code_id),
                "label": label,
                "msg": msg,
                "funds": [],
            },
        )

    def execute(self, sender: str, contract: str, msg: Dict[str, Any]) -> TxResult:
        return self._broadcast(
            sender,
            {
                "@type": MSG_EXECUTE_CONTRACT,
                "sender": sender,
                "contract": contract,
                "msg": msg,
                "funds": [],
            },
        )

    def update_admin(self, sender: str, contract: str, new_admin: str) -> TxResult:
        return self._broadcast(
            sender,
            {
                "@type": MSG_UPDATE_ADMIN,
                "sender": sender,
                "new_admin": new_admin,
                "contract": contract,
            },
        )

    def latest_height(self) -> int:
        """
        Get the latest block height from the LCD.

        Raises:
            LedgerError: On HTTP or network errors, or a response that is not
                a block JSON document
        """
        url = self.config.lcd_url.rstrip("/") + LATEST_BLOCK_PATH
        try:
            response = requests.get(url, timeout=self.config.request_timeout)
        except requests.RequestException as e:
            raise LedgerError(f"Network error querying latest block: {e}") from e

        if response.status_code != 200:
            raise LedgerError(f"Latest block query failed with status {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise LedgerError(f"Latest block response is not JSON: {response.text[:200]!r}") from e

        try:
            # Newer SDKs return sdk_block alongside block
            block = data.get("block") or data.get("sdk_block")
            return int(block["header"]["height"])
        except (AttributeError, TypeError, KeyError, ValueError) as e:
            raise LedgerError(f"Malformed latest block response: {data!r}") from e

    def wait_for_settlement(self) -> None:
        """
        Block until the ledger has produced a block past the last broadcast.

        Raises:
            SettlementTimeoutError: If no newer block within settle_timeout
        """
        if self._last_height is None:
            return

        deadline = time.monotonic() + self.config.settle_timeout
        while True:
            height = self.latest_height()
            if height > self._last_height:
                logger.debug("Settled at height %d (tx height %d)", height, self._last_height)
                return
            if time.monotonic() >= deadline:
                raise SettlementTimeoutError(
                    f"Ledger did not advance past height {self._last_height} "
                    f"within {self.config.settle_timeout}s"
                )
            time.sleep(self.config.settle_interval)

    def _broadcast(self, signer: str, msg: Dict[str, Any]) -> TxResult:
        url = self.config.signer_url.rstrip("/") + "/txs"
        try:
            response = requests.post(
                url,
                json={"chain_id": self.config.chain_id, "signer": signer, "msgs": [msg]},
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise LedgerError(f"Network error broadcasting {msg['@type']}: {e}") from e

        if response.status_code != 200:
            raise LedgerError(
                f"Broadcast of {msg['@type']} failed with status {response.status_code}: "
                f"{response.text}"
            )

        try:
            result = parse_tx_result(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise LedgerError(f"Malformed broadcast response for {msg['@type']}: {e}") from e

        if result.code != 0:
            raise LedgerError(
                f"Transaction {result.txhash} ({msg['@type']}) failed with code "
                f"{result.code}: {result.raw_log}"
            )

        self._last_height = result.height
        return result
