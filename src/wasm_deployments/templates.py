"""Constructor message templates for wasm-deployments library."""

from typing import Any, Dict, Set

from .constants import CODE_ID_MARKER, REFERENCE_MARKER
from .exceptions import CodeIdNotFoundError, UnresolvedReferenceError
from .types import CodeIdReference, Literal, Reference


def parse_template(node: Any) -> Any:
    """
    Convert marker strings in a plain JSON tree into tagged values.

    "__code_id:<name>" becomes CodeIdReference(name) and "__<name>" becomes
    Reference(name). Everything else is returned unchanged.

    Args:
        node: JSON-compatible value (dict, list or scalar)

    Returns:
        Tree of the same shape with marker strings replaced
    """
    if isinstance(node, dict):
        return {key: parse_template(value) for key, value in node.items()}
    if isinstance(node, list):
        return [parse_template(value) for value in node]
    if isinstance(node, str):
        if node.startswith(CODE_ID_MARKER):
            return CodeIdReference(node[len(CODE_ID_MARKER):])
        if node.startswith(REFERENCE_MARKER):
            return Reference(node[len(REFERENCE_MARKER):])
    return node


def template_references(node: Any) -> Set[str]:
    """Collect the contract names whose addresses a template needs."""
    if isinstance(node, Reference):
        return {node.contract}
    if isinstance(node, dict):
        node = list(node.values())
    if isinstance(node, list):
        refs: Set[str] = set()
        for value in node:
            refs |= template_references(value)
        return refs
    return set()


def resolve_template(
    node: Any,
    addresses: Dict[str, str],
    code_ids: Dict[str, int],
    contract_name: str = "",
) -> Any:
    """
    Resolve every tagged value in a template.

    Args:
        node: Template tree
        addresses: Contract name -> address known so far
        code_ids: Contract name -> code id
        contract_name: Contract the template belongs to, for error messages

    Returns:
        Plain JSON-compatible tree

    Raises:
        UnresolvedReferenceError: If a referenced contract has no address
        CodeIdNotFoundError: If a referenced contract has no code id
    """
    if isinstance(node, Reference):
        if node.contract not in addresses:
            raise UnresolvedReferenceError(
                f"Contract '{contract_name}' references '{node.contract}', "
                "which is not deployed yet"
            )
        return addresses[node.contract]
    if isinstance(node, CodeIdReference):
        if node.contract not in code_ids:
            raise CodeIdNotFoundError(
                f"Contract '{contract_name}' needs the code id of '{node.contract}', "
                "which has not been uploaded"
            )
        return code_ids[node.contract]
    if isinstance(node, Literal):
        return node.value
    if isinstance(node, dict):
        return {
            key: resolve_template(value, addresses, code_ids, contract_name)
            for key, value in node.items()
        }
    if isinstance(node, list):
        return [resolve_template(value, addresses, code_ids, contract_name) for value in node]
    return node
