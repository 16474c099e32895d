import os
from collections.abc import Mapping
from dataclasses import dataclass

from ._contract_abi import AmbiguityPolicy

AMBIGUITY_ENV = "ABICODEC_AMBIGUITY"
CHECKSUM_ENV = "ABICODEC_CHECKSUM"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class Config:
    ambiguity: AmbiguityPolicy = AmbiguityPolicy.RAISE
    checksum_addresses: bool = False


def resolve_ambiguity_policy(value: str) -> AmbiguityPolicy:
    """Resolve an ambiguity policy from its name (``raise`` or ``first``)."""
    normalized = (value or "").strip().lower()
    for policy in AmbiguityPolicy:
        if policy.value == normalized:
            return policy

    allowed = ", ".join(policy.value for policy in AmbiguityPolicy)
    raise ValueError(f"Unknown ambiguity policy '{value}'. Supported: {allowed}.")


def _parse_flag(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag (1/0, true/false, yes/no), got '{value}'")


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Load configuration from environment variables."""
    env = os.environ if environ is None else environ

    ambiguity = resolve_ambiguity_policy(env.get(AMBIGUITY_ENV, AmbiguityPolicy.RAISE.value))
    checksum = _parse_flag(CHECKSUM_ENV, env.get(CHECKSUM_ENV, ""))

    return Config(ambiguity=ambiguity, checksum_addresses=checksum)
