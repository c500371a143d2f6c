"""
Deterministic canonical encoding of pool records.

This is not the ledger wire format (that lives with the transaction builder).
It is a stable, byte-exact rendering used to estimate the size of the state
carried by the pool container and to fingerprint post-states so independent
re-executions can be compared cheaply.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict

from .pools import AssetId, PoolState, PoolStats


CANONICAL_ENCODING_VERSION = 1


def _reject_surrogates(s: str) -> None:
    # Surrogate code points are not valid Unicode scalar values and lead to
    # implementation-defined behavior across JSON encoders/UTF-8 encoders.
    for ch in s:
        o = ord(ch)
        if 0xD800 <= o <= 0xDFFF:
            raise TypeError("surrogate code points are not allowed in canonical encoding")


def _reject_floats(value: Any) -> None:
    if isinstance(value, float):
        raise TypeError("floats are not allowed in canonical encoding")
    if isinstance(value, str):
        _reject_surrogates(value)
    if isinstance(value, dict):
        for k in value.keys():
            if not isinstance(k, str):
                raise TypeError("dict keys must be str for canonical encoding")
        for k, v in value.items():
            _reject_surrogates(k)
            _reject_floats(v)
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            _reject_floats(item)
        return


def canonical_json_bytes(value: Any) -> bytes:
    """
    Canonical JSON encoding for hashing and size estimation.

    Rules:
    - UTF-8
    - sort_keys=True
    - separators=(',', ':') (no whitespace)
    - allow_nan=False
    - floats rejected (to avoid representation ambiguity)
    """
    _reject_floats(value)
    text = json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    return text.encode("utf-8")


def _asset_to_list(asset: AssetId) -> list:
    return [asset.policy_id, asset.asset_name]


def _stats_to_dict(stats: PoolStats) -> Dict[str, int]:
    return {
        "swap_count": stats.swap_count,
        "total_volume_ada": stats.total_volume_ada,
        "total_volume_token": stats.total_volume_token,
        "total_lp_fees": stats.total_lp_fees,
        "total_protocol_fees": stats.total_protocol_fees,
        "created_at": stats.created_at,
        "last_interaction_time": stats.last_interaction_time,
    }


def pool_state_to_dict(pool: PoolState) -> Dict[str, Any]:
    """Plain-dict view of a pool record (stable keys, ints and strings only)."""
    return {
        "v": CANONICAL_ENCODING_VERSION,
        "ada_reserve": pool.ada_reserve,
        "token_reserve": pool.token_reserve,
        "lp_total_supply": pool.lp_total_supply,
        "fee_bps": pool.fee_bps,
        "protocol_fee_bps": pool.protocol_fee_bps,
        "status": pool.status.value,
        "identity_token_count": pool.identity_token_count,
        "token_id": _asset_to_list(pool.token_id),
        "lp_token_id": _asset_to_list(pool.lp_token_id),
        "admin": pool.admin,
        "stats": _stats_to_dict(pool.stats),
    }


def pool_record_bytes(pool: PoolState) -> bytes:
    return canonical_json_bytes(pool_state_to_dict(pool))


def pool_state_size_bytes(pool: PoolState) -> int:
    """Size in bytes of the canonical pool record."""
    return len(pool_record_bytes(pool))


def pool_state_digest(pool: PoolState) -> str:
    """sha256 fingerprint of the canonical pool record (0x-prefixed hex)."""
    return "0x" + hashlib.sha256(pool_record_bytes(pool)).hexdigest()
