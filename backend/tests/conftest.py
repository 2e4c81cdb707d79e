"""Shared fixtures: diagnostic dumps, backend payloads and a fake backend."""

from __future__ import annotations

import asyncio
import json

import pytest

from zcash_viewer.config import Settings
from zcash_viewer.services.sync_backends.base import SyncBackend


def received_entry(txid: str, value: str | int, memo: str | None = None, *, with_memo_field: bool = True) -> str:
    if not with_memo_field:
        memo_part = ""
    elif memo is None:
        memo_part = ", memo: None"
    else:
        memo_part = f', memo: Some("{memo}")'
    return (
        f'TransactionSummary {{ txid: TxId("{txid}"), datetime: 1700000000,\n'
        f"    status: Confirmed(BlockHeight(3700100)), kind: Received, value: {value}, fee: None,\n"
        f"    orchard_notes: [OrchardNoteSummary {{ value: {value}, spend_summary: Unspent{memo_part} }}],\n"
        f"    outgoing_tx_data: [] }}"
    )


def sent_entry(txid: str, value: str | int, recipient: str | None = None) -> str:
    outgoing = ""
    if recipient is not None:
        outgoing = f'OutgoingTxData {{ recipient: "{recipient}", value: {value}, memo: None }}'
    return (
        f'TransactionSummary {{ txid: TxId("{txid}"), datetime: 1700000500,\n'
        f"    status: Confirmed(BlockHeight(3700200)), kind: Sent(Send), value: {value}, fee: Some(10000),\n"
        f"    orchard_notes: [],\n"
        f"    outgoing_tx_data: [{outgoing}] }}"
    )


def dump(*entries: str) -> str:
    return "[" + ",\n".join(entries) + "]"


def backend_payload(history_raw: str, balance_zat: int = 400_000_000) -> str:
    return json.dumps(
        {
            "balance_zat": balance_zat,
            "balance_zec": balance_zat / 100_000_000,
            "sync_height": "Server: testnet.zec.rocks, latest block 3700300",
            "history_raw": history_raw,
            "pretty_log": "DEBUG INFO:\n\nBalance: ...",
        }
    )


class FakeBackend(SyncBackend):
    """In-memory stand-in for the sync sidecar."""

    def __init__(self, response: str = "", error: Exception | None = None, gate: asyncio.Event | None = None):
        self.response = response
        self.error = error
        self.gate = gate
        self.calls: list[tuple[str, bool, int]] = []

    async def sync_wallet(self, viewing_key: str, is_testnet: bool, birthday: int) -> str:
        self.calls.append((viewing_key, is_testnet, birthday))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def test_settings() -> Settings:
    return Settings(sync_timeout_seconds=5.0, recipient_lookup_scope="first_occurrence")


@pytest.fixture
def sample_history() -> str:
    return dump(
        received_entry("r-aaa", 500_000_000, "coffee"),
        sent_entry("s-bbb", 100_000_000, "utest1recipient"),
        received_entry("r-ccc", 25_000_000, None),
    )
