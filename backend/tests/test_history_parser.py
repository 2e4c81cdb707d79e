import pytest

from conftest import dump, received_entry, sent_entry
from zcash_viewer.services.history_parser import HistoryParser


def test_received_entry_with_memo():
    parsed = HistoryParser().parse(dump(received_entry("r1", 500_000_000, "coffee")))

    assert parsed.sent == []
    assert len(parsed.received) == 1
    match = parsed.received[0]
    assert match.txid == "r1"
    assert match.value == 500_000_000
    assert match.memo == "coffee"


def test_memo_none_empty_and_absent_all_mean_no_memo():
    raw = dump(
        received_entry("r1", 1, None),
        received_entry("r2", 2, ""),
        received_entry("r3", 3, with_memo_field=False),
        received_entry("r4", 4, "hello"),
    )
    parsed = HistoryParser().parse(raw)

    assert [(m.txid, m.memo) for m in parsed.received] == [
        ("r1", None),
        ("r2", None),
        ("r3", None),
        ("r4", "hello"),
    ]


def test_entry_without_memo_does_not_borrow_next_entry_memo():
    raw = dump(
        received_entry("r1", 1, with_memo_field=False),
        received_entry("r2", 2, "for r2"),
    )
    parsed = HistoryParser().parse(raw)

    assert [(m.txid, m.memo) for m in parsed.received] == [("r1", None), ("r2", "for r2")]


def test_fields_may_span_lines_and_unrelated_content():
    raw = (
        'txid: TxId("multi")\n'
        "  datetime: 1700000000\n"
        "  kind: Received\n"
        "  blockheight: 12\n"
        "  value: 700\n"
        "  notes: [...]\n"
        '  memo: Some("split\nover lines")\n'
    )
    parsed = HistoryParser().parse(raw)

    assert len(parsed.received) == 1
    assert parsed.received[0].value == 700
    assert parsed.received[0].memo == "split\nover lines"


def test_received_scan_does_not_attach_sent_txid():
    raw = dump(sent_entry("s1", 10), received_entry("r1", 20, "x"))
    parsed = HistoryParser().parse(raw)

    assert [m.txid for m in parsed.received] == ["r1"]
    assert [m.txid for m in parsed.sent] == ["s1"]


def test_scan_order_is_first_occurrence_per_kind():
    raw = dump(
        received_entry("a", 1),
        sent_entry("c", 3),
        received_entry("b", 2),
        sent_entry("d", 4),
    )
    parsed = HistoryParser().parse(raw)

    assert [m.txid for m in parsed.received] == ["a", "b"]
    assert [m.txid for m in parsed.sent] == ["c", "d"]


def test_sent_recipient_found_after_txid():
    parsed = HistoryParser().parse(dump(sent_entry("s1", 100_000_000, "utest1abc")))

    assert parsed.sent[0].recipient == "utest1abc"


def test_sent_without_recipient_defaults_to_unknown():
    parsed = HistoryParser().parse(dump(sent_entry("s1", 100_000_000)))

    assert parsed.sent[0].recipient == "Unknown Recipient"


def test_recipient_before_txid_is_not_used():
    raw = 'recipient: "utest1early"\n' + dump(sent_entry("s1", 5))
    parsed = HistoryParser().parse(raw)

    assert parsed.sent[0].recipient == "Unknown Recipient"


def test_first_occurrence_scope_reads_past_entry_boundary():
    raw = dump(sent_entry("s1", 5), sent_entry("s2", 6, "utest1second"))
    parsed = HistoryParser(recipient_scope="first_occurrence").parse(raw)

    assert [m.recipient for m in parsed.sent] == ["utest1second", "utest1second"]


def test_entry_scope_stops_at_next_entry():
    raw = dump(sent_entry("s1", 5), sent_entry("s2", 6, "utest1second"))
    parsed = HistoryParser(recipient_scope="entry").parse(raw)

    assert [m.recipient for m in parsed.sent] == ["Unknown Recipient", "utest1second"]


def test_malformed_value_skips_only_that_entry():
    raw = dump(
        received_entry("bad", "NaN", "lost"),
        received_entry("good", 300, "kept"),
        sent_entry("bad-sent", "12x"),
        sent_entry("good-sent", 400),
    )
    parsed = HistoryParser().parse(raw)

    assert [(m.txid, m.value) for m in parsed.received] == [("good", 300)]
    assert [(m.txid, m.value) for m in parsed.sent] == [("good-sent", 400)]


def test_non_send_sent_kinds_are_ignored():
    raw = 'txid: TxId("shield"), kind: Sent(Shield), value: 99'
    assert HistoryParser().parse(raw).sent == []


def test_plain_sent_kind_is_matched():
    raw = 'txid: TxId("plain"), kind: Sent, value: 99'
    assert [m.txid for m in HistoryParser().parse(raw).sent] == ["plain"]


def test_empty_text():
    parsed = HistoryParser().parse("")
    assert parsed.received == [] and parsed.sent == []


def test_unknown_scope_rejected():
    with pytest.raises(ValueError):
        HistoryParser(recipient_scope="nearest")


def test_empty_value_skips_entry_instead_of_reading_nested_value():
    raw = 'txid: TxId("r1"), kind: Received, value: , notes: [Note { value: 777 }], memo: None'

    assert HistoryParser().parse(raw).received == []


def test_empty_sent_value_skips_entry():
    raw = dump(sent_entry("s1", ""), sent_entry("s2", 40))

    assert [(m.txid, m.value) for m in HistoryParser().parse(raw).sent] == [("s2", 40)]


def test_empty_txid_is_skipped_and_does_not_match_earlier_recipient():
    raw = 'recipient: "early"\ntxid: TxId(""), kind: Sent(Send), value: 5\n' + dump(sent_entry("s2", 6))
    parsed = HistoryParser().parse(raw)

    assert [(m.txid, m.recipient) for m in parsed.sent] == [("s2", "Unknown Recipient")]


def test_empty_txid_has_no_recipient():
    raw = 'recipient: "early"'
    assert HistoryParser().resolve_recipient(raw, "") == "Unknown Recipient"


@pytest.mark.parametrize(
    "escaped,expected",
    [
        (r'say \"hi\"', 'say "hi"'),
        (r"back\\slash", "back\\slash"),
        (r"two\nlines", "two\nlines"),
        (r'closing \") inside', 'closing ") inside'),
        (r"snow \u{2603}", "snow ☃"),
    ],
)
def test_memo_debug_escapes_are_undone(escaped, expected):
    raw = f'txid: TxId("r1"), kind: Received, value: 1, memo: Some("{escaped}")'

    assert HistoryParser().parse(raw).received[0].memo == expected


def test_entry_scope_starts_at_the_entry_itself():
    raw = 'note: "refund of s1", recipient: "utest1wrong"\n' + dump(sent_entry("s1", 5, "utest1right"))

    first = HistoryParser(recipient_scope="first_occurrence").parse(raw).sent[0]
    scoped = HistoryParser(recipient_scope="entry").parse(raw).sent[0]

    assert first.recipient == "utest1wrong"
    assert scoped.recipient == "utest1right"


def test_match_positions_point_at_entries():
    raw = dump(received_entry("r1", 1), sent_entry("s1", 2))
    parsed = HistoryParser().parse(raw)

    assert raw[parsed.received[0].position:].startswith('txid: TxId("r1")')
    assert raw[parsed.sent[0].position:].startswith('txid: TxId("s1")')
