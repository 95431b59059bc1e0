from __future__ import annotations

from datetime import date

from personal_ledger.models import Direction, Record
from personal_ledger.sequencer import Sequencer, is_dense


def _rec(rid):
    return Record(rid, Direction.EXPENSE, float(rid), None, date(2025, 1, rid % 28 + 1))


def test_is_dense():
    assert is_dense([])
    assert is_dense([_rec(2), _rec(1), _rec(3)])
    assert not is_dense([_rec(1), _rec(3)])
    assert not is_dense([_rec(1), _rec(1)])
    assert not is_dense([_rec(0)])


def test_next_id_on_empty_storage_is_one(gateway):
    out = Sequencer(gateway).next_id()
    assert out.ok and out.value == 1


def test_renumber_restores_dense_ids_and_next_id_follows(gateway):
    for rid in (3, 8, 11, 12):
        gateway.insert(_rec(rid))
    seq = Sequencer(gateway)

    out = seq.renumber()
    assert out.ok and out.value == 4
    loaded = gateway.load_all().value
    assert is_dense(loaded)
    # Relative order survives; only ids change.
    assert [r.amount for r in loaded] == [3.0, 8.0, 11.0, 12.0]
    assert seq.next_id().value == 5


def test_renumber_is_idempotent_on_dense_ids(gateway):
    for rid in (1, 2, 3):
        gateway.insert(_rec(rid))
    seq = Sequencer(gateway)
    seq.renumber()
    seq.renumber()
    assert [r.id for r in gateway.load_all().value] == [1, 2, 3]


def test_next_id_reports_storage_failure(tmp_path):
    from personal_ledger.persistence import GatewayConfig, PersistenceGateway

    gw = PersistenceGateway(GatewayConfig(database_url=f"sqlite+pysqlite:///{tmp_path / 'x.db'}"))
    out = Sequencer(gw).next_id()
    assert not out.ok
    assert out.error
