import json
import pytest
from unittest.mock import patch
from sqlalchemy.exc import SQLAlchemyError

from app.core.database import make_engine, make_session_factory
from app.core.schema import migrate
from app.repositories.record_repository import RecordRepository
from app.services.backup_service import BackupFormatError, BackupService, backup_file_name
from app.services.cheque_service import ChequeService
from app.services.customer_service import CustomerService
from app.services.debt_service import DebtService
from app.services.employee_service import EmployeeService
from app.services.payee_service import PayeeService
from app.services.store_service import StoreService


async def _fill(session):
    store = await StoreService(session).create_store("Main", "Market St")
    payee = await PayeeService(session).create_payee("Acme Corp", "John", "0917")
    await ChequeService(session).create_cheque(payee["id"], 1000, "2024-02-01")
    employee = await EmployeeService(session).create_employee(
        "Juan", "Cashier", 500, store_id=store["id"]
    )
    customer = await CustomerService(session).create_customer("Maria")
    debts = DebtService(session)
    await debts.add_entry("customer", customer["id"], "charge", 50, "2024-01-01")
    await debts.add_entry("employee", employee["id"], "charge", 70, "2024-01-02")


@pytest.mark.asyncio
async def test_round_trip_to_empty_store(session):
    await _fill(session)
    snapshot = await BackupService(session).export_all()
    assert len(snapshot["cheques"]) == 1
    assert len(snapshot["debts"]) == 2
    assert snapshot["payrolls"] == []

    other_engine = make_engine("sqlite+aiosqlite:///:memory:")
    await migrate(other_engine)
    other_factory = make_session_factory(other_engine)
    try:
        async with other_factory() as other:
            restored = await BackupService(other).import_all(json.loads(json.dumps(snapshot)))
            assert restored["cheques"] == 1
            assert await BackupService(other).export_all() == snapshot
    finally:
        await other_engine.dispose()


@pytest.mark.asyncio
async def test_import_replaces_only_present_kinds(session):
    await _fill(session)
    service = BackupService(session)
    before = await service.export_all()

    new_payee = {"id": "p1", "companyName": "Beta", "agentName": "", "mobile": ""}
    restored = await service.import_all({"payees": [new_payee]})

    assert restored == {"payees": 1}
    after = await service.export_all()
    assert after["payees"] == [new_payee]
    assert after["cheques"] == before["cheques"]
    assert after["stores"] == before["stores"]


@pytest.mark.asyncio
async def test_import_reuses_existing_ids(session):
    await _fill(session)
    service = BackupService(session)
    snapshot = await service.export_all()

    snapshot["stores"][0]["storeName"] = "Renamed"
    await service.import_all(snapshot)

    assert (await service.export_all())["stores"][0]["storeName"] == "Renamed"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"payees": {"id": "x"}},
        {"payees": ["Acme"]},
        {"payees": [{"companyName": "no id"}]},
        {"payees": [{"id": "a"}, {"id": "a"}]},
        {"cheques": [], "payees": [{"id": 5}]},
    ],
)
async def test_malformed_payload_changes_nothing(session, payload):
    await _fill(session)
    service = BackupService(session)
    before = await service.export_all()

    with pytest.raises(BackupFormatError):
        await service.import_all(payload)

    assert await service.export_all() == before


@pytest.mark.asyncio
async def test_storage_failure_rolls_back_all_kinds(session):
    """Сбой записи второго вида не оставляет смесь старых и новых данных"""
    await _fill(session)
    service = BackupService(session)
    before = await service.export_all()

    # cheques очищаются и пишутся, запись payees падает
    with patch.object(
        RecordRepository, "bulk_add", side_effect=[0, SQLAlchemyError("disk full")]
    ) as bulk_add:
        with pytest.raises(SQLAlchemyError):
            await service.import_all({"cheques": [], "payees": []})

    assert bulk_add.await_count == 2
    assert await service.export_all() == before


@pytest.mark.asyncio
async def test_dump_and_load_files(session, tmp_path):
    await _fill(session)
    service = BackupService(session)

    path = await service.dump_backup(tmp_path)
    assert path.name == backup_file_name()
    assert path.name.startswith("cheque-tracker-backup-")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["payees"][0]["companyName"] == "Acme Corp"

    await service.import_all({kind: [] for kind in data})
    assert (await service.export_all())["payees"] == []

    restored = await service.load_backup(path)
    assert restored["payees"] == 1
    assert await service.export_all() == data

    broken = tmp_path / "broken.json"
    broken.write_text("{oops", encoding="utf-8")
    with pytest.raises(BackupFormatError):
        await service.load_backup(broken)
