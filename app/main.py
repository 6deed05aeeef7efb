import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Добавляем корень проекта в PYTHONPATH
sys.path.append(str(Path(__file__).resolve().parent.parent))

from app.core.config import BACKUP_DIR, LOG_LEVEL
from app.core.database import engine, get_session, init_db
from app.services.backup_service import BackupService
from app.services.payee_service import PayeeService
from app.services.payroll_service import PayrollService
from app.utils.date_utils import current_week_ending
from app.utils.validators import validate_amount


async def cmd_migrate(args) -> None:
    version = await init_db()
    print(f"Версия схемы: {version}")


async def cmd_export(args) -> None:
    async with get_session() as session:
        path = await BackupService(session).dump_backup(args.path or BACKUP_DIR)
    print(f"Резервная копия сохранена: {path}")


async def cmd_import(args) -> None:
    async with get_session() as session:
        restored = await BackupService(session).load_backup(args.path)
    for kind, count in restored.items():
        print(f"{kind}: {count}")


async def cmd_import_payees(args) -> None:
    path = Path(args.path)
    async with get_session() as session:
        service = PayeeService(session)
        if path.suffix.lower() in (".xlsx", ".xls"):
            result = await service.import_from_excel(str(path))
        elif path.suffix.lower() == ".json":
            result = await service.import_from_json(path.read_text(encoding="utf-8"))
        else:
            result = await service.import_from_text(path.read_text(encoding="utf-8"))
    print(f"Добавлено: {result.added}, пропущено: {result.skipped}")


def parse_deduction(value: str):
    """Аргумент --deduct в виде EMPLOYEE_ID=AMOUNT"""
    employee_id, sep, amount = value.partition("=")
    if not sep or not employee_id.strip():
        raise argparse.ArgumentTypeError(f"ожидается EMPLOYEE_ID=AMOUNT: {value }")
    try:
        return employee_id.strip(), validate_amount(amount)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


async def cmd_generate_payroll(args) -> None:
    deductions = dict(args.deduct or [])
    async with get_session() as session:
        created = await PayrollService(session).generate(
            args.week_ending or current_week_ending(), deductions
        )
    for payroll in created:
        print(
            f"{payroll['employeeName']}: {payroll['grossPay']:.2f} - "
            f"{payroll['deductions']:.2f} = {payroll['netPay']:.2f}"
        )


async def cmd_mark_paid(args) -> None:
    async with get_session() as session:
        payroll = await PayrollService(session).mark_paid(args.payroll_id)
    if payroll is None:
        print("Ведомость не найдена")
    else:
        print(f"{payroll['employeeName']}: {payroll['status']} {payroll.get('paidDate', '')}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jumong", description="Чеки, долги и зарплата")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("migrate", help="обновить схему хранилища").set_defaults(
        handler=cmd_migrate
    )

    export = commands.add_parser("export", help="сохранить резервную копию")
    export.add_argument("path", nargs="?")
    export.set_defaults(handler=cmd_export)

    restore = commands.add_parser("import", help="восстановить из резервной копии")
    restore.add_argument("path")
    restore.set_defaults(handler=cmd_import)

    payees = commands.add_parser("import-payees", help="добавить получателей из файла")
    payees.add_argument("path")
    payees.set_defaults(handler=cmd_import_payees)

    payroll = commands.add_parser("generate-payroll", help="сформировать ведомости")
    payroll.add_argument("--week-ending", help="воскресенье недели, YYYY-MM-DD")
    payroll.add_argument(
        "--deduct",
        action="append",
        type=parse_deduction,
        metavar="EMPLOYEE_ID=AMOUNT",
        help="удержание",
    )
    payroll.set_defaults(handler=cmd_generate_payroll)

    paid = commands.add_parser("mark-paid", help="отметить ведомость выплаченной")
    paid.add_argument("payroll_id")
    paid.set_defaults(handler=cmd_mark_paid)

    return parser


async def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        if args.handler is not cmd_migrate:
            await init_db()
        await args.handler(args)
    finally:
        await engine.dispose()


def run():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    asyncio.run(main())


if __name__ == "__main__":
    run()
