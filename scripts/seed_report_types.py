# flake8: noqa
# scripts/seed_report_types.py

import asyncio
import typer

from app.core.database import create_db_and_tables, engine, get_async_session_context
from app.domains.rpt.seeds import REPORT_TYPE_SEEDS, seed_report_types

cli = typer.Typer()


async def run_seed(create_tables: bool) -> None:
    if create_tables:
        print("스키마와 테이블을 생성합니다...")
        await create_db_and_tables()

    async with get_async_session_context() as db:
        created = await seed_report_types(db)

    print(f"보고서 유형 {created['report_types']}개, 필드 {created['report_fields']}개를 새로 생성했습니다.")
    if not created["report_types"] and not created["report_fields"]:
        print("모든 시드 데이터가 이미 존재합니다.")
    await engine.dispose()


@cli.command()
def main(
    create_tables: bool = typer.Option(
        False, '--create-tables', '-c',
        help="시드 전에 lims/rpt 스키마와 테이블을 생성합니다. (운영 환경에서는 Alembic 사용)"
    ),
):
    """
    기본 보고서 유형(BLOOD_GROUP, CBC)과 필드 정의를 데이터베이스에 등록합니다.
    여러 번 실행해도 이미 존재하는 항목은 건너뜁니다.
    """
    codes = ", ".join(seed["code"] for seed in REPORT_TYPE_SEEDS)
    print(f"보고서 유형 시드를 시작합니다: {codes}")
    asyncio.run(run_seed(create_tables))


if __name__ == "__main__":
    cli()
