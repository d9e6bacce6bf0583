# scripts/create_admin.py
# 실행: python -m scripts.create_admin --email admin@example.com --organization-id <uuid>

import asyncio
import uuid

import typer

from app.core.database import AsyncSessionLocal, create_db_and_tables, engine
from app.core.exceptions import AppError
from app.domains.usr import crud as usr_crud
from app.domains.usr import schemas as usr_schemas
from app.domains.usr.models import UserRole

cli = typer.Typer()


async def create_admin_user(user_in: usr_schemas.UserCreate) -> None:
    """
    데이터베이스에 관리자 사용자를 생성하는 비동기 함수
    """
    await create_db_and_tables()
    try:
        async with AsyncSessionLocal() as db:
            user = await usr_crud.user.create(db, obj_in=user_in)
            typer.echo(f"관리자 계정이 성공적으로 생성되었습니다: {user.email} (org={user.organization_id})")
    finally:
        await engine.dispose()


@cli.command()
def main(
    email: str = typer.Option(
        ..., '--email', '-e',
        prompt="관리자 이메일을 입력하세요",
        help="생성할 관리자 계정의 이메일 주소입니다."
    ),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="관리자 비밀번호를 입력하세요",
        hide_input=True,
        confirmation_prompt=True,
        help="생성할 관리자 계정의 비밀번호입니다. (최소 8자 이상)"
    ),
    first_name: str = typer.Option("Admin", '--first-name', help="관리자의 이름입니다."),
    last_name: str = typer.Option("User", '--last-name', help="관리자의 성입니다."),
    organization_id: str = typer.Option(
        None, '--organization-id', '-o',
        help="소속 조직 ID (UUID). 생략하면 새 조직 ID를 발급합니다."
    ),
):
    """
    Stockkeeper 조직의 관리자(ADMIN) 계정을 생성합니다.
    """
    if len(password) < 8:
        typer.echo("오류: 비밀번호는 최소 8자 이상이어야 합니다.", err=True)
        raise typer.Abort()

    try:
        org_id = uuid.UUID(organization_id) if organization_id else uuid.uuid4()
    except ValueError:
        typer.echo(f"오류: 올바른 UUID가 아닙니다: {organization_id}", err=True)
        raise typer.Exit(code=1)

    user_data = usr_schemas.UserCreate(
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
        organization_id=org_id,
        role=UserRole.ADMIN,
    )

    try:
        asyncio.run(create_admin_user(user_data))
    except AppError as e:
        typer.echo(f"오류: {e.message}", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    cli()
