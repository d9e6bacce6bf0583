# scripts/change_admin_password.py
# 실행: python -m scripts.change_admin_password --email admin@example.com

import asyncio

import typer

from app.core.database import AsyncSessionLocal, engine
from app.domains.usr import crud as usr_crud

cli = typer.Typer()


async def change_password(email: str, new_password: str) -> bool:
    """이메일로 사용자를 찾아 비밀번호를 교체합니다. 사용자가 없으면 False."""
    try:
        async with AsyncSessionLocal() as db:
            user = await usr_crud.user.get_by_email(db, email=email)
            if user is None:
                return False
            await usr_crud.user.set_password(db, db_obj=user, new_password=new_password)
            return True
    finally:
        await engine.dispose()


@cli.command()
def main(
    email: str = typer.Option(..., '--email', '-e', prompt="사용자 이메일을 입력하세요"),
    new_password: str = typer.Option(
        ..., '--password', '-p',
        prompt="새 비밀번호를 입력하세요",
        hide_input=True,
        confirmation_prompt=True,
    ),
):
    """
    사용자(주로 관리자)의 비밀번호를 기존 비밀번호 확인 없이 재설정합니다.
    """
    if len(new_password) < 8:
        typer.echo("오류: 비밀번호는 최소 8자 이상이어야 합니다.", err=True)
        raise typer.Abort()

    if not asyncio.run(change_password(email, new_password)):
        typer.echo(f"오류: 사용자를 찾을 수 없습니다: {email}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"비밀번호가 변경되었습니다: {email}")


if __name__ == "__main__":
    cli()
