# flake8: noqa
# scripts/issue_token.py

import uuid
from datetime import timedelta

import typer

from app.core.security import create_access_token

cli = typer.Typer()


@cli.command()
def main(
    user_id: str = typer.Option(
        ..., '--user-id', '-u',
        prompt="토큰을 발급할 사용자 UUID를 입력하세요",
        help="토큰의 sub 클레임에 들어갈 사용자 UUID입니다."
    ),
    email: str = typer.Option(
        None, '--email', '-e',
        help="토큰에 포함할 이메일 (선택)."
    ),
    minutes: int = typer.Option(
        60, '--minutes', '-m',
        help="토큰 유효 시간(분)입니다."
    ),
):
    """
    개발/테스트용 Bearer Access Token을 발급합니다.
    """
    try:
        subject = uuid.UUID(user_id)
    except ValueError:
        print(f"오류: 올바른 UUID가 아닙니다: {user_id}")
        raise typer.Abort()

    claims = {"sub": str(subject)}
    if email:
        claims["email"] = email

    token = create_access_token(claims, expires_delta=timedelta(minutes=minutes))
    print(token)


if __name__ == "__main__":
    cli()
