from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..db.models import Account, User, utcnow
from ..schemas.user import UserPublic

if TYPE_CHECKING:
    from .oauth import OAuthProfile

logger = logging.getLogger(__name__)


def is_admin_email(email: str | None) -> bool:
    return bool(email) and email.lower() in settings.admin_emails_list


def user_to_public(user: User) -> UserPublic:
    return UserPublic(
        id=user.id,
        name=user.name,
        email=user.email,
        image=user.image,
        created_at=user.created_at,
        is_admin=is_admin_email(user.email),
    )


async def get_user_by_id(db: AsyncSession, user_id: str) -> User | None:
    return await db.get(User, user_id)


async def find_user_by_email(db: AsyncSession, email: str) -> User | None:
    return await db.scalar(select(User).where(User.email == email))


async def find_account(db: AsyncSession, provider: str, provider_account_id: str) -> Account | None:
    return await db.scalar(
        select(Account).where(Account.provider == provider, Account.provider_account_id == provider_account_id)
    )


async def upsert_oauth_user(db: AsyncSession, profile: OAuthProfile) -> User:
    """
    OAuth 로그인 사용자 저장

    1. (provider, provider_account_id) 계정이 있으면 그 사용자
    2. 같은 이메일 사용자가 있으면 계정을 연결
    3. 둘 다 없으면 사용자와 계정을 새로 생성
    """
    account = await find_account(db, profile.provider, profile.provider_account_id)
    user: User | None = None
    if account is not None:
        user = await db.get(User, account.user_id)
    if user is None and profile.email:
        user = await find_user_by_email(db, profile.email)
    if user is None:
        user = User(email=profile.email, name=profile.name, image=profile.image)
        db.add(user)
        await db.flush()
        logger.info("신규 사용자 생성: %s (%s)", user.id, profile.provider)

    if account is None:
        account = Account(
            user_id=user.id,
            type="oauth",
            provider=profile.provider,
            provider_account_id=profile.provider_account_id,
        )
        db.add(account)
    account.access_token = profile.access_token
    account.refresh_token = profile.refresh_token or account.refresh_token
    account.expires_at = profile.expires_at

    user.name = user.name or profile.name
    user.image = profile.image or user.image
    if profile.email_verified and user.email_verified is None:
        user.email_verified = utcnow()
    user.updated_at = utcnow()

    await db.commit()
    return user


async def find_or_create_mobile_user(
    db: AsyncSession,
    *,
    email: str,
    provider: str,
    provider_id: str,
) -> User:
    """모바일 앱이 공급자 로그인 후 넘겨준 신원으로 사용자를 찾거나 만든다."""
    user = await db.scalar(
        select(User)
        .outerjoin(Account, Account.user_id == User.id)
        .where(or_(User.email == email, Account.provider_account_id == provider_id))
        .limit(1)
    )
    if user is not None:
        return user

    user = User(email=email)
    db.add(user)
    await db.flush()
    db.add(Account(user_id=user.id, type="oauth", provider=provider, provider_account_id=provider_id))
    await db.commit()
    logger.info("모바일 신규 사용자 생성: %s (%s)", user.id, provider)
    return user
