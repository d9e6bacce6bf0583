# app/domains/usr/permissions.py

"""
역할 기반 권한 검사 함수 모음입니다.

하나의 역할 값이 세 가지 권한(품목 편집, 단가 조회, 카테고리 관리)을 결정합니다.
현재는 모두 관리자 여부와 같지만, 이후 권한이 갈라질 수 있도록 별도 함수로 둡니다.
서버(라우터 가드, 단가 숨김)와 클라이언트(app.client)가 같은 함수를 사용합니다.
"""

from typing import Optional, Union

from .models import UserRole

RoleLike = Union[UserRole, str, None]


def _normalize(role: RoleLike) -> Optional[UserRole]:
    if role is None:
        return None
    if isinstance(role, UserRole):
        return role
    try:
        return UserRole(str(role).upper())
    except ValueError:
        return None


def is_admin(role: RoleLike) -> bool:
    return _normalize(role) is UserRole.ADMIN


def can_edit_items(role: RoleLike) -> bool:
    return is_admin(role)


def can_view_unit_cost(role: RoleLike) -> bool:
    return is_admin(role)


def can_manage_categories(role: RoleLike) -> bool:
    return is_admin(role)
