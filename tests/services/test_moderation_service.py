# tests/services/test_moderation_service.py
"""Tests for the moderator gate and account suspension."""

import pytest

from rubin_market.core.errors import AuthorizationError, BadRequestError, NotFoundError
from rubin_market.services.moderation import require_active_user, require_moderator


def test_require_moderator(db_session, moderator, buyer) -> None:
    assert require_moderator(db_session, moderator.id).id == moderator.id

    with pytest.raises(AuthorizationError, match="Moderator access required"):
        require_moderator(db_session, buyer.id)
    with pytest.raises(AuthorizationError):
        require_moderator(db_session, "missing-user")


def test_require_active_user(db_session, make_user) -> None:
    banned = make_user(is_banned=True)

    with pytest.raises(AuthorizationError, match="Account suspended"):
        require_active_user(db_session, banned.id)
    with pytest.raises(NotFoundError):
        require_active_user(db_session, "missing-user")


def test_ban_and_unban(moderation_service, moderator, seller) -> None:
    assert moderation_service.ban_status(seller.id) is False

    moderation_service.ban_user(moderator.id, seller.id)
    assert moderation_service.ban_status(seller.id) is True

    moderation_service.unban_user(moderator.id, seller.id)
    assert moderation_service.ban_status(seller.id) is False


def test_ban_twice_is_rejected(moderation_service, moderator, seller) -> None:
    moderation_service.ban_user(moderator.id, seller.id)

    with pytest.raises(BadRequestError, match="already banned"):
        moderation_service.ban_user(moderator.id, seller.id)


def test_unban_of_active_user_is_rejected(moderation_service, moderator, seller) -> None:
    with pytest.raises(BadRequestError, match="not banned"):
        moderation_service.unban_user(moderator.id, seller.id)


def test_players_cannot_ban(moderation_service, buyer, seller) -> None:
    with pytest.raises(AuthorizationError):
        moderation_service.ban_user(buyer.id, seller.id)
    assert moderation_service.ban_status(seller.id) is False


def test_ban_unknown_user(moderation_service, moderator) -> None:
    with pytest.raises(NotFoundError):
        moderation_service.ban_user(moderator.id, "missing-user")


def test_ban_status_of_unknown_user(moderation_service) -> None:
    assert moderation_service.ban_status("missing-user") is False
