import pytest

from stampforge.domain.permissions import ActorCapabilities, can_manage, can_reset_all

MANAGERS = frozenset({"stamp-mod"})


@pytest.mark.parametrize(
    ("actor", "manage", "reset_all"),
    [
        (ActorCapabilities("1"), False, False),
        (ActorCapabilities("2", role_ids=frozenset({"stamp-mod"})), True, False),
        (ActorCapabilities("3", role_ids=frozenset({"other"})), False, False),
        (ActorCapabilities("4", is_admin=True), True, True),
        (ActorCapabilities("5", is_owner=True), True, True),
    ],
)
def test_capabilities(actor, manage, reset_all):
    assert can_manage(actor, MANAGERS) is manage
    assert can_reset_all(actor) is reset_all


def test_manager_role_is_not_enough_without_configuration():
    actor = ActorCapabilities("2", role_ids=frozenset({"stamp-mod"}))

    assert can_manage(actor, frozenset()) is False
