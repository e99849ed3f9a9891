from codefence.walker.permission_action import PermissionAction


def test_values():
    assert PermissionAction.IGNORE.value == "ignore"
    assert PermissionAction.WARN.value == "warn"
    assert PermissionAction.RAISE.value == "raise"


def test_from_string():
    assert PermissionAction("warn") is PermissionAction.WARN
    assert PermissionAction.RAISE == "raise"
