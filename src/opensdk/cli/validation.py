"""Flag validation helpers shared by command handlers."""

from typing import Any, Callable, Mapping, Sequence

from opensdk.errors import FlagValueError


def flag_contains(config: Mapping[str, Any], flag: str, values: Sequence[str]) -> None:
    """Check that the resolved value of ``flag`` is one of ``values``.

    Raises:
        FlagValueError: Naming the flag and the offending value.
    """
    value = config.get(flag)
    flag_value = "" if value is None else str(value)
    if flag_value in values:
        return
    raise FlagValueError(flag, flag_value, values)


def cmd_pre_run(*checks: Callable[[], None]) -> None:
    """Run pre-run checks in order; the first failure propagates."""
    for check in checks:
        check()
