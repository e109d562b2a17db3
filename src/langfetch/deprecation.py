"""Deprecation helpers for langfetch.

The blocking load path (LanguageData.load_sync) and everything that relies on
it implicitly are kept for compatibility with callers that cannot await.
These helpers mark such APIs with a DeprecationWarning that names the
version of removal and the asynchronous replacement.

Policy:
    - Deprecated APIs keep working until the announced removal version
    - Every warning names the replacement, when one exists

Python 3.13+.
"""

import functools
import warnings
from collections.abc import Callable
from typing import ParamSpec, TypeVar

__all__ = [
    "deprecated",
    "warn_deprecated",
]

P = ParamSpec("P")
R = TypeVar("R")


def warn_deprecated(
    feature: str,
    *,
    removal_version: str,
    alternative: str | None = None,
    stacklevel: int = 2,
) -> None:
    """Issue a DeprecationWarning with the standard langfetch wording.

    Args:
        feature: Name of the deprecated API, e.g. "LanguageData.load_sync()"
        removal_version: Version in which the API disappears
        alternative: Replacement to mention (optional)
        stacklevel: Passed to warnings.warn (default: 2, the caller)

    Example:
        >>> warn_deprecated(
        ...     "LanguageData.load_sync()",
        ...     removal_version="2.0.0",
        ...     alternative="await LanguageData.load()",
        ... )
        # DeprecationWarning: LanguageData.load_sync() is deprecated and will be
        # removed in version 2.0.0. Use await LanguageData.load() instead.
    """
    msg = f"{feature} is deprecated and will be removed in version {removal_version}."
    if alternative:
        msg += f" Use {alternative} instead."

    warnings.warn(msg, DeprecationWarning, stacklevel=stacklevel)


def _docstring_note(removal_version: str, alternative: str | None) -> str:
    lines = [".. deprecated::", f"    Will be removed in version {removal_version}."]
    if alternative:
        lines.append(f"    Use ``{alternative}`` instead.")
    return "\n".join(lines)


def deprecated(
    *,
    removal_version: str,
    alternative: str | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Wrap a callable so that every call warns before running it.

    The ``.. deprecated::`` directive is added to the end of the docstring
    so that it shows up in help() and rendered API docs.

    Example:
        >>> class Resolver:
        ...     @deprecated(removal_version="2.0.0", alternative="await Resolver.load()")
        ...     def load_sync(self) -> None: ...
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        feature = f"{func.__qualname__}()"

        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            # 3 = wrapper's caller, not warn_deprecated or wrapper itself
            warn_deprecated(
                feature, removal_version=removal_version, alternative=alternative, stacklevel=3
            )
            return func(*args, **kwargs)

        note = _docstring_note(removal_version, alternative)
        doc = (wrapper.__doc__ or "").rstrip()
        wrapper.__doc__ = f"{doc}\n\n{note}" if doc else note
        return wrapper

    return decorator
