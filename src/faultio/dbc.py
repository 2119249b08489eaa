# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Design by contract utilities for :mod:`faultio`.

Contracts are off by default so the streams stay cheap inside tight test
loops. Set ``FAULTIO_DBC=1`` or wrap code in :func:`dbc_enabled` to turn
them on. A failing contract raises :class:`AssertionError`.

Predicates may return ``bool``, ``None`` (failure) or a tuple whose first
item is the outcome and whose second item is a diagnostic message.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from functools import wraps
from typing import ParamSpec, TypeVar, cast

__all__ = [
    "ContractResult",
    "dbc_active",
    "dbc_enabled",
    "disable_dbc",
    "enable_dbc",
    "ensure",
    "invariant",
    "require",
]

P = ParamSpec("P")
R = TypeVar("R")
T = TypeVar("T", bound=object)

type ContractResult = bool | tuple[bool, *tuple[object, ...]] | None
ContractCallable = Callable[..., ContractResult | object]

_ENV_FLAG = "FAULTIO_DBC"
_forced_state: bool | None = None


def _coerce_flag(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() not in {"", "0", "false", "off", "no"}


def dbc_active() -> bool:
    """Return ``True`` when contract checks should run."""

    if _forced_state is not None:
        return _forced_state
    return _coerce_flag(os.getenv(_ENV_FLAG))


def enable_dbc() -> None:
    """Force contract enforcement on."""

    global _forced_state
    _forced_state = True


def disable_dbc() -> None:
    """Force contract enforcement off."""

    global _forced_state
    _forced_state = False


@contextmanager
def dbc_enabled(*, active: bool = True) -> Iterator[None]:
    """Temporarily set the contract flag inside a ``with`` block."""

    global _forced_state
    previous = _forced_state
    _forced_state = active
    try:
        yield
    finally:
        _forced_state = previous


def _outcome(result: ContractResult | object) -> tuple[bool, str | None]:
    if isinstance(result, tuple):
        items = cast(Sequence[object], result)
        if not items:
            msg = "Contract callables must not return empty tuples"
            raise TypeError(msg)
        detail = str(items[1]) if len(items) > 1 else None
        return bool(items[0]), detail
    if result is None:
        return False, None
    return bool(result), None


def _check(
    kind: str,
    func: Callable[..., object],
    predicate: ContractCallable,
    args: tuple[object, ...],
    kwargs: Mapping[str, object],
) -> None:
    qualname = getattr(func, "__qualname__", repr(func))
    try:
        result = predicate(*args, **kwargs)
    except AssertionError:
        raise
    except Exception as exc:
        msg = f"{kind} contract for {qualname} raised {type(exc).__name__}: {exc}"
        raise AssertionError(msg) from exc
    passed, detail = _outcome(result)
    if passed:
        return
    predicate_name = getattr(predicate, "__name__", repr(predicate))
    msg = f"{kind} contract for {qualname} failed via {predicate_name}."
    if detail:
        msg = f"{msg} Details: {detail}"
    raise AssertionError(msg)


def require(
    *predicates: ContractCallable,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Validate preconditions before invoking the wrapped callable."""

    if not predicates:
        msg = "@require expects at least one predicate"
        raise ValueError(msg)

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapped(*args: P.args, **kwargs: P.kwargs) -> R:
            if dbc_active():
                for predicate in predicates:
                    _check("require", func, predicate, tuple(args), dict(kwargs))
            return func(*args, **kwargs)

        return wrapped

    return decorator


def ensure(
    *predicates: ContractCallable,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Validate postconditions once the callable returns or raises.

    Predicates receive the call arguments plus either ``result=`` or
    ``exception=`` as a keyword argument.
    """

    if not predicates:
        msg = "@ensure expects at least one predicate"
        raise ValueError(msg)

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapped(*args: P.args, **kwargs: P.kwargs) -> R:
            if not dbc_active():
                return func(*args, **kwargs)
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                for predicate in predicates:
                    _check(
                        "ensure",
                        func,
                        predicate,
                        tuple(args),
                        {**kwargs, "exception": exc},
                    )
                raise
            for predicate in predicates:
                _check(
                    "ensure", func, predicate, tuple(args), {**kwargs, "result": result}
                )
            return result

        return wrapped

    return decorator


def _wrap_method(
    method: Callable[..., object], predicates: tuple[ContractCallable, ...]
) -> Callable[..., object]:
    @wraps(method)
    def wrapper(self: object, *args: object, **kwargs: object) -> object:
        if not dbc_active():
            return method(self, *args, **kwargs)
        for predicate in predicates:
            _check("invariant", method, predicate, (self,), {})
        try:
            return method(self, *args, **kwargs)
        finally:
            for predicate in predicates:
                _check("invariant", method, predicate, (self,), {})

    return wrapper


def invariant(*predicates: ContractCallable) -> Callable[[type[T]], type[T]]:
    """Enforce class invariants after ``__init__`` and around public methods."""

    if not predicates:
        msg = "@invariant expects at least one predicate"
        raise ValueError(msg)

    def decorator(cls: type[T]) -> type[T]:
        original_init = cls.__init__

        @wraps(original_init)
        def init_wrapper(self: object, *args: object, **kwargs: object) -> None:
            original_init(self, *args, **kwargs)
            if dbc_active():
                for predicate in predicates:
                    _check("invariant", original_init, predicate, (self,), {})

        type.__setattr__(cls, "__init__", init_wrapper)

        for name, attribute in list(cls.__dict__.items()):
            if name.startswith("_") or not callable(attribute):
                continue
            if isinstance(attribute, (staticmethod, classmethod)):
                continue
            setattr(cls, name, _wrap_method(attribute, predicates))
        return cls

    return decorator
