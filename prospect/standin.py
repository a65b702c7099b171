"""Generate stand-in classes that forward method calls to a dispatcher.

A stand-in class is a subclass of the mocked capability whose methods are all
replaced by small forwarders. Each forwarder normalises the call's arguments
to a positional tuple and hands ``(identity, method name, arguments)`` to the
:class:`~prospect.dispatcher.CallDispatcher` bound to the instance.
"""

from __future__ import annotations

import abc
import dataclasses as dc
import functools
import inspect
import logging
import types
import typing as t

from .errors import ConfigurationError

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .dispatcher import CallDispatcher
    from .expectations import Outcome
    from .registry import MockIdentity

logger = logging.getLogger(__name__)

BINDING_ATTR = "_prospect_binding"
METHODS_ATTR = "_prospect_methods"

_SKIPPED_BASES: frozenset[t.Any] = frozenset({object, abc.ABC, t.Generic, t.Protocol})
_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dc.dataclass(frozen=True, slots=True)
class MethodSpec:
    """Shape of one capability method as seen by its forwarder."""

    name: str
    signature: inspect.Signature | None
    is_async: bool


@dc.dataclass(frozen=True, slots=True)
class _Binding:
    identity: MockIdentity
    dispatcher: CallDispatcher


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _unwrap(value: t.Any) -> tuple[t.Callable[..., t.Any], bool] | None:
    """Return ``(function, takes_receiver)`` for method-like *value*."""
    if isinstance(value, staticmethod):
        return value.__func__, False
    if isinstance(value, classmethod):
        return value.__func__, True
    if isinstance(value, types.FunctionType):
        return value, True
    return None


def _signature(
    func: t.Callable[..., t.Any], *, takes_receiver: bool
) -> inspect.Signature | None:
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    params = list(sig.parameters.values())
    if takes_receiver and params and params[0].kind in _POSITIONAL_KINDS:
        params = params[1:]
    return sig.replace(parameters=params)


def capability_methods(capability: type) -> dict[str, MethodSpec]:
    """Collect the methods a stand-in of *capability* must forward."""
    members: dict[str, t.Any] = {}
    for klass in reversed(inspect.getmro(capability)):
        if klass in _SKIPPED_BASES:
            continue
        members.update(vars(klass))

    specs: dict[str, MethodSpec] = {}
    for name, value in members.items():
        if _is_dunder(name):
            continue
        unwrapped = _unwrap(value)
        if unwrapped is None:
            continue
        func, takes_receiver = unwrapped
        specs[name] = MethodSpec(
            name=name,
            signature=_signature(func, takes_receiver=takes_receiver),
            is_async=inspect.iscoroutinefunction(func),
        )
    return specs


def normalise_arguments(
    signature: inspect.Signature | None,
    args: tuple[t.Any, ...],
    kwargs: dict[str, t.Any],
) -> tuple[t.Any, ...]:
    """Flatten a call's arguments into positional order.

    Keyword arguments move to their parameter's position. Defaults are only
    filled in for positional parameters skipped before the last supplied
    one, ``*args`` are expanded and surplus ``**kwargs`` are appended as a
    single dict. A call the signature rejects raises :class:`TypeError`.
    """
    if signature is None:
        if kwargs:
            msg = "keyword arguments require an inspectable method signature"
            raise TypeError(msg)
        return args

    bound = signature.bind(*args, **kwargs)
    supplied = bound.arguments
    params = list(signature.parameters.values())
    last = max(
        (index for index, param in enumerate(params) if param.name in supplied),
        default=-1,
    )
    flat: list[t.Any] = []
    for index, param in enumerate(params):
        if param.name in supplied:
            value = supplied[param.name]
            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                flat.extend(value)
            else:
                flat.append(value)
        elif index < last and param.kind in _POSITIONAL_KINDS:
            flat.append(param.default)
    return tuple(flat)


async def _deferred(outcome: Outcome) -> t.Any:
    return outcome.produce()


def _binding(stand_in: t.Any) -> _Binding:
    return object.__getattribute__(stand_in, BINDING_ATTR)


def _make_forwarder(spec: MethodSpec, owner: str) -> t.Callable[..., t.Any]:
    name = spec.name
    signature = spec.signature

    if spec.is_async:

        def forward(self: t.Any, *args: t.Any, **kwargs: t.Any) -> t.Any:
            binding = _binding(self)
            arguments = normalise_arguments(signature, args, kwargs)
            # Mismatches surface at the call site; canned outcomes on await.
            expectation = binding.dispatcher.resolve(
                binding.identity, name, arguments
            )
            return _deferred(expectation.outcome)

    else:

        def forward(self: t.Any, *args: t.Any, **kwargs: t.Any) -> t.Any:
            binding = _binding(self)
            arguments = normalise_arguments(signature, args, kwargs)
            return binding.dispatcher.dispatch(binding.identity, name, arguments)

    forward.__name__ = name
    forward.__qualname__ = f"{owner}.{name}"
    return forward


def _stand_in_repr(self: t.Any) -> str:
    identity = _binding(self).identity
    return f"<{identity.capability_name} stand-in #{identity.serial}>"


@functools.cache
def stand_in_class(capability: type) -> type:
    """Return the (cached) stand-in class for *capability*."""
    if not isinstance(capability, type):
        msg = f"cannot mock {capability!r}: expected a class"
        raise ConfigurationError(msg)

    specs = capability_methods(capability)
    owner = capability.__qualname__

    def exec_body(ns: dict[str, t.Any]) -> None:
        for spec in specs.values():
            ns[spec.name] = _make_forwarder(spec, owner)
        ns[METHODS_ATTR] = frozenset(specs)
        ns["__qualname__"] = owner
        ns["__module__"] = capability.__module__
        ns["__repr__"] = _stand_in_repr

    try:
        cls = types.new_class(capability.__name__, (capability,), {}, exec_body)
    except TypeError as exc:
        msg = f"cannot mock {capability.__qualname__}: {exc}"
        raise ConfigurationError(msg) from exc

    if getattr(cls, "__abstractmethods__", None):
        # Abstract members that are not methods (e.g. properties) are not
        # forwarded but must not block instantiation.
        cls.__abstractmethods__ = frozenset()
    logger.debug(
        "Generated stand-in class for %s forwarding %s",
        capability.__qualname__,
        sorted(specs),
    )
    return cls


def create_stand_in(
    capability: type, identity: MockIdentity, dispatcher: CallDispatcher
) -> t.Any:
    """Instantiate a stand-in bound to *identity* without running ``__init__``."""
    cls = stand_in_class(capability)
    try:
        stand_in = object.__new__(cls)
    except TypeError as exc:
        msg = f"cannot instantiate a stand-in for {capability.__qualname__}: {exc}"
        raise ConfigurationError(msg) from exc
    object.__setattr__(stand_in, BINDING_ATTR, _Binding(identity, dispatcher))
    return stand_in


def identity_of(obj: t.Any) -> MockIdentity | None:
    """Return the identity bound to *obj*, or ``None`` for non stand-ins."""
    try:
        binding = object.__getattribute__(obj, BINDING_ATTR)
    except AttributeError:
        return None
    return binding.identity if isinstance(binding, _Binding) else None


def forwarded_methods(stand_in: t.Any) -> frozenset[str]:
    """Return the method names *stand_in* forwards."""
    return getattr(type(stand_in), METHODS_ATTR, frozenset())
