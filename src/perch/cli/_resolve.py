"""Locate the ``App`` a CLI command should operate on."""

import importlib

from perch.app import App


def resolve_app(import_string: str) -> App:
    """Turn ``"package.module:name"`` into a perch ``App``.

    *name* defaults to ``app``. If it names a callable other than an App
    (an app factory), it is called with no arguments.

    Raises:
        ModuleNotFoundError: The module part does not import.
        AttributeError: The module has no such attribute.
        TypeError: The factory failed, or the result is not an ``App``.
    """
    module_name, _, attr = import_string.partition(":")
    target = getattr(importlib.import_module(module_name), attr or "app")

    if not isinstance(target, App) and callable(target):
        try:
            target = target()
        except Exception as exc:
            msg = f"App factory {import_string!r} failed: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(target, App):
        msg = f"{import_string!r} is a {type(target).__name__}, not a perch.App instance"
        raise TypeError(msg)
    return target
