"""Kiln — a static-site generator with an incremental dev loop.

Markdown documents in ``content/`` are rendered through layouts in
``layouts/`` and may include fragments from ``content/_partials/``.  In dev
mode every save rebuilds only the documents that consumed the changed
file, and open browser tabs reload.

Quick start::

    import kiln

    kiln.init("my-site/")
    kiln.dev("my-site/")      # build, watch, serve with live reload
    kiln.build("my-site/")    # one-shot build into dist/

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0.dev0"
__all__ = [
    "KilnConfig",
    "__version__",
    "build",
    "dev",
    "init",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import kiln`` fast; Chirp and watchfiles load only when a
    command runs.
    """
    if name == "KilnConfig":
        from kiln.config import KilnConfig

        return KilnConfig

    if name == "dev":
        from kiln.app import dev

        return dev

    if name == "build":
        from kiln.app import build

        return build

    if name == "init":
        from kiln.app import init

        return init

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
