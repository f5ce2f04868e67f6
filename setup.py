"""
Optional mypyc build for htmlsnip.

Project metadata lives in pyproject.toml; this file only adds compiled
extensions when asked to:

    HTMLSNIP_USE_MYPYC=1 pip install .
"""

import os

from setuptools import setup

# Modules on the per-character path. options.py and entities.py only run once
# per call and stay interpreted.
COMPILED_MODULES = [
    "src/htmlsnip/truncator.py",
    "src/htmlsnip/scanner.py",
    "src/htmlsnip/buffer.py",
    "src/htmlsnip/charclass.py",
]


def compiled_extensions() -> list:
    if os.environ.get("HTMLSNIP_USE_MYPYC", "0") != "1":
        return []
    try:
        from mypyc.build import mypycify
    except ImportError as exc:
        raise SystemExit("HTMLSNIP_USE_MYPYC=1 needs mypyc: pip install 'htmlsnip[mypyc]'") from exc

    return mypycify(
        COMPILED_MODULES,
        opt_level=os.environ.get("MYPYC_OPT_LEVEL", "3"),
        debug_level=os.environ.get("MYPYC_DEBUG_LEVEL", "0"),
    )


if __name__ == "__main__":
    setup(ext_modules=compiled_extensions())
