import os
import pathlib
import platform
import shutil
import sys

import pypandoc

from paraxref.config import logger
from paraxref.exceptions import PandocNotInstalled


def ensure_pandoc_path():
    """Make sure pypandoc can find a pandoc executable.

    Falls back to ``shutil.which`` and the interpreter prefix (conda/pixi environments) when
    pypandoc's own lookup fails.

    :raises PandocNotInstalled: no pandoc executable could be found
    """
    try:
        pypandoc.get_pandoc_path()
        return None
    except OSError:
        logger.debug("pypandoc could not find pandoc, attempting to locate it manually")

    pandoc_exe = shutil.which("pandoc")
    if pandoc_exe is not None:
        pandoc_path = pathlib.Path(pandoc_exe)
    elif platform.system() == "Windows":
        pandoc_path = pathlib.Path(sys.prefix) / "Library" / "bin" / "pandoc.exe"
    else:
        pandoc_path = pathlib.Path(sys.prefix) / "bin" / "pandoc"

    if not pandoc_path.exists():
        raise PandocNotInstalled("Pandoc executable not found. Please install Pandoc.")

    os.environ["PYPANDOC_PANDOC"] = str(pandoc_path)
    pypandoc.get_pandoc_path()
    return None


def convert_latex_to_html(source: str, id_prefix: str = "content-") -> str:
    """Convert LaTeX to an HTML fragment.

    Cross-references come out as ``<a data-reference-type="ref" data-reference="label">[label]</a>``
    and every id and internal link is prefixed with ``id_prefix``. Math is left for MathJax.
    """
    ensure_pandoc_path()
    return pypandoc.convert_text(
        source,
        "html",
        format="latex",
        extra_args=["--mathjax", f"--id-prefix={id_prefix}"],
    )
