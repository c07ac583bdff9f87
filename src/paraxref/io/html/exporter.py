from __future__ import annotations

import pathlib
import shutil
from typing import TYPE_CHECKING

from paraxref.config import logger

if TYPE_CHECKING:
    from paraxref.document import XrefDocument

MATHJAX_URL = "https://cdnjs.cloudflare.com/ajax/libs/mathjax/3.2.2/es5/tex-mml-chtml.js"


class HTMLExporter:
    def __init__(self, doc: XrefDocument):
        self.doc = doc

    def _build_styled_html(self) -> str:
        tree = self.doc.tree
        if tree.soup.find("html") is not None:
            return tree.to_html()

        return f"""<html>
        <head>
        <meta charset=\"utf-8\">
        <title>{self.doc.name}</title>
        <link rel=\"stylesheet\" type=\"text/css\" href=\"style.css\">
        <script>window.MathJax = {{ tex: {{ tags: "ams" }} }};</script>
        <script type=\"text/javascript\" async src=\"{MATHJAX_URL}\"></script>
        </head>
        <body>
        {tree.to_html()}
        </body>
        </html>"""

    def export(self, dest_file) -> pathlib.Path:
        dest_file = pathlib.Path(dest_file)
        dest_file.parent.mkdir(parents=True, exist_ok=True)

        with open(dest_file, "w", encoding="utf-8") as f:
            f.write(self._build_styled_html())

        style_css_file = self.doc.source_file.parent / "style.css"
        if style_css_file.exists() and style_css_file != dest_file.parent / "style.css":
            shutil.copy(style_css_file, dest_file.parent / "style.css")

        logger.info(f'Successfully exported HTML to "{dest_file}"')
        return dest_file
