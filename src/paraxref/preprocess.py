from __future__ import annotations

from .config import logger
from .labels import RE_LABEL, in_regions, math_regions


def inject_hypertargets(source: str) -> str:
    """Insert ``\\hypertarget{<label>}{}`` right after every ``\\label`` that sits outside math.

    Pandoc turns the hypertarget into an element carrying the label as id, so those references
    work without any post-processing. Labels inside display math are left alone, equation
    anchors are placed on the typeset output instead.
    """
    regions = math_regions(source)
    parts = []
    last = 0
    injected = 0
    skipped = 0
    for m in RE_LABEL.finditer(source):
        parts.append(source[last : m.end()])
        last = m.end()
        if in_regions(m.start(), regions):
            skipped += 1
            continue
        parts.append(f"\\hypertarget{{{m.group(1)}}}{{}}")
        injected += 1
    parts.append(source[last:])

    logger.info(f"Injected {injected} \\hypertarget anchors (skipped {skipped} equation labels)")
    return "".join(parts)
