"""Quarto wrapper pages that embed a built story inside the site layout."""

from __future__ import annotations

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

WRAPPER_FILENAME = "index.qmd"
ARTIFACT_FILENAME = "story.html"
FALLBACK_TITLE = "Molecular Story"
IFRAME_HEIGHT_PX = 800
LAYOUT_MARGIN_PX = 40

_WORD_SEPARATOR = re.compile(r"[-_]")


def printable(value: object) -> str:
    """Render a value for console, page, or report text.

    Undecodable filename bytes surface from `os.walk` as lone surrogates, which
    strict UTF-8 streams reject; they become U+FFFD here.
    """
    return str(value).encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def story_title(story_dir: Path) -> str:
    """Turn a directory name like `protein_folding` into `Protein Folding`."""
    name = printable(story_dir.name)
    if not name:
        return FALLBACK_TITLE
    words = _WORD_SEPARATOR.split(name)
    return " ".join(word[:1].upper() + word[1:] for word in words)


def _yaml_quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_wrapper_document(title: str) -> str:
    """Render the wrapper page: front matter, iframe, and resize script."""
    return f"""---
title: {_yaml_quote(title)}
format:
  html:
    page-layout: full
---

<iframe src="{ARTIFACT_FILENAME}" width="100%" height="{IFRAME_HEIGHT_PX}px" frameborder="0" style="border: none; min-height: {IFRAME_HEIGHT_PX}px;"></iframe>

<script>
// Resize the iframe when the story reports its content height
window.addEventListener('message', function(e) {{
  if (e.data && e.data.type === 'resize' && typeof e.data.height === 'number') {{
    const iframe = document.querySelector('iframe');
    if (iframe) {{
      iframe.style.height = e.data.height + 'px';
    }}
  }}
}});

// Fallback: fill the viewport below the navbar
function resizeIframe() {{
  const iframe = document.querySelector('iframe');
  if (iframe) {{
    const navbar = document.querySelector('.navbar');
    const headerHeight = navbar ? navbar.offsetHeight : 0;
    iframe.style.height = (window.innerHeight - headerHeight - {LAYOUT_MARGIN_PX}) + 'px';
  }}
}}

window.addEventListener('load', resizeIframe);
window.addEventListener('resize', resizeIframe);
</script>
"""


def write_wrapper(story_dir: Path) -> Path:
    """Write `<story_dir>/index.qmd`, replacing any previous wrapper."""
    wrapper_path = story_dir / WRAPPER_FILENAME
    page = build_wrapper_document(story_title(story_dir))
    wrapper_path.write_text(page, encoding="utf-8")
    logger.info("wrapper.written path=%s", wrapper_path)
    return wrapper_path
