"""Build configuration using pydantic models.

The command line is read once at startup and turned into a ``BuildOptions``
record, which is passed explicitly through the pipeline. Nothing in the
pipeline looks at the working directory or ``sys.argv`` itself.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, field_validator


class PostProcess(Enum):
    """Post-processing applied to the serialized document.

    A single choice, so beautify and minify can never both be requested.
    """

    NONE = "none"
    BEAUTIFY = "beautify"
    MINIFY = "minify"


# ---------------------------------------------------------------------------
# Sub-models (one per content producer)
# ---------------------------------------------------------------------------
class MarkdownConfig(BaseModel):
    """Python-Markdown rendering options."""

    extensions: list[str] = ["extra", "sane_lists"]
    output_format: Literal["html", "xhtml"] = "html"


class SassConfig(BaseModel):
    """libsass compilation options."""

    output_style: str = "expanded"

    @field_validator("output_style")
    @classmethod
    def known_output_style(cls, value: str) -> str:
        allowed = ("nested", "expanded", "compact", "compressed")
        if value not in allowed:
            msg = f"output_style must be one of {', '.join(allowed)}, got {value!r}"
            raise ValueError(msg)
        return value


# ---------------------------------------------------------------------------
# Root options
# ---------------------------------------------------------------------------
class BuildOptions(BaseModel):
    """Everything one run needs: where to read, where to write, and how."""

    input_path: Path
    output_path: Path
    post_process: PostProcess = PostProcess.NONE
    markdown: MarkdownConfig = MarkdownConfig()
    sass: SassConfig = SassConfig()

    @property
    def base_dir(self) -> Path:
        """Directory that marker file paths are resolved against."""
        return self.input_path.parent
