"""Color theme for the player widgets."""

from __future__ import annotations

from dataclasses import dataclass

from rich.style import Style


@dataclass(frozen=True)
class Theme:
    primary: str = "cyan"
    secondary: str = "blue"
    accent: str = "magenta"
    text: str = "white"
    text_dim: str = "grey50"
    border: str = "grey37"
    highlight: str = "yellow"
    progress: str = "green"
    error: str = "#ff5f52"
    warn: str = "#ffcc66"

    def style_title(self) -> Style:
        return Style(color=self.primary, bold=True)

    def style_text(self) -> Style:
        return Style(color=self.text)

    def style_dim(self) -> Style:
        return Style(color=self.text_dim)

    def style_highlight(self) -> Style:
        return Style(color=self.highlight, bold=True)

    def style_border(self) -> Style:
        return Style(color=self.border)

    def style_progress(self) -> Style:
        return Style(color=self.progress)


DEFAULT_THEME = Theme()
