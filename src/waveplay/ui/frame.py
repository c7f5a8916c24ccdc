"""Drawing surface handed to the controller's render function."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import groupby
from typing import Optional

from rich.console import RenderableType
from rich.layout import Layout
from rich.text import Text

from waveplay.layout import Region
from waveplay.ui.widgets import RegionKind


@dataclass(frozen=True)
class Draw:
    kind: RegionKind
    region: Region
    renderable: RenderableType


class Frame:
    """Collects region draws for one screen update."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.draws: list[Draw] = []

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def render(
        self, kind: RegionKind, region: Region, renderable: RenderableType
    ) -> None:
        self.draws.append(Draw(kind=kind, region=region, renderable=renderable))

    def get(self, kind: RegionKind) -> Optional[Draw]:
        for draw in reversed(self.draws):
            if draw.kind is kind:
                return draw
        return None

    def compose(self) -> Layout:
        """Stack the drawn regions into a rich Layout, row bands top to bottom."""
        root = Layout(name="root")
        visible = [d for d in self.draws if d.region.height > 0 and d.region.width > 0]
        if not visible:
            root.update(Text(""))
            return root
        visible.sort(key=lambda d: (d.region.y, d.region.x))
        bands: list[Layout] = []
        for (_, height), group in groupby(
            visible, key=lambda d: (d.region.y, d.region.height)
        ):
            cells = list(group)
            if len(cells) == 1:
                bands.append(
                    Layout(cells[0].renderable, name=cells[0].kind.value, size=height)
                )
                continue
            band = Layout(size=height)
            band.split_row(
                *(
                    Layout(
                        cell.renderable, name=cell.kind.value, size=cell.region.width
                    )
                    for cell in cells
                )
            )
            bands.append(band)
        root.split_column(*bands)
        return root
