"""Selectable, filterable list of branches."""

from __future__ import annotations

from dataclasses import dataclass, replace

from gbt.core.messages import Branch


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class SelectableList:
    """Immutable list widget state.

    ``index`` and ``scroll`` address the *visible* (filtered) items. Every
    operation returns a new instance with both clamped.
    """

    items: tuple[Branch, ...] = ()
    index: int = 0
    scroll: int = 0
    height: int = 0
    filter_text: str = ""
    filtering: bool = False

    @property
    def visible(self) -> tuple[Branch, ...]:
        if not self.filter_text:
            return self.items
        needle = self.filter_text.lower()
        return tuple(item for item in self.items if needle in item.name.lower())

    def selected(self) -> Branch | None:
        visible = self.visible
        if not visible:
            return None
        return visible[_clamp(self.index, 0, len(visible) - 1)]

    def selected_name(self) -> str:
        item = self.selected()
        return item.name if item is not None else ""

    def window(self) -> tuple[Branch, ...]:
        """Items currently scrolled into view."""
        if self.height <= 0:
            return self.visible
        return self.visible[self.scroll : self.scroll + self.height]

    def _normalized(self, index: int, scroll: int | None = None) -> SelectableList:
        count = len(self.visible)
        if count == 0:
            return replace(self, index=0, scroll=0)
        index = _clamp(index, 0, count - 1)
        scroll = self.scroll if scroll is None else scroll
        if self.height > 0:
            if index < scroll:
                scroll = index
            elif index >= scroll + self.height:
                scroll = index - self.height + 1
            scroll = _clamp(scroll, 0, max(0, count - self.height))
        else:
            scroll = 0
        return replace(self, index=index, scroll=scroll)

    def move(self, delta: int) -> SelectableList:
        return self._normalized(self.index + delta)

    def page(self, delta_pages: int) -> SelectableList:
        return self.move(delta_pages * max(1, self.height))

    def first(self) -> SelectableList:
        return self._normalized(0)

    def last(self) -> SelectableList:
        return self._normalized(len(self.visible) - 1)

    def with_height(self, height: int) -> SelectableList:
        return replace(self, height=max(0, height))._normalized(self.index)

    def with_items(self, items: tuple[Branch, ...] | list[Branch]) -> SelectableList:
        """Replace the item set, keeping the selected name when it survives."""
        previous = self.selected_name()
        updated = replace(self, items=tuple(items))
        return updated.select_name(previous) if previous else updated._normalized(self.index)

    def _position(self, name: str) -> int | None:
        for position, item in enumerate(self.visible):
            if item.name == name:
                return position
        return None

    def select_name(self, name: str) -> SelectableList:
        position = self._position(name)
        return self._normalized(self.index if position is None else position)

    def start_filter(self) -> SelectableList:
        return replace(self, filtering=True)

    def stop_filter(self, *, keep: bool = True) -> SelectableList:
        if keep:
            return replace(self, filtering=False)
        return replace(self.set_filter(""), filtering=False)

    def set_filter(self, text: str) -> SelectableList:
        """Apply a filter, following the selected branch when it stays visible."""
        previous = self.selected_name()
        updated = replace(self, filter_text=text)
        position = updated._position(previous) if previous else None
        if position is None:
            return updated._normalized(0, 0)
        return updated._normalized(position)
