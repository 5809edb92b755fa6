from enum import Enum


class Category(str, Enum):
    """Task category. Each one owns a task table and a counter pair on Project."""

    PANEL = "panel"
    DOOR = "door"
    CUTTING = "cutting"
    ACCESSORIES = "accessories"
    STRIP_CURTAIN = "strip_curtain"
    SYSTEM = "system"
    TRANSPORTATION = "transportation"
    QUOTATION = "quotation"

    @property
    def slug(self) -> str:
        """URL form, e.g. strip_curtain -> strip-curtain."""
        return self.value.replace("_", "-")

    @property
    def label(self) -> str:
        """Human form, e.g. strip_curtain -> Strip Curtain."""
        return self.value.replace("_", " ").title()


class CounterKind(str, Enum):
    TOTAL = "total"
    COMPLETED = "completed"
