from __future__ import annotations

from collections.abc import Sequence
from typing import List, Literal

from pydantic import BaseModel, Field

from domain.models import PointerButton, PointerEvent, PointerTarget, TargetKind
from domain.services.canvas_session import CanvasSession

StepType = Literal["down", "move", "up", "cancel", "click"]


class ReplayTarget(BaseModel):
    kind: TargetKind
    item_id: str | None = None

    def to_pointer_target(self) -> PointerTarget:
        return PointerTarget(self.kind, self.item_id)


class ReplayStep(BaseModel):
    type: StepType
    x: float = 0.0
    y: float = 0.0
    pointer_id: int = 1
    button: PointerButton = PointerButton.PRIMARY
    modifiers: List[str] = Field(default_factory=list)
    target: ReplayTarget | None = None

    def to_event(self) -> PointerEvent:
        return PointerEvent(
            client_x=self.x,
            client_y=self.y,
            pointer_id=self.pointer_id,
            button=self.button,
            modifiers=frozenset(modifier.lower() for modifier in self.modifiers),
            target=self.target.to_pointer_target() if self.target else None,
        )


class ReplayScript(BaseModel):
    steps: List[ReplayStep] = Field(default_factory=list)


def apply_steps(session: CanvasSession, steps: Sequence[ReplayStep]) -> None:
    for step in steps:
        event = step.to_event()
        if step.type == "down":
            session.pointer_down(event)
        elif step.type == "move":
            session.pointer_move(event)
        elif step.type == "up":
            session.pointer_up(event)
        elif step.type == "cancel":
            session.pointer_cancel(event)
        else:
            target = event.target or session.hit_test(event.client)
            session.click(target)
