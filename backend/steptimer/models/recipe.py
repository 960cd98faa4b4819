from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, conint


class Instruction(BaseModel):
    step_number: conint(ge=1)
    description: str


class Recipe(BaseModel):
    title: str
    instructions: List[Instruction] = []

    def instruction(self, step_number: int) -> Optional[Instruction]:
        for inst in self.instructions:
            if inst.step_number == step_number:
                return inst
        return None
