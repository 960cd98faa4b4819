"""
Splits raw recipe text into numbered instructions.
"""

import re
from typing import List

from ..models.recipe import Instruction, Recipe


class RecipeParser:
    step_pattern = re.compile(r"^\s*(\d+)[.\)]\s*(.*)$", re.M)
    title_pattern = re.compile(r"^\s*#+\s*(.+?)\s*$")

    @classmethod
    def parse(cls, raw: str) -> Recipe:
        lines = [line for line in raw.splitlines() if line.strip()]
        title = "Untitled"
        if lines:
            heading = cls.title_pattern.match(lines[0])
            if heading:
                title = heading.group(1)
                lines = lines[1:]
        body = "\n".join(lines)

        instructions: List[Instruction] = []
        for match in cls.step_pattern.finditer(body):
            number = int(match.group(1))
            if number < 1:
                continue
            instructions.append(Instruction(step_number=number, description=match.group(2).strip()))

        if not instructions:
            # Fallback to trivial split
            instructions = [
                Instruction(step_number=i, description=line.strip())
                for i, line in enumerate(lines, start=1)
            ]

        return Recipe(title=title, instructions=instructions)
