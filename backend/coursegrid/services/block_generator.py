from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import time
import logging
import math
import random

from coursegrid.core.exceptions import InvalidCreditsError
from coursegrid.models.schedule_block import WEEKDAYS, Weekday

logger = logging.getLogger(__name__)

BLOCK_HOURS = 2

# Fixed 2-hour slots spanning 06:00-20:00.
TIME_SLOTS: tuple[tuple[time, time], ...] = tuple(
    (time(hour, 0), time(hour + BLOCK_HOURS, 0)) for hour in range(6, 20, BLOCK_HOURS)
)

WEEKLY_HOURS_BY_CREDITS: dict[int, int] = {2: 2, 3: 4, 4: 6}

SlotPicker = Callable[[int], tuple[time, time]]


@dataclass(frozen=True)
class BlockSpec:
    weekday: Weekday
    start_time: time
    end_time: time

    @property
    def duration_hours(self) -> int:
        return self.end_time.hour - self.start_time.hour

    def as_dict(self) -> dict:
        return {
            "weekday": self.weekday.value,
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
        }


def random_slot_picker(rng: random.Random | None = None) -> SlotPicker:
    """Pick each block's slot uniformly at random, optionally from a seeded generator."""
    source = rng if rng is not None else random.Random()

    def pick(_: int) -> tuple[time, time]:
        return source.choice(TIME_SLOTS)

    return pick


def fixed_slot_picker(slot_index: int = 0) -> SlotPicker:
    if not 0 <= slot_index < len(TIME_SLOTS):
        raise ValueError(f"slot_index must be between 0 and {len(TIME_SLOTS) - 1}")

    def pick(_: int) -> tuple[time, time]:
        return TIME_SLOTS[slot_index]

    return pick


def slot_picker_for_seed(seed: int | None) -> SlotPicker:
    return random_slot_picker(random.Random(seed))


def _validate_credits(credits) -> int:
    if isinstance(credits, bool) or not isinstance(credits, int) or credits < 1:
        raise InvalidCreditsError(credits)
    return credits


def weekly_hours_for_credits(credits: int) -> int:
    credits = _validate_credits(credits)
    if credits in WEEKLY_HOURS_BY_CREDITS:
        return WEEKLY_HOURS_BY_CREDITS[credits]
    # Outside the documented 2-4 credit table; best-effort extrapolation.
    return max(BLOCK_HOURS, credits * 2)


def block_count_for_credits(credits: int) -> int:
    return math.ceil(weekly_hours_for_credits(credits) / BLOCK_HOURS)


def generate_blocks(credits: int, *, slot_picker: SlotPicker | None = None) -> list[BlockSpec]:
    """Lay out a course's weekly blocks for its credit load.

    Block ``i`` falls on ``WEEKDAYS[i % 5]`` and its time of day comes from
    ``slot_picker`` (random by default). Blocks of different courses are not
    checked against each other, so a student's courses may overlap.
    """
    weekly_hours = weekly_hours_for_credits(credits)
    block_count = math.ceil(weekly_hours / BLOCK_HOURS)
    picker = slot_picker if slot_picker is not None else random_slot_picker()

    logger.debug("Credits %d -> %d hours/week -> %d blocks", credits, weekly_hours, block_count)

    blocks: list[BlockSpec] = []
    for index in range(block_count):
        start_time, end_time = picker(index)
        block = BlockSpec(weekday=WEEKDAYS[index % len(WEEKDAYS)], start_time=start_time, end_time=end_time)
        logger.debug("Block %d: %s %s-%s", index + 1, block.weekday.value, start_time, end_time)
        blocks.append(block)
    return blocks
