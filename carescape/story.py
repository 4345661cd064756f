"""Story mode: a camera-animated walk through the filtered color records.

The navigator is a small state machine with two modes. In ``IDLE`` nothing is
selected. Selecting a record (a marker click or a programmatic call) enters
``ACTIVE``, flies the camera to the record and listens to the arrow keys until
story mode is closed.

Camera animations are fire-and-forget: a new fly-to simply retargets the
camera, so navigating during an animation is always allowed. ``is_animating``
only tells the UI whether the last fly-to is still running.
"""

import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Protocol, Sequence

from carescape import defaults
from carescape.markers import MapMarker
from carescape.types import CameraCommand, LatLng, MarkerId, wrap_longitude

logger = logging.getLogger(__name__)

KeyListener = Callable[[str], None]

NEXT_KEYS = frozenset({"ArrowRight", "ArrowDown"})
PREVIOUS_KEYS = frozenset({"ArrowLeft", "ArrowUp"})
CLOSE_KEYS = frozenset({"Escape"})


class Camera(Protocol):
    def fly_to(self, command: CameraCommand) -> None: ...


class KeyboardSource(Protocol):
    def add_listener(self, listener: KeyListener) -> None: ...

    def remove_listener(self, listener: KeyListener) -> None: ...


class StoryMode(Enum):
    IDLE = "idle"
    ACTIVE = "active"


@dataclass(frozen=True)
class StoryState:
    mode: StoryMode = StoryMode.IDLE
    ordered_ids: tuple[MarkerId, ...] = ()
    active_id: Optional[MarkerId] = None
    # Monotonic clock time at which the current fly-to finishes
    animation_ends_at: Optional[float] = None

    def __post_init__(self) -> None:
        if self.mode is StoryMode.IDLE:
            if self.active_id is not None or self.animation_ends_at is not None:
                raise ValueError("An idle story has no active record or animation")
        elif self.active_id not in self.ordered_ids:
            raise ValueError(
                f"Active record {self.active_id!r} is not in the story's records"
            )

    @property
    def active_index(self) -> Optional[int]:
        if self.active_id is None:
            return None
        return self.ordered_ids.index(self.active_id)


class StoryNavigator:
    def __init__(
        self,
        camera: Camera,
        keyboard: Optional[KeyboardSource] = None,
        clock: Callable[[], float] = time.monotonic,
        focus_zoom: float = defaults.STORY_FOCUS_ZOOM,
        duration_ms: int = defaults.STORY_FLY_DURATION_MS,
        longitude_offset: float = defaults.STORY_LONGITUDE_OFFSET,
    ) -> None:
        self.camera = camera
        self.keyboard = keyboard
        self.clock = clock
        self.focus_zoom = focus_zoom
        self.duration_ms = duration_ms
        self.longitude_offset = longitude_offset
        self._state = StoryState()
        self._positions: dict[MarkerId, LatLng] = {}
        self._key_listener: KeyListener = self.handle_key
        self._listening = False

    @property
    def state(self) -> StoryState:
        return self._state

    @property
    def mode(self) -> StoryMode:
        return self._state.mode

    @property
    def active_id(self) -> Optional[MarkerId]:
        return self._state.active_id

    @property
    def is_animating(self) -> bool:
        ends_at = self._state.animation_ends_at
        return ends_at is not None and self.clock() < ends_at

    def camera_command_for(self, marker_id: MarkerId) -> CameraCommand:
        position = self._positions[marker_id]
        return CameraCommand(
            center=LatLng(
                position.lat, wrap_longitude(position.lng + self.longitude_offset)
            ),
            zoom=self.focus_zoom,
            duration_ms=self.duration_ms,
        )

    def update_markers(self, markers: Sequence[MapMarker]) -> None:
        """
        Replace the ordered record list after the upstream list changed.

        Story mode stays on the active record if it is still listed and
        closes otherwise.
        """
        self._positions = {marker.id: marker.position for marker in markers}
        ordered_ids = tuple(self._positions)
        active_id = self._state.active_id

        if self._state.mode is StoryMode.ACTIVE and active_id not in self._positions:
            logger.info(f"Active record {active_id} was filtered out, closing story")
            self._state = StoryState(ordered_ids=ordered_ids)
            self._detach_keyboard()
            return

        self._state = replace(self._state, ordered_ids=ordered_ids)

    def select(self, marker_id: MarkerId) -> bool:
        """Enter story mode on ``marker_id``, or retarget if already active."""
        if marker_id not in self._positions:
            logger.debug(f"Ignoring selection of unknown record {marker_id}")
            return False
        if self._state.mode is StoryMode.IDLE:
            logger.info(f"Starting story at record {marker_id}")
        self._fly_to(marker_id)
        self._attach_keyboard()
        return True

    def next(self) -> bool:
        return self._step(1)

    def previous(self) -> bool:
        return self._step(-1)

    def close(self) -> None:
        if self._state.mode is StoryMode.ACTIVE:
            logger.info("Closing story")
        self._state = StoryState(ordered_ids=self._state.ordered_ids)
        self._detach_keyboard()

    def handle_key(self, key: str) -> None:
        if self._state.mode is not StoryMode.ACTIVE:
            return
        if key in NEXT_KEYS:
            self.next()
        elif key in PREVIOUS_KEYS:
            self.previous()
        elif key in CLOSE_KEYS:
            self.close()

    def _step(self, delta: int) -> bool:
        index = self._state.active_index
        if self._state.mode is not StoryMode.ACTIVE or index is None:
            return False
        last = len(self._state.ordered_ids) - 1
        new_index = min(max(index + delta, 0), last)
        if new_index == index:
            return False
        new_id = self._state.ordered_ids[new_index]
        logger.debug(f"Story moved from record {self._state.active_id} to {new_id}")
        self._fly_to(new_id)
        return True

    def _fly_to(self, marker_id: MarkerId) -> None:
        command = self.camera_command_for(marker_id)
        self._state = StoryState(
            mode=StoryMode.ACTIVE,
            ordered_ids=self._state.ordered_ids,
            active_id=marker_id,
            animation_ends_at=self.clock() + command.duration_ms / 1000,
        )
        self.camera.fly_to(command)

    def _attach_keyboard(self) -> None:
        if self.keyboard is None or self._listening:
            return
        self.keyboard.add_listener(self._key_listener)
        self._listening = True

    def _detach_keyboard(self) -> None:
        if self.keyboard is None or not self._listening:
            return
        self.keyboard.remove_listener(self._key_listener)
        self._listening = False
