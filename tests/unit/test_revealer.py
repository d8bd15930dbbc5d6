"""Unit tests for paced response reveal."""

import pytest_check as check

from companion.session.avatar import AvatarResolver, ResolvedAvatar
from companion.session.revealer import ResponseRevealer
from companion.session.timeline import DisplayMessage, Timeline
from tests.helpers import RecordingSleep, StubProbe


def _revealer(
    timeline: Timeline,
    sleep: RecordingSleep,
    avatars: list[ResolvedAvatar],
    *assets: str,
) -> ResponseRevealer:
    return ResponseRevealer(
        timeline,
        AvatarResolver(StubProbe(*assets)),
        on_avatar=avatars.append,
        sleep=sleep,
    )


class TestResponseRevealer:
    """Tests for ordering, pacing and mood updates."""

    async def test_two_messages_pause_once(self, recorded_sleep: RecordingSleep) -> None:
        """Two messages are appended in order with one 1s pause between them."""
        timeline = Timeline()
        avatars: list[ResolvedAvatar] = []
        revealer = _revealer(timeline, recorded_sleep, avatars, "excited.png")

        await revealer.reveal(
            [
                DisplayMessage(role="assistant", content="hi there"),
                DisplayMessage(role="assistant", content="how are you", mood="excited"),
            ]
        )

        check.equal([m.content for m in timeline.messages], ["hi there", "how are you"])
        check.equal(recorded_sleep.pauses, [1.0])
        check.equal(avatars, [ResolvedAvatar(mood="excited", extension="png")])

    async def test_pause_happens_between_appends(self) -> None:
        timeline = Timeline()
        lengths_at_pause: list[int] = []

        async def sleep(delay: float) -> None:
            if delay > 0:
                lengths_at_pause.append(len(timeline))

        revealer = ResponseRevealer(timeline, AvatarResolver(StubProbe()), sleep=sleep)

        await revealer.reveal([DisplayMessage(role="assistant", content=str(i)) for i in range(3)])

        assert lengths_at_pause == [1, 2]

    async def test_single_message_has_no_pause(self, recorded_sleep: RecordingSleep) -> None:
        timeline = Timeline()
        revealer = _revealer(timeline, recorded_sleep, [])

        await revealer.reveal([DisplayMessage(role="assistant", content="only")])

        check.equal(len(timeline), 1)
        check.equal(recorded_sleep.pauses, [])

    async def test_yields_after_each_message(self, recorded_sleep: RecordingSleep) -> None:
        timeline = Timeline()
        revealer = _revealer(timeline, recorded_sleep, [])

        await revealer.reveal([DisplayMessage(role="assistant", content=str(i)) for i in range(3)])

        assert recorded_sleep.delays == [0, 1.0, 0, 1.0, 0]

    async def test_custom_delay(self, recorded_sleep: RecordingSleep) -> None:
        timeline = Timeline()
        revealer = _revealer(timeline, recorded_sleep, [])

        await revealer.reveal(
            [DisplayMessage(role="assistant", content="a"), DisplayMessage(role="assistant", content="b")],
            delay=0.25,
        )

        assert recorded_sleep.pauses == [0.25]

    async def test_messages_without_mood_keep_avatar(self, recorded_sleep: RecordingSleep) -> None:
        avatars: list[ResolvedAvatar] = []
        revealer = _revealer(Timeline(), recorded_sleep, avatars, "happy.mp4")

        await revealer.reveal([DisplayMessage(role="assistant", content="plain")])

        assert avatars == []

    async def test_unknown_mood_resolves_to_fallback(self, recorded_sleep: RecordingSleep) -> None:
        avatars: list[ResolvedAvatar] = []
        revealer = _revealer(Timeline(), recorded_sleep, avatars)

        await revealer.reveal([DisplayMessage(role="assistant", content="?", mood="puzzled")])

        assert avatars == [ResolvedAvatar(mood="normal", extension="png")]

    async def test_empty_batch(self, recorded_sleep: RecordingSleep) -> None:
        timeline = Timeline()

        await _revealer(timeline, recorded_sleep, []).reveal([])

        check.equal(len(timeline), 0)
        check.equal(recorded_sleep.delays, [])
