"""Busy flags shared by the send orchestrator and the background scheduler."""


class SessionState:
    """Tracks whether a send or a summarization is in flight.

    Sends and summarizations are mutually exclusive. The try_begin_* guards
    check and set the flags in one step, with no await in between, so two
    coroutines on the same event loop cannot both pass.
    """

    def __init__(self) -> None:
        self.sending = False
        self.summarizing = False

    @property
    def busy(self) -> bool:
        return self.sending or self.summarizing

    def try_begin_send(self) -> bool:
        if self.busy:
            return False
        self.sending = True
        return True

    def end_send(self) -> None:
        self.sending = False

    def try_begin_summarization(self) -> bool:
        if self.busy:
            return False
        self.summarizing = True
        return True

    def end_summarization(self) -> None:
        self.summarizing = False
