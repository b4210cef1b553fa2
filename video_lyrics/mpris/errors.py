class MprisError(RuntimeError):
    pass


class NoPlayersFound(MprisError):
    pass


class PlayerUnavailable(MprisError):
    pass


class MediaLoadFailed(PlayerUnavailable):
    """The player refused or never answered an OpenUri for the selected video."""

    def __init__(self, uri: str, reason: str):
        super().__init__(f"Cannot open {uri}: {reason}")
        self.uri = uri
        self.reason = reason
