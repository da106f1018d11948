"""Soft failures raised and absorbed inside the simulation engine."""


class MissingDataError(LookupError):
    """A squad, stat or history record is absent for a gameweek."""

    def __init__(self, kind: str, gameweek: int) -> None:
        super().__init__(f"No {kind} data for GW{gameweek}")
        self.kind = kind
        self.gameweek = gameweek


class UnavailableFreezePointError(MissingDataError):
    """The frozen squad for a freeze point is missing."""

    def __init__(self, gameweek: int) -> None:
        super().__init__("squad", gameweek)


__all__ = ["MissingDataError", "UnavailableFreezePointError"]
