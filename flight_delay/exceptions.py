class MissingArtifactError(FileNotFoundError):
    """The persisted model is not where inference expects it."""


class EmptyTrainingSetError(ValueError):
    """No usable training rows remain after cleaning."""
