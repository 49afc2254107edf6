from .exceptions import EmptyTrainingSetError, MissingArtifactError
