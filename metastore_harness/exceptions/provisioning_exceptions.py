from .base_exceptions import HarnessException

class ArtifactFetchError(HarnessException):
    """Distribution or jar download errors"""
    pass

class ArchiveExtractionError(HarnessException):
    """Archive unpack errors"""
    pass

class SchemaInitializationError(HarnessException):
    """schematool errors"""
    pass

class ServiceLaunchError(HarnessException):
    """Metastore process launch errors"""
    pass

class ServiceNotReadyError(HarnessException):
    """Metastore did not start listening in time"""
    pass
