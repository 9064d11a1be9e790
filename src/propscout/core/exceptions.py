class PropScoutError(Exception):
    pass

class ConfigError(PropScoutError):
    pass

class InvalidInputError(PropScoutError):
    """Collaborator document does not have the expected shape."""
    pass

class InputFileError(PropScoutError):
    """Collaborator document could not be read or parsed."""
    pass

class ExportError(PropScoutError):
    pass

# Downstream selection errors
class FilterError(PropScoutError):
    """Base exception for consumers of a filter result."""
    pass

class NoMatchingURLsError(FilterError):
    """Filter result holds no URLs to test."""
    pass

class NoCategoryExamplesError(FilterError):
    """None of the selected categories has example URLs."""
    pass
