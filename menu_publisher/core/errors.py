class MenuPublisherError(Exception):
    """Base class for pipeline errors."""


class FetchError(MenuPublisherError):
    """The menu page could not be rendered or loaded."""


class GenerationError(MenuPublisherError):
    """The image service returned nothing usable, or the image could not be stored."""


class NormalizationFailure(MenuPublisherError):
    """The language model call or its structured response failed."""


class NotificationFailure(MenuPublisherError):
    """A chat message could not be delivered."""
