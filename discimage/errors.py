"""Exceptions raised while probing and reading disc image inputs."""


class ImageError(Exception):
    """Base class for every disc image problem."""


class NotCompatibleError(ImageError):
    """The input is not of the probed format; another prober may accept it."""


class BadCompatibilityError(ImageError):
    """The input looks like the probed format but holds unsupported data."""


class BrokenLinkError(ImageError):
    """A file referenced by an image description cannot be found."""


class MultiTrackError(ImageError):
    """The image holds more than one track, which is not supported."""


class BadIsoFsError(ImageError):
    """The ISO 9660 file system on the image is damaged or missing."""


class NotPs2DiscError(ImageError):
    """The image is a valid disc, but not a PlayStation 2 CD or DVD."""