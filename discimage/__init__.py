"""Read CD/DVD disc image files and inspect PlayStation 2 discs."""

__version__ = "0.9.2"

__all__ = [
    "cdrwin",
    "errors",
    "gi",
    "image",
    "iml",
    "iso",
    "isofs",
    "nero",
    "netio",
    "osal",
    "probe",
    "progress",
]