"""ghcard - social preview cards for GitHub profiles."""

from ghcard.models.profile import ProfileRecord
from ghcard.models.activity import ActivityDay, WeeklyActivity
from ghcard.models.theme import Theme
from ghcard.models.result import ImageResult
from ghcard.config import CardConfig
from ghcard.core.orchestrator import CardGenerator
from ghcard.core.exporter import to_json, to_dict, save_json, load_json, save_image

__version__ = "0.1.0"

__all__ = [
    # Main interface
    "CardGenerator",
    "CardConfig",
    # Models
    "ProfileRecord",
    "ActivityDay",
    "WeeklyActivity",
    "Theme",
    "ImageResult",
    # Export utilities
    "to_json",
    "to_dict",
    "save_json",
    "load_json",
    "save_image",
    "__version__",
]
