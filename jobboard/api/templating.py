"""
Jinja2 templates for the dashboard.
"""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from jobboard import __version__
from jobboard.constants import UI_BASE_PATH, UI_LOGIN_PATH, JobState

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals.update(
    ui_base=UI_BASE_PATH,
    ui_login=UI_LOGIN_PATH,
    states=list(JobState),
    version=__version__,
)
