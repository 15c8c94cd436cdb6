"""
HTML rendering for the consent and error pages.
"""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from idp_console.config import Branding
from idp_console.consent.flow import ConsentView
from idp_console.i18n import get_messages

_template_dir = Path(__file__).parent / "templates"
_env = Environment(
    loader=FileSystemLoader(_template_dir),
    autoescape=True,
)


def consent_page(view: ConsentView, branding: Branding, user_name: str = "") -> str:
    """Generate the consent page HTML."""
    messages = get_messages(view.locale)
    template = _env.get_template("consent.jinja2")
    return template.render(
        view=view,
        branding=branding,
        user_name=user_name,
        t=messages,
        requesting=messages["application_requesting"].format(app_name=branding.app_name),
        error_message=messages[view.error.value] if view.error else "",
    )


def error_page(view: ConsentView, branding: Branding, login_url: str = "") -> str:
    """Generate an error page HTML."""
    messages = get_messages(view.locale)
    template = _env.get_template("error.jinja2")
    return template.render(
        locale=view.locale,
        branding=branding,
        t=messages,
        error_message=messages[view.error.value] if view.error else messages["error"],
        login_url=login_url,
    )
