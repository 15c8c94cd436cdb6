"""
Locale handling and UI strings for the pages rendered by this service.
"""

from typing import Optional

from idp_console.config import settings

MESSAGES = {
    "en": {
        "title": "Authorize application",
        "description": "An application is requesting access to your account",
        "application_requesting": "wants to access your {app_name} account",
        "signed_in_as": "Signed in as",
        "this_will_allow": "This will allow the application to:",
        "authorize": "Authorize",
        "deny": "Deny",
        "authorizing": "Authorizing...",
        "error": "Error",
        "missing_consent_code": "Missing consent code. Please restart the sign-in from the application.",
        "client_not_found": "The application requesting access could not be found.",
        "authorization_failed": "Authorization failed. Please try again.",
        "back_to_login": "Back to login",
    },
    "zh": {
        "title": "授权应用",
        "description": "有应用正在请求访问您的账户",
        "application_requesting": "想要访问您的 {app_name} 账户",
        "signed_in_as": "当前登录",
        "this_will_allow": "这将允许该应用：",
        "authorize": "授权",
        "deny": "拒绝",
        "authorizing": "正在授权...",
        "error": "错误",
        "missing_consent_code": "缺少授权码，请从应用重新发起登录。",
        "client_not_found": "未找到请求访问的应用。",
        "authorization_failed": "授权失败，请重试。",
        "back_to_login": "返回登录",
    },
}


def resolve_locale(locale: Optional[str]) -> str:
    """Map a requested locale onto a supported one, falling back to the default."""
    if locale and locale in settings.supported_locales and locale in MESSAGES:
        return locale
    return settings.default_locale


def get_messages(locale: str) -> dict:
    return MESSAGES.get(locale) or MESSAGES["en"]
