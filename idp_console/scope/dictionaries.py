"""
Compiled-in descriptions for the well-known OIDC scopes, per locale.
Used when the scope_descriptions table has no row for a (scope, locale) pair.
"""

WELL_KNOWN_SCOPES = ("openid", "profile", "email", "offline_access")

SCOPE_DICTIONARIES = {
    "en": {
        "openid": {
            "display_name": "Sign you in",
            "description": "Verify your identity with your account",
        },
        "profile": {
            "display_name": "Profile",
            "description": "Access your basic profile information (name, username, picture)",
        },
        "email": {
            "display_name": "Email address",
            "description": "Access your email address and whether it is verified",
        },
        "offline_access": {
            "display_name": "Offline access",
            "description": "Keep access to your data when you are not using the application",
        },
    },
    "zh": {
        "openid": {
            "display_name": "登录",
            "description": "使用您的账户验证您的身份",
        },
        "profile": {
            "display_name": "个人资料",
            "description": "访问您的基本个人资料信息（姓名、用户名、头像）",
        },
        "email": {
            "display_name": "电子邮件地址",
            "description": "访问您的电子邮件地址及其验证状态",
        },
        "offline_access": {
            "display_name": "离线访问",
            "description": "在您未使用应用时保持对您数据的访问",
        },
    },
}
