"""
=============================================================================
PORTFOLIO SITE - CONTACT EMAIL CONFIGURATION
=============================================================================

Identity and profile details used by the contact relay emails.
To change the signature, links or subjects, modify ONLY this file.

Recipient addresses and mail account credentials are environment settings
(EMAIL_USER, EMAIL_PASS, OWNER_EMAIL), see core/config.py.
=============================================================================
"""


class EmailConfig:
    """
    Static content for the owner notification and the submitter auto-reply.

    Usage:
        from portfolio_site.core.email_config import email_config

        subject = email_config.NOTIFICATION_SUBJECT_PREFIX
    """

    # =========================================================================
    # OWNER PROFILE
    # =========================================================================

    OWNER_NAME: str = "Shekhar Singh"
    OWNER_TITLE: str = "AI/ML Engineer & Python Developer"
    OWNER_AVATAR_URL: str = (
        "https://via.placeholder.com/100x100/6366f1/ffffff?text=SS"
    )
    LINKEDIN_URL: str = "https://www.linkedin.com/in/shekhar-singh-a5b43b377"
    GITHUB_URL: str = "https://github.com/shekhar-codes"

    # =========================================================================
    # OWNER NOTIFICATION
    # =========================================================================

    NOTIFICATION_SUBJECT_PREFIX: str = "Portfolio Contact:"
    NOTIFICATION_ORIGIN: str = "Portfolio Website Contact Form"

    # =========================================================================
    # AUTO-REPLY
    # =========================================================================

    AUTO_REPLY_SUBJECT: str = "Thank you for contacting me!"
    AUTO_REPLY_RESPONSE_TIME: str = "24-48 hours"

    # Characters of the original message quoted back to the submitter
    AUTO_REPLY_EXCERPT_LENGTH: int = 100

    # =========================================================================
    # EMAIL TEMPLATES
    # =========================================================================

    ACCENT_COLOR: str = "#6366f1"

    # Used as sender when EMAIL_USER is not configured (dev only)
    DEFAULT_FROM: str = "noreply@localhost"


# Singleton instance - import this in your code
email_config = EmailConfig()
